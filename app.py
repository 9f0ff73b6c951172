#!/usr/bin/env python
"""
Graph Snapshot Loader - Streamlit entrypoint.
"""

from deltagraph.ui import render_app


def main() -> None:
    render_app()


if __name__ == "__main__":
    main()
