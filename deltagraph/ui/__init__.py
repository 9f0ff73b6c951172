"""Streamlit application shell."""

from __future__ import annotations


def render_app() -> None:
    import streamlit as st

    # set_page_config() must run before any other streamlit command
    st.set_page_config(page_title="Graph Snapshot Loader", layout="wide")

    from deltagraph.ui.sidebar import init_session_state, render_sidebar
    from deltagraph.ui.tabs import render_tabs

    init_session_state()
    st.title("Graph Snapshot Loader")
    st.caption("Build a typed graph from RDF triples and inspect the change records between snapshots.")
    render_sidebar()
    render_tabs()
