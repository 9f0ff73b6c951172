"""Sidebar logic and session state initialization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import streamlit as st

from deltagraph.changes import load_changes
from deltagraph.config import CONFIG
from deltagraph.data_processing import load_dbpedia, load_imdb
from deltagraph.exceptions import DeltaGraphError
from deltagraph.models import LoadingSchema
from deltagraph.sources import SourceResolver

VARIANTS = ("DBPedia", "IMDB")


@dataclass
class LoadRequest:
    variant: str
    types_paths: List[str]
    data_paths: List[str]
    changes_path: str
    schema: LoadingSchema
    remote: bool
    region: str
    prefix_length: int


def split_lines(text: str) -> List[str]:
    """One path or name per line; blank lines and surrounding spaces dropped."""
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def init_session_state() -> None:
    defaults = {
        "load_result": None,
        "changes": None,
        "load_errors": [],
        "last_request": None,
        "changes_replayed": False,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def run_request(request: LoadRequest) -> None:
    resolver = SourceResolver(remote=request.remote, region=request.region)
    errors: List[str] = []
    if request.variant == "DBPedia":
        result = load_dbpedia(
            request.types_paths,
            request.data_paths,
            schema=request.schema,
            prefix_length=request.prefix_length,
            resolver=resolver,
        )
    else:
        result = load_imdb(
            request.data_paths,
            schema=request.schema,
            prefix_length=request.prefix_length,
            resolver=resolver,
        )
    errors.extend(f"Could not load {path}" for path in result.failed_sources)

    changes = None
    if request.changes_path:
        try:
            changes = load_changes(request.changes_path, resolver=resolver)
        except DeltaGraphError as exc:
            errors.append(str(exc))

    st.session_state.load_result = result
    st.session_state.changes = changes
    st.session_state.load_errors = errors
    st.session_state.last_request = request
    st.session_state.changes_replayed = False


def render_sidebar() -> None:
    with st.sidebar.expander("Sources", expanded=True):
        variant = st.radio("Dataset layout", VARIANTS, horizontal=True)
        types_text = ""
        if variant == "DBPedia":
            types_text = st.text_area("Type files (one per line)", key="types_text")
        data_text = st.text_area("Data files (one per line)", key="data_text")
        changes_path = st.text_input("Change file (JSON)", key="changes_path")

    with st.sidebar.expander("Storage"):
        remote = st.checkbox(
            "Read from remote object storage",
            value=bool(CONFIG["REMOTE_STORAGE"]),
            help="Paths are then read as '<bucket>/<key>'.",
        )
        region = st.text_input("Region", value=CONFIG["REGION"])
        default_prefix = CONFIG["DBPEDIA_PREFIX_LENGTH"] if variant == "DBPedia" else CONFIG["IMDB_PREFIX_LENGTH"]
        prefix_length = st.number_input(
            "IRI prefix length",
            min_value=0,
            value=int(default_prefix),
            step=1,
            help="Number of leading characters stripped from subject and object IRIs.",
        )

    with st.sidebar.expander("Schema optimization"):
        optimized = st.checkbox("Only load allowed types and attributes", value=bool(CONFIG["OPTIMIZED_LOADING"]))
        valid_types = st.text_area("Allowed types (one per line)", disabled=not optimized)
        valid_attributes = st.text_area("Allowed attributes (one per line)", disabled=not optimized)

    if st.sidebar.button("Load", type="primary"):
        request = LoadRequest(
            variant=variant,
            types_paths=split_lines(types_text),
            data_paths=split_lines(data_text),
            changes_path=(changes_path or "").strip(),
            schema=LoadingSchema.build(split_lines(valid_types), split_lines(valid_attributes), optimized=optimized),
            remote=remote,
            region=region.strip(),
            prefix_length=int(prefix_length),
        )
        with st.spinner("Loading graph..."):
            run_request(request)
