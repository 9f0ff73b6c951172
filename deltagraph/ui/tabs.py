"""Main-area tabs: graph summary and change records."""

from __future__ import annotations

from collections import Counter
from typing import List, MutableMapping, Optional

import pandas as pd
import streamlit as st

from deltagraph.changes import count_by_type
from deltagraph.graph import TypedGraph
from deltagraph.models import AttributeChange, Change, EdgeChange, VertexChange


def type_frequency_frame(graph: TypedGraph) -> pd.DataFrame:
    primary = Counter(v.primary_type for v in graph.vertices())
    any_type = Counter(t for v in graph.vertices() for t in v.types)
    rows = [
        {"type": t, "vertices": any_type[t], "as primary": primary.get(t, 0)}
        for t in sorted(any_type, key=lambda name: (-any_type[name], name))
    ]
    return pd.DataFrame(rows, columns=["type", "vertices", "as primary"])


def label_frequency_frame(graph: TypedGraph) -> pd.DataFrame:
    labels = Counter(edge.label for edge in graph.edges())
    rows = [{"label": label, "edges": count} for label, count in labels.most_common()]
    return pd.DataFrame(rows, columns=["label", "edges"])


def changes_frame(changes: List[Change]) -> pd.DataFrame:
    rows = []
    for idx, change in enumerate(changes):
        row = {"#": idx, "type": change.type.value, "target": "", "detail": ""}
        if isinstance(change, VertexChange):
            row["target"] = change.vertex.id
            row["detail"] = ", ".join(sorted(change.vertex.types))
        elif isinstance(change, EdgeChange):
            row["target"] = f"{change.source_id} -> {change.target_id}"
            row["detail"] = change.label
        elif isinstance(change, AttributeChange):
            row["target"] = change.vertex_id
            row["detail"] = f"{change.attribute.name}={change.attribute.value}"
        rows.append(row)
    return pd.DataFrame(rows, columns=["#", "type", "target", "detail"])


def replay_changes(graph: TypedGraph, changes: List[Change], state: MutableMapping) -> Optional[int]:
    """Apply `changes` to `graph` once; None when they were already replayed onto it."""
    if state.get("changes_replayed"):
        return None
    applied = sum(1 for change in changes if graph.apply_change(change))
    state["changes_replayed"] = True
    return applied


def _render_graph_tab() -> None:
    result = st.session_state.get("load_result")
    if result is None:
        st.info("Enter source paths in the sidebar and press Load.")
        return
    graph = result.graph
    cols = st.columns(4)
    cols[0].metric("Vertices", graph.vertex_count())
    cols[1].metric("Edges", graph.edge_count())
    cols[2].metric("Subjects not found", result.stats.subjects_not_found)
    cols[3].metric("Objects not found", result.stats.objects_not_found)

    left, right = st.columns(2)
    with left:
        st.subheader("Types")
        st.dataframe(type_frequency_frame(graph), use_container_width=True, hide_index=True)
    with right:
        st.subheader("Edge labels")
        st.dataframe(label_frequency_frame(graph), use_container_width=True, hide_index=True)

    with st.expander("Load statistics"):
        st.json(result.stats.as_dict())


def _render_changes_tab() -> None:
    changes: Optional[List[Change]] = st.session_state.get("changes")
    if changes is None:
        st.info("No change file loaded.")
        return
    counts = count_by_type(changes)
    st.dataframe(
        pd.DataFrame([counts]),
        use_container_width=True,
        hide_index=True,
    )
    st.dataframe(changes_frame(changes), use_container_width=True, hide_index=True)

    result = st.session_state.get("load_result")
    if result is None:
        return
    replayed = bool(st.session_state.get("changes_replayed"))
    if st.button("Replay changes onto the loaded graph", disabled=replayed):
        applied = replay_changes(result.graph, changes, st.session_state)
        if applied is not None:
            st.success(f"Applied {applied} of {len(changes)} change(s).")
    elif replayed:
        st.caption("Changes already replayed onto this graph. Load again to start over.")


def render_tabs() -> None:
    for error in st.session_state.get("load_errors") or []:
        st.error(error)
    graph_tab, changes_tab = st.tabs(["Graph", "Changes"])
    with graph_tab:
        _render_graph_tab()
    with changes_tab:
        _render_changes_tab()
