"""In-memory typed property graph backed by a networkx MultiDiGraph."""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

import networkx as nx

from deltagraph.models import (
    AttributeChange,
    Change,
    ChangeType,
    DataVertex,
    EdgeChange,
    RelationshipEdge,
    VertexChange,
)


class TypedGraph:
    """Vertices keyed by id, directed labeled edges between them.

    Node keys of the underlying MultiDiGraph are vertex ids; the vertex object
    lives in the node data under "vertex" and each edge's RelationshipEdge
    under "edge". Parallel edges with the same label are allowed.
    """

    def __init__(self) -> None:
        self._g = nx.MultiDiGraph()

    # ------------------------------
    # Vertices
    # ------------------------------

    def get_node(self, vertex_id: str) -> Optional[DataVertex]:
        data = self._g.nodes.get(vertex_id)
        return data["vertex"] if data is not None else None

    def __contains__(self, vertex_id: object) -> bool:
        return vertex_id in self._g

    def add_vertex(self, vertex: DataVertex) -> DataVertex:
        if vertex.id in self._g:
            raise ValueError(f"Vertex '{vertex.id}' already exists")
        self._g.add_node(vertex.id, vertex=vertex)
        return vertex

    def remove_vertex(self, vertex_id: str) -> Optional[DataVertex]:
        vertex = self.get_node(vertex_id)
        if vertex is not None:
            self._g.remove_node(vertex_id)
        return vertex

    def vertices(self) -> Iterator[DataVertex]:
        for _, data in self._g.nodes(data=True):
            yield data["vertex"]

    # ------------------------------
    # Edges
    # ------------------------------

    def add_edge(self, source: DataVertex, target: DataVertex, label: str) -> RelationshipEdge:
        for endpoint in (source, target):
            if endpoint.id not in self._g:
                raise KeyError(f"Vertex '{endpoint.id}' is not in the graph")
        edge = RelationshipEdge(
            label=label, source=self.get_node(source.id), target=self.get_node(target.id)
        )
        self._g.add_edge(source.id, target.id, edge=edge)
        return edge

    def remove_edge(self, source_id: str, target_id: str, label: str) -> bool:
        """Remove one edge with this label between the endpoints."""
        if not self._g.has_edge(source_id, target_id):
            return False
        for key, data in list(self._g.get_edge_data(source_id, target_id).items()):
            if data["edge"].label == label:
                self._g.remove_edge(source_id, target_id, key=key)
                return True
        return False

    def has_edge(self, source_id: str, target_id: str, label: Optional[str] = None) -> bool:
        if not self._g.has_edge(source_id, target_id):
            return False
        if label is None:
            return True
        return any(
            data["edge"].label == label
            for data in self._g.get_edge_data(source_id, target_id).values()
        )

    def edges(self) -> Iterator[RelationshipEdge]:
        for _, _, data in self._g.edges(data=True):
            yield data["edge"]

    def out_edges(self, vertex_id: str) -> List[RelationshipEdge]:
        if vertex_id not in self._g:
            return []
        return [data["edge"] for _, _, data in self._g.out_edges(vertex_id, data=True)]

    def in_edges(self, vertex_id: str) -> List[RelationshipEdge]:
        if vertex_id not in self._g:
            return []
        return [data["edge"] for _, _, data in self._g.in_edges(vertex_id, data=True)]

    # ------------------------------
    # Size queries
    # ------------------------------

    def vertex_count(self) -> int:
        return self._g.number_of_nodes()

    def edge_count(self) -> int:
        return self._g.number_of_edges()

    def size(self) -> int:
        return self.vertex_count() + self.edge_count()

    def __len__(self) -> int:
        return self.vertex_count()

    def to_networkx(self) -> nx.MultiDiGraph:
        """The backing graph, for downstream algorithms that speak networkx."""
        return self._g

    # ------------------------------
    # Change replay
    # ------------------------------

    def apply_change(self, change: Change) -> bool:
        """Apply one change record; False when it does not apply to this graph."""
        if isinstance(change, VertexChange):
            return self._apply_vertex_change(change)
        if isinstance(change, EdgeChange):
            return self._apply_edge_change(change)
        if isinstance(change, AttributeChange):
            return self._apply_attribute_change(change)
        raise TypeError(f"Unsupported change record: {type(change).__name__}")

    def _apply_vertex_change(self, change: VertexChange) -> bool:
        incoming = change.vertex
        if change.type == ChangeType.DELETE_VERTEX:
            return self.remove_vertex(incoming.id) is not None
        existing = self.get_node(incoming.id)
        if existing is None:
            self.add_vertex(
                DataVertex(
                    id=incoming.id,
                    primary_type=incoming.primary_type,
                    extra_types=set(incoming.extra_types),
                    attributes=dict(incoming.attributes),
                )
            )
            return True
        for vertex_type in incoming.types:
            existing.add_type(vertex_type)
        for attribute in incoming.attributes.values():
            existing.add_attribute(attribute)
        return True

    def _apply_edge_change(self, change: EdgeChange) -> bool:
        if change.type == ChangeType.DELETE_EDGE:
            return self.remove_edge(change.source_id, change.target_id, change.label)
        source = self.get_node(change.source_id)
        target = self.get_node(change.target_id)
        if source is None or target is None or source.id == target.id:
            logging.debug(
                "Edge change %s -> %s (%s) skipped: endpoint missing or self-loop",
                change.source_id,
                change.target_id,
                change.label,
            )
            return False
        self.add_edge(source, target, change.label)
        return True

    def _apply_attribute_change(self, change: AttributeChange) -> bool:
        vertex = self.get_node(change.vertex_id)
        if vertex is None:
            return False
        if change.type == ChangeType.DELETE_ATTR:
            return vertex.remove_attribute(change.attribute.name) is not None
        vertex.add_attribute(change.attribute)
        return True
