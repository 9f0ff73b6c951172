"""Typed property graphs from RDF triples, plus graph change records."""

from deltagraph.changes import load_changes, parse_changes, read_changes
from deltagraph.data_processing import (
    LoadResult,
    LoadStats,
    load_data_graph,
    load_dbpedia,
    load_imdb,
    load_imdb_graph,
    load_node_types,
)
from deltagraph.exceptions import ChangeLoadError, DeltaGraphError, SourceUnavailable, TripleParseError
from deltagraph.graph import TypedGraph
from deltagraph.models import (
    Attribute,
    AttributeChange,
    Change,
    ChangeType,
    DataVertex,
    EdgeChange,
    LoadingSchema,
    RelationshipEdge,
    VertexChange,
)
from deltagraph.sources import SourceResolver, open_source

__version__ = "0.3.0"

__all__ = [
    "Attribute",
    "AttributeChange",
    "Change",
    "ChangeLoadError",
    "ChangeType",
    "DataVertex",
    "DeltaGraphError",
    "EdgeChange",
    "LoadResult",
    "LoadStats",
    "LoadingSchema",
    "RelationshipEdge",
    "SourceResolver",
    "SourceUnavailable",
    "TripleParseError",
    "TypedGraph",
    "VertexChange",
    "load_changes",
    "load_data_graph",
    "load_dbpedia",
    "load_imdb",
    "load_imdb_graph",
    "load_node_types",
    "open_source",
    "parse_changes",
    "read_changes",
]
