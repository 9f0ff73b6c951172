"""RDF ingestion: type pass, data pass and the simplified IMDB pass."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from rdflib import Graph as RDFGraph, Literal, URIRef

from deltagraph.config import CONFIG, RDF_EXTENSION_FORMATS
from deltagraph.exceptions import DeltaGraphError, TripleParseError
from deltagraph.graph import TypedGraph
from deltagraph.models import UNFILTERED, Attribute, DataVertex, LoadingSchema
from deltagraph.sources import SourceResolver, open_source
from deltagraph.utils import local_name, profile_time, split_typed_id, strip_prefix

Triple = Tuple[Any, Any, Any]


@dataclass
class LoadStats:
    triples: int = 0
    malformed: int = 0
    types_filtered: int = 0
    vertices_created: int = 0
    types_added: int = 0
    subjects_not_found: int = 0
    objects_not_found: int = 0
    self_loops: int = 0
    edges: int = 0
    attributes: int = 0
    attributes_filtered: int = 0
    literals_discarded: int = 0
    # edges + attributes admitted, the size measure the mining side reports
    graph_size: int = 0
    types_seen: Set[str] = field(default_factory=set)

    def merge(self, other: "LoadStats") -> "LoadStats":
        for f in fields(self):
            if f.name == "types_seen":
                self.types_seen |= other.types_seen
            else:
                setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))
        return self

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {f.name: getattr(self, f.name) for f in fields(self)}
        data["types_seen"] = sorted(self.types_seen)
        return data


@dataclass
class LoadResult:
    graph: TypedGraph
    stats: LoadStats
    failed_sources: List[str] = field(default_factory=list)


def _ensure_vertex(graph: TypedGraph, vertex_id: str, vertex_type: str, stats: LoadStats) -> DataVertex:
    vertex = graph.get_node(vertex_id)
    if vertex is None:
        vertex = graph.add_vertex(DataVertex(id=vertex_id, primary_type=vertex_type))
        stats.vertices_created += 1
    elif vertex_type not in vertex.types:
        vertex.add_type(vertex_type)
        stats.types_added += 1
    return vertex


def _prefix_length(prefix_length: Optional[int], config_key: str) -> int:
    return CONFIG[config_key] if prefix_length is None else prefix_length


# ------------------------------
# Triple-level ingestion
# ------------------------------


def ingest_type_triples(
    graph: TypedGraph,
    triples: Iterable[Triple],
    schema: LoadingSchema = UNFILTERED,
    prefix_length: Optional[int] = None,
) -> LoadStats:
    """Create or re-type one vertex per (subject, rdf:type, Type) statement."""
    prefix_length = _prefix_length(prefix_length, "DBPEDIA_PREFIX_LENGTH")
    stats = LoadStats()
    for subject, _predicate, obj in triples:
        stats.triples += 1
        if not isinstance(subject, URIRef) or not isinstance(obj, URIRef):
            logging.debug("Skipping type statement with non-IRI term: %s %s", subject, obj)
            stats.malformed += 1
            continue
        vertex_id = strip_prefix(str(subject), prefix_length)
        vertex_type = local_name(str(obj)).lower()
        if not vertex_id or not vertex_type:
            stats.malformed += 1
            continue
        if not schema.accepts_type(vertex_type):
            stats.types_filtered += 1
            continue
        _ensure_vertex(graph, vertex_id, vertex_type, stats)
        stats.types_seen.add(vertex_type)
    return stats


def ingest_data_triples(
    graph: TypedGraph,
    triples: Iterable[Triple],
    schema: LoadingSchema = UNFILTERED,
    prefix_length: Optional[int] = None,
) -> LoadStats:
    """Attach attributes and edges to vertices discovered by the type pass."""
    prefix_length = _prefix_length(prefix_length, "DBPEDIA_PREFIX_LENGTH")
    stats = LoadStats()
    for subject, predicate, obj in triples:
        stats.triples += 1
        if not isinstance(subject, URIRef):
            stats.malformed += 1
            continue
        subject_id = strip_prefix(str(subject), prefix_length)
        label = local_name(str(predicate)).lower()
        if not label:
            stats.malformed += 1
            continue

        subject_vertex = graph.get_node(subject_id)
        if subject_vertex is None:
            stats.subjects_not_found += 1
            continue

        if isinstance(obj, Literal):
            if not schema.accepts_attribute(label):
                stats.attributes_filtered += 1
                continue
            subject_vertex.add_attribute(Attribute(label, str(obj).lower()))
            stats.attributes += 1
            stats.graph_size += 1
            continue

        if not isinstance(obj, URIRef):
            stats.malformed += 1
            continue
        object_id = strip_prefix(str(obj), prefix_length)
        object_vertex = graph.get_node(object_id)
        if object_vertex is None:
            logging.debug("Object node not found: %s -> %s -> %s", subject_id, label, object_id)
            stats.objects_not_found += 1
            continue
        if object_id == subject_id:
            stats.self_loops += 1
            continue
        graph.add_edge(subject_vertex, object_vertex, label)
        stats.edges += 1
        stats.graph_size += 1
    return stats


def ingest_imdb_triples(
    graph: TypedGraph,
    triples: Iterable[Triple],
    schema: LoadingSchema = UNFILTERED,
    prefix_length: Optional[int] = None,
) -> LoadStats:
    """Build an attribute-free graph from '<prefix><type>/<id>' IRIs in one pass.

    Vertices for both endpoints are created on demand; literal objects are
    dropped.
    """
    prefix_length = _prefix_length(prefix_length, "IMDB_PREFIX_LENGTH")
    stats = LoadStats()
    for subject, predicate, obj in triples:
        stats.triples += 1
        if not isinstance(subject, URIRef):
            stats.malformed += 1
            continue
        subject_parts = split_typed_id(str(subject), prefix_length)
        if subject_parts is None:
            logging.debug("Skipping malformed subject IRI: %s", subject)
            stats.malformed += 1
            continue
        subject_type, subject_id = subject_parts
        if not schema.accepts_type(subject_type):
            stats.types_filtered += 1
            continue
        stats.types_seen.add(subject_type)
        subject_vertex = _ensure_vertex(graph, subject_id, subject_type, stats)

        if isinstance(obj, Literal):
            stats.literals_discarded += 1
            continue
        if not isinstance(obj, URIRef):
            stats.malformed += 1
            continue
        label = local_name(str(predicate)).lower()
        object_parts = split_typed_id(str(obj), prefix_length)
        if object_parts is None or not label:
            logging.debug("Skipping malformed object IRI: %s", obj)
            stats.malformed += 1
            continue
        object_type, object_id = object_parts
        if not schema.accepts_type(object_type):
            stats.types_filtered += 1
            continue
        stats.types_seen.add(object_type)
        object_vertex = _ensure_vertex(graph, object_id, object_type, stats)
        if object_vertex.id == subject_vertex.id:
            stats.self_loops += 1
            continue
        graph.add_edge(subject_vertex, object_vertex, label)
        stats.edges += 1
        stats.graph_size += 1
    return stats


# ------------------------------
# File-level loading
# ------------------------------


def rdf_format_for(path: str, default: Optional[str] = None) -> str:
    extension = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    return RDF_EXTENSION_FORMATS.get(extension, default or CONFIG["RDF_LANGUAGE"])


def read_triples(
    path: str,
    resolver: Optional[SourceResolver] = None,
    rdf_format: Optional[str] = None,
) -> RDFGraph:
    """Parse the whole source behind `path` into an rdflib graph."""
    fmt = rdf_format or rdf_format_for(path)
    rdf_graph = RDFGraph()
    with open_source(path, resolver) as stream:
        try:
            rdf_graph.parse(data=stream.read(), format=fmt)
        except Exception as exc:
            raise TripleParseError(path, str(exc)) from exc
    return rdf_graph


@profile_time
def load_node_types(
    graph: TypedGraph,
    path: str,
    schema: LoadingSchema = UNFILTERED,
    prefix_length: Optional[int] = None,
    resolver: Optional[SourceResolver] = None,
    rdf_format: Optional[str] = None,
) -> LoadStats:
    if not path:
        logging.warning("No input node types file path!")
        return LoadStats()
    logging.info("Loading node types: %s", path)
    rdf_graph = read_triples(path, resolver, rdf_format)
    try:
        stats = ingest_type_triples(graph, rdf_graph, schema, prefix_length)
    finally:
        rdf_graph.close()
    logging.info("Done. Number of types: %s, vertices: %s", len(stats.types_seen), graph.vertex_count())
    return stats


@profile_time
def load_data_graph(
    graph: TypedGraph,
    path: str,
    schema: LoadingSchema = UNFILTERED,
    prefix_length: Optional[int] = None,
    resolver: Optional[SourceResolver] = None,
    rdf_format: Optional[str] = None,
) -> LoadStats:
    if not path:
        logging.warning("No input graph data file path!")
        return LoadStats()
    logging.info("Loading DBPedia graph: %s", path)
    rdf_graph = read_triples(path, resolver, rdf_format)
    try:
        stats = ingest_data_triples(graph, rdf_graph, schema, prefix_length)
    finally:
        rdf_graph.close()
    logging.info(
        "Subjects and objects not found: %s ** %s",
        stats.subjects_not_found,
        stats.objects_not_found,
    )
    logging.info("Done. Nodes: %s, Edges: %s", graph.vertex_count(), graph.edge_count())
    return stats


@profile_time
def load_imdb_graph(
    graph: TypedGraph,
    path: str,
    schema: LoadingSchema = UNFILTERED,
    prefix_length: Optional[int] = None,
    resolver: Optional[SourceResolver] = None,
    rdf_format: Optional[str] = None,
) -> LoadStats:
    if not path:
        logging.warning("No input graph data file path!")
        return LoadStats()
    logging.info("Loading IMDB graph: %s", path)
    rdf_graph = read_triples(path, resolver, rdf_format)
    try:
        stats = ingest_imdb_triples(graph, rdf_graph, schema, prefix_length)
    finally:
        rdf_graph.close()
    logging.info("Done. Nodes: %s, Edges: %s", graph.vertex_count(), graph.edge_count())
    logging.info("Number of types: %s (%s)", len(stats.types_seen), " - ".join(sorted(stats.types_seen)))
    return stats


def _run_pass(load_fn, graph: TypedGraph, path: str, result: LoadResult, **kwargs) -> None:
    try:
        result.stats.merge(load_fn(graph, path, **kwargs))
    except DeltaGraphError as exc:
        logging.error("Skipping %s: %s", path, exc)
        result.failed_sources.append(path)


def load_dbpedia(
    types_paths: Iterable[str],
    data_paths: Iterable[str],
    schema: LoadingSchema = UNFILTERED,
    prefix_length: Optional[int] = None,
    resolver: Optional[SourceResolver] = None,
    graph: Optional[TypedGraph] = None,
) -> LoadResult:
    """Run every type pass, in order, then every data pass, into one graph."""
    result = LoadResult(graph=graph if graph is not None else TypedGraph(), stats=LoadStats())
    options = {"schema": schema, "prefix_length": prefix_length, "resolver": resolver}
    for path in types_paths:
        _run_pass(load_node_types, result.graph, path, result, **options)
    for path in data_paths:
        _run_pass(load_data_graph, result.graph, path, result, **options)
    return result


def load_imdb(
    paths: Iterable[str],
    schema: LoadingSchema = UNFILTERED,
    prefix_length: Optional[int] = None,
    resolver: Optional[SourceResolver] = None,
    graph: Optional[TypedGraph] = None,
) -> LoadResult:
    result = LoadResult(graph=graph if graph is not None else TypedGraph(), stats=LoadStats())
    options = {"schema": schema, "prefix_length": prefix_length, "resolver": resolver}
    for path in paths:
        _run_pass(load_imdb_graph, result.graph, path, result, **options)
    return result
