"""Change-file loading: JSON array of edits -> ordered change records."""

from __future__ import annotations

import json
import logging
from collections import Counter
from typing import Any, BinaryIO, Dict, List, Optional

from deltagraph.exceptions import ChangeLoadError
from deltagraph.models import (
    ATTRIBUTE_CHANGE_TYPES,
    EDGE_CHANGE_TYPES,
    VERTEX_CHANGE_TYPES,
    Attribute,
    AttributeChange,
    Change,
    ChangeType,
    DataVertex,
    EdgeChange,
    VertexChange,
)
from deltagraph.sources import SourceResolver, open_source
from deltagraph.utils import profile_time


def _require(obj: Dict[str, Any], key: str, kind: type, where: str) -> Any:
    if not isinstance(obj, dict):
        raise ChangeLoadError(f"{where}: expected an object, got {type(obj).__name__}")
    if key not in obj:
        raise ChangeLoadError(f"{where}: missing '{key}'")
    value = obj[key]
    if not isinstance(value, kind):
        raise ChangeLoadError(f"{where}: '{key}' must be {kind.__name__}, got {type(value).__name__}")
    return value


def _parse_attribute(raw: Any, where: str) -> Attribute:
    return Attribute(
        name=_require(raw, "attrName", str, where),
        value=_require(raw, "attrValue", str, where),
    )


def _parse_vertex(raw: Any, where: str) -> DataVertex:
    uri = _require(raw, "vertexURI", str, where)
    types = _require(raw, "types", list, where)
    if not types:
        raise ChangeLoadError(f"{where}: vertex '{uri}' has no types")
    for idx, vertex_type in enumerate(types):
        if not isinstance(vertex_type, str):
            raise ChangeLoadError(f"{where}: types[{idx}] must be str")
    vertex = DataVertex(id=uri, primary_type=types[0])
    for vertex_type in types[1:]:
        vertex.add_type(vertex_type)
    for idx, raw_attr in enumerate(_require(raw, "allAttributesList", list, where)):
        vertex.add_attribute(_parse_attribute(raw_attr, f"{where}.allAttributesList[{idx}]"))
    return vertex


def parse_change(raw: Any, index: int = 0) -> Change:
    where = f"change[{index}]"
    type_name = _require(raw, "typeOfChange", str, where)
    try:
        change_type = ChangeType(type_name)
    except ValueError as exc:
        raise ChangeLoadError(f"{where}: unknown typeOfChange '{type_name}'") from exc

    if change_type in EDGE_CHANGE_TYPES:
        return EdgeChange(
            type=change_type,
            source_id=_require(raw, "src", str, where),
            target_id=_require(raw, "dst", str, where),
            label=_require(raw, "label", str, where),
        )
    if change_type in ATTRIBUTE_CHANGE_TYPES:
        return AttributeChange(
            type=change_type,
            vertex_id=_require(raw, "uri", str, where),
            attribute=_parse_attribute(_require(raw, "attribute", dict, where), f"{where}.attribute"),
        )
    if change_type in VERTEX_CHANGE_TYPES:
        return VertexChange(
            type=change_type,
            vertex=_parse_vertex(_require(raw, "vertex", dict, where), f"{where}.vertex"),
        )
    raise ChangeLoadError(f"{where}: unhandled typeOfChange '{type_name}'")


def parse_changes(payload: Any) -> List[Change]:
    """Build change records from an already-decoded JSON array, in order."""
    if not isinstance(payload, list):
        raise ChangeLoadError(f"Change file must hold a JSON array, got {type(payload).__name__}")
    return [parse_change(raw, idx) for idx, raw in enumerate(payload)]


def read_changes(stream: BinaryIO) -> List[Change]:
    try:
        payload = json.load(stream)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ChangeLoadError(f"Change file is not valid JSON: {exc}") from exc
    return parse_changes(payload)


@profile_time
def load_changes(path: str, resolver: Optional[SourceResolver] = None) -> List[Change]:
    """Load every change record from `path`; any deviation aborts the load."""
    logging.info("Loading changes: %s", path)
    with open_source(path, resolver) as stream:
        changes = read_changes(stream)
    logging.info("Done. Number of changes: %s", len(changes))
    return changes


def count_by_type(changes: List[Change]) -> Dict[str, int]:
    counts = Counter(change.type.value for change in changes)
    return {change_type.value: counts.get(change_type.value, 0) for change_type in ChangeType}
