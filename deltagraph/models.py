"""Data models for typed graphs and change records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, FrozenSet, Iterable, Optional, Set


@dataclass(frozen=True)
class Attribute:
    name: str
    value: str


@dataclass(eq=False)
class DataVertex:
    """A graph node. Identity is the `id` string alone."""

    id: str
    primary_type: str
    extra_types: Set[str] = field(default_factory=set)
    attributes: Dict[str, Attribute] = field(default_factory=dict)

    @property
    def types(self) -> Set[str]:
        return {self.primary_type} | self.extra_types

    def add_type(self, vertex_type: str) -> None:
        if vertex_type != self.primary_type:
            self.extra_types.add(vertex_type)

    def add_attribute(self, attribute: Attribute) -> None:
        self.attributes[attribute.name] = attribute

    def get_attribute(self, name: str) -> Optional[Attribute]:
        return self.attributes.get(name)

    def remove_attribute(self, name: str) -> Optional[Attribute]:
        return self.attributes.pop(name, None)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataVertex):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True)
class RelationshipEdge:
    label: str
    source: DataVertex
    target: DataVertex

    def __post_init__(self) -> None:
        if self.source.id == self.target.id:
            raise ValueError(f"Self-loop on '{self.source.id}' is not allowed")


@dataclass(frozen=True)
class LoadingSchema:
    """Allow-lists applied when schema-optimized loading is on."""

    valid_types: FrozenSet[str] = frozenset()
    valid_attributes: FrozenSet[str] = frozenset()
    optimized: bool = False

    @classmethod
    def build(
        cls,
        types: Optional[Iterable[str]] = None,
        attributes: Optional[Iterable[str]] = None,
        optimized: bool = True,
    ) -> "LoadingSchema":
        return cls(
            valid_types=frozenset(t.strip().lower() for t in (types or []) if t and t.strip()),
            valid_attributes=frozenset(
                a.strip().lower() for a in (attributes or []) if a and a.strip()
            ),
            optimized=optimized,
        )

    def accepts_type(self, vertex_type: str) -> bool:
        return not self.optimized or vertex_type in self.valid_types

    def accepts_attribute(self, name: str) -> bool:
        return not self.optimized or name in self.valid_attributes


UNFILTERED = LoadingSchema()


# ------------------------------
# Change records
# ------------------------------


class ChangeType(str, Enum):
    INSERT_VERTEX = "insertVertex"
    DELETE_VERTEX = "deleteVertex"
    INSERT_EDGE = "insertEdge"
    DELETE_EDGE = "deleteEdge"
    INSERT_ATTR = "insertAttr"
    DELETE_ATTR = "deleteAttr"
    CHANGE_ATTR = "changeAttr"


VERTEX_CHANGE_TYPES = frozenset({ChangeType.INSERT_VERTEX, ChangeType.DELETE_VERTEX})
EDGE_CHANGE_TYPES = frozenset({ChangeType.INSERT_EDGE, ChangeType.DELETE_EDGE})
ATTRIBUTE_CHANGE_TYPES = frozenset(
    {ChangeType.INSERT_ATTR, ChangeType.DELETE_ATTR, ChangeType.CHANGE_ATTR}
)


@dataclass(frozen=True)
class Change:
    """Base of the change-record variants; `type` must belong to the variant."""

    type: ChangeType

    allowed_types: ClassVar[FrozenSet[ChangeType]] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", ChangeType(self.type))
        if self.type not in self.allowed_types:
            raise ValueError(
                f"{type(self).__name__} cannot carry change type '{self.type.value}'"
            )


@dataclass(frozen=True)
class VertexChange(Change):
    """Vertex insertion or deletion.

    The record is frozen but `vertex` is an ordinary mutable DataVertex;
    consumers must not modify it. Replay copies it before touching a graph.
    """

    vertex: DataVertex

    allowed_types: ClassVar[FrozenSet[ChangeType]] = VERTEX_CHANGE_TYPES


@dataclass(frozen=True)
class EdgeChange(Change):
    source_id: str
    target_id: str
    label: str

    allowed_types: ClassVar[FrozenSet[ChangeType]] = EDGE_CHANGE_TYPES


@dataclass(frozen=True)
class AttributeChange(Change):
    vertex_id: str
    attribute: Attribute

    allowed_types: ClassVar[FrozenSet[ChangeType]] = ATTRIBUTE_CHANGE_TYPES
