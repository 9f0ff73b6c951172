"""Tests for vertices, edges, schemas and change-record shapes."""
import dataclasses

import pytest

from deltagraph.models import (
    Attribute,
    AttributeChange,
    ChangeType,
    DataVertex,
    EdgeChange,
    LoadingSchema,
    RelationshipEdge,
    VertexChange,
)


class TestDataVertex:
    """Typing and attribute rules on a single vertex."""

    def test_types_include_primary_and_extra(self):
        vertex = DataVertex(id="bob", primary_type="person")
        vertex.add_type("athlete")

        assert vertex.types == {"person", "athlete"}
        assert vertex.extra_types == {"athlete"}

    def test_adding_same_type_twice_is_noop(self):
        vertex = DataVertex(id="bob", primary_type="person")
        vertex.add_type("athlete")
        vertex.add_type("athlete")
        vertex.add_type("person")

        assert vertex.extra_types == {"athlete"}

    def test_attribute_last_write_wins(self):
        vertex = DataVertex(id="alice", primary_type="person")
        vertex.add_attribute(Attribute("name", "alice"))
        vertex.add_attribute(Attribute("name", "alicia"))

        assert vertex.get_attribute("name") == Attribute("name", "alicia")
        assert len(vertex.attributes) == 1

    def test_identity_is_the_id(self):
        a = DataVertex(id="x", primary_type="person")
        b = DataVertex(id="x", primary_type="city")

        assert a == b
        assert len({a, b}) == 1

    def test_attribute_is_immutable(self):
        attribute = Attribute("name", "alice")

        with pytest.raises(dataclasses.FrozenInstanceError):
            attribute.value = "bob"


class TestRelationshipEdge:
    """Edge construction."""

    def test_self_loop_rejected(self):
        vertex = DataVertex(id="a", primary_type="person")

        with pytest.raises(ValueError):
            RelationshipEdge(label="knows", source=vertex, target=DataVertex(id="a", primary_type="x"))

    def test_directed_edge(self):
        a = DataVertex(id="a", primary_type="person")
        b = DataVertex(id="b", primary_type="person")

        edge = RelationshipEdge(label="knows", source=a, target=b)

        assert (edge.source.id, edge.target.id, edge.label) == ("a", "b", "knows")


class TestLoadingSchema:
    """Allow-list filtering."""

    def test_unoptimized_accepts_everything(self):
        schema = LoadingSchema.build(["person"], ["name"], optimized=False)

        assert schema.accepts_type("city")
        assert schema.accepts_attribute("height")

    def test_optimized_filters(self):
        schema = LoadingSchema.build(["Person "], ["NAME"])

        assert schema.accepts_type("person")
        assert not schema.accepts_type("city")
        assert schema.accepts_attribute("name")
        assert not schema.accepts_attribute("height")


class TestChangeRecords:
    """Each variant only carries its own change types."""

    def test_change_type_wire_names(self):
        assert [t.value for t in ChangeType] == [
            "insertVertex",
            "deleteVertex",
            "insertEdge",
            "deleteEdge",
            "insertAttr",
            "deleteAttr",
            "changeAttr",
        ]

    def test_edge_change_rejects_vertex_type(self):
        with pytest.raises(ValueError):
            EdgeChange(type=ChangeType.INSERT_VERTEX, source_id="a", target_id="b", label="knows")

    def test_attribute_change_accepts_change_attr(self):
        change = AttributeChange(
            type=ChangeType.CHANGE_ATTR, vertex_id="a", attribute=Attribute("name", "x")
        )

        assert change.attribute.name == "name"

    def test_vertex_change_is_frozen(self):
        change = VertexChange(type=ChangeType.INSERT_VERTEX, vertex=DataVertex("a", "person"))

        with pytest.raises(dataclasses.FrozenInstanceError):
            change.type = ChangeType.DELETE_VERTEX

    def test_string_type_normalized_to_enum(self):
        change = EdgeChange(type="insertEdge", source_id="a", target_id="b", label="knows")

        assert change.type is ChangeType.INSERT_EDGE
        assert change.type.value == "insertEdge"

    def test_unknown_string_type_rejected(self):
        with pytest.raises(ValueError):
            EdgeChange(type="renameEdge", source_id="a", target_id="b", label="knows")
