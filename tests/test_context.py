"""
Tests for Editing Context
=========================
Entities, graphs and the undoable edit history in namelint/context.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from namelint.context import Entity, Graph, EditContext, ChangeTagsAction


@pytest.fixture
def context():
    return EditContext(Graph([
        Entity("n1", {"name": "Bar", "amenity": "bar"}),
        Entity("n2", {"name": "Joe's"}),
    ]))


class TestEntity:

    def test_from_dict(self):
        entity = Entity.from_dict({"id": 7, "tags": {"name": "Bar", "level": 1}})
        assert entity.id == "7"
        assert entity.tags == {"name": "Bar", "level": "1"}

    def test_from_dict_without_tags(self):
        assert Entity.from_dict({"id": "n1"}).tags == {}

    @pytest.mark.parametrize("data", [{"tags": {}}, ["n1"], {"id": "n1", "tags": ["name"]}])
    def test_from_dict_invalid(self, data):
        with pytest.raises(ValueError):
            Entity.from_dict(data)

    def test_round_trip_dict(self):
        data = {"id": "n1", "tags": {"name": "Bar"}}
        assert Entity.from_dict(data).to_dict() == data


class TestGraph:

    def test_lookup(self, context):
        graph = context.graph()
        assert graph.entity("n1").tags["name"] == "Bar"
        assert graph.has_entity("missing") is None
        assert "n2" in graph
        assert len(graph) == 2

    def test_missing_entity_raises(self, context):
        with pytest.raises(KeyError):
            context.entity("missing")

    def test_replace_is_persistent(self, context):
        graph = context.graph()
        updated = graph.replace(Entity("n1", {}))
        assert graph.entity("n1").tags["name"] == "Bar"
        assert updated.entity("n1").tags == {}


class TestEditContext:

    def test_perform(self, context):
        context.perform(ChangeTagsAction("n1", {"amenity": "bar"}), "Removed a generic name.")
        assert context.entity("n1").tags == {"amenity": "bar"}
        assert context.annotation == "Removed a generic name."
        assert context.history == ["Removed a generic name."]

    def test_undo_redo(self, context):
        context.perform(ChangeTagsAction("n1", {"amenity": "bar"}), "edit")
        assert context.undo() == "edit"
        assert context.entity("n1").tags == {"name": "Bar", "amenity": "bar"}
        assert context.history == []
        assert context.redo() == "edit"
        assert context.entity("n1").tags == {"amenity": "bar"}

    def test_nothing_to_undo(self, context):
        assert context.undo() is None
        assert context.redo() is None

    def test_new_edit_discards_redo(self, context):
        context.perform(ChangeTagsAction("n1", {}), "first")
        context.undo()
        context.perform(ChangeTagsAction("n2", {}), "second")
        assert not context.can_redo()
        assert context.history == ["second"]

    def test_action_on_missing_entity(self, context):
        with pytest.raises(KeyError):
            context.perform(ChangeTagsAction("missing", {}), "edit")
        assert context.history == []
