#!/usr/bin/env python3
"""
Editing Context
===============
Minimal host-side entity model used by validations and their fixes:

- Entity: a map feature (id + tags), immutable
- Graph: an immutable snapshot of entities
- ChangeTagsAction: graph -> graph replacing one entity's tags
- EditContext: current graph plus an undo/redo history of annotated edits
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Entity:
    """A map feature with a stable id and its tags."""
    id: str
    tags: Mapping[str, str] = field(default_factory=dict)

    def update(self, **changes) -> "Entity":
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: dict) -> "Entity":
        """Build from ``{"id": ..., "tags": {...}}``."""
        if not isinstance(data, dict) or 'id' not in data:
            raise ValueError(f"Feature must be an object with an 'id': {data!r}")
        tags = data.get('tags') or {}
        if not isinstance(tags, dict):
            raise ValueError(f"Feature {data['id']} has non-object tags")
        return cls(id=str(data['id']), tags={str(k): str(v) for k, v in tags.items()})

    def to_dict(self) -> dict:
        return {'id': self.id, 'tags': dict(self.tags)}


class Graph:
    """Immutable collection of entities keyed by id."""

    def __init__(self, entities: Iterable[Entity] = ()):
        self._entities: Dict[str, Entity] = {e.id: e for e in entities}

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self._entities

    def __iter__(self):
        return iter(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)

    def entity(self, entity_id: str) -> Entity:
        """
        Raises:
            KeyError: If the entity is not in the graph
        """
        try:
            return self._entities[entity_id]
        except KeyError:
            raise KeyError(f"Entity {entity_id} not found") from None

    def has_entity(self, entity_id: str) -> Optional[Entity]:
        return self._entities.get(entity_id)

    def replace(self, entity: Entity) -> "Graph":
        entities = dict(self._entities)
        entities[entity.id] = entity
        graph = Graph()
        graph._entities = entities
        return graph


@dataclass(frozen=True)
class ChangeTagsAction:
    """Replace the tags of one entity."""
    entity_id: str
    tags: Mapping[str, str]

    def __call__(self, graph: Graph) -> Graph:
        entity = graph.entity(self.entity_id)
        return graph.replace(entity.update(tags=dict(self.tags)))


class EditContext:
    """
    Current graph plus an annotated, undoable edit history.

    Usage:
        context = EditContext(Graph([Entity("n1", {"name": "Bar"})]))
        context.perform(ChangeTagsAction("n1", {}), "Removed a generic name.")
        context.undo()
    """

    def __init__(self, graph: Optional[Graph] = None):
        self._stack: List[Tuple[Graph, Optional[str]]] = [(graph or Graph(), None)]
        self._index = 0

    def graph(self) -> Graph:
        return self._stack[self._index][0]

    def entity(self, entity_id: str) -> Entity:
        return self.graph().entity(entity_id)

    def has_entity(self, entity_id: str) -> Optional[Entity]:
        return self.graph().has_entity(entity_id)

    @property
    def annotation(self) -> Optional[str]:
        """Annotation of the most recent edit still applied."""
        return self._stack[self._index][1]

    @property
    def history(self) -> List[str]:
        """Annotations of applied edits, oldest first."""
        return [annotation for _, annotation in self._stack[1:self._index + 1]]

    def perform(self, action, annotation: str) -> Graph:
        """Apply an action as a single undoable edit."""
        graph = action(self.graph())
        # A new edit discards anything that was undone
        del self._stack[self._index + 1:]
        self._stack.append((graph, annotation))
        self._index += 1
        return graph

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._stack) - 1

    def undo(self) -> Optional[str]:
        """Revert the last edit. Returns its annotation, or None if nothing to undo."""
        if not self.can_undo():
            return None
        annotation = self._stack[self._index][1]
        self._index -= 1
        return annotation

    def redo(self) -> Optional[str]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._stack[self._index][1]
