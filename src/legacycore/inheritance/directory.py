"""Relationship directory: who is related to whom, how, and in what category.

Provides:
- RelationshipDirectory Protocol (interface consumed by the processor)
- Relationship dataclass
- InMemoryRelationshipDirectory (fixture / embedded implementation)

The relationship graph itself lives outside the engine. Production
implementations typically wrap a remote relationship service; the engine
never knows whether lookups hit the network, a cache, or memory.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol, runtime_checkable
from uuid import UUID, uuid4

from .constants import RelationshipCategory


# =========================================
# Protocol
# =========================================


@runtime_checkable
class RelationshipDirectory(Protocol):
    """Protocol for relationship lookups.

    Implementations must provide:
    - users_by_relationship_type(): users holding a named type with the anchor
    - users_by_relationship_category(): users in a category with the anchor
    - relationship_exists() / active_relationship_exists(): pair checks

    Each lookup is one synchronous call returning the whole set.
    """

    def users_by_relationship_type(self, anchor_user_id: UUID, type_name: str) -> list[UUID]: ...

    def users_by_relationship_category(
        self, anchor_user_id: UUID, category: RelationshipCategory
    ) -> list[UUID]: ...

    def relationship_exists(self, user_a: UUID, user_b: UUID) -> bool: ...

    def active_relationship_exists(self, user_a: UUID, user_b: UUID) -> bool: ...


# =========================================
# In-memory implementation
# =========================================


@dataclass(frozen=True)
class Relationship:
    """One edge in the relationship graph, read from ``user1``'s side.

    ``type_name`` is how ``user1`` names ``user2`` (``"Son"`` means user2 is
    user1's son). Bidirectional edges are visible from both ends under the
    same type name.
    """

    user1_id: UUID
    user2_id: UUID
    type_name: str
    category: RelationshipCategory = RelationshipCategory.FAMILY
    status: str = "ACTIVE"
    bidirectional: bool = False
    id: UUID = field(default_factory=uuid4)
    metadata: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"

    def other_user_id(self, current_user_id: UUID) -> UUID:
        return self.user2_id if self.user1_id == current_user_id else self.user1_id

    def involves(self, user_a: UUID, user_b: UUID) -> bool:
        return {self.user1_id, self.user2_id} == {user_a, user_b}


class InMemoryRelationshipDirectory:
    """Directory backed by a list of :class:`Relationship` edges.

    Lookups return only ACTIVE relationships. Type names match
    case-insensitively.
    """

    def __init__(self, relationships: Iterable[Relationship] | None = None) -> None:
        self._lock = threading.Lock()
        self._relationships: list[Relationship] = list(relationships or ())
        self.calls: int = 0

    def add(self, relationship: Relationship) -> Relationship:
        with self._lock:
            self._relationships.append(relationship)
        return relationship

    def relate(
        self,
        anchor_user_id: UUID,
        other_user_id: UUID,
        type_name: str,
        category: RelationshipCategory = RelationshipCategory.FAMILY,
        **kwargs: Any,
    ) -> Relationship:
        """Shorthand: ``other_user_id`` is the anchor's ``type_name``."""
        return self.add(Relationship(anchor_user_id, other_user_id, type_name, RelationshipCategory(category), **kwargs))

    def remove(self, relationship_id: UUID) -> None:
        with self._lock:
            self._relationships = [r for r in self._relationships if r.id != relationship_id]

    def _outgoing(self, anchor_user_id: UUID) -> list[Relationship]:
        with self._lock:
            self.calls += 1
            return [
                r
                for r in self._relationships
                if r.is_active
                and (r.user1_id == anchor_user_id or (r.bidirectional and r.user2_id == anchor_user_id))
            ]

    def users_by_relationship_type(self, anchor_user_id: UUID, type_name: str) -> list[UUID]:
        wanted = type_name.casefold()
        users = [
            r.other_user_id(anchor_user_id)
            for r in self._outgoing(anchor_user_id)
            if r.type_name.casefold() == wanted
        ]
        return list(dict.fromkeys(users))

    def users_by_relationship_category(self, anchor_user_id: UUID, category: RelationshipCategory) -> list[UUID]:
        wanted = RelationshipCategory(category)
        users = [r.other_user_id(anchor_user_id) for r in self._outgoing(anchor_user_id) if r.category == wanted]
        return list(dict.fromkeys(users))

    def relationship_exists(self, user_a: UUID, user_b: UUID) -> bool:
        with self._lock:
            return any(r.involves(user_a, user_b) for r in self._relationships)

    def active_relationship_exists(self, user_a: UUID, user_b: UUID) -> bool:
        with self._lock:
            return any(r.is_active and r.involves(user_a, user_b) for r in self._relationships)


__all__ = [
    "InMemoryRelationshipDirectory",
    "Relationship",
    "RelationshipDirectory",
]
