"""Recipient resolution for inheritance rules.

A resolver turns a rule's ``(target_type, target_value)`` into the set of
users eligible to inherit. RELATIONSHIP_TYPE and RELATIONSHIP_CATEGORY are
built in; GENERATION, CONTEXT and CUSTOM targets are resolved by whatever
the host application registers.

Example::

    def children_of(rule, directory):
        return [EligibleRecipient(uid, relationship_context="GENERATION")
                for uid in family_tree.generation_below(rule.creator_id)]

    registry = ResolverRegistry()
    registry.register(TargetType.GENERATION, children_of)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable
from uuid import UUID

from ..exceptions import InvalidArgumentError
from .constants import RelationshipCategory, TargetType
from .directory import RelationshipDirectory
from .models import InheritanceRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EligibleRecipient:
    """A resolved recipient and why they qualified."""

    user_id: UUID
    relationship_type_id: str | None = None
    relationship_context: str | None = None


RecipientResolver = Callable[[InheritanceRule, RelationshipDirectory], Iterable[EligibleRecipient]]


def resolve_by_relationship_type(rule: InheritanceRule, directory: RelationshipDirectory) -> list[EligibleRecipient]:
    """Users holding ``rule.target_value`` (e.g. ``"Son"``) with the creator."""
    users = directory.users_by_relationship_type(rule.creator_id, rule.target_value)
    return [
        EligibleRecipient(user_id, relationship_type_id=rule.target_value, relationship_context=TargetType.RELATIONSHIP_TYPE.value)
        for user_id in users
    ]


def resolve_by_relationship_category(rule: InheritanceRule, directory: RelationshipDirectory) -> list[EligibleRecipient]:
    """Users in category ``rule.target_value`` (FAMILY/SOCIAL/PROFESSIONAL/CUSTOM)."""
    category = parse_category(rule.target_value)
    users = directory.users_by_relationship_category(rule.creator_id, category)
    return [EligibleRecipient(user_id, relationship_context=category.value) for user_id in users]


def available_relationship_categories() -> list[str]:
    return [c.value for c in RelationshipCategory]


def parse_category(value: str) -> RelationshipCategory:
    try:
        return RelationshipCategory(value.strip().upper())
    except ValueError:
        raise InvalidArgumentError(
            f"Unknown relationship category: {value}. Must be one of {available_relationship_categories()}",
            target_value=value,
        )


class ResolverRegistry:
    """Registry of recipient resolvers keyed by target type."""

    def __init__(self, *, builtins: bool = True) -> None:
        self._resolvers: dict[TargetType, RecipientResolver] = {}
        if builtins:
            self.register(TargetType.RELATIONSHIP_TYPE, resolve_by_relationship_type)
            self.register(TargetType.RELATIONSHIP_CATEGORY, resolve_by_relationship_category)

    def register(self, target_type: TargetType, resolver: RecipientResolver) -> None:
        self._resolvers[TargetType(target_type)] = resolver

    def get(self, target_type: TargetType) -> RecipientResolver | None:
        return self._resolvers.get(TargetType(target_type))

    def supports(self, target_type: TargetType) -> bool:
        return TargetType(target_type) in self._resolvers

    def resolve(self, rule: InheritanceRule, directory: RelationshipDirectory) -> list[EligibleRecipient]:
        """Resolve the eligible recipients for ``rule``.

        Unregistered target types resolve to nobody. The creator is never
        a recipient of their own rule, and each user appears once.
        """
        resolver = self.get(rule.target_type)
        if resolver is None:
            logger.warning(
                "No recipient resolver registered for target type %s (rule %s)",
                TargetType(rule.target_type).value,
                rule.id,
            )
            return []

        seen: set[UUID] = set()
        recipients: list[EligibleRecipient] = []
        for recipient in resolver(rule, directory):
            if recipient.user_id == rule.creator_id or recipient.user_id in seen:
                continue
            seen.add(recipient.user_id)
            recipients.append(recipient)
        return recipients


__all__ = [
    "EligibleRecipient",
    "RecipientResolver",
    "ResolverRegistry",
    "available_relationship_categories",
    "parse_category",
    "resolve_by_relationship_category",
    "resolve_by_relationship_type",
]
