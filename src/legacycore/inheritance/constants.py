"""Inheritance enums and event categories.

Provides:
- ``RuleStatus`` — inheritance rule lifecycle.
- ``TargetType`` — how a rule selects recipients.
- ``InheritanceTrigger`` — when a rule is processed.
- ``InheritanceState`` — per-recipient inheritance lifecycle.
- ``RelationshipCategory`` — relationship groupings known to the directory.
- ``EventType`` — audit event types, grouped into ``RULE_EVENTS``,
  ``RELATIONSHIP_EVENTS``, ``INHERITANCE_EVENTS`` and ``CONTENT_EVENTS``.
"""

from __future__ import annotations

from enum import Enum


class RuleStatus(str, Enum):
    ACTIVE = "ACTIVE"  # Rule is active and processing
    PAUSED = "PAUSED"  # Rule is paused temporarily
    COMPLETED = "COMPLETED"  # Rule has completed all inheritance
    CANCELLED = "CANCELLED"  # Rule has been cancelled


class TargetType(str, Enum):
    RELATIONSHIP_TYPE = "RELATIONSHIP_TYPE"  # e.g. "Son", "Daughter", "Friend"
    RELATIONSHIP_CATEGORY = "RELATIONSHIP_CATEGORY"  # e.g. "FAMILY", "SOCIAL"
    GENERATION = "GENERATION"  # e.g. "CHILDREN", "GRANDCHILDREN"
    CONTEXT = "CONTEXT"  # relationship context
    CUSTOM = "CUSTOM"  # host-defined targeting


class InheritanceTrigger(str, Enum):
    IMMEDIATE = "IMMEDIATE"  # Inherit at rule creation for existing relationships
    EVENT_BASED = "EVENT_BASED"  # New relationship, birthday, ...
    TIME_BASED = "TIME_BASED"  # Age milestones, anniversaries, ...
    MANUAL = "MANUAL"  # Explicit processing only


class InheritanceState(str, Enum):
    PENDING = "PENDING"
    INHERITED = "INHERITED"
    ACCESSED = "ACCESSED"
    DECLINED = "DECLINED"


class RelationshipCategory(str, Enum):
    FAMILY = "FAMILY"
    SOCIAL = "SOCIAL"
    PROFESSIONAL = "PROFESSIONAL"
    CUSTOM = "CUSTOM"


class EventType(str, Enum):
    # Rule lifecycle
    RULE_CREATED = "RULE_CREATED"
    RULE_UPDATED = "RULE_UPDATED"
    RULE_DELETED = "RULE_DELETED"
    RULE_ACTIVATED = "RULE_ACTIVATED"
    RULE_PAUSED = "RULE_PAUSED"
    RULE_CANCELLED = "RULE_CANCELLED"

    # Relationship changes reported by the host
    RELATIONSHIP_ADDED = "RELATIONSHIP_ADDED"
    RELATIONSHIP_REMOVED = "RELATIONSHIP_REMOVED"
    RELATIONSHIP_UPDATED = "RELATIONSHIP_UPDATED"

    # Inheritance processing
    INHERITANCE_TRIGGERED = "INHERITANCE_TRIGGERED"
    INHERITANCE_COMPLETED = "INHERITANCE_COMPLETED"
    INHERITANCE_FAILED = "INHERITANCE_FAILED"

    # Recipient activity
    CONTENT_INHERITED = "CONTENT_INHERITED"
    CONTENT_ACCESSED = "CONTENT_ACCESSED"
    CONTENT_DECLINED = "CONTENT_DECLINED"
    CONTENT_SHARED = "CONTENT_SHARED"


RULE_EVENTS: frozenset[EventType] = frozenset(
    {
        EventType.RULE_CREATED,
        EventType.RULE_UPDATED,
        EventType.RULE_DELETED,
        EventType.RULE_ACTIVATED,
        EventType.RULE_PAUSED,
        EventType.RULE_CANCELLED,
    }
)

RELATIONSHIP_EVENTS: frozenset[EventType] = frozenset(
    {
        EventType.RELATIONSHIP_ADDED,
        EventType.RELATIONSHIP_REMOVED,
        EventType.RELATIONSHIP_UPDATED,
    }
)

INHERITANCE_EVENTS: frozenset[EventType] = frozenset(
    {
        EventType.INHERITANCE_TRIGGERED,
        EventType.INHERITANCE_COMPLETED,
        EventType.INHERITANCE_FAILED,
    }
)

CONTENT_EVENTS: frozenset[EventType] = frozenset(
    {
        EventType.CONTENT_INHERITED,
        EventType.CONTENT_ACCESSED,
        EventType.CONTENT_DECLINED,
        EventType.CONTENT_SHARED,
    }
)


__all__ = [
    "CONTENT_EVENTS",
    "INHERITANCE_EVENTS",
    "RELATIONSHIP_EVENTS",
    "RULE_EVENTS",
    "EventType",
    "InheritanceState",
    "InheritanceTrigger",
    "RelationshipCategory",
    "RuleStatus",
    "TargetType",
]
