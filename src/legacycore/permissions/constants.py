"""Privacy, access and recipient enums for legacy content.

Provides:
- ``PrivacyLevel`` — who may see a content item, ordered by openness.
- ``AccessLevel`` — what a viewer may do, ordered READ < COMMENT < EDIT.
- ``ContentStatus`` — content lifecycle.
- ``RecipientType`` / ``RecipientStatus`` — explicit recipient grants.
"""

from __future__ import annotations

from enum import Enum


class PrivacyLevel(str, Enum):
    """Content visibility scope.

    Declaration order is the openness order used by privacy inheritance:
    ``PRIVATE < FAMILY < EXTENDED_FAMILY < PUBLIC``.
    """

    PRIVATE = "PRIVATE"  # Only creator can access
    FAMILY = "FAMILY"  # Family members can access
    EXTENDED_FAMILY = "EXTENDED_FAMILY"  # Extended family can access
    PUBLIC = "PUBLIC"  # Everyone can access

    @property
    def ordinal(self) -> int:
        return PRIVACY_ORDER.index(self)


class AccessLevel(str, Enum):
    """Operation granularity on a content item.

    Hierarchy: ``EDIT`` > ``COMMENT`` > ``READ``.
    Higher level implies all lower levels.
    """

    READ = "READ"  # Can only view the content
    COMMENT = "COMMENT"  # Can view and comment
    EDIT = "EDIT"  # Can view, comment, and edit

    @property
    def ordinal(self) -> int:
        return ACCESS_HIERARCHY.index(self)


class ContentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ARCHIVED = "ARCHIVED"
    DELETED = "DELETED"


class RecipientType(str, Enum):
    SPECIFIC_USER = "SPECIFIC_USER"
    GENERATION = "GENERATION"
    RELATIONSHIP = "RELATIONSHIP"


class RecipientStatus(str, Enum):
    PENDING = "PENDING"  # Waiting for recipient to accept
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"  # Reaped while still pending


PRIVACY_ORDER: tuple[PrivacyLevel, ...] = (
    PrivacyLevel.PRIVATE,
    PrivacyLevel.FAMILY,
    PrivacyLevel.EXTENDED_FAMILY,
    PrivacyLevel.PUBLIC,
)

ACCESS_HIERARCHY: tuple[AccessLevel, ...] = (
    AccessLevel.READ,
    AccessLevel.COMMENT,
    AccessLevel.EDIT,
)


__all__ = [
    "ACCESS_HIERARCHY",
    "PRIVACY_ORDER",
    "AccessLevel",
    "ContentStatus",
    "PrivacyLevel",
    "RecipientStatus",
    "RecipientType",
]
