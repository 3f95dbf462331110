"""Access-check helpers for legacy content.

Provides runtime functions that decide whether a user may see a content item
and at what level. All functions are pure: relationship facts
(``is_family_member``, ``is_extended_family_member``, generation levels) are
resolved by the caller beforehand.

Two independent gates guard every item:

1. **Privacy gate** — PRIVATE admits only the creator, FAMILY adds family,
   EXTENDED_FAMILY adds extended family, PUBLIC admits everyone.
2. **Generation gate** — content is visible to its own generation, every
   younger generation, and exactly one generation older.
"""

from __future__ import annotations

import logging
from typing import Iterable
from uuid import UUID

from ..exceptions import PermissionDeniedError
from .constants import AccessLevel, PrivacyLevel
from .models import ContentItem
from .policy import default_access_level

logger = logging.getLogger(__name__)


def passes_privacy_gate(
    user_id: UUID,
    content: ContentItem,
    is_family_member: bool,
    is_extended_family_member: bool,
) -> bool:
    """Privacy-level gate on its own."""
    if content.creator_id == user_id:
        return True

    privacy = PrivacyLevel(content.privacy_level)
    if privacy == PrivacyLevel.PUBLIC:
        return True
    if privacy == PrivacyLevel.EXTENDED_FAMILY:
        return is_family_member or is_extended_family_member
    if privacy == PrivacyLevel.FAMILY:
        return is_family_member
    return False


def is_content_visible_to_generation(
    content_generation_level: int | None,
    user_generation_level: int | None,
) -> bool:
    """Generation gate on its own.

    Visible iff ``user >= content - 1``. Either side ``None`` bypasses
    the gate.

    Example::

        is_content_visible_to_generation(3, 2)  # True  (one generation up)
        is_content_visible_to_generation(3, 9)  # True  (any descendant)
        is_content_visible_to_generation(3, 1)  # False (two generations up)
    """
    if content_generation_level is None or user_generation_level is None:
        return True
    return user_generation_level >= content_generation_level - 1


def is_sharing_allowed_between_generations(
    from_generation: int | None,
    to_generation: int | None,
) -> bool:
    """Sharing across generations has no distance limit.

    Privacy settings and relationships control sharing; this gate is kept
    separate from :func:`is_content_visible_to_generation` on purpose.
    """
    return True


def has_content_access(
    user_id: UUID,
    content: ContentItem,
    user_generation_level: int | None,
    is_family_member: bool,
    is_extended_family_member: bool,
) -> bool:
    """Check if a user may see a content item at all.

    Both the privacy gate and the generation gate must pass. Explicit
    recipient grants do not override a failed gate.

    Args:
        user_id: Requesting user.
        content: Content item being accessed.
        user_generation_level: Requester's generation (``None`` = unknown).
        is_family_member: Requester is in the creator's family.
        is_extended_family_member: Requester is in the creator's extended family.

    Returns:
        True if access is granted.

    Example::

        content = ContentItem(creator_id=x, generation_level=2, privacy_level=PrivacyLevel.FAMILY)
        has_content_access(y, content, 1, True, False)  # True
        has_content_access(z, content, 0, True, False)  # False (generation gate)
    """
    if not passes_privacy_gate(user_id, content, is_family_member, is_extended_family_member):
        logger.debug(
            "User %s denied access to content %s due to privacy level %s",
            user_id,
            content.id,
            content.privacy_level,
        )
        return False

    if not is_content_visible_to_generation(content.generation_level, user_generation_level):
        logger.debug(
            "User %s (generation %s) denied access to content %s (generation %s)",
            user_id,
            user_generation_level,
            content.id,
            content.generation_level,
        )
        return False

    return True


def get_effective_access_level(
    user_id: UUID,
    content: ContentItem,
    user_generation_level: int | None = None,
    is_family_member: bool = False,
    is_extended_family_member: bool = False,
) -> AccessLevel | None:
    """Resolve the access level a user holds on a content item.

    Checks in order:
    1. creator → ``EDIT``
    2. ACCEPTED recipient grant → its access level
    3. privacy default (``READ`` for FAMILY / EXTENDED_FAMILY / PUBLIC)

    Returns ``None`` when no path applies. Callers must already have checked
    :func:`has_content_access`; the relationship arguments are accepted for a
    uniform signature.
    """
    if content.creator_id == user_id:
        return AccessLevel.EDIT

    grant = content.accepted_grant_for(user_id)
    if grant is not None:
        logger.debug("User %s has recipient access %s to content %s", user_id, grant.access_level, content.id)
        return AccessLevel(grant.access_level)

    return default_access_level(content.privacy_level)


def has_access_level(
    required: AccessLevel,
    user_id: UUID,
    content: ContentItem,
    user_generation_level: int | None,
    is_family_member: bool,
    is_extended_family_member: bool,
) -> bool:
    """Check content access plus a minimum access level.

    Hierarchy: ``EDIT`` implies ``COMMENT`` implies ``READ``.

    Example::

        has_access_level(AccessLevel.READ, creator, content, None, False, False)  # True
        has_access_level(AccessLevel.EDIT, cousin, content, 3, False, True)       # False
    """
    if not has_content_access(user_id, content, user_generation_level, is_family_member, is_extended_family_member):
        return False

    effective = get_effective_access_level(
        user_id, content, user_generation_level, is_family_member, is_extended_family_member
    )
    if effective is None:
        return False
    return effective.ordinal >= AccessLevel(required).ordinal


def can_inherit_content(content: ContentItem, target_generation_level: int | None) -> bool:
    """PRIVATE content can never be inherited; anything else can."""
    if PrivacyLevel(content.privacy_level) == PrivacyLevel.PRIVATE:
        logger.debug("Content %s cannot be inherited due to PRIVATE privacy level", content.id)
        return False
    return is_sharing_allowed_between_generations(content.generation_level, target_generation_level)


def can_modify_privacy_level(user_id: UUID, content: ContentItem, new_level: PrivacyLevel) -> bool:
    """Only the creator can change a content item's privacy level."""
    allowed = content.creator_id == user_id
    if not allowed:
        logger.debug("User %s cannot set privacy of content %s to %s: not the creator", user_id, content.id, new_level)
    return allowed


def require_privacy_modification(user_id: UUID, content: ContentItem, new_level: PrivacyLevel) -> None:
    """Raise :class:`PermissionDeniedError` unless the user may change privacy."""
    if not can_modify_privacy_level(user_id, content, new_level):
        raise PermissionDeniedError(
            f"User {user_id} cannot modify privacy level of content {content.id}",
            user_id=user_id,
            content_id=content.id,
        )


def get_accessible_users(
    content: ContentItem,
    family_members: Iterable[UUID] = (),
    extended_family_members: Iterable[UUID] = (),
) -> list[UUID]:
    """List the known users who can reach a content item through privacy rules.

    Includes the creator, family / extended family as the privacy level
    allows, and recipients with ACCEPTED grants. PUBLIC content is open to
    everyone, so only the creator and accepted recipients are listed.
    Generation levels are not considered.
    """
    users: list[UUID] = [content.creator_id]

    privacy = PrivacyLevel(content.privacy_level)
    if privacy == PrivacyLevel.EXTENDED_FAMILY:
        users.extend(extended_family_members)
        users.extend(family_members)
    elif privacy == PrivacyLevel.FAMILY:
        users.extend(family_members)

    users.extend(grant.recipient_id for grant in content.recipients if grant.is_accepted)

    # Deduplicate, keep first occurrence
    return list(dict.fromkeys(users))


__all__ = [
    "can_inherit_content",
    "can_modify_privacy_level",
    "get_accessible_users",
    "get_effective_access_level",
    "has_access_level",
    "has_content_access",
    "is_content_visible_to_generation",
    "is_sharing_allowed_between_generations",
    "passes_privacy_gate",
    "require_privacy_modification",
]
