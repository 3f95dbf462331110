"""Privacy and access defaults.

Provides:
- ``DEFAULT_ACCESS_BY_PRIVACY`` — access granted to non-creators reached
  through privacy and generation rules alone.
- ``default_privacy_level_for_generation()`` — advisory privacy for new
  content when the caller omits one.
- ``validate_privacy_inheritance()`` — derived content may never be more
  private than its source.
"""

from __future__ import annotations

import logging

from .constants import AccessLevel, PrivacyLevel

logger = logging.getLogger(__name__)


# ── Default Access ──────────────────────────────────────
# PRIVATE has no default path: only the creator and explicit grants apply.

DEFAULT_ACCESS_BY_PRIVACY: dict[PrivacyLevel, AccessLevel] = {
    PrivacyLevel.FAMILY: AccessLevel.READ,
    PrivacyLevel.EXTENDED_FAMILY: AccessLevel.READ,
    PrivacyLevel.PUBLIC: AccessLevel.READ,
}


def default_access_level(privacy_level: PrivacyLevel) -> AccessLevel | None:
    """Default access for a non-creator without an accepted grant."""
    return DEFAULT_ACCESS_BY_PRIVACY.get(PrivacyLevel(privacy_level))


# ── Generation Defaults ─────────────────────────────────


def default_privacy_level_for_generation(generation_level: int | None) -> PrivacyLevel:
    """Advisory privacy level for content created at ``generation_level``.

    - ``None`` or ``<= 0`` (grandparents and older): FAMILY
    - ``1`` (parents): FAMILY
    - ``2`` (children): EXTENDED_FAMILY
    - ``>= 3`` (grandchildren and younger): PRIVATE

    Only used when the caller omits a privacy level; never enforced later.
    """
    if generation_level is None or generation_level <= 1:
        level = PrivacyLevel.FAMILY
    elif generation_level == 2:
        level = PrivacyLevel.EXTENDED_FAMILY
    else:
        level = PrivacyLevel.PRIVATE

    logger.debug("Default privacy level for generation %s: %s", generation_level, level.value)
    return level


# ── Privacy Inheritance ─────────────────────────────────


def validate_privacy_inheritance(parent: PrivacyLevel, child: PrivacyLevel) -> bool:
    """Check that ``child`` is at least as open as ``parent``.

    Example::

        validate_privacy_inheritance(PrivacyLevel.FAMILY, PrivacyLevel.EXTENDED_FAMILY)  # True
        validate_privacy_inheritance(PrivacyLevel.EXTENDED_FAMILY, PrivacyLevel.FAMILY)  # False
        validate_privacy_inheritance(PrivacyLevel.PRIVATE, PrivacyLevel.PUBLIC)          # True
    """
    is_valid = PrivacyLevel(child).ordinal >= PrivacyLevel(parent).ordinal
    logger.debug("Privacy inheritance from %s to %s: %s", parent, child, is_valid)
    return is_valid


__all__ = [
    "DEFAULT_ACCESS_BY_PRIVACY",
    "default_access_level",
    "default_privacy_level_for_generation",
    "validate_privacy_inheritance",
]
