"""Access policy for legacy content.

Defines:
- PrivacyLevel / AccessLevel: ordered visibility and capability enums
- ContentItem / RecipientGrant: the inputs the policy reads
- has_content_access(): privacy gate + generation gate
- get_effective_access_level() / has_access_level(): capability resolution
- Privacy defaults and privacy-inheritance validation
"""

from .access import (
    can_inherit_content,
    can_modify_privacy_level,
    get_accessible_users,
    get_effective_access_level,
    has_access_level,
    has_content_access,
    is_content_visible_to_generation,
    is_sharing_allowed_between_generations,
    passes_privacy_gate,
    require_privacy_modification,
)
from .constants import (
    ACCESS_HIERARCHY,
    PRIVACY_ORDER,
    AccessLevel,
    ContentStatus,
    PrivacyLevel,
    RecipientStatus,
    RecipientType,
)
from .models import ContentItem, RecipientGrant
from .policy import (
    DEFAULT_ACCESS_BY_PRIVACY,
    default_access_level,
    default_privacy_level_for_generation,
    validate_privacy_inheritance,
)

__all__ = [
    "ACCESS_HIERARCHY",
    "DEFAULT_ACCESS_BY_PRIVACY",
    "PRIVACY_ORDER",
    "AccessLevel",
    "ContentItem",
    "ContentStatus",
    "PrivacyLevel",
    "RecipientGrant",
    "RecipientStatus",
    "RecipientType",
    "can_inherit_content",
    "can_modify_privacy_level",
    "default_access_level",
    "default_privacy_level_for_generation",
    "get_accessible_users",
    "get_effective_access_level",
    "has_access_level",
    "has_content_access",
    "is_content_visible_to_generation",
    "is_sharing_allowed_between_generations",
    "passes_privacy_gate",
    "require_privacy_modification",
    "validate_privacy_inheritance",
]
