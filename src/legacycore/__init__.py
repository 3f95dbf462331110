from .config import LegacyConfig, LogLevel, load_config_from_env
from .exceptions import (
    ConfigurationError,
    ContentNotFoundError,
    DuplicateStatusError,
    IllegalStateTransitionError,
    InvalidArgumentError,
    LegacyError,
    NotFoundError,
    PermissionDeniedError,
    RuleNotFoundError,
    StatusNotFoundError,
    StorageError,
)
from .interfaces import ContentRepository, InMemoryContentRepository
from .logging import (
    safe_preview,
    redact_secrets,
    safe_log_value,
    LegacyFormatter,
    LegacyLoggerAdapter,
    setup_logging,
    get_legacy_logger,
)
from .permissions import (
    AccessLevel,
    ContentItem,
    PrivacyLevel,
    RecipientGrant,
    get_effective_access_level,
    has_access_level,
    has_content_access,
)
from .inheritance import (
    InheritanceEngine,
    InheritanceProcessor,
    InheritanceRule,
    InheritanceRuleStore,
    InheritanceState,
    InheritanceStatus,
    InheritanceStatusTracker,
    InMemoryInheritanceRepository,
    InMemoryRelationshipDirectory,
    RelationshipDirectory,
    RuleStatus,
    TargetType,
)

__all__ = [
    'LegacyConfig',
    'LogLevel',
    'load_config_from_env',
    'LegacyError',
    'NotFoundError',
    'RuleNotFoundError',
    'StatusNotFoundError',
    'ContentNotFoundError',
    'InvalidArgumentError',
    'IllegalStateTransitionError',
    'PermissionDeniedError',
    'ConfigurationError',
    'StorageError',
    'DuplicateStatusError',
    'ContentRepository',
    'InMemoryContentRepository',
    'safe_preview',
    'redact_secrets',
    'safe_log_value',
    'LegacyFormatter',
    'LegacyLoggerAdapter',
    'setup_logging',
    'get_legacy_logger',
    'AccessLevel',
    'ContentItem',
    'PrivacyLevel',
    'RecipientGrant',
    'get_effective_access_level',
    'has_access_level',
    'has_content_access',
    'InheritanceEngine',
    'InheritanceProcessor',
    'InheritanceRule',
    'InheritanceRuleStore',
    'InheritanceState',
    'InheritanceStatus',
    'InheritanceStatusTracker',
    'InMemoryInheritanceRepository',
    'InMemoryRelationshipDirectory',
    'RelationshipDirectory',
    'RuleStatus',
    'TargetType',
]
