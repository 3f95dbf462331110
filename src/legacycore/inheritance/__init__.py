"""Content inheritance.

Defines:
- InheritanceRuleStore: rule CRUD and lifecycle
- InheritanceProcessor: recipient resolution and idempotent materialization
- InheritanceStatusTracker: per-recipient lifecycle, queries, statistics
- EventRecorder: append-only audit trail
- InheritanceEngine: the above wired around one repository
"""

from .constants import (
    CONTENT_EVENTS,
    INHERITANCE_EVENTS,
    RELATIONSHIP_EVENTS,
    RULE_EVENTS,
    EventType,
    InheritanceState,
    InheritanceTrigger,
    RelationshipCategory,
    RuleStatus,
    TargetType,
)
from .directory import InMemoryRelationshipDirectory, Relationship, RelationshipDirectory
from .engine import InheritanceEngine
from .events import EventRecorder
from .models import (
    BatchResult,
    CreateRuleRequest,
    InheritanceEvent,
    InheritanceRule,
    InheritanceStatus,
    ProcessResult,
    UpdateRuleRequest,
)
from .processor import InheritanceProcessor
from .repository import InheritanceRepository, InMemoryInheritanceRepository
from .resolvers import EligibleRecipient, RecipientResolver, ResolverRegistry, available_relationship_categories
from .rules import InheritanceRuleStore
from .tracker import InheritanceStatusTracker
from .transitions import (
    GRANT_TRANSITIONS,
    RULE_TRANSITIONS,
    STATE_TRANSITIONS,
    check_rule_transition,
    check_state_transition,
    transition_grant,
)

__all__ = [
    "CONTENT_EVENTS",
    "GRANT_TRANSITIONS",
    "INHERITANCE_EVENTS",
    "RELATIONSHIP_EVENTS",
    "RULE_EVENTS",
    "RULE_TRANSITIONS",
    "STATE_TRANSITIONS",
    "BatchResult",
    "CreateRuleRequest",
    "EligibleRecipient",
    "EventRecorder",
    "EventType",
    "InMemoryInheritanceRepository",
    "InMemoryRelationshipDirectory",
    "InheritanceEngine",
    "InheritanceEvent",
    "InheritanceProcessor",
    "InheritanceRepository",
    "InheritanceRule",
    "InheritanceRuleStore",
    "InheritanceState",
    "InheritanceStatus",
    "InheritanceStatusTracker",
    "InheritanceTrigger",
    "ProcessResult",
    "RecipientResolver",
    "Relationship",
    "RelationshipCategory",
    "RelationshipDirectory",
    "ResolverRegistry",
    "RuleStatus",
    "TargetType",
    "UpdateRuleRequest",
    "available_relationship_categories",
    "check_rule_transition",
    "check_state_transition",
    "transition_grant",
]
