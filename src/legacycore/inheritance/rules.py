"""Inheritance rule store: CRUD and lifecycle.

Lifecycle (see :data:`~legacycore.inheritance.transitions.RULE_TRANSITIONS`)::

    ACTIVE ⇄ PAUSED
    ACTIVE → COMPLETED
    ACTIVE / PAUSED → CANCELLED

COMPLETED and CANCELLED are terminal. Every state-changing call writes
exactly one audit event; every rejected call leaves state untouched.
Only a rule's creator may mutate it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional
from uuid import UUID

from pydantic import ValidationError

from ..config import LegacyConfig
from ..exceptions import (
    IllegalStateTransitionError,
    InvalidArgumentError,
    PermissionDeniedError,
    RuleNotFoundError,
)
from ..interfaces import ContentRepository
from .constants import EventType, InheritanceTrigger, RuleStatus, TargetType
from .events import EventRecorder
from .models import CreateRuleRequest, InheritanceRule, UpdateRuleRequest
from .repository import InheritanceRepository
from .resolvers import parse_category
from .transitions import RULE_TRANSITIONS, check_rule_transition

logger = logging.getLogger(__name__)

# Lifecycle verb → (target status, audit event)
_LIFECYCLE: dict[str, tuple[RuleStatus, EventType]] = {
    "activate": (RuleStatus.ACTIVE, EventType.RULE_ACTIVATED),
    "pause": (RuleStatus.PAUSED, EventType.RULE_PAUSED),
    "complete": (RuleStatus.COMPLETED, EventType.INHERITANCE_COMPLETED),
    "cancel": (RuleStatus.CANCELLED, EventType.RULE_CANCELLED),
}


def _invalid(error: ValidationError) -> InvalidArgumentError:
    problems = "; ".join(f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in error.errors())
    return InvalidArgumentError(f"Invalid inheritance rule request: {problems}", errors=error.errors())


def _parse(model: type, data: Any):
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise _invalid(e) from e


class InheritanceRuleStore:
    """Rule definitions and their lifecycle.

    Args:
        repository: Persistence collaborator.
        events: Event writer (defaults to one bound to ``repository``).
        processor: Called with the new rule id when an ACTIVE IMMEDIATE rule
            is created. Usually ``InheritanceProcessor.process``.
        content_repository: When given, rules may only be created on
            existing content by that content's creator.
        config: Supplies ``immediate_processing``.
    """

    def __init__(
        self,
        repository: InheritanceRepository,
        *,
        events: Optional[EventRecorder] = None,
        processor: Optional[Callable[[UUID], Any]] = None,
        content_repository: Optional[ContentRepository] = None,
        config: Optional[LegacyConfig] = None,
    ) -> None:
        self._repository = repository
        self._events = events or EventRecorder(repository)
        self._processor = processor
        self._content = content_repository
        self._config = config or LegacyConfig()

    # ── CRUD ───────────────────────────────────────────

    def create(self, request: CreateRuleRequest | dict[str, Any], creator_id: UUID) -> InheritanceRule:
        """Validate and store a new rule, then process it if IMMEDIATE.

        Raises:
            InvalidArgumentError: Malformed request; nothing is written.
            ContentNotFoundError / PermissionDeniedError: Only with a
                content repository configured.
            Exception: Whatever immediate processing raises. The rule, its
                status records and its events are discarded first.
        """
        req: CreateRuleRequest = _parse(CreateRuleRequest, request)
        target_value = self._validate_target(req.target_type, req.target_value)

        if self._content is not None:
            content = self._content.load_content(req.content_id)
            if content.creator_id != creator_id:
                raise PermissionDeniedError(
                    f"User {creator_id} is not the creator of content {req.content_id}",
                    content_id=req.content_id,
                    actor_id=creator_id,
                )

        rule = InheritanceRule(
            content_id=req.content_id,
            creator_id=creator_id,
            target_type=req.target_type,
            target_value=target_value,
            target_metadata=req.target_metadata,
            trigger=req.trigger,
            trigger_metadata=req.trigger_metadata,
            status=req.status,
            priority=req.priority,
            created_by=creator_id,
            updated_by=creator_id,
        )
        self._repository.add_rule(rule)
        logger.info("Created inheritance rule %s for content %s", rule.id, rule.content_id)

        self._events.record(
            rule.id,
            EventType.RULE_CREATED,
            {"ruleId": rule.id, "contentId": rule.content_id},
            created_by=creator_id,
        )

        if rule.is_immediate and rule.is_active and self._config.immediate_processing and self._processor:
            try:
                self._processor(rule.id)
            except Exception:
                logger.warning("Immediate processing failed; discarding inheritance rule %s", rule.id)
                self._repository.discard_rule(rule.id)
                raise

        return rule

    def create_relationship_type_rule(
        self,
        content_id: UUID,
        creator_id: UUID,
        relationship_type: str,
        trigger: InheritanceTrigger,
        trigger_metadata: Optional[dict[str, Any]] = None,
        priority: int = 0,
    ) -> InheritanceRule:
        """Create a rule targeting one named relationship type (e.g. "Son")."""
        return self.create(
            {
                "content_id": content_id,
                "target_type": TargetType.RELATIONSHIP_TYPE,
                "target_value": relationship_type,
                "target_metadata": {"relationshipTypeName": relationship_type},
                "trigger": trigger,
                "trigger_metadata": trigger_metadata or {},
                "priority": priority,
            },
            creator_id,
        )

    def create_relationship_category_rule(
        self,
        content_id: UUID,
        creator_id: UUID,
        category: str,
        trigger: InheritanceTrigger,
        trigger_metadata: Optional[dict[str, Any]] = None,
        priority: int = 0,
    ) -> InheritanceRule:
        """Create a rule targeting a whole relationship category (e.g. FAMILY)."""
        return self.create(
            {
                "content_id": content_id,
                "target_type": TargetType.RELATIONSHIP_CATEGORY,
                "target_value": category,
                "target_metadata": {"relationshipCategory": parse_category(category).value},
                "trigger": trigger,
                "trigger_metadata": trigger_metadata or {},
                "priority": priority,
            },
            creator_id,
        )

    def update(self, rule_id: UUID, request: UpdateRuleRequest | dict[str, Any], actor_id: UUID) -> InheritanceRule:
        """Apply a partial update.

        A ``status`` in the request goes through the lifecycle table.

        Raises:
            RuleNotFoundError, PermissionDeniedError, InvalidArgumentError,
            IllegalStateTransitionError
        """
        req: UpdateRuleRequest = _parse(UpdateRuleRequest, request)
        rule = self._load_for_mutation(rule_id, actor_id)

        changes = req.model_dump(exclude_none=True)
        current = RuleStatus(rule.status)
        target = RuleStatus(changes.pop("status", current))
        # Terminal rules accept no updates at all
        if target != current or not RULE_TRANSITIONS[current]:
            check_rule_transition(current, target, rule_id=rule_id)
        if target != current:
            changes["status"] = target
        if not changes:
            return rule

        target_value = self._validate_target(
            changes.get("target_type", rule.target_type),
            changes.get("target_value", rule.target_value),
        )
        if "target_value" in changes or target_value != rule.target_value:
            changes["target_value"] = target_value

        updated = self._save(rule, actor_id, **changes)
        logger.info("Updated inheritance rule %s", rule_id)
        self._events.record(
            rule_id,
            EventType.RULE_UPDATED,
            {"ruleId": rule_id, "updatedBy": actor_id, "fields": sorted(changes)},
            created_by=actor_id,
        )
        return updated

    def delete(self, rule_id: UUID, actor_id: UUID) -> None:
        """Delete a rule and its status records; its events are retained."""
        rule = self._load_for_mutation(rule_id, actor_id)
        if not self._repository.delete_rule(rule_id):
            # Deleted concurrently
            raise RuleNotFoundError(rule_id)
        self._events.record(
            rule_id,
            EventType.RULE_DELETED,
            {"ruleId": rule_id, "deletedBy": actor_id, "contentId": rule.content_id},
            created_by=actor_id,
        )
        logger.info("Deleted inheritance rule %s", rule_id)

    # ── Lifecycle verbs ────────────────────────────────

    def activate(self, rule_id: UUID, actor_id: UUID) -> InheritanceRule:
        return self._transition("activate", rule_id, actor_id)

    def pause(self, rule_id: UUID, actor_id: UUID) -> InheritanceRule:
        return self._transition("pause", rule_id, actor_id)

    def complete(self, rule_id: UUID, actor_id: UUID) -> InheritanceRule:
        return self._transition("complete", rule_id, actor_id)

    def cancel(self, rule_id: UUID, actor_id: UUID) -> InheritanceRule:
        return self._transition("cancel", rule_id, actor_id)

    def _transition(self, verb: str, rule_id: UUID, actor_id: UUID) -> InheritanceRule:
        target, event_type = _LIFECYCLE[verb]
        rule = self._load_for_mutation(rule_id, actor_id)
        check_rule_transition(rule.status, target, rule_id=rule_id)

        updated = self._save(rule, actor_id, status=target)
        logger.info("Inheritance rule %s: %s -> %s", rule_id, RuleStatus(rule.status).value, target.value)
        self._events.record(
            rule_id,
            event_type,
            {"ruleId": rule_id, "actorId": actor_id, "from": RuleStatus(rule.status).value, "to": target.value},
            created_by=actor_id,
        )
        return updated

    # ── Queries ────────────────────────────────────────

    def get(self, rule_id: UUID) -> InheritanceRule:
        rule = self._repository.get_rule(rule_id)
        if rule is None:
            raise RuleNotFoundError(rule_id)
        return rule

    def list_by_content(self, content_id: UUID) -> list[InheritanceRule]:
        return _ordered(self._repository.list_rules(content_id=content_id))

    def list_by_creator(self, creator_id: UUID) -> list[InheritanceRule]:
        return _ordered(self._repository.list_rules(creator_id=creator_id))

    def list_by_status(self, status: RuleStatus) -> list[InheritanceRule]:
        return _ordered(self._repository.list_rules(status=RuleStatus(status)))

    def list_by_target(self, target_type: TargetType, target_value: str) -> list[InheritanceRule]:
        return _ordered(self._repository.list_rules(target_type=TargetType(target_type), target_value=target_value))

    def list_by_trigger(self, trigger: InheritanceTrigger) -> list[InheritanceRule]:
        return _ordered(self._repository.list_rules(trigger=InheritanceTrigger(trigger)))

    # ── Internals ──────────────────────────────────────

    def _load_for_mutation(self, rule_id: UUID, actor_id: UUID) -> InheritanceRule:
        rule = self.get(rule_id)
        if rule.creator_id != actor_id:
            raise PermissionDeniedError(
                f"User {actor_id} is not the creator of inheritance rule {rule_id}",
                rule_id=rule_id,
                actor_id=actor_id,
            )
        return rule

    def _save(self, rule: InheritanceRule, actor_id: UUID, **changes: Any) -> InheritanceRule:
        updated = rule.model_copy(
            update={**changes, "updated_by": actor_id, "updated_at": datetime.now(timezone.utc)}
        )
        if not self._repository.update_rule(updated, expected_status=rule.status):
            # Another lifecycle call moved the rule first
            current = self.get(rule.id)
            raise IllegalStateTransitionError(
                current.status, updated.status, entity="inheritance rule", rule_id=rule.id
            )
        return updated

    @staticmethod
    def _validate_target(target_type: TargetType, target_value: str) -> str:
        """Return the stored form of ``target_value``."""
        if TargetType(target_type) == TargetType.RELATIONSHIP_CATEGORY:
            return parse_category(target_value).value
        return target_value


def _ordered(rules: list[InheritanceRule]) -> list[InheritanceRule]:
    return sorted(rules, key=lambda r: (-r.priority, r.created_at))


__all__ = ["InheritanceRuleStore"]
