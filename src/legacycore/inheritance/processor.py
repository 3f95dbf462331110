"""Inheritance processing: resolve recipients, materialize status records.

``process(rule_id)`` is idempotent. Re-processing a rule, sequentially or
concurrently, never creates a second status record for a recipient: the
repository's atomic insert rejects the duplicate and the processor skips it.

Batch entry points (``process_all``, ``process_for_target`` and the
relationship-scoped variants) isolate failures per rule. They can be
narrowed to one content item, which is how a host reacts to a new
relationship for a single piece of content.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional
from uuid import UUID

from ..config import LegacyConfig
from ..exceptions import DuplicateStatusError, RuleNotFoundError
from ..interfaces import ContentRepository
from ..logging import get_legacy_logger
from ..permissions.access import can_inherit_content
from .constants import EventType, InheritanceTrigger, RuleStatus, TargetType
from .directory import RelationshipDirectory
from .events import EventRecorder
from .models import BatchResult, InheritanceRule, InheritanceStatus, ProcessResult
from .repository import InheritanceRepository
from .resolvers import EligibleRecipient, ResolverRegistry, parse_category

logger = get_legacy_logger(__name__)


class InheritanceProcessor:
    """Resolves eligible recipients and creates their status records.

    Args:
        repository: Rule / status / event persistence.
        directory: Relationship lookups, one call per processed rule.
        resolvers: Target-type resolvers (defaults to the built-ins).
        events: Event writer (defaults to one bound to ``repository``).
        content_repository: When given, content that cannot be inherited
            (PRIVATE) resolves to no recipients.
        config: Supplies ``process_all_max_workers``.
    """

    def __init__(
        self,
        repository: InheritanceRepository,
        directory: RelationshipDirectory,
        *,
        resolvers: Optional[ResolverRegistry] = None,
        events: Optional[EventRecorder] = None,
        content_repository: Optional[ContentRepository] = None,
        config: Optional[LegacyConfig] = None,
    ) -> None:
        self._repository = repository
        self._directory = directory
        self._resolvers = resolvers or ResolverRegistry()
        self._events = events or EventRecorder(repository)
        self._content = content_repository
        self._config = config or LegacyConfig()

    @property
    def resolvers(self) -> ResolverRegistry:
        return self._resolvers

    # ── Single rule ────────────────────────────────────

    def process(self, rule_id: UUID) -> ProcessResult:
        """Materialize a PENDING status record for every eligible recipient.

        Non-ACTIVE rules are a no-op (``result.processed`` is False).

        Raises:
            RuleNotFoundError: The rule does not exist.
        """
        rule = self._load_rule(rule_id)
        if not rule.is_active:
            logger.warning("Skipping inactive rule (status %s)", RuleStatus(rule.status).value, rule=rule)
            return ProcessResult(rule_id=rule.id, processed=False)

        result = ProcessResult(rule_id=rule.id)
        for recipient in self._resolve(rule):
            record = self._materialize(rule, recipient)
            if record is None:
                result.skipped.append(recipient.user_id)
            else:
                result.created.append(record)

        logger.info(
            "Processed rule: %d created, %d already materialized",
            result.created_count,
            len(result.skipped),
            rule=rule,
        )
        return result

    def process_for_recipient(self, rule_id: UUID, recipient_id: UUID) -> ProcessResult:
        """Materialize a single recipient, if the rule currently targets them."""
        rule = self._load_rule(rule_id)
        if not rule.is_active:
            logger.warning("Skipping inactive rule for recipient %s", recipient_id, rule=rule)
            return ProcessResult(rule_id=rule.id, processed=False)

        result = ProcessResult(rule_id=rule.id)
        recipient = next((r for r in self._resolve(rule) if r.user_id == recipient_id), None)
        if recipient is None:
            logger.info("Recipient %s is not eligible", recipient_id, rule=rule)
            return result

        record = self._materialize(rule, recipient)
        if record is None:
            result.skipped.append(recipient_id)
        else:
            result.created.append(record)
        return result

    def eligible_recipients(self, rule_id: UUID) -> list[EligibleRecipient]:
        """Preview the resolved recipient set without writing anything."""
        return self._resolve(self._load_rule(rule_id))

    # ── Batches ────────────────────────────────────────

    def process_all(self) -> BatchResult:
        """Process every ACTIVE rule; one rule's failure never blocks another."""
        logger.info("Processing all active inheritance rules")
        return self._run_batch(self._repository.list_rules(status=RuleStatus.ACTIVE))

    def process_for_target(
        self,
        target_type: TargetType,
        target_value: str,
        content_id: Optional[UUID] = None,
    ) -> BatchResult:
        """Process every ACTIVE rule aimed at ``(target_type, target_value)``.

        With ``content_id``, only that content's rules are processed.
        """
        logger.info("Processing inheritance for target %s - %s", TargetType(target_type).value, target_value)
        rules = self._repository.list_rules(
            content_id=content_id,
            status=RuleStatus.ACTIVE,
            target_type=TargetType(target_type),
            target_value=target_value,
        )
        return self._run_batch(rules)

    def process_for_relationship_type(self, relationship_type: str, content_id: Optional[UUID] = None) -> BatchResult:
        return self.process_for_target(TargetType.RELATIONSHIP_TYPE, relationship_type, content_id)

    def process_for_relationship_category(self, category: str, content_id: Optional[UUID] = None) -> BatchResult:
        return self.process_for_target(
            TargetType.RELATIONSHIP_CATEGORY, parse_category(category).value, content_id
        )

    def _run_batch(self, rules: Iterable[InheritanceRule]) -> BatchResult:
        ordered = sorted(rules, key=lambda r: (-r.priority, r.created_at))
        batch = BatchResult()
        workers = self._config.process_all_max_workers

        if workers <= 1 or len(ordered) <= 1:
            for rule in ordered:
                self._process_isolated(rule.id, batch)
        else:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="inheritance") as pool:
                futures = {rule.id: pool.submit(self.process, rule.id) for rule in ordered}
                for rule_id, future in futures.items():
                    try:
                        batch.record(future.result())
                    except Exception as e:
                        logger.exception("Error processing inheritance rule", rule_id=rule_id)
                        batch.record_failure(rule_id, e)

        logger.info(
            "Batch complete: %d processed, %d failed, %d records created",
            batch.processed,
            batch.failed,
            batch.created_count,
        )
        return batch

    def _process_isolated(self, rule_id: UUID, batch: BatchResult) -> None:
        try:
            batch.record(self.process(rule_id))
        except Exception as e:
            logger.exception("Error processing inheritance rule", rule_id=rule_id)
            batch.record_failure(rule_id, e)

    # ── Relationship previews ──────────────────────────

    def eligible_recipients_by_relationship_type(
        self, content_id: UUID, relationship_type: str
    ) -> list[EligibleRecipient]:
        """Who a RELATIONSHIP_TYPE rule on ``content_id`` would reach. Writes nothing."""
        return self._preview(content_id, TargetType.RELATIONSHIP_TYPE, relationship_type)

    def eligible_recipients_by_relationship_category(
        self, content_id: UUID, category: str
    ) -> list[EligibleRecipient]:
        return self._preview(content_id, TargetType.RELATIONSHIP_CATEGORY, parse_category(category).value)

    def has_inheritance_access_by_relationship_type(
        self, user_id: UUID, content_id: UUID, relationship_type: str
    ) -> bool:
        """True when ``user_id`` holds ``relationship_type`` with the content's creator."""
        recipients = self.eligible_recipients_by_relationship_type(content_id, relationship_type)
        return any(r.user_id == user_id for r in recipients)

    def has_inheritance_access_by_relationship_category(self, user_id: UUID, content_id: UUID, category: str) -> bool:
        recipients = self.eligible_recipients_by_relationship_category(content_id, category)
        return any(r.user_id == user_id for r in recipients)

    # ── Internals ──────────────────────────────────────

    def _load_rule(self, rule_id: UUID) -> InheritanceRule:
        rule = self._repository.get_rule(rule_id)
        if rule is None:
            raise RuleNotFoundError(rule_id)
        return rule

    def _preview(self, content_id: UUID, target_type: TargetType, target_value: str) -> list[EligibleRecipient]:
        creator_id = self._content_creator(content_id)
        if creator_id is None:
            return []
        # Never stored
        draft = InheritanceRule(
            content_id=content_id,
            creator_id=creator_id,
            target_type=target_type,
            target_value=target_value,
            trigger=InheritanceTrigger.MANUAL,
        )
        return self._resolve(draft)

    def _content_creator(self, content_id: UUID) -> Optional[UUID]:
        if self._content is not None:
            return self._content.load_content(content_id).creator_id
        rules = self._repository.list_rules(content_id=content_id)
        if not rules:
            return None
        return min(rules, key=lambda r: r.created_at).creator_id

    def _resolve(self, rule: InheritanceRule) -> list[EligibleRecipient]:
        if self._content is not None:
            content = self._content.load_content(rule.content_id)
            if not can_inherit_content(content, None):
                logger.info("Content cannot be inherited; no recipients", rule=rule)
                return []
        return self._resolvers.resolve(rule, self._directory)

    def _materialize(self, rule: InheritanceRule, recipient: EligibleRecipient) -> InheritanceStatus | None:
        record = InheritanceStatus(
            content_id=rule.content_id,
            recipient_id=recipient.user_id,
            inheritance_rule_id=rule.id,
            relationship_type_id=recipient.relationship_type_id,
            relationship_context=recipient.relationship_context,
        )
        try:
            self._repository.insert_status(record)
        except DuplicateStatusError:
            return None

        self._events.record(
            rule.id,
            EventType.INHERITANCE_TRIGGERED,
            {
                "ruleId": rule.id,
                "contentId": rule.content_id,
                "recipientId": recipient.user_id,
                "relationshipContext": recipient.relationship_context,
            },
            created_by=rule.creator_id,
        )
        return record


__all__ = ["InheritanceProcessor"]
