"""Per-recipient inheritance lifecycle.

Transitions (see :data:`~legacycore.inheritance.transitions.STATE_TRANSITIONS`)::

    PENDING → INHERITED → ACCESSED
    PENDING → ACCESSED
    PENDING → DECLINED

Each successful transition sets its timestamp once and appends one audit
event. A rejected transition leaves the record exactly as it was.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from ..exceptions import StatusNotFoundError
from .constants import EventType, InheritanceState
from .events import EventRecorder
from .models import InheritanceEvent, InheritanceStatus
from .repository import InheritanceRepository
from .transitions import check_state_transition

logger = logging.getLogger(__name__)

# Target state → (timestamp field, audit event)
_TRANSITIONS: dict[InheritanceState, tuple[str, EventType]] = {
    InheritanceState.INHERITED: ("inherited_at", EventType.CONTENT_INHERITED),
    InheritanceState.ACCESSED: ("accessed_at", EventType.CONTENT_ACCESSED),
    InheritanceState.DECLINED: ("declined_at", EventType.CONTENT_DECLINED),
}


class InheritanceStatusTracker:
    """Advances inheritance status records and answers queries about them."""

    def __init__(self, repository: InheritanceRepository, *, events: Optional[EventRecorder] = None) -> None:
        self._repository = repository
        self._events = events or EventRecorder(repository)

    # ── Transitions ────────────────────────────────────

    def mark_inherited(
        self, recipient_id: UUID, content_id: UUID, rule_id: UUID, actor_id: Optional[UUID] = None
    ) -> InheritanceStatus:
        """PENDING → INHERITED. ``actor_id`` defaults to the recipient."""
        return self._advance(recipient_id, content_id, rule_id, InheritanceState.INHERITED, actor_id)

    def mark_accessed(self, recipient_id: UUID, content_id: UUID, rule_id: UUID) -> InheritanceStatus:
        """PENDING or INHERITED → ACCESSED.

        Raises:
            StatusNotFoundError: No record for the triple.
            IllegalStateTransitionError: The record is ACCESSED or DECLINED.
        """
        return self._advance(recipient_id, content_id, rule_id, InheritanceState.ACCESSED)

    def decline(self, recipient_id: UUID, content_id: UUID, rule_id: UUID) -> InheritanceStatus:
        """PENDING → DECLINED.

        Raises:
            StatusNotFoundError: No record for the triple.
            IllegalStateTransitionError: The record has left PENDING.
        """
        return self._advance(recipient_id, content_id, rule_id, InheritanceState.DECLINED)

    def _advance(
        self,
        recipient_id: UUID,
        content_id: UUID,
        rule_id: UUID,
        target: InheritanceState,
        actor_id: Optional[UUID] = None,
    ) -> InheritanceStatus:
        timestamp_field, event_type = _TRANSITIONS[target]

        while True:
            record = self.get(recipient_id, content_id, rule_id)
            current = InheritanceState(record.status)
            check_state_transition(current, target, recipient_id=recipient_id, content_id=content_id, rule_id=rule_id)

            now = datetime.now(timezone.utc)
            updated = record.model_copy(update={"status": target, timestamp_field: now, "updated_at": now})
            if self._repository.update_status(updated, expected_state=current):
                break
            # Lost a race; re-read and re-check against the new state
            logger.debug("Concurrent update on inheritance status %s, retrying", record.id)

        logger.info(
            "Inheritance status for recipient %s, content %s: %s -> %s",
            recipient_id,
            content_id,
            current.value,
            target.value,
        )
        self._events.record(
            rule_id,
            event_type,
            {
                "ruleId": rule_id,
                "contentId": content_id,
                "recipientId": recipient_id,
                "from": current.value,
                "to": target.value,
            },
            created_by=actor_id or recipient_id,
        )
        return updated

    # ── Queries ────────────────────────────────────────

    def get(self, recipient_id: UUID, content_id: UUID, rule_id: UUID) -> InheritanceStatus:
        record = self._repository.get_status(content_id, recipient_id, rule_id)
        if record is None:
            raise StatusNotFoundError(recipient_id, content_id, rule_id)
        return record

    def list_by_recipient(self, recipient_id: UUID) -> list[InheritanceStatus]:
        return _ordered(self._repository.list_statuses(recipient_id=recipient_id))

    def list_by_content(self, content_id: UUID) -> list[InheritanceStatus]:
        return _ordered(self._repository.list_statuses(content_id=content_id))

    def list_by_rule(self, rule_id: UUID) -> list[InheritanceStatus]:
        return _ordered(self._repository.list_statuses(rule_id=rule_id))

    def list_by_state(self, state: InheritanceState) -> list[InheritanceStatus]:
        return _ordered(self._repository.list_statuses(state=InheritanceState(state)))

    def inherited_content_ids(self, user_id: UUID) -> set[UUID]:
        """Content ids the user holds a non-declined record for."""
        return {
            s.content_id
            for s in self._repository.list_statuses(recipient_id=user_id)
            if s.status != InheritanceState.DECLINED
        }

    def has_inheritance_access(self, user_id: UUID, content_id: UUID) -> bool:
        return any(
            s.status != InheritanceState.DECLINED
            for s in self._repository.list_statuses(recipient_id=user_id, content_id=content_id)
        )

    def events_for_rule(self, rule_id: UUID) -> list[InheritanceEvent]:
        return self._events.for_rule(rule_id)

    def events_by_type(self, event_type: EventType) -> list[InheritanceEvent]:
        return self._events.by_type(event_type)

    # ── Statistics ─────────────────────────────────────

    def statistics_for_content(self, content_id: UUID) -> dict[str, int]:
        return _count(self._repository.list_statuses(content_id=content_id))

    def statistics_for_user(self, user_id: UUID) -> dict[str, int]:
        return _count(self._repository.list_statuses(recipient_id=user_id))

    def statistics_for_rule(self, rule_id: UUID) -> dict[str, int]:
        return _count(self._repository.list_statuses(rule_id=rule_id))

    def statistics_for_relationship_type(self, relationship_type: str) -> dict[str, int]:
        """Counts over records created through RELATIONSHIP_TYPE rules for ``relationship_type``."""
        return _count(self._repository.list_statuses(relationship_type_id=relationship_type))


def _ordered(records: list[InheritanceStatus]) -> list[InheritanceStatus]:
    return sorted(records, key=lambda s: s.created_at)


def _count(records: list[InheritanceStatus]) -> dict[str, int]:
    """Counts keyed by lower-case state name, plus ``total``."""
    stats = {state.value.lower(): 0 for state in InheritanceState}
    for record in records:
        stats[InheritanceState(record.status).value.lower()] += 1
    stats["total"] = len(records)
    return stats


__all__ = ["InheritanceStatusTracker"]
