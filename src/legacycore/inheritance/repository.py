"""Persistence interface for rules, status records and audit events.

Provides:
- InheritanceRepository Protocol (interface)
- InMemoryInheritanceRepository (thread-safe reference implementation)

Storage enforces the one invariant the engine cannot enforce alone: at most
one status record per ``(content_id, recipient_id, rule_id)``. SQL-backed
implementations do this with a unique constraint and translate the
violation into :class:`DuplicateStatusError`.

Repositories hand out copies. Changing a returned model never changes
what is stored; writes go through the methods below only.
"""

from __future__ import annotations

import threading
from typing import Optional, Protocol, TypeVar, runtime_checkable
from uuid import UUID

from ..exceptions import DuplicateStatusError
from .constants import EventType, InheritanceState, InheritanceTrigger, RuleStatus, TargetType
from .models import InheritanceEvent, InheritanceRule, InheritanceStatus

StatusKey = tuple[UUID, UUID, UUID]

_M = TypeVar("_M", InheritanceRule, InheritanceStatus, InheritanceEvent)


# =========================================
# Protocol
# =========================================


@runtime_checkable
class InheritanceRepository(Protocol):
    """Protocol for inheritance persistence.

    Implementations must provide atomic:
    - insert_status(): check-then-insert on the status key, raising
      DuplicateStatusError when the key exists
    - update_status() / update_rule(): compare-and-set on the current state,
      returning False when the stored state no longer matches
    - discard_rule(): remove a rule together with its status records and
      events, undoing a creation that failed part-way
    """

    # Rules
    def add_rule(self, rule: InheritanceRule) -> InheritanceRule: ...

    def get_rule(self, rule_id: UUID) -> Optional[InheritanceRule]: ...

    def update_rule(self, rule: InheritanceRule, expected_status: RuleStatus) -> bool: ...

    def delete_rule(self, rule_id: UUID) -> bool: ...

    def discard_rule(self, rule_id: UUID) -> None: ...

    def list_rules(
        self,
        *,
        content_id: Optional[UUID] = None,
        creator_id: Optional[UUID] = None,
        status: Optional[RuleStatus] = None,
        target_type: Optional[TargetType] = None,
        target_value: Optional[str] = None,
        trigger: Optional[InheritanceTrigger] = None,
    ) -> list[InheritanceRule]: ...

    # Status records
    def insert_status(self, record: InheritanceStatus) -> InheritanceStatus: ...

    def get_status(self, content_id: UUID, recipient_id: UUID, rule_id: UUID) -> Optional[InheritanceStatus]: ...

    def update_status(self, record: InheritanceStatus, expected_state: InheritanceState) -> bool: ...

    def list_statuses(
        self,
        *,
        content_id: Optional[UUID] = None,
        recipient_id: Optional[UUID] = None,
        rule_id: Optional[UUID] = None,
        state: Optional[InheritanceState] = None,
        relationship_type_id: Optional[str] = None,
    ) -> list[InheritanceStatus]: ...

    # Events (append-only)
    def append_event(self, event: InheritanceEvent) -> InheritanceEvent: ...

    def list_events(
        self,
        *,
        rule_id: Optional[UUID] = None,
        event_type: Optional[EventType] = None,
    ) -> list[InheritanceEvent]: ...


# =========================================
# In-memory implementation
# =========================================


class InMemoryInheritanceRepository:
    """Dict-backed repository guarded by a single lock.

    Suitable for tests and single-process embedding. Every public method is
    atomic with respect to every other. Models are deep-copied on the way in
    and on the way out.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rules: dict[UUID, InheritanceRule] = {}
        self._statuses: dict[StatusKey, InheritanceStatus] = {}
        self._events: list[InheritanceEvent] = []

    # ── Rules ──────────────────────────────────────────

    def add_rule(self, rule: InheritanceRule) -> InheritanceRule:
        with self._lock:
            self._rules[rule.id] = _copy(rule)
        return rule

    def get_rule(self, rule_id: UUID) -> Optional[InheritanceRule]:
        with self._lock:
            rule = self._rules.get(rule_id)
            return _copy(rule) if rule is not None else None

    def update_rule(self, rule: InheritanceRule, expected_status: RuleStatus) -> bool:
        with self._lock:
            current = self._rules.get(rule.id)
            if current is None or current.status != expected_status:
                return False
            self._rules[rule.id] = _copy(rule)
            return True

    def delete_rule(self, rule_id: UUID) -> bool:
        """Remove a rule and its status records. Events are kept."""
        with self._lock:
            if self._rules.pop(rule_id, None) is None:
                return False
            self._drop_statuses(rule_id)
            return True

    def discard_rule(self, rule_id: UUID) -> None:
        """Remove every trace of a rule, its events included."""
        with self._lock:
            self._rules.pop(rule_id, None)
            self._drop_statuses(rule_id)
            self._events = [e for e in self._events if e.inheritance_rule_id != rule_id]

    def _drop_statuses(self, rule_id: UUID) -> None:
        for key in [k for k in self._statuses if k[2] == rule_id]:
            del self._statuses[key]

    def list_rules(
        self,
        *,
        content_id: Optional[UUID] = None,
        creator_id: Optional[UUID] = None,
        status: Optional[RuleStatus] = None,
        target_type: Optional[TargetType] = None,
        target_value: Optional[str] = None,
        trigger: Optional[InheritanceTrigger] = None,
    ) -> list[InheritanceRule]:
        with self._lock:
            rules = [_copy(r) for r in self._rules.values()]
        return [
            r
            for r in rules
            if (content_id is None or r.content_id == content_id)
            and (creator_id is None or r.creator_id == creator_id)
            and (status is None or r.status == status)
            and (target_type is None or r.target_type == target_type)
            and (target_value is None or r.target_value == target_value)
            and (trigger is None or r.trigger == trigger)
        ]

    # ── Status records ─────────────────────────────────

    def insert_status(self, record: InheritanceStatus) -> InheritanceStatus:
        with self._lock:
            if record.key in self._statuses:
                raise DuplicateStatusError(
                    content_id=record.content_id,
                    recipient_id=record.recipient_id,
                    rule_id=record.inheritance_rule_id,
                )
            self._statuses[record.key] = _copy(record)
        return record

    def get_status(self, content_id: UUID, recipient_id: UUID, rule_id: UUID) -> Optional[InheritanceStatus]:
        with self._lock:
            record = self._statuses.get((content_id, recipient_id, rule_id))
            return _copy(record) if record is not None else None

    def update_status(self, record: InheritanceStatus, expected_state: InheritanceState) -> bool:
        with self._lock:
            current = self._statuses.get(record.key)
            if current is None or current.status != expected_state:
                return False
            self._statuses[record.key] = _copy(record)
            return True

    def list_statuses(
        self,
        *,
        content_id: Optional[UUID] = None,
        recipient_id: Optional[UUID] = None,
        rule_id: Optional[UUID] = None,
        state: Optional[InheritanceState] = None,
        relationship_type_id: Optional[str] = None,
    ) -> list[InheritanceStatus]:
        with self._lock:
            records = [_copy(s) for s in self._statuses.values()]
        return [
            s
            for s in records
            if (content_id is None or s.content_id == content_id)
            and (recipient_id is None or s.recipient_id == recipient_id)
            and (rule_id is None or s.inheritance_rule_id == rule_id)
            and (state is None or s.status == state)
            and (relationship_type_id is None or s.relationship_type_id == relationship_type_id)
        ]

    # ── Events ─────────────────────────────────────────

    def append_event(self, event: InheritanceEvent) -> InheritanceEvent:
        with self._lock:
            self._events.append(_copy(event))
        return event

    def list_events(
        self,
        *,
        rule_id: Optional[UUID] = None,
        event_type: Optional[EventType] = None,
    ) -> list[InheritanceEvent]:
        with self._lock:
            events = [_copy(e) for e in self._events]
        return [
            e
            for e in events
            if (rule_id is None or e.inheritance_rule_id == rule_id)
            and (event_type is None or e.event_type == event_type)
        ]


def _copy(model: _M) -> _M:
    return model.model_copy(deep=True)


__all__ = [
    "InMemoryInheritanceRepository",
    "InheritanceRepository",
    "StatusKey",
]
