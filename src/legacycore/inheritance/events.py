"""Audit trail writer.

Every state-changing operation on a rule or status record appends exactly
one :class:`InheritanceEvent` through :class:`EventRecorder`. Events are
never mutated or deleted.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from uuid import UUID

from ..exceptions import InvalidArgumentError
from ..logging import safe_log_value
from .constants import RELATIONSHIP_EVENTS, EventType
from .models import InheritanceEvent
from .repository import InheritanceRepository

logger = logging.getLogger(__name__)


def _jsonable(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    return value


class EventRecorder:
    """Append-only event writer bound to one repository."""

    def __init__(self, repository: InheritanceRepository) -> None:
        self._repository = repository

    def record(
        self,
        rule_id: UUID,
        event_type: EventType,
        data: Optional[Mapping[str, Any]] = None,
        created_by: Optional[UUID] = None,
    ) -> InheritanceEvent:
        event = InheritanceEvent(
            inheritance_rule_id=rule_id,
            event_type=event_type,
            event_data={key: _jsonable(value) for key, value in (data or {}).items()},
            created_by=created_by,
        )
        self._repository.append_event(event)
        logger.debug(
            "Recorded %s for rule %s: %s",
            EventType(event_type).value,
            rule_id,
            safe_log_value(event.event_data),
        )
        return event

    def record_relationship_change(
        self,
        rule_id: UUID,
        event_type: EventType,
        data: Optional[Mapping[str, Any]] = None,
        created_by: Optional[UUID] = None,
    ) -> InheritanceEvent:
        """Record a relationship change reported by the host application."""
        if EventType(event_type) not in RELATIONSHIP_EVENTS:
            raise InvalidArgumentError(
                f"{EventType(event_type).value} is not a relationship event",
                event_type=EventType(event_type).value,
            )
        return self.record(rule_id, event_type, data, created_by)

    def for_rule(self, rule_id: UUID) -> list[InheritanceEvent]:
        return sorted(self._repository.list_events(rule_id=rule_id), key=lambda e: e.created_at)

    def by_type(self, event_type: EventType) -> list[InheritanceEvent]:
        return sorted(self._repository.list_events(event_type=event_type), key=lambda e: e.created_at)


__all__ = ["EventRecorder"]
