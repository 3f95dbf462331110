"""Inheritance data models.

These are Pydantic models: rules, per-recipient status records, audit
events, and the validated requests that create / update rules. Processing
results are plain dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from .constants import (
    CONTENT_EVENTS,
    INHERITANCE_EVENTS,
    RELATIONSHIP_EVENTS,
    RULE_EVENTS,
    EventType,
    InheritanceState,
    InheritanceTrigger,
    RuleStatus,
    TargetType,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _minutes_since(moment: datetime | None, now: datetime | None = None) -> int:
    if moment is None:
        return 0
    return int(((now or _utcnow()) - moment).total_seconds() // 60)


class InheritanceRule(BaseModel):
    """Standing instruction to hand a content item to a computed recipient set.

    ``priority`` only orders listings; processing correctness never
    depends on it.
    """

    id: UUID = Field(default_factory=uuid4)
    content_id: UUID
    creator_id: UUID
    target_type: TargetType
    target_value: str
    target_metadata: dict[str, Any] = Field(default_factory=dict)
    trigger: InheritanceTrigger
    trigger_metadata: dict[str, Any] = Field(default_factory=dict)
    status: RuleStatus = RuleStatus.ACTIVE
    priority: int = 0

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    created_by: Optional[UUID] = None
    updated_by: Optional[UUID] = None

    model_config = {"frozen": True}

    @property
    def is_active(self) -> bool:
        return self.status == RuleStatus.ACTIVE

    @property
    def is_immediate(self) -> bool:
        return self.trigger == InheritanceTrigger.IMMEDIATE


class InheritanceStatus(BaseModel):
    """Per-recipient inheritance record.

    At most one record exists per ``(content_id, recipient_id,
    inheritance_rule_id)``; see :attr:`key`.
    """

    id: UUID = Field(default_factory=uuid4)
    content_id: UUID
    recipient_id: UUID
    inheritance_rule_id: UUID
    status: InheritanceState = InheritanceState.PENDING

    inherited_at: Optional[datetime] = None
    accessed_at: Optional[datetime] = None
    declined_at: Optional[datetime] = None

    # Why this recipient qualified
    relationship_type_id: Optional[str] = None
    relationship_context: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    model_config = {"frozen": True}

    @property
    def key(self) -> tuple[UUID, UUID, UUID]:
        return (self.content_id, self.recipient_id, self.inheritance_rule_id)

    def minutes_since_inheritance(self, now: datetime | None = None) -> int:
        return _minutes_since(self.inherited_at, now)

    def minutes_since_access(self, now: datetime | None = None) -> int:
        return _minutes_since(self.accessed_at, now)


class InheritanceEvent(BaseModel):
    """Append-only audit record."""

    id: UUID = Field(default_factory=uuid4)
    inheritance_rule_id: UUID
    event_type: EventType
    event_data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)
    created_by: Optional[UUID] = None

    model_config = {"frozen": True}

    @property
    def is_rule_event(self) -> bool:
        return self.event_type in RULE_EVENTS

    @property
    def is_relationship_event(self) -> bool:
        return self.event_type in RELATIONSHIP_EVENTS

    @property
    def is_inheritance_event(self) -> bool:
        return self.event_type in INHERITANCE_EVENTS

    @property
    def is_content_event(self) -> bool:
        return self.event_type in CONTENT_EVENTS


# ── Requests ────────────────────────────────────────────


class CreateRuleRequest(BaseModel):
    """Validated input for creating an inheritance rule."""

    content_id: UUID
    target_type: TargetType
    target_value: str
    target_metadata: dict[str, Any] = Field(default_factory=dict)
    trigger: InheritanceTrigger
    trigger_metadata: dict[str, Any] = Field(default_factory=dict)
    priority: int = Field(default=0, ge=0)
    status: RuleStatus = RuleStatus.ACTIVE

    model_config = {"extra": "forbid"}

    @field_validator("target_value")
    @classmethod
    def validate_target_value(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Target value is required")
        return v.strip()

    @field_validator("status")
    @classmethod
    def validate_initial_status(cls, v: RuleStatus) -> RuleStatus:
        if v not in (RuleStatus.ACTIVE, RuleStatus.PAUSED):
            raise ValueError("Rules are created ACTIVE or PAUSED")
        return v


class UpdateRuleRequest(BaseModel):
    """Partial update; ``None`` fields are left unchanged."""

    target_type: Optional[TargetType] = None
    target_value: Optional[str] = None
    target_metadata: Optional[dict[str, Any]] = None
    trigger: Optional[InheritanceTrigger] = None
    trigger_metadata: Optional[dict[str, Any]] = None
    status: Optional[RuleStatus] = None
    priority: Optional[int] = Field(default=None, ge=0)

    model_config = {"extra": "forbid"}

    @field_validator("target_value")
    @classmethod
    def validate_target_value(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.strip():
            raise ValueError("Target value cannot be blank")
        return v.strip()


# ── Processing Results ──────────────────────────────────


@dataclass
class ProcessResult:
    """Outcome of processing one rule."""

    rule_id: UUID
    created: list[InheritanceStatus] = field(default_factory=list)
    skipped: list[UUID] = field(default_factory=list)
    processed: bool = True

    @property
    def created_count(self) -> int:
        return len(self.created)


@dataclass
class BatchResult:
    """Outcome of processing many rules. Failures never abort the batch."""

    processed: int = 0
    failed: int = 0
    created_count: int = 0
    errors: dict[UUID, str] = field(default_factory=dict)

    def record(self, result: ProcessResult) -> None:
        self.processed += 1
        self.created_count += result.created_count

    def record_failure(self, rule_id: UUID, error: BaseException) -> None:
        self.failed += 1
        self.errors[rule_id] = str(error) or type(error).__name__


__all__ = [
    "BatchResult",
    "CreateRuleRequest",
    "InheritanceEvent",
    "InheritanceRule",
    "InheritanceStatus",
    "ProcessResult",
    "UpdateRuleRequest",
]
