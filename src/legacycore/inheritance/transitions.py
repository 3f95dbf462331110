"""Lifecycle transition tables.

Each state machine is one dict: current state → states it may move to.
Terminal states map to an empty tuple.

Provides:
- ``RULE_TRANSITIONS`` / ``check_rule_transition()``
- ``STATE_TRANSITIONS`` / ``check_state_transition()``
- ``GRANT_TRANSITIONS`` / ``transition_grant()``
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Mapping, TypeVar

from ..exceptions import IllegalStateTransitionError
from ..permissions.constants import RecipientStatus
from ..permissions.models import RecipientGrant
from .constants import InheritanceState, RuleStatus

# ── Inheritance Rules ───────────────────────────────────
# CANCELLED and COMPLETED are terminal.

RULE_TRANSITIONS: dict[RuleStatus, tuple[RuleStatus, ...]] = {
    RuleStatus.ACTIVE: (RuleStatus.PAUSED, RuleStatus.COMPLETED, RuleStatus.CANCELLED),
    RuleStatus.PAUSED: (RuleStatus.ACTIVE, RuleStatus.CANCELLED),
    RuleStatus.COMPLETED: (),
    RuleStatus.CANCELLED: (),
}

# ── Per-recipient Inheritance ───────────────────────────

STATE_TRANSITIONS: dict[InheritanceState, tuple[InheritanceState, ...]] = {
    InheritanceState.PENDING: (
        InheritanceState.INHERITED,
        InheritanceState.ACCESSED,
        InheritanceState.DECLINED,
    ),
    InheritanceState.INHERITED: (InheritanceState.ACCESSED,),
    InheritanceState.ACCESSED: (),
    InheritanceState.DECLINED: (),
}

# ── Recipient Grants ────────────────────────────────────
# ACCEPTED / REJECTED by the recipient, EXPIRED by a reaper.

GRANT_TRANSITIONS: dict[RecipientStatus, tuple[RecipientStatus, ...]] = {
    RecipientStatus.PENDING: (
        RecipientStatus.ACCEPTED,
        RecipientStatus.REJECTED,
        RecipientStatus.EXPIRED,
    ),
    RecipientStatus.ACCEPTED: (),
    RecipientStatus.REJECTED: (),
    RecipientStatus.EXPIRED: (),
}

_S = TypeVar("_S", bound=Enum)


def is_allowed(table: Mapping[_S, tuple[_S, ...]], current: _S, target: _S) -> bool:
    return target in table.get(current, ())


def _check(table: Mapping[_S, tuple[_S, ...]], current: _S, target: _S, entity: str, **details) -> None:
    if not is_allowed(table, current, target):
        raise IllegalStateTransitionError(current, target, entity=entity, **details)


def check_rule_transition(current: RuleStatus, target: RuleStatus, **details) -> None:
    """Raise :class:`IllegalStateTransitionError` unless the rule may move."""
    _check(RULE_TRANSITIONS, RuleStatus(current), RuleStatus(target), "inheritance rule", **details)


def check_state_transition(current: InheritanceState, target: InheritanceState, **details) -> None:
    """Raise :class:`IllegalStateTransitionError` unless the record may move."""
    _check(STATE_TRANSITIONS, InheritanceState(current), InheritanceState(target), "inheritance status", **details)


def transition_grant(grant: RecipientGrant, target: RecipientStatus) -> RecipientGrant:
    """Return a copy of ``grant`` moved to ``target``.

    Recipient acceptance / rejection and reaper expiry all go through here.
    """
    _check(
        GRANT_TRANSITIONS,
        RecipientStatus(grant.status),
        RecipientStatus(target),
        "recipient grant",
        grant_id=grant.id,
    )
    return grant.model_copy(update={"status": RecipientStatus(target), "responded_at": datetime.now(timezone.utc)})


__all__ = [
    "GRANT_TRANSITIONS",
    "RULE_TRANSITIONS",
    "STATE_TRANSITIONS",
    "check_rule_transition",
    "check_state_transition",
    "is_allowed",
    "transition_grant",
]
