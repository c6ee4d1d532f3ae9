"""Order state machine.

Single source of truth for lifecycle rules.  Pure functions over
``OrderStatus`` values, no I/O.  Extra preconditions that depend on the
order contents (non-empty cart on checkout, compliance approval on ship)
are enforced by the command service on top of these rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from modules.orders.constants import (
    ORDER_STATUS_METADATA,
    PAID_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
)

StatusLike = Union[OrderStatus, str]


@dataclass(frozen=True)
class TransitionValidation:
    valid: bool
    reason: Optional[str] = None
    allowed_transitions: Tuple[OrderStatus, ...] = ()


def _as_status(value: StatusLike) -> OrderStatus:
    """Coerce a raw value into ``OrderStatus``; unknown values raise ``ValueError``."""
    return OrderStatus(value)


def get_allowed_transitions(from_status: StatusLike) -> Tuple[OrderStatus, ...]:
    return VALID_TRANSITIONS[_as_status(from_status)]


def can_transition(from_status: StatusLike, to_status: StatusLike) -> bool:
    return _as_status(to_status) in get_allowed_transitions(from_status)


def validate_transition(from_status: StatusLike, to_status: StatusLike) -> TransitionValidation:
    """Validate a transition and explain a refusal.

    ``allowed_transitions`` always lists every status reachable from
    *from_status*, so callers can build precise error messages.
    """
    current = _as_status(from_status)
    target = _as_status(to_status)
    allowed = VALID_TRANSITIONS[current]

    if is_terminal_status(current):
        return TransitionValidation(
            valid=False,
            reason=f"Order is in terminal state '{current}' and cannot be modified",
            allowed_transitions=allowed,
        )
    if target not in allowed:
        return TransitionValidation(
            valid=False,
            reason=f"Transition from '{current}' to '{target}' is not allowed",
            allowed_transitions=allowed,
        )
    return TransitionValidation(valid=True, allowed_transitions=allowed)


def can_cancel(status: StatusLike) -> bool:
    return can_transition(status, OrderStatus.CANCELLED)


def is_terminal_status(status: StatusLike) -> bool:
    return ORDER_STATUS_METADATA[_as_status(status)].terminal


def is_mutable_status(status: StatusLike) -> bool:
    """Only items of a mutable (DRAFT) order may change."""
    return ORDER_STATUS_METADATA[_as_status(status)].mutable


def is_draft_order(status: StatusLike) -> bool:
    return _as_status(status) == OrderStatus.DRAFT


def is_paid(status: StatusLike) -> bool:
    return _as_status(status) in PAID_STATES
