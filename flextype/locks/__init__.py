"""Locks — управление lock-состояниями TypedValue.

- Lock state machine: LOCK_STRING / LOCK_BOOL / LOCK_TYPE / UNLOCK
- Guards: string-lock запрет арифметики, bool-lock насыщение
"""

from .state_machine import (
    LockStateMachine,
    LockTransition,
    LockTransitionResult,
    check_arithmetic_permitted,
    is_saturating,
)

__all__ = [
    "LockStateMachine",
    "LockTransition",
    "LockTransitionResult",
    "check_arithmetic_permitted",
    "is_saturating",
]
