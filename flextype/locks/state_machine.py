"""Lock State Machine — управление lock-состояниями TypedValue.

Состояния: комбинации трёх независимых флагов (string/bool/type).
Переходы:
- LOCK_STRING / LOCK_BOOL / LOCK_TYPE: добавить один флаг
- UNLOCK: снять все флаги

Переход никогда не мутирует текущие флаги: результат содержит новый
экземпляр LockFlags. Guards определяют, разрешена ли арифметика и
включено ли насыщение.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from flextype.core.domain.lock_flags import UNLOCKED, LockFlags
from flextype.core.domain.type_tag import TypeTag
from flextype.core.errors import OperationNotPermitted

logger = logging.getLogger(__name__)


class LockTransition(str, Enum):
    """Запрошенный переход lock-состояния."""
    LOCK_STRING = "LOCK_STRING"
    LOCK_BOOL = "LOCK_BOOL"
    LOCK_TYPE = "LOCK_TYPE"
    UNLOCK = "UNLOCK"


# Флаг, устанавливаемый каждым lock-переходом
_TRANSITION_FLAG = {
    LockTransition.LOCK_STRING: "string_locked",
    LockTransition.LOCK_BOOL: "bool_locked",
    LockTransition.LOCK_TYPE: "type_locked",
}


@dataclass(frozen=True)
class LockTransitionResult:
    """Результат перехода lock-состояния."""

    new_flags: LockFlags
    previous_flags: LockFlags
    transition: LockTransition

    # Диагностика
    transition_occurred: bool
    transition_reason: str

    # Для отладки
    details: str


class LockStateMachine:
    """Lock State Machine: переходы между комбинациями lock-флагов.

    Правила:
    - LOCK_* при уже установленном флаге → без перехода (already_locked)
    - LOCK_* иначе → флаг добавляется, остальные сохраняются
    - UNLOCK при отсутствии флагов → без перехода (already_unlocked)
    - UNLOCK иначе → все флаги сброшены
    """

    def apply(self, current: LockFlags, transition: LockTransition) -> LockTransitionResult:
        """Применение перехода к текущим флагам.

        Args:
            current: текущие lock-флаги
            transition: запрошенный переход

        Returns:
            LockTransitionResult с новыми флагами
        """
        # 1. Снятие всех lock-флагов
        if transition == LockTransition.UNLOCK:
            if not current.is_locked:
                return self._create_result(
                    new_flags=current,
                    previous_flags=current,
                    transition=transition,
                    transition_occurred=False,
                    transition_reason="already_unlocked",
                    details="No flags set"
                )
            return self._create_result(
                new_flags=UNLOCKED,
                previous_flags=current,
                transition=transition,
                transition_occurred=True,
                transition_reason="unlock_all",
                details=f"Cleared flags: {self._describe(current)}"
            )

        # 2. Добавление одного флага
        flag = _TRANSITION_FLAG[transition]
        if getattr(current, flag):
            return self._create_result(
                new_flags=current,
                previous_flags=current,
                transition=transition,
                transition_occurred=False,
                transition_reason="already_locked",
                details=f"{flag} already set"
            )

        new_flags = current.model_copy(update={flag: True})
        return self._create_result(
            new_flags=new_flags,
            previous_flags=current,
            transition=transition,
            transition_occurred=True,
            transition_reason=f"lock_{flag}",
            details=f"{self._describe(current)} → {self._describe(new_flags)}"
        )

    def _describe(self, flags: LockFlags) -> str:
        """Краткое описание установленных флагов."""
        names = [name for name in ("string_locked", "bool_locked", "type_locked") if getattr(flags, name)]
        return ",".join(names) if names else "unlocked"

    def _create_result(
        self,
        new_flags: LockFlags,
        previous_flags: LockFlags,
        transition: LockTransition,
        transition_occurred: bool,
        transition_reason: str,
        details: str
    ) -> LockTransitionResult:
        """Создание результата перехода."""
        if transition_occurred:
            logger.debug(f"Lock transition {transition.value}: {details}")
        return LockTransitionResult(
            new_flags=new_flags,
            previous_flags=previous_flags,
            transition=transition,
            transition_occurred=transition_occurred,
            transition_reason=transition_reason,
            details=details
        )


# =============================================================================
# GUARDS
# =============================================================================


def check_arithmetic_permitted(
    flags: LockFlags,
    tag: TypeTag,
    variable_name: str,
    operation: str = "mathematical operations",
) -> None:
    """String-lock guard: арифметика над string-locked строкой запрещена.

    Raises:
        OperationNotPermitted: если string_locked и тег всё ещё string
    """
    if flags.string_locked and tag == TypeTag.STRING:
        logger.debug(f"Rejected {operation} on string locked variable '{variable_name}'")
        raise OperationNotPermitted(variable_name, operation)


def is_saturating(flags: LockFlags, tag: TypeTag) -> bool:
    """Bool-lock: насыщающая арифметика для bool-locked boolean значения."""
    return flags.bool_locked and tag == TypeTag.BOOLEAN
