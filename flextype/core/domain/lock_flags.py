"""
LockFlags — Модель lock-состояния TypedValue

Immutable Pydantic модель: три независимых флага.
Все изменения (lock/unlock) создают новый экземпляр через
LockStateMachine (flextype.locks).
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class LockFlags(BaseModel):
    """
    Lock-флаги значения.

    - string_locked: строка не реинтерпретируется, арифметика запрещена
    - bool_locked: арифметика над boolean насыщается в [0, 1]
    - type_locked: конверсия не выполняется вообще
    """

    string_locked: bool = Field(default=False, description="Запрет реинтерпретации строки")
    bool_locked: bool = Field(default=False, description="Насыщающая bool-арифметика")
    type_locked: bool = Field(default=False, description="Запрет любой конверсии")

    model_config = ConfigDict(frozen=True)

    @property
    def is_locked(self) -> bool:
        """True если установлен хотя бы один флаг."""
        return self.string_locked or self.bool_locked or self.type_locked

    def as_tuple(self) -> Tuple[bool, bool, bool]:
        """(string_locked, bool_locked, type_locked): ключ для кэша."""
        return (self.string_locked, self.bool_locked, self.type_locked)


UNLOCKED = LockFlags()
