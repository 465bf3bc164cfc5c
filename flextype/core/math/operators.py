"""
Operators — Семантика бинарных операций над эффективными значениями

Арифметика: оба операнда приводятся через to_number, деление/остаток/
степень подчиняются DivisionPolicy. Сравнения:
- loose_equals (==): null/undefined равны друг другу, примитивы разных
  тегов сравниваются численно, массив против примитива: через строку
- strict_equals (===): одинаковый тег и равенство значений, контейнеры:
  только идентичность
- порядок (>, <, >=, <=): численное сравнение, NaN → False
"""

import math
from enum import Enum
from typing import Any, Callable, Dict

from flextype.core.config import DivisionPolicy
from flextype.core.conversion.primitives import Number, to_number, to_string
from flextype.core.domain.type_tag import CONTAINER_TAGS, TypeTag, classify
from flextype.core.math.numerical_safeguards import (
    safe_divide,
    safe_modulus,
    safe_power,
    widen_to_float,
)


# =============================================================================
# ENUMS
# =============================================================================


class ArithmeticOp(str, Enum):
    """Арифметическая операция (значение: символ для display name)."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULUS = "%"
    POWER = "^"


class ComparisonOp(str, Enum):
    """Операция сравнения (значение: символ для display name)."""

    EQUALS = "=="
    STRICT_EQUALS = "==="
    GREATER_THAN = ">"
    LESS_THAN = "<"
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="


_NULLISH = frozenset({TypeTag.NULL, TypeTag.UNDEFINED})
_PRIMITIVES = frozenset({TypeTag.BOOLEAN, TypeTag.NUMBER, TypeTag.STRING})


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


def compute(
    op: ArithmeticOp,
    left: Number,
    right: Number,
    policy: DivisionPolicy = DivisionPolicy.STRICT,
) -> Number:
    """
    Вычисление арифметической операции над числами.

    Args:
        op: Операция
        left: Левый операнд (число)
        right: Правый операнд (число)
        policy: Политика деления на ноль

    Returns:
        Результат операции

    Raises:
        DivisionByZero: при делении на ноль и policy == STRICT
    """
    if isinstance(left, float) != isinstance(right, float):
        # Смешанная int/float арифметика идёт в double
        left, right = widen_to_float(left), widen_to_float(right)

    if op == ArithmeticOp.ADD:
        return left + right
    if op == ArithmeticOp.SUBTRACT:
        return left - right
    if op == ArithmeticOp.MULTIPLY:
        return left * right
    if op == ArithmeticOp.DIVIDE:
        return safe_divide(left, right, policy)
    if op == ArithmeticOp.MODULUS:
        return safe_modulus(left, right, policy)
    return safe_power(left, right, policy)


def compute_values(
    op: ArithmeticOp,
    left: Any,
    right: Any,
    policy: DivisionPolicy = DivisionPolicy.STRICT,
) -> Number:
    """Арифметика над произвольными значениями: оба операнда через to_number."""
    return compute(op, to_number(left), to_number(right), policy)


# =============================================================================
# СРАВНЕНИЯ
# =============================================================================


def loose_equals(left: Any, right: Any) -> bool:
    """
    Нестрогое равенство.

    Examples:
        >>> loose_equals("10", 10)
        True
        >>> loose_equals(None, None)
        True
        >>> loose_equals(0, None)
        False
    """
    left_tag, right_tag = classify(left), classify(right)

    if left_tag in _NULLISH or right_tag in _NULLISH:
        return left_tag in _NULLISH and right_tag in _NULLISH
    if left_tag == TypeTag.NAN or right_tag == TypeTag.NAN:
        return False
    if left_tag == right_tag:
        return left == right

    if left_tag in _PRIMITIVES and right_tag in _PRIMITIVES:
        return to_number(left) == to_number(right)

    # Массив против примитива: сравнение через строковое представление
    if left_tag == TypeTag.ARRAY and right_tag in _PRIMITIVES:
        return loose_equals(to_string(left), right)
    if right_tag == TypeTag.ARRAY and left_tag in _PRIMITIVES:
        return loose_equals(left, to_string(right))

    return False


def strict_equals(left: Any, right: Any) -> bool:
    """
    Строгое равенство: одинаковый тег и равные значения.

    Контейнеры равны только если это один и тот же объект.
    """
    tag = classify(left)
    if tag != classify(right) or tag == TypeTag.NAN:
        return False
    if tag in CONTAINER_TAGS:
        return left is right
    return left == right


def _ordered(check: Callable[[Number, Number], bool]) -> Callable[[Any, Any], bool]:
    def compare(left: Any, right: Any) -> bool:
        left_number, right_number = to_number(left), to_number(right)
        if (isinstance(left_number, float) and math.isnan(left_number)) or (
            isinstance(right_number, float) and math.isnan(right_number)
        ):
            return False
        return check(left_number, right_number)

    return compare


_COMPARATORS: Dict[ComparisonOp, Callable[[Any, Any], bool]] = {
    ComparisonOp.EQUALS: loose_equals,
    ComparisonOp.STRICT_EQUALS: strict_equals,
    ComparisonOp.GREATER_THAN: _ordered(lambda a, b: a > b),
    ComparisonOp.LESS_THAN: _ordered(lambda a, b: a < b),
    ComparisonOp.GREATER_EQUAL: _ordered(lambda a, b: a >= b),
    ComparisonOp.LESS_EQUAL: _ordered(lambda a, b: a <= b),
}


def compare(op: ComparisonOp, left: Any, right: Any) -> bool:
    """Вычисление операции сравнения над эффективными значениями."""
    return _COMPARATORS[op](left, right)
