"""
Numerical Safeguards — Безопасные числовые примитивы

Модуль обеспечивает предсказуемую числовую семантику слоя операций:
- Нормализация точности float (15 значащих цифр по умолчанию)
- Проверка safe-integer диапазона (2**53 - 1)
- Насыщающее ограничение в [0, 1] для bool-locked арифметики
- Деление, остаток и степень с политикой деления на ноль
  (STRICT → DivisionByZero, IEEE → inf/NaN)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Целые значения никогда не округляются
2. Насыщение никогда не возвращает -0.0 или значение вне [0, 1] (кроме NaN)
3. Политика деления на ноль применяется одинаково к /, % и 0 ** отрицательное
4. Все операции детерминированы в пределах IEEE-754 double
"""

import math
from decimal import Decimal
from fractions import Fraction
from typing import Final, Union

from flextype.core.config import DEFAULT_PRECISION_DIGITS, DivisionPolicy
from flextype.core.errors import DivisionByZero

Number = Union[int, float]

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Максимальное целое, точно представимое в IEEE-754 double
MAX_SAFE_INTEGER: Final[int] = 2**53 - 1

# Порог (в битах) для точного целочисленного возведения в степень
# Больше: результат вычисляется во float (с переполнением в inf)
EXACT_POWER_BITS_LIMIT: Final[int] = 1100


# =============================================================================
# ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение валидное (finite), False если NaN или Inf
    """
    return math.isfinite(value)


def is_integral(value: object) -> bool:
    """
    Проверка, что число целое (int, float без дробной части, Fraction n/1).

    bool не считается числом.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    if isinstance(value, Fraction):
        return value.denominator == 1
    if isinstance(value, Decimal):
        return value.is_finite() and value == value.to_integral_value()
    return False


def is_safe_magnitude(value: Number) -> bool:
    """
    Проверка, что |value| <= MAX_SAFE_INTEGER.

    Examples:
        >>> is_safe_magnitude(2**53 - 1)
        True
        >>> is_safe_magnitude(2**53)
        False
    """
    return abs(value) <= MAX_SAFE_INTEGER


# =============================================================================
# НОРМАЛИЗАЦИЯ ТОЧНОСТИ
# =============================================================================


def normalize_precision(value: object, digits: int = DEFAULT_PRECISION_DIGITS) -> object:
    """
    Округление float до `digits` значащих десятичных цифр.

    Ограничивает floating-point шум (0.1 + 0.2 → 0.3) без изменения
    порядка величины. Целые значения, inf и точные типы
    (Fraction, Decimal) возвращаются без изменений.

    Args:
        value: Число
        digits: Количество значащих цифр (default: 15)

    Returns:
        Нормализованное значение

    Raises:
        ValueError: Если digits вне диапазона [1, 17]

    Examples:
        >>> normalize_precision(0.1 + 0.2)
        0.3
        >>> normalize_precision(10)
        10
    """
    if not 1 <= digits <= 17:
        raise ValueError(f"digits must be in [1, 17], got {digits}")

    if not isinstance(value, float) or not is_valid_float(value):
        return value
    if value.is_integer():
        return value

    return float(f"{value:.{digits}g}")


# =============================================================================
# НАСЫЩЕНИЕ
# =============================================================================


def clamp(
    value: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """
    Ограничение значения в заданном диапазоне.

    Args:
        value: Исходное значение
        min_value: Минимальное допустимое значение (optional)
        max_value: Максимальное допустимое значение (optional)

    Returns:
        Значение, ограниченное диапазоном [min_value, max_value]

    Examples:
        >>> clamp(5.0, 0.0, 10.0)
        5.0
        >>> clamp(-1.0, 0.0, 10.0)
        0.0
    """
    result = value

    if min_value is not None:
        result = max(result, min_value)

    if max_value is not None:
        result = min(result, max_value)

    return result


def saturate_unit(value: Number) -> Number:
    """
    Насыщение в замкнутый интервал [0, 1] (однобитный аккумулятор).

    NaN пропагируется. -0.0 нормализуется в 0.

    Examples:
        >>> saturate_unit(-1)
        0
        >>> saturate_unit(2)
        1
        >>> saturate_unit(0.5)
        0.5
    """
    result = clamp(value, 0, 1)
    # NaN проходит через clamp без изменений; -0.0 == 0
    return 0 if result == 0 else result


# =============================================================================
# ДЕЛЕНИЕ / ОСТАТОК / СТЕПЕНЬ
# =============================================================================


def widen_to_float(value: Number) -> float:
    """
    Приведение операнда к float; int вне диапазона double даёт ±inf.

    Examples:
        >>> widen_to_float(3)
        3.0
        >>> widen_to_float(-10**400)
        -inf
    """
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _sign(value: Number) -> float:
    # Знак с учётом -0.0; int не приводится к float (большие int)
    if isinstance(value, float):
        return math.copysign(1.0, value)
    return -1.0 if value < 0 else 1.0


def _is_nan(value: Number) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _signed_infinity(numerator: Number, denominator: Number) -> float:
    # Знак результата x / ±0 по IEEE-754
    return math.copysign(math.inf, _sign(numerator) * _sign(denominator))


def safe_divide(
    numerator: Number,
    denominator: Number,
    policy: DivisionPolicy = DivisionPolicy.STRICT,
) -> Number:
    """
    Деление с политикой деления на ноль.

    Args:
        numerator: Числитель
        denominator: Знаменатель
        policy: STRICT (исключение) или IEEE (inf/NaN)

    Returns:
        numerator / denominator

    Raises:
        DivisionByZero: если denominator == 0 и policy == STRICT

    Examples:
        >>> safe_divide(10, 4)
        2.5
        >>> safe_divide(1, 0, DivisionPolicy.IEEE)
        inf
        >>> safe_divide(0, 0, DivisionPolicy.IEEE)
        nan
    """
    if denominator == 0:
        if policy == DivisionPolicy.STRICT:
            raise DivisionByZero("Division by zero")
        if numerator == 0 or _is_nan(numerator):
            return math.nan
        return _signed_infinity(numerator, denominator)

    try:
        return numerator / denominator
    except OverflowError:
        # int / int вне диапазона double
        return _signed_infinity(numerator, denominator)


def safe_modulus(
    dividend: Number,
    divisor: Number,
    policy: DivisionPolicy = DivisionPolicy.STRICT,
) -> Number:
    """
    Остаток с усечением к нулю (знак результата = знак делимого).

    Examples:
        >>> safe_modulus(7, 3)
        1
        >>> safe_modulus(-7, 3)
        -1
        >>> safe_modulus(5.5, 2)
        1.5

    Raises:
        DivisionByZero: если divisor == 0 и policy == STRICT
    """
    if divisor == 0:
        if policy == DivisionPolicy.STRICT:
            raise DivisionByZero("Modulus by zero")
        return math.nan

    if _is_nan(dividend) or _is_nan(divisor):
        return math.nan
    if isinstance(dividend, float) and math.isinf(dividend):
        return math.nan
    if isinstance(divisor, float) and math.isinf(divisor):
        return dividend

    if isinstance(dividend, int) and isinstance(divisor, int):
        remainder = abs(dividend) % abs(divisor)
        return -remainder if dividend < 0 else remainder

    return math.fmod(dividend, divisor)


def safe_power(
    base: Number,
    exponent: Number,
    policy: DivisionPolicy = DivisionPolicy.STRICT,
) -> Number:
    """
    Возведение в степень с семантикой IEEE-754.

    - 0 ** отрицательное: политика деления на ноль
    - отрицательное ** дробное: NaN (без комплексных чисел)
    - переполнение: ±inf

    Raises:
        DivisionByZero: для 0 ** отрицательное при policy == STRICT
    """
    if base == 0 and exponent < 0:
        if policy == DivisionPolicy.STRICT:
            raise DivisionByZero("Zero raised to a negative power")
        odd = is_integral(exponent) and int(exponent) % 2 == 1
        return -math.inf if odd and _sign(base) < 0 else math.inf

    if base < 0 and isinstance(exponent, float) and is_valid_float(exponent) and not exponent.is_integer():
        return math.nan

    if (
        isinstance(base, int)
        and isinstance(exponent, int)
        and exponent >= 0
        and max(abs(base).bit_length(), 1) * exponent <= EXACT_POWER_BITS_LIMIT
    ):
        return base**exponent

    try:
        return math.pow(base, exponent)
    except OverflowError:
        odd = is_integral(exponent) and int(exponent) % 2 == 1
        return -math.inf if base < 0 and odd else math.inf
