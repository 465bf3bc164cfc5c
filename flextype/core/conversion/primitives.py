"""
Primitives — Явные примитивные конверсии

Функции приведения значения к примитиву, используемые:
- арифметикой (to_number для обоих операндов)
- явными конверсиями TypedValue (to_string/to_number/to_boolean/
  to_integer/to_float/to_json), которые игнорируют lock-флаги

Семантика повторяет динамическую модель значений: Number(), String(),
Boolean()-истинность, Math.trunc, parseFloat.
"""

import json
import math
import re
from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from fractions import Fraction
from typing import Any, Final, Optional, Union

from flextype.core.domain.type_tag import UNDEFINED, is_nan_value

Number = Union[int, float]

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Десятичное число: целое, дробное, научная нотация
DECIMAL_PATTERN: Final[re.Pattern] = re.compile(
    r"^[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$"
)

# Целое без дробной части и экспоненты
INTEGER_PATTERN: Final[re.Pattern] = re.compile(r"^[-+]?\d+$")

# Литералы с основанием (только для to_number, не для реинтерпретации)
RADIX_PATTERN: Final[re.Pattern] = re.compile(r"^0([xXoObB])([0-9a-fA-F]+)$")

INFINITY_PATTERN: Final[re.Pattern] = re.compile(r"^([-+]?)Infinity$")

# Ведущий числовой префикс для parseFloat
FLOAT_PREFIX_PATTERN: Final[re.Pattern] = re.compile(
    r"^[-+]?(Infinity|(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?)"
)

_RADIX = {"x": 16, "o": 8, "b": 2}


# =============================================================================
# РАЗБОР ЧИСЛОВОГО ТЕКСТА
# =============================================================================


def parse_decimal(text: str) -> Optional[Number]:
    """
    Разбор полного десятичного числа.

    Args:
        text: Текст без ведущих/хвостовых пробелов

    Returns:
        int для целых без экспоненты, float для остальных, None если не число

    Examples:
        >>> parse_decimal("42")
        42
        >>> parse_decimal("1.5e3")
        1500.0
        >>> parse_decimal("12abc") is None
        True
    """
    if not DECIMAL_PATTERN.match(text):
        return None
    if INTEGER_PATTERN.match(text):
        return int(text)
    return float(text)


def _string_to_number(text: str) -> Number:
    stripped = text.strip()
    if stripped == "":
        return 0

    number = parse_decimal(stripped)
    if number is not None:
        return number

    radix_match = RADIX_PATTERN.match(stripped)
    if radix_match:
        base = _RADIX[radix_match.group(1).lower()]
        try:
            return int(radix_match.group(2), base)
        except ValueError:
            return math.nan

    infinity_match = INFINITY_PATTERN.match(stripped)
    if infinity_match:
        return -math.inf if infinity_match.group(1) == "-" else math.inf

    return math.nan


def _date_to_millis(value: date) -> float:
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return value.timestamp() * 1000


# =============================================================================
# NUMBER
# =============================================================================


def to_number(value: Any) -> Number:
    """
    Приведение к числу (семантика Number()).

    - bool → 0/1, None → 0, UNDEFINED → NaN
    - str → полное число, "" → 0, иначе NaN
    - пустой массив → 0, массив из одного элемента → число элемента
    - дата → миллисекунды Unix
    - Fraction/Decimal → float
    - всё остальное → NaN

    Examples:
        >>> to_number("  10 ")
        10
        >>> to_number(True)
        1
        >>> to_number("abc")
        nan
    """
    if value is None:
        return 0
    if value is UNDEFINED:
        return math.nan
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, (Fraction, Decimal)):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        return _string_to_number(value)
    if isinstance(value, date):
        return _date_to_millis(value)
    if isinstance(value, (list, tuple)):
        if len(value) == 0:
            return 0
        if len(value) == 1:
            item = value[0]
            if item is None or item is UNDEFINED:
                return 0
            return to_number(item)
        return math.nan
    return math.nan


def to_integer(value: Any) -> Number:
    """
    Усечение к нулю (семантика Math.trunc(Number(value))).

    NaN и ±inf возвращаются без изменений.
    """
    number = to_number(value)
    if isinstance(number, float) and not math.isfinite(number):
        return number
    return math.trunc(number)


def to_float(value: Any) -> float:
    """
    Разбор ведущего числового префикса (семантика parseFloat).

    Examples:
        >>> to_float("3.5px")
        3.5
        >>> to_float(True)
        nan
    """
    match = FLOAT_PREFIX_PATTERN.match(to_string(value).lstrip())
    if not match:
        return math.nan
    return float(match.group(0).replace("Infinity", "inf"))


# =============================================================================
# STRING
# =============================================================================


def _number_to_string(value: Any) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
    return str(value)


def to_string(value: Any) -> str:
    """
    Приведение к строке (семантика String()).

    - None → "null", UNDEFINED → "undefined", bool → "true"/"false"
    - целые float без ".0", NaN → "NaN", inf → "Infinity"
    - массив → элементы через запятую (null/undefined и циклы → "")
    - dict/map → JSON-текст, дата → ISO-8601, regexp → исходный шаблон
    """
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, Fraction, Decimal)):
        return _number_to_string(value)
    if isinstance(value, (list, tuple)):
        return _join_array(value, set())
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, re.Pattern):
        return f"/{value.pattern}/"
    if isinstance(value, Mapping):
        text = to_json_text(dict(value))
        return text if text is not None else str(value)
    return str(value)


def _join_array(value: Any, active: set) -> str:
    # Массив, уже раскрываемый выше по стеку, даёт пустую строку
    if id(value) in active:
        return ""
    active.add(id(value))
    try:
        parts = []
        for item in value:
            if item is None or item is UNDEFINED:
                parts.append("")
            elif isinstance(item, (list, tuple)):
                parts.append(_join_array(item, active))
            else:
                parts.append(to_string(item))
        return ",".join(parts)
    finally:
        active.discard(id(value))


def to_json_text(value: Any) -> Optional[str]:
    """
    JSON-сериализация (семантика JSON.stringify).

    Returns:
        JSON-текст или None, если значение не сериализуемо
    """
    if value is UNDEFINED:
        return None
    try:
        return json.dumps(value, allow_nan=False, separators=(",", ":"), default=_json_default)
    except (TypeError, ValueError):
        return None


def _json_default(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return {}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


# =============================================================================
# BOOLEAN
# =============================================================================


def is_truthy(value: Any) -> bool:
    """
    Истинность значения (семантика Boolean()).

    Ложны: False, 0, -0.0, NaN, "", None, UNDEFINED.
    Все контейнеры (включая пустые) истинны.
    """
    if value is None or value is UNDEFINED:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Fraction, Decimal)):
        return not is_nan_value(value) and value != 0
    if isinstance(value, str):
        return value != ""
    return True
