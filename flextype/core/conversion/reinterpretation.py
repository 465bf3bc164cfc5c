"""
String Reinterpretation — Конвейер переинтерпретации строк

Детерминированный упорядоченный конвейер, первое совпадение выигрывает
(текст предварительно обрезается strip()):

1. Пустая строка → исходная строка (или "" при strict_empty_string=False)
2. "true"/"false" → bool (политика регистра BoolCasing)
3. Полное десятичное число → int/float (вне safe-integer диапазона:
   по OverflowPolicy)
4. ISO-8601 или M/D/YYYY дата → date/datetime (detect_dates)
5. {...} или [...] → JSON (parse_json); ошибка разбора → исходная строка
6. Иначе → исходная строка

Конвейер никогда не бросает исключений и не рекурсирует в разобранные
структуры.
"""

import json
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Final, Optional

from flextype.core.config import BoolCasing, FlexConfig, OverflowPolicy
from flextype.core.conversion.primitives import parse_decimal
from flextype.core.domain.type_tag import TypeTag
from flextype.core.math.numerical_safeguards import is_safe_magnitude, normalize_precision

logger = logging.getLogger(__name__)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

EXACT_TRUE_WORDS: Final[frozenset] = frozenset({"true", "True"})
EXACT_FALSE_WORDS: Final[frozenset] = frozenset({"false", "False"})

ISO_DATE_PATTERN: Final[re.Pattern] = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")

ISO_DATETIME_PATTERN: Final[re.Pattern] = re.compile(
    r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(:\d{2}(\.\d{1,6})?)?(Z|[+-]\d{2}:?\d{2})?$"
)

US_DATE_PATTERN: Final[re.Pattern] = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

_OFFSET_WITHOUT_COLON: Final[re.Pattern] = re.compile(r"([+-]\d{2})(\d{2})$")


# =============================================================================
# РЕЗУЛЬТАТ
# =============================================================================


class ReinterpretationRule(str, Enum):
    """Правило конвейера, давшее результат."""

    EMPTY = "empty"
    BOOLEAN = "boolean"
    NUMBER = "number"
    OVERFLOW_KEPT = "overflow_kept"
    DATE = "date"
    JSON = "json"
    JSON_FAILED = "json_failed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class Reinterpretation:
    """Результат переинтерпретации строки."""

    value: Any
    tag: TypeTag
    rule: ReinterpretationRule


# =============================================================================
# ПРАВИЛА
# =============================================================================


def _match_boolean(text: str, casing: BoolCasing) -> Optional[bool]:
    if casing == BoolCasing.EXACT:
        if text in EXACT_TRUE_WORDS:
            return True
        if text in EXACT_FALSE_WORDS:
            return False
        return None

    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def parse_date_text(text: str) -> Optional[date]:
    """
    Разбор даты в одном синтаксическом проходе.

    Поддерживаются YYYY-M-D, ISO-8601 date-time (с T или пробелом,
    опционально с Z/смещением) и M/D/YYYY. Невалидные календарные
    даты → None.

    Examples:
        >>> parse_date_text("2024-02-29")
        datetime.date(2024, 2, 29)
        >>> parse_date_text("2023-02-29") is None
        True
    """
    try:
        iso_match = ISO_DATE_PATTERN.match(text)
        if iso_match:
            year, month, day = (int(part) for part in iso_match.groups())
            return date(year, month, day)

        if ISO_DATETIME_PATTERN.match(text):
            normalized = text.replace(" ", "T", 1)
            if normalized.endswith("Z"):
                normalized = normalized[:-1] + "+00:00"
            normalized = _OFFSET_WITHOUT_COLON.sub(r"\1:\2", normalized)
            return datetime.fromisoformat(normalized)

        us_match = US_DATE_PATTERN.match(text)
        if us_match:
            month, day, year = (int(part) for part in us_match.groups())
            return date(year, month, day)
    except ValueError:
        return None

    return None


def _parse_json_constant(token: str) -> Any:
    # JSON.parse не принимает NaN/Infinity
    raise ValueError(f"Invalid JSON constant: {token}")


def _is_json_wrapped(text: str) -> bool:
    return (text.startswith("{") and text.endswith("}")) or (
        text.startswith("[") and text.endswith("]")
    )


# =============================================================================
# КОНВЕЙЕР
# =============================================================================


def reinterpret_string(text: str, config: FlexConfig) -> Reinterpretation:
    """
    Переинтерпретация строки в более богатый тип.

    Args:
        text: Исходная строка
        config: Политики реинтерпретации

    Returns:
        Reinterpretation(value, tag, rule)

    Examples:
        >>> reinterpret_string("123.45", FlexConfig()).value
        123.45
        >>> reinterpret_string('{"a":1', FlexConfig()).tag
        <TypeTag.STRING: 'string'>
    """
    trimmed = text.strip()

    # 1. Пустая строка
    if trimmed == "":
        value = text if config.strict_empty_string else ""
        return Reinterpretation(value, TypeTag.STRING, ReinterpretationRule.EMPTY)

    # 2. Boolean
    boolean = _match_boolean(trimmed, config.bool_casing)
    if boolean is not None:
        return Reinterpretation(boolean, TypeTag.BOOLEAN, ReinterpretationRule.BOOLEAN)

    # 3. Number
    number = parse_decimal(trimmed)
    if number is not None:
        if (
            not is_safe_magnitude(number)
            and config.overflow_policy == OverflowPolicy.KEEP_AS_STRING
        ):
            logger.debug(f"Numeric string outside safe-integer range kept as string: {trimmed[:32]}")
            return Reinterpretation(text, TypeTag.STRING, ReinterpretationRule.OVERFLOW_KEPT)
        return Reinterpretation(
            normalize_precision(number, config.precision_digits),
            TypeTag.NUMBER,
            ReinterpretationRule.NUMBER,
        )

    # 4. Date
    if config.detect_dates:
        parsed_date = parse_date_text(trimmed)
        if parsed_date is not None:
            return Reinterpretation(parsed_date, TypeTag.DATE, ReinterpretationRule.DATE)

    # 5. JSON
    if config.parse_json and _is_json_wrapped(trimmed):
        try:
            parsed = json.loads(trimmed, parse_constant=_parse_json_constant)
        except (ValueError, RecursionError) as e:
            logger.debug(f"JSON reinterpretation failed, keeping string: {e}")
            return Reinterpretation(text, TypeTag.STRING, ReinterpretationRule.JSON_FAILED)
        tag = TypeTag.ARRAY if isinstance(parsed, list) else TypeTag.OBJECT
        return Reinterpretation(parsed, tag, ReinterpretationRule.JSON)

    # 6. Без изменений
    return Reinterpretation(text, TypeTag.STRING, ReinterpretationRule.UNCHANGED)
