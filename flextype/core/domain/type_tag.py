"""
TypeTag — Классификатор семантических типов

Отображает произвольное Python-значение в один тег из закрытого набора
{null, undefined, boolean, number, nan, string, array, object, date,
regexp, map, set}.

Приоритет правил:
1. None → null
2. UNDEFINED (sentinel) → undefined
3. float NaN → nan
4. Структурные типы: array, date, regexp, map, set, object (dict)
5. Примитивы: boolean, number, string
6. Всё остальное → object

classify() чистая и тотальная: никогда не бросает исключений.
"""

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any, Optional, Tuple


# =============================================================================
# UNDEFINED SENTINEL
# =============================================================================


class _Undefined:
    """Sentinel отсутствующего значения (отличается от None)."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo: dict) -> "_Undefined":
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


# =============================================================================
# ENUMS
# =============================================================================


class TypeTag(str, Enum):
    """Семантический тег значения."""

    NULL = "null"
    UNDEFINED = "undefined"
    BOOLEAN = "boolean"
    NUMBER = "number"
    NAN = "nan"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    DATE = "date"
    REGEXP = "regexp"
    MAP = "map"
    SET = "set"


class NumberKind(str, Enum):
    """Уточнение number-тега для профилей (integer/float)."""

    INTEGER = "integer"
    FLOAT = "float"


CONTAINER_TAGS = frozenset({TypeTag.ARRAY, TypeTag.OBJECT})

NUMERIC_TYPES = (int, float, Fraction, Decimal)


# =============================================================================
# CLASSIFIER
# =============================================================================


def is_nan_value(value: Any) -> bool:
    """True для NaN float/Decimal (bool исключён)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


def classify(value: Any) -> TypeTag:
    """
    Классификация значения в TypeTag.

    Args:
        value: Любое Python-значение

    Returns:
        Тег значения

    Examples:
        >>> classify(None)
        <TypeTag.NULL: 'null'>
        >>> classify(float("nan"))
        <TypeTag.NAN: 'nan'>
        >>> classify({"a": 1})
        <TypeTag.OBJECT: 'object'>
    """
    if value is None:
        return TypeTag.NULL
    if value is UNDEFINED:
        return TypeTag.UNDEFINED
    if is_nan_value(value):
        return TypeTag.NAN

    # Структурные типы
    if isinstance(value, (list, tuple)):
        return TypeTag.ARRAY
    if isinstance(value, date):
        return TypeTag.DATE
    if isinstance(value, re.Pattern):
        return TypeTag.REGEXP
    if type(value) is dict:
        return TypeTag.OBJECT
    if isinstance(value, Mapping):
        return TypeTag.MAP
    if isinstance(value, (set, frozenset)):
        return TypeTag.SET

    # Примитивы (bool раньше чисел: bool наследует int)
    if isinstance(value, bool):
        return TypeTag.BOOLEAN
    if isinstance(value, NUMERIC_TYPES):
        return TypeTag.NUMBER
    if isinstance(value, str):
        return TypeTag.STRING

    return TypeTag.OBJECT


# =============================================================================
# DEEP PROFILE
# =============================================================================


@dataclass(frozen=True)
class TypeProfile:
    """
    Детальный профиль значения.

    Для array заполнены length/item_types, для object/map: keys/value_types.
    Теги элементов: строки: number уточняется до integer/float.
    """

    tag: TypeTag
    length: Optional[int] = None
    item_types: Tuple[str, ...] = ()
    keys: Tuple[Any, ...] = ()
    key_count: Optional[int] = None
    value_types: Tuple[str, ...] = ()
    empty: Optional[bool] = None


def element_kind(value: Any) -> str:
    """Тег элемента для профиля: number → integer/float."""
    tag = classify(value)
    if tag != TypeTag.NUMBER:
        return tag.value
    if isinstance(value, int) or (isinstance(value, float) and value.is_integer()):
        return NumberKind.INTEGER.value
    if isinstance(value, Fraction) and value.denominator == 1:
        return NumberKind.INTEGER.value
    if isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
        return NumberKind.INTEGER.value
    return NumberKind.FLOAT.value


def _unique(kinds: Any) -> Tuple[str, ...]:
    # Уникальные значения в порядке первого появления
    return tuple(dict.fromkeys(kinds))


def profile(value: Any) -> TypeProfile:
    """
    Глубокий профиль значения (один уровень вложенности).

    Args:
        value: Любое Python-значение

    Returns:
        TypeProfile
    """
    tag = classify(value)

    if tag == TypeTag.ARRAY:
        return TypeProfile(
            tag=tag,
            length=len(value),
            item_types=_unique(element_kind(item) for item in value),
            empty=len(value) == 0,
        )

    if tag in (TypeTag.OBJECT, TypeTag.MAP) and isinstance(value, Mapping):
        keys = tuple(value.keys())
        return TypeProfile(
            tag=tag,
            keys=keys,
            key_count=len(keys),
            value_types=_unique(element_kind(v) for v in value.values()),
            empty=len(keys) == 0,
        )

    return TypeProfile(tag=tag)
