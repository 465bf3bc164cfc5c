"""
Config — Настройки реинтерпретации и опции конструирования

Immutable Pydantic модели:
- FlexConfig: политика реинтерпретации строк и арифметики (вместо
  глобального синглтона config: значение передаётся явно или хранится
  в FlexContext, которым владеет вызывающий)
- WrapOptions: lock-флаги при конструировании TypedValue

Оба класса принимают snake_case и camelCase ключи
(parseJSON, detectDates, stringLock, ...).
"""

from enum import Enum
from typing import Any, Final, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from flextype.core.errors import InvalidArgument


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Количество значащих десятичных цифр при нормализации float
DEFAULT_PRECISION_DIGITS: Final[int] = 15


# =============================================================================
# ENUMS
# =============================================================================


class OverflowPolicy(str, Enum):
    """Поведение для числовых строк за пределами safe-integer диапазона."""

    KEEP_AS_STRING = "keep_as_string"
    CONVERT_ANYWAY = "convert_anyway"


class BoolCasing(str, Enum):
    """Политика регистра для строк "true"/"false"."""

    CASE_INSENSITIVE = "case_insensitive"
    EXACT = "exact"  # только true/True/false/False


class DivisionPolicy(str, Enum):
    """Политика деления на ноль для всего слоя операций."""

    STRICT = "strict"  # DivisionByZero
    IEEE = "ieee"  # inf / NaN


# =============================================================================
# FLEX CONFIG
# =============================================================================


class FlexConfig(BaseModel):
    """
    Настройки реинтерпретации строк и арифметики.

    Immutable модель (frozen=True). Изменения через merge() создают
    новый экземпляр.
    """

    parse_json: bool = Field(
        default=True, alias="parseJSON", description="Парсить {...}/[...] как JSON"
    )
    detect_dates: bool = Field(
        default=True, alias="detectDates", description="Распознавать ISO/M-D-Y даты"
    )
    strict_empty_string: bool = Field(
        default=True,
        alias="strictEmptyString",
        description="Пустая (после strip) строка остаётся исходной строкой",
    )
    overflow_policy: OverflowPolicy = Field(
        default=OverflowPolicy.KEEP_AS_STRING,
        alias="overflowPolicy",
        description="Числа вне safe-integer диапазона",
    )
    bool_casing: BoolCasing = Field(
        default=BoolCasing.CASE_INSENSITIVE,
        alias="boolCasing",
        description="Регистр true/false",
    )
    division_policy: DivisionPolicy = Field(
        default=DivisionPolicy.STRICT,
        alias="divisionPolicy",
        description="Деление на ноль: исключение или IEEE-754",
    )
    precision_digits: int = Field(
        default=DEFAULT_PRECISION_DIGITS,
        ge=1,
        le=17,
        alias="precisionDigits",
        description="Значащие цифры при нормализации float",
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    def merge(self, **updates: Any) -> "FlexConfig":
        """
        Новый config с обновлёнными полями (с валидацией).

        Args:
            **updates: поля в snake_case или camelCase

        Returns:
            Новый FlexConfig

        Raises:
            InvalidArgument: если обновление невалидно
        """
        data = self.model_dump(by_alias=True)
        for key, value in updates.items():
            field = type(self).model_fields.get(key)
            data[field.alias if field is not None and field.alias else key] = value
        return coerce_config(data)


# =============================================================================
# WRAP OPTIONS
# =============================================================================


class WrapOptions(BaseModel):
    """Опции конструирования TypedValue (lock-флаги и история типов)."""

    string_lock: bool = Field(default=False, alias="stringLock")
    bool_lock: bool = Field(default=False, alias="boolLock")
    type_lock: bool = Field(default=False, alias="typeLock")
    track_history: bool = Field(default=True, alias="trackHistory")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


# =============================================================================
# COERCION
# =============================================================================


def coerce_config(config: Union[FlexConfig, Mapping[str, Any], None]) -> FlexConfig:
    """
    Приведение пользовательского config к FlexConfig.

    Raises:
        InvalidArgument: если mapping не проходит валидацию
    """
    if config is None:
        return FlexConfig()
    if isinstance(config, FlexConfig):
        return config
    if not isinstance(config, Mapping):
        raise InvalidArgument(
            f"config must be a FlexConfig or a mapping, got {type(config).__name__}"
        )
    try:
        return FlexConfig.model_validate(dict(config))
    except ValidationError as e:
        raise InvalidArgument(f"Invalid config: {e}") from e


def coerce_options(options: Union[WrapOptions, Mapping[str, Any], None]) -> WrapOptions:
    """
    Приведение пользовательских options к WrapOptions.

    Raises:
        InvalidArgument: если mapping не проходит валидацию
    """
    if options is None:
        return WrapOptions()
    if isinstance(options, WrapOptions):
        return options
    if not isinstance(options, Mapping):
        raise InvalidArgument(
            f"options must be a WrapOptions or a mapping, got {type(options).__name__}"
        )
    try:
        return WrapOptions.model_validate(dict(options))
    except ValidationError as e:
        raise InvalidArgument(f"Invalid options: {e}") from e
