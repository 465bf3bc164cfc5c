"""
Converter — Вычисление эффективного значения

convert(tag, raw_value, lock_flags, config) → ConversionResult

Правила:
- type_locked → значение и тег без изменений
- number → целые без изменений, float нормализуется до N значащих цифр
- boolean → без изменений (bool-lock влияет только на арифметику)
- string и не string_locked → конвейер переинтерпретации
- остальные теги → без изменений

Конверсия тотальна: любые ошибки разбора деградируют к исходному значению.
"""

import logging
from dataclasses import dataclass
from typing import Any, Tuple

from flextype.core.config import FlexConfig
from flextype.core.conversion.reinterpretation import reinterpret_string
from flextype.core.domain.lock_flags import LockFlags
from flextype.core.domain.type_tag import TypeTag
from flextype.core.math.numerical_safeguards import normalize_precision

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    """Результат конверсии: эффективное значение, итоговый тег и история тегов."""

    value: Any
    tag: TypeTag
    history: Tuple[TypeTag, ...]


def record_tag(history: Tuple[TypeTag, ...], tag: TypeTag) -> Tuple[TypeTag, ...]:
    """Добавление тега в историю с подавлением последовательных дубликатов."""
    if history and history[-1] == tag:
        return history
    return history + (tag,)


def convert(
    tag: TypeTag,
    raw_value: Any,
    lock_flags: LockFlags,
    config: FlexConfig,
) -> ConversionResult:
    """
    Конверсия сырого значения в эффективное.

    Args:
        tag: Тег, выданный классификатором
        raw_value: Исходное значение
        lock_flags: Текущие lock-флаги
        config: Политики реинтерпретации

    Returns:
        ConversionResult (value, tag, history)
    """
    history = (tag,)

    if lock_flags.type_locked:
        return ConversionResult(raw_value, tag, history)

    if tag == TypeTag.NUMBER:
        return ConversionResult(
            normalize_precision(raw_value, config.precision_digits), tag, history
        )

    if tag == TypeTag.STRING and not lock_flags.string_locked:
        result = reinterpret_string(raw_value, config)
        if result.tag != tag:
            logger.debug(f"Reinterpreted string as {result.tag.value} ({result.rule.value})")
        return ConversionResult(result.value, result.tag, record_tag(history, result.tag))

    return ConversionResult(raw_value, tag, history)
