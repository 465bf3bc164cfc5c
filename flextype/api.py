"""
FlexType API — точки входа и контекст вызывающего

wrap()/wrap_many() конструируют TypedValue с явными config и cache.
FlexContext хранит неизменяемый FlexConfig и (опционально) ConversionCache,
которые передаются в каждое конструирование. Глобального изменяемого
состояния нет: configure() возвращает новый контекст.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from flextype.cache.conversion_cache import CacheStats, ConversionCache
from flextype.core.config import FlexConfig, WrapOptions, coerce_config
from flextype.core.domain.typed_value import TypedValue, create_batch
from flextype.core.errors import InvalidArgument

logger = logging.getLogger(__name__)

ConfigLike = Union[FlexConfig, Mapping[str, Any], None]
OptionsLike = Union[WrapOptions, Mapping[str, Any], None]


def wrap(
    name: str,
    value: Any,
    options: OptionsLike = None,
    *,
    config: ConfigLike = None,
    cache: Optional[ConversionCache] = None,
) -> TypedValue:
    """
    Обёртка значения в TypedValue.

    Args:
        name: Display name
        value: Любое Python-значение
        options: Lock-флаги / track_history (snake_case или camelCase)
        config: Политики реинтерпретации
        cache: Кэш конверсий вызывающего

    Raises:
        InvalidArgument: если name не строка или options/config невалидны

    Examples:
        >>> wrap("x", "123.45").effective_value
        123.45
    """
    return TypedValue(name, value, options, config=config, cache=cache)


def wrap_many(
    named_values: Mapping[str, Any],
    options: OptionsLike = None,
    *,
    config: ConfigLike = None,
    cache: Optional[ConversionCache] = None,
) -> Dict[str, TypedValue]:
    """Обёртка mapping name → value; ключи и порядок сохраняются."""
    if not isinstance(named_values, Mapping):
        raise InvalidArgument(
            f"wrap_many() expects a mapping, got {type(named_values).__name__}"
        )
    resolved = coerce_config(config)
    return {
        name: TypedValue(name, value, options, config=resolved, cache=cache)
        for name, value in named_values.items()
    }


class FlexContext:
    """
    Контекст вызывающего: config + опциональный кэш конверсий.

    Examples:
        >>> ctx = FlexContext({"parseJSON": False}, cache=ConversionCache())
        >>> ctx.wrap("j", "[1, 2]").type_tag.value
        'string'
    """

    def __init__(self, config: ConfigLike = None, cache: Optional[ConversionCache] = None):
        self._config = coerce_config(config)
        self._cache = cache

    @property
    def config(self) -> FlexConfig:
        return self._config

    @property
    def cache(self) -> Optional[ConversionCache]:
        return self._cache

    def wrap(self, name: str, value: Any, options: OptionsLike = None) -> TypedValue:
        return TypedValue(name, value, options, config=self._config, cache=self._cache)

    def wrap_many(
        self, named_values: Mapping[str, Any], options: OptionsLike = None
    ) -> Dict[str, TypedValue]:
        return wrap_many(named_values, options, config=self._config, cache=self._cache)

    def create_batch(self, values: Iterable[Any], prefix: str = "item") -> Tuple[TypedValue, ...]:
        return create_batch(values, prefix, config=self._config, cache=self._cache)

    def configure(self, **updates: Any) -> "FlexContext":
        """
        Новый контекст с обновлённым config; кэш разделяется.

        Raises:
            InvalidArgument: если обновление невалидно
        """
        config = self._config.merge(**updates)
        logger.debug(f"Context reconfigured: {sorted(updates)}")
        return FlexContext(config, cache=self._cache)

    def clear_cache(self) -> None:
        if self._cache is not None:
            self._cache.clear()

    def cache_stats(self) -> Optional[CacheStats]:
        return self._cache.stats if self._cache is not None else None
