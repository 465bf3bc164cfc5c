"""
Conversion Cache — ограниченный FIFO кэш результатов конверсии

Кэш отделён от TypedValue: им владеет вызывающий (через FlexContext или
аргумент cache=). Кэшируются только конверсии скалярных сырых значений
(str, int, float, bool, None, UNDEFINED); ключ: тип и repr значения,
lock-флаги и FlexConfig.

Контейнерные результаты (JSON-разбор) копируются (deepcopy) при каждом
попадании, поэтому set()/push() на экземпляре не затрагивают кэш.

Потокобезопасность: get/put/clear защищены threading.Lock.
"""

import copy
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Final, Hashable, Optional, Tuple

from flextype.core.config import FlexConfig
from flextype.core.conversion.converter import ConversionResult
from flextype.core.domain.lock_flags import LockFlags
from flextype.core.domain.type_tag import CONTAINER_TAGS, UNDEFINED

logger = logging.getLogger(__name__)

# Ёмкость кэша по умолчанию
DEFAULT_CACHE_SIZE: Final[int] = 1000

_CACHEABLE_TYPES = (str, int, float, bool, type(None))


@dataclass(frozen=True)
class CacheStats:
    """Статистика кэша."""

    hits: int
    misses: int
    size: int
    max_size: int

    @property
    def hit_rate(self) -> float:
        """Доля попаданий (0.0 если обращений не было)."""
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class ConversionCache:
    """
    Ограниченный кэш конверсий с FIFO-вытеснением.

    При достижении max_size вытесняется самая старая запись
    (порядок вставки, без LRU-переупорядочивания).
    """

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE):
        """
        Args:
            max_size: Максимальное число записей (> 0)

        Raises:
            ValueError: Если max_size <= 0
        """
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")

        self._max_size = max_size
        self._entries: Dict[Hashable, ConversionResult] = {}
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()

    @staticmethod
    def make_key(
        raw_value: Any, lock_flags: LockFlags, config: FlexConfig
    ) -> Optional[Tuple[Hashable, ...]]:
        """
        Ключ кэша для сырого значения.

        Returns:
            Кортеж-ключ или None, если значение не кэшируется
        """
        if raw_value is not UNDEFINED and type(raw_value) not in _CACHEABLE_TYPES:
            return None
        return (type(raw_value).__name__, repr(raw_value), lock_flags.as_tuple(), config)

    def get(self, key: Hashable) -> Optional[ConversionResult]:
        """Результат по ключу (копия для контейнеров) или None."""
        with self._lock:
            result = self._entries.get(key)
            if result is None:
                self._misses += 1
                return None
            self._hits += 1

        logger.debug(f"Conversion cache hit: {result.tag.value}")
        return self._detach(result)

    def put(self, key: Hashable, result: ConversionResult) -> None:
        """Сохранение результата (FIFO-вытеснение при переполнении)."""
        stored = self._detach(result)
        with self._lock:
            if key not in self._entries and len(self._entries) >= self._max_size:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                logger.debug(f"Conversion cache evicted oldest entry (max_size={self._max_size})")
            self._entries[key] = stored

    def clear(self) -> None:
        """Очистка записей и счётчиков."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    @property
    def stats(self) -> CacheStats:
        """Снапшот статистики."""
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                size=len(self._entries),
                max_size=self._max_size,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @staticmethod
    def _detach(result: ConversionResult) -> ConversionResult:
        # Контейнеры изменяемы: кэш и экземпляры не должны разделять объект
        if result.tag in CONTAINER_TAGS:
            return ConversionResult(copy.deepcopy(result.value), result.tag, result.history)
        return result
