"""
Тесты для ConversionCache

Проверяет:
1. Ключи (только скалярные сырые значения)
2. Попадания/промахи и статистику
3. FIFO-вытеснение
4. Изоляцию контейнерных результатов
5. Конкурентный доступ
"""

import threading

import pytest

from flextype.cache import DEFAULT_CACHE_SIZE, ConversionCache
from flextype.core.config import FlexConfig
from flextype.core.conversion.converter import ConversionResult
from flextype.core.domain.lock_flags import LockFlags
from flextype.core.domain.type_tag import UNDEFINED, TypeTag
from flextype.core.domain.typed_value import TypedValue


@pytest.fixture
def cache():
    return ConversionCache(max_size=3)


def _result(value, tag=TypeTag.NUMBER):
    return ConversionResult(value, tag, (TypeTag.STRING, tag))


class TestCacheKeys:
    """Тесты для make_key"""

    def test_scalar_values_are_cacheable(self):
        flags, config = LockFlags(), FlexConfig()

        for value in ["1", 1, 1.0, True, None, UNDEFINED]:
            assert ConversionCache.make_key(value, flags, config) is not None

    def test_containers_not_cacheable(self):
        assert ConversionCache.make_key([1], LockFlags(), FlexConfig()) is None
        assert ConversionCache.make_key({"a": 1}, LockFlags(), FlexConfig()) is None

    def test_key_distinguishes_types(self):
        """1, True и "1": разные ключи"""
        flags, config = LockFlags(), FlexConfig()
        keys = {ConversionCache.make_key(v, flags, config) for v in [1, True, "1", 1.0]}

        assert len(keys) == 4

    def test_key_includes_flags_and_config(self):
        base = ConversionCache.make_key("1", LockFlags(), FlexConfig())

        assert base != ConversionCache.make_key("1", LockFlags(string_locked=True), FlexConfig())
        assert base != ConversionCache.make_key("1", LockFlags(), FlexConfig(parse_json=False))


class TestCacheOperations:
    """Тесты get/put/clear/stats"""

    def test_default_size(self):
        assert ConversionCache().stats.max_size == DEFAULT_CACHE_SIZE == 1000

    def test_invalid_size(self):
        with pytest.raises(ValueError, match="max_size must be positive"):
            ConversionCache(max_size=0)

    def test_hit_and_miss(self, cache):
        assert cache.get("k") is None

        cache.put("k", _result(1))

        assert cache.get("k").value == 1
        stats = cache.stats
        assert stats.hits == 1
        assert stats.misses == 1
        assert stats.hit_rate == 0.5

    def test_fifo_eviction(self, cache):
        """Вытесняется самая старая запись (без LRU)"""
        for i in range(3):
            cache.put(f"k{i}", _result(i))
        cache.get("k0")

        cache.put("k3", _result(3))

        assert cache.get("k0") is None
        assert cache.get("k3").value == 3
        assert len(cache) == 3

    def test_overwrite_does_not_evict(self, cache):
        for i in range(3):
            cache.put(f"k{i}", _result(i))

        cache.put("k1", _result(10))

        assert len(cache) == 3
        assert cache.get("k1").value == 10

    def test_clear(self, cache):
        cache.put("k", _result(1))
        cache.get("k")

        cache.clear()

        assert len(cache) == 0
        assert cache.stats.hits == 0
        assert cache.stats.hit_rate == 0.0

    def test_container_results_are_copied(self, cache):
        """Мутация полученного контейнера не затрагивает кэш"""
        cache.put("k", _result([1, 2], TypeTag.ARRAY))

        first = cache.get("k")
        first.value.append(3)

        assert cache.get("k").value == [1, 2]

    def test_concurrent_access(self):
        cache = ConversionCache(max_size=50)

        def worker(offset):
            for i in range(200):
                cache.put((offset, i), _result(i))
                cache.get((offset, i))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        stats = cache.stats
        assert stats.size == 50
        assert stats.hits + stats.misses == 8 * 200


class TestCacheWithTypedValue:
    """Интеграция с TypedValue"""

    def test_repeated_wrap_hits_cache(self):
        cache = ConversionCache()

        TypedValue("a", "42", cache=cache)
        second = TypedValue("b", "42", cache=cache)

        assert second.effective_value == 42
        assert second.type_history == (TypeTag.STRING, TypeTag.NUMBER)
        assert cache.stats.hits == 1

    def test_mutation_does_not_leak_into_cache(self):
        cache = ConversionCache()

        first = TypedValue("a", "[1, 2]", cache=cache)
        first.push(3)
        second = TypedValue("b", "[1, 2]", cache=cache)

        assert second.effective_value == [1, 2]
        assert first.effective_value is not second.effective_value

    def test_container_raw_values_bypass_cache(self):
        cache = ConversionCache()

        TypedValue("a", [1], cache=cache)

        assert len(cache) == 0
        assert cache.stats.misses == 0
