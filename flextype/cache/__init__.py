"""
Cache — кэш результатов конверсии, которым владеет вызывающий.
"""

from .conversion_cache import DEFAULT_CACHE_SIZE, CacheStats, ConversionCache

__all__ = [
    "DEFAULT_CACHE_SIZE",
    "CacheStats",
    "ConversionCache",
]
