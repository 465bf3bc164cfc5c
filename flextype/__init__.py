"""
FlexType — обёртка динамических значений с выводом типа, реинтерпретацией
строк и lock-семантикой.

    >>> from flextype import wrap
    >>> wrap("a", "10").add(wrap("b", "5")).effective_value
    15
"""

from flextype.api import FlexContext, wrap, wrap_many
from flextype.cache.conversion_cache import DEFAULT_CACHE_SIZE, CacheStats, ConversionCache
from flextype.core.config import (
    DEFAULT_PRECISION_DIGITS,
    BoolCasing,
    DivisionPolicy,
    FlexConfig,
    OverflowPolicy,
    WrapOptions,
)
from flextype.core.contracts import validate_snapshot
from flextype.core.domain.lock_flags import LockFlags
from flextype.core.domain.snapshot import TypedValueSnapshot
from flextype.core.domain.type_tag import UNDEFINED, NumberKind, TypeProfile, TypeTag, classify, profile
from flextype.core.domain.typed_value import TypedValue, create_batch, merge
from flextype.core.errors import (
    DivisionByZero,
    FlexTypeError,
    InvalidArgument,
    OperationNotPermitted,
    TypeMismatch,
)

__version__ = "1.0.0"

__all__ = [
    # API
    "wrap",
    "wrap_many",
    "create_batch",
    "merge",
    "FlexContext",
    "TypedValue",
    # Types
    "UNDEFINED",
    "TypeTag",
    "NumberKind",
    "TypeProfile",
    "classify",
    "profile",
    "LockFlags",
    "TypedValueSnapshot",
    "validate_snapshot",
    # Config
    "FlexConfig",
    "WrapOptions",
    "OverflowPolicy",
    "BoolCasing",
    "DivisionPolicy",
    "DEFAULT_PRECISION_DIGITS",
    # Cache
    "ConversionCache",
    "CacheStats",
    "DEFAULT_CACHE_SIZE",
    # Errors
    "FlexTypeError",
    "InvalidArgument",
    "OperationNotPermitted",
    "TypeMismatch",
    "DivisionByZero",
]
