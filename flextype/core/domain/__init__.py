"""
Domain модели FlexType: теги типов и lock-флаги.

TypedValue и TypedValueSnapshot импортируются из своих модулей
(flextype.core.domain.typed_value, flextype.core.domain.snapshot) или из flextype.
"""

from flextype.core.domain.lock_flags import UNLOCKED, LockFlags
from flextype.core.domain.type_tag import (
    CONTAINER_TAGS,
    UNDEFINED,
    NumberKind,
    TypeProfile,
    TypeTag,
    classify,
    element_kind,
    is_nan_value,
    profile,
)

__all__ = [
    # Type tags
    "UNDEFINED",
    "TypeTag",
    "NumberKind",
    "CONTAINER_TAGS",
    "classify",
    "is_nan_value",
    # Profiles
    "TypeProfile",
    "element_kind",
    "profile",
    # Locks
    "LockFlags",
    "UNLOCKED",
]
