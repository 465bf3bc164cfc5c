"""
Contract Validation Module

Валидация диагностических снапшотов FlexType по JSON Schema.
"""

from .validators import SNAPSHOT_SCHEMA, SchemaLoader, SnapshotValidator, validate_snapshot

__all__ = [
    "SNAPSHOT_SCHEMA",
    "SchemaLoader",
    "SnapshotValidator",
    "validate_snapshot",
]
