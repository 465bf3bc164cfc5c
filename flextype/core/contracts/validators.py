"""
Snapshot Contract

Проверка диагностических снапшотов (TypedValueSnapshot.to_contract())
по JSON Schema из каталога flextype/core/contracts/schema/.
"""

import json
from pathlib import Path
from typing import Any, Dict, Final, List, Optional

from jsonschema import Draft202012Validator, SchemaError

SCHEMA_DIR: Final[Path] = Path(__file__).parent / "schema"
SNAPSHOT_SCHEMA: Final[str] = "typed_value_snapshot"


class SchemaLoader:
    """Чтение схем по имени: meta-validation при первой загрузке, затем кэш."""

    def __init__(self, schema_dir: Optional[Path] = None):
        self.schema_dir = Path(schema_dir) if schema_dir is not None else SCHEMA_DIR
        if not self.schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self.schema_dir}")
        self._loaded: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, name: str) -> Dict[str, Any]:
        """
        Raises:
            FileNotFoundError: нет файла <name>.json
            ValueError: файл не является корректной Draft 2020-12 схемой
        """
        if name not in self._loaded:
            path = self.schema_dir / f"{name}.json"
            if not path.is_file():
                raise FileNotFoundError(f"Schema not found: {path}")
            schema = json.loads(path.read_text(encoding="utf-8"))
            try:
                Draft202012Validator.check_schema(schema)
            except SchemaError as e:
                raise ValueError(f"Invalid JSON Schema in {path.name}: {e.message}") from e
            self._loaded[name] = schema
        return self._loaded[name]


_DEFAULT_LOADER = SchemaLoader()


class SnapshotValidator:
    """Валидатор снапшота TypedValue."""

    def __init__(self, loader: Optional[SchemaLoader] = None):
        schema = (loader or _DEFAULT_LOADER).load_schema(SNAPSHOT_SCHEMA)
        self._validator = Draft202012Validator(schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: первое найденное нарушение
        """
        self._validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self._validator.is_valid(data)

    def errors(self, data: Dict[str, Any]) -> List[str]:
        """Все нарушения в виде "путь: сообщение", упорядоченные по пути."""
        found = sorted(self._validator.iter_errors(data), key=lambda e: list(map(str, e.path)))
        return [f"{'/'.join(map(str, e.path)) or '<root>'}: {e.message}" for e in found]


def validate_snapshot(data: Dict[str, Any]) -> None:
    """
    Проверка результата TypedValueSnapshot.to_contract().

    Raises:
        jsonschema.ValidationError: если данные не соответствуют схеме
    """
    SnapshotValidator().validate(data)
