"""
Tests for JSON Schema Contract Validators

Тестирование валидации диагностических снапшотов:
- Валидность самой схемы
- Валидация правильных данных
- Детекция нарушений required полей
- Детекция нарушений типов и enum
- Интеграция с Pydantic моделью TypedValueSnapshot
"""

import json
import math
import re
from pathlib import Path

import pytest
from jsonschema import ValidationError

from flextype.core.contracts import SNAPSHOT_SCHEMA, SchemaLoader, SnapshotValidator, validate_snapshot
from flextype.core.domain.lock_flags import LockFlags
from flextype.core.domain.snapshot import TypedValueSnapshot, json_safe
from flextype.core.domain.type_tag import UNDEFINED, TypeTag
from flextype.core.domain.typed_value import TypedValue


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_snapshot():
    """Валидный снапшот для тестирования."""
    return {
        "name": "x",
        "raw": "42",
        "effective": 42,
        "tag": "number",
        "history": ["string", "number"],
        "lock_flags": {
            "string_locked": False,
            "bool_locked": False,
            "type_locked": False,
        },
        "is_locked": False,
    }


# =============================================================================
# TESTS - SCHEMA LOADING
# =============================================================================


def test_schema_loader_loads_snapshot_schema():
    """Проверка загрузки схемы."""
    loader = SchemaLoader()

    schema = loader.load_schema("typed_value_snapshot")

    assert schema["title"] == "TypedValueSnapshot"
    assert len(schema["$defs"]["tag"]["enum"]) == len(TypeTag)


def test_schema_loader_caches_schemas():
    """Проверка кэширования схем."""
    loader = SchemaLoader()

    schema1 = loader.load_schema("typed_value_snapshot")
    schema2 = loader.load_schema("typed_value_snapshot")

    # Должен вернуть тот же объект (кэш)
    assert schema1 is schema2


def test_schema_loader_raises_on_missing_schema():
    """Проверка ошибки при отсутствующей схеме."""
    loader = SchemaLoader()

    with pytest.raises(FileNotFoundError):
        loader.load_schema("non_existent_schema")


def test_schema_loader_rejects_invalid_schema(tmp_path: Path):
    """Meta-validation отклоняет некорректную схему."""
    (tmp_path / "broken.json").write_text('{"type": 12}', encoding="utf-8")
    loader = SchemaLoader(schema_dir=tmp_path)

    with pytest.raises(ValueError, match="Invalid JSON Schema in broken.json"):
        loader.load_schema("broken")


def test_schema_loader_missing_directory(tmp_path: Path):
    with pytest.raises(RuntimeError, match="Schema directory not found"):
        SchemaLoader(schema_dir=tmp_path / "missing")


def test_schema_tags_match_type_tag_enum():
    """Enum тегов в схеме совпадает с TypeTag."""
    schema = SchemaLoader().load_schema("typed_value_snapshot")

    assert set(schema["$defs"]["tag"]["enum"]) == {tag.value for tag in TypeTag}


# =============================================================================
# TESTS - SNAPSHOT VALIDATION
# =============================================================================


def test_snapshot_validator_accepts_valid_data(valid_snapshot):
    """Валидация правильного снапшота."""
    validator = SnapshotValidator()
    validator.validate(valid_snapshot)  # Не должно выбросить исключение
    assert validator.is_valid(valid_snapshot)


def test_snapshot_validate_function(valid_snapshot):
    """Проверка функции validate_snapshot."""
    validate_snapshot(valid_snapshot)


def test_snapshot_rejects_missing_required_field(valid_snapshot):
    """Валидация отклоняет данные без обязательных полей."""
    validator = SnapshotValidator()

    data = valid_snapshot.copy()
    del data["tag"]

    with pytest.raises(ValidationError) as exc_info:
        validator.validate(data)
    assert "'tag' is a required property" in str(exc_info.value)


def test_snapshot_rejects_unknown_tag(valid_snapshot):
    """Тег вне закрытого набора отклоняется."""
    data = valid_snapshot.copy()
    data["tag"] = "integer"

    with pytest.raises(ValidationError):
        validate_snapshot(data)


def test_snapshot_rejects_wrong_type(valid_snapshot):
    data = valid_snapshot.copy()
    data["is_locked"] = "no"

    with pytest.raises(ValidationError) as exc_info:
        validate_snapshot(data)
    assert "is not of type 'boolean'" in str(exc_info.value)


def test_snapshot_rejects_additional_properties(valid_snapshot):
    data = valid_snapshot.copy()
    data["options"] = {}

    assert not SnapshotValidator().is_valid(data)


def test_snapshot_collects_all_errors(valid_snapshot):
    data = valid_snapshot.copy()
    data["tag"] = "integer"
    data["history"] = ["bogus"]

    errors = SnapshotValidator().errors(data)

    assert len(errors) == 2
    assert errors[0].startswith("history/0: ")
    assert errors[1].startswith("tag: ")


def test_snapshot_errors_empty_for_valid_data(valid_snapshot):
    assert SnapshotValidator().errors(valid_snapshot) == []


def test_snapshot_validator_with_custom_loader(tmp_path: Path, valid_snapshot):
    """Валидатор читает схему через переданный загрузчик."""
    schema = {"$schema": "https://json-schema.org/draft/2020-12/schema", "type": "object", "required": ["extra"]}
    (tmp_path / f"{SNAPSHOT_SCHEMA}.json").write_text(json.dumps(schema), encoding="utf-8")

    validator = SnapshotValidator(SchemaLoader(schema_dir=tmp_path))

    assert not validator.is_valid(valid_snapshot)


# =============================================================================
# TESTS - PYDANTIC INTEGRATION
# =============================================================================


def test_snapshot_model_immutability():
    """Тест immutability TypedValueSnapshot (frozen=True)."""
    snapshot = TypedValueSnapshot(name="x", raw=1, effective=1, tag=TypeTag.NUMBER)

    with pytest.raises(Exception):
        snapshot.name = "y"  # type: ignore


@pytest.mark.parametrize(
    "value",
    [
        "42",
        "hello",
        '{"a": [1, 2]}',
        "2024-01-15T10:30:00Z",
        None,
        UNDEFINED,
        float("nan"),
        re.compile("a+"),
        {1, 2},
        object(),
    ],
)
def test_typed_value_snapshots_match_contract(value):
    """Снапшот любого TypedValue соответствует схеме."""
    snapshot = TypedValue("v", value).debug()

    validate_snapshot(snapshot.to_contract())


def test_locked_snapshot_contract():
    snapshot = TypedValue("v", "5", {"stringLock": True}).debug()
    contract = snapshot.to_contract()

    validate_snapshot(contract)
    assert contract["lock_flags"]["string_locked"] is True
    assert contract["is_locked"] is True
    assert snapshot.lock_flags == LockFlags(string_locked=True)


def test_json_safe_fallbacks():
    """Несериализуемые значения представлены строкой."""
    assert json_safe({"a": 1}) == {"a": 1}
    assert json_safe(math.nan) == "NaN"
    assert json_safe(UNDEFINED) == "undefined"
    assert json_safe(re.compile("a+")) == "/a+/"


def test_self_referencing_array_snapshot():
    """Циклический массив сериализуется строкой."""
    looped = [1]
    looped.append(looped)
    tv = TypedValue("a", looped)

    contract = tv.debug().to_contract()

    validate_snapshot(contract)
    assert contract["effective"] == "1,"
    assert str(tv) == "1,"
