"""
TypedValueSnapshot — Диагностический снапшот TypedValue

Immutable Pydantic модель, возвращаемая debug()/inspect().
Только для диагностики: не является частью семантического контракта.
to_contract() даёт JSON-совместимый dict, соответствующий схеме
contracts/schema/typed_value_snapshot.json.
"""

import json
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field

from flextype.core.conversion.primitives import to_json_text, to_string
from flextype.core.domain.lock_flags import LockFlags
from flextype.core.domain.type_tag import TypeTag


def json_safe(value: Any) -> Any:
    """JSON-совместимое представление значения (строка, если не сериализуемо)."""
    text = to_json_text(value)
    if text is None:
        return to_string(value)
    return json.loads(text)


class TypedValueSnapshot(BaseModel):
    """
    Снапшот состояния TypedValue.

    Immutable модель (frozen=True).
    """

    name: str = Field(..., description="Display name")
    raw: Any = Field(..., description="Исходное значение")
    effective: Any = Field(..., description="Эффективное значение")
    tag: TypeTag = Field(..., description="Текущий тег")
    history: Tuple[TypeTag, ...] = Field(default=(), description="История тегов")
    lock_flags: LockFlags = Field(default_factory=LockFlags, description="Lock-флаги")
    is_locked: bool = Field(default=False, description="Установлен ли хотя бы один флаг")

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def to_contract(self) -> Dict[str, Any]:
        """JSON-совместимый dict для валидации по схеме typed_value_snapshot."""
        return {
            "name": self.name,
            "raw": json_safe(self.raw),
            "effective": json_safe(self.effective),
            "tag": self.tag.value,
            "history": [tag.value for tag in self.history],
            "lock_flags": {
                "string_locked": self.lock_flags.string_locked,
                "bool_locked": self.lock_flags.bool_locked,
                "type_locked": self.lock_flags.type_locked,
            },
            "is_locked": self.is_locked,
        }
