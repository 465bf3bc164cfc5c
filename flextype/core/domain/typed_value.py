"""
TypedValue — Обёртка динамического значения

Конструирование: (name, value[, options]) → классификация (один раз) →
конверсия (один раз, с учётом lock-флагов). После конструирования
экземпляр неизменяем, за исключением set()/push() над контейнерами.

Lock-операции (lock_string/lock_bool/lock_type/unlock) возвращают новый
экземпляр: эффективное значение становится новым сырым значением,
display name сохраняется, история типов переносится.

Операции:
- арифметика: add/subtract/multiply/divide/modulus/power (+ - * / % **)
- сравнения: equals/strict_equals/greater_than/less_than/greater_equal/less_equal
- явные конверсии: to_string/to_number/to_boolean/to_integer/to_float/to_json
- контейнеры: get/set/push
- прочее: char_shift, pipe, clone, profile, debug/inspect
"""

import copy
import logging
import sys
from collections.abc import Hashable
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple, Union

from flextype.core.config import FlexConfig, WrapOptions, coerce_config, coerce_options
from flextype.core.conversion import primitives
from flextype.core.conversion.converter import ConversionResult, convert, record_tag
from flextype.core.domain.lock_flags import LockFlags
from flextype.core.domain.snapshot import TypedValueSnapshot
from flextype.core.domain.type_tag import UNDEFINED, TypeProfile, TypeTag, classify, profile
from flextype.core.errors import InvalidArgument, TypeMismatch
from flextype.core.math.numerical_safeguards import saturate_unit
from flextype.core.math.operators import ArithmeticOp, ComparisonOp, compare, compute, compute_values
from flextype.locks.state_machine import (
    LockStateMachine,
    LockTransition,
    check_arithmetic_permitted,
    is_saturating,
)

logger = logging.getLogger(__name__)

# Имя операнда, переданного без обёртки
LITERAL_NAME = "literal"

# Диапазон code points для char_shift
_CODE_POINTS = sys.maxunicode + 1

_LOCK_MACHINE = LockStateMachine()


def _unwrap(value: Any) -> Any:
    return value.effective_value if isinstance(value, TypedValue) else value


def _name_of(value: Any) -> str:
    return value.display_name if isinstance(value, TypedValue) else LITERAL_NAME


def _attribute_name(key: Any) -> str:
    # Поля не-dict объектов адресуются именем атрибута
    if not isinstance(key, str):
        raise InvalidArgument(f"Attribute name must be a string, got {type(key).__name__}")
    return key


class TypedValue:
    """
    Обёртка значения с тегом типа, lock-флагами и историей типов.

    Args:
        name: Display name (только для диагностики)
        value: Любое Python-значение
        options: WrapOptions или mapping (snake_case / camelCase)
        config: FlexConfig или mapping
        cache: ConversionCache вызывающего (optional)

    Raises:
        InvalidArgument: если name не строка или options/config невалидны

    Examples:
        >>> TypedValue("a", "10").add(TypedValue("b", "5")).effective_value
        15
    """

    def __init__(
        self,
        name: str,
        value: Any,
        options: Union[WrapOptions, Mapping[str, Any], None] = None,
        *,
        config: Union[FlexConfig, Mapping[str, Any], None] = None,
        cache: Optional[Any] = None,
    ):
        if not isinstance(name, str):
            raise InvalidArgument("Variable name must be a string")

        wrap_options = coerce_options(options)
        flags = LockFlags(
            string_locked=wrap_options.string_lock,
            bool_locked=wrap_options.bool_lock,
            type_locked=wrap_options.type_lock,
        )
        self._initialize(
            name,
            value,
            flags,
            coerce_config(config),
            track_history=wrap_options.track_history,
            cache=cache,
        )

    def _initialize(
        self,
        name: str,
        value: Any,
        flags: LockFlags,
        config: FlexConfig,
        track_history: bool = True,
        history_prefix: Tuple[TypeTag, ...] = (),
        cache: Optional[Any] = None,
    ) -> None:
        result = self._run_conversion(value, flags, config, cache)

        self._display_name = name
        self._raw_value = value
        self._effective_value = result.value
        self._type_tag = result.tag
        self._lock_flags = flags
        self._config = config
        self._track_history = track_history

        history: Tuple[TypeTag, ...] = ()
        if track_history:
            history = history_prefix
            for tag in result.history:
                history = record_tag(history, tag)
        self._type_history = history

    @staticmethod
    def _run_conversion(
        value: Any, flags: LockFlags, config: FlexConfig, cache: Optional[Any]
    ) -> ConversionResult:
        key = cache.make_key(value, flags, config) if cache is not None else None
        if key is not None:
            cached = cache.get(key)
            if cached is not None:
                return cached

        result = convert(classify(value), value, flags, config)

        if key is not None:
            cache.put(key, result)
        return result

    @classmethod
    def _create(
        cls,
        name: str,
        value: Any,
        config: FlexConfig,
        flags: Optional[LockFlags] = None,
        track_history: bool = True,
        history_prefix: Tuple[TypeTag, ...] = (),
    ) -> "TypedValue":
        """Внутренний конструктор для производных значений (без coerce)."""
        instance = cls.__new__(cls)
        instance._initialize(
            name,
            value,
            flags or LockFlags(),
            config,
            track_history=track_history,
            history_prefix=history_prefix,
        )
        return instance

    @classmethod
    def _create_explicit(cls, name: str, value: Any, config: FlexConfig) -> "TypedValue":
        """Результат явной конверсии: без реинтерпретации, флаги сброшены."""
        instance = cls.__new__(cls)
        tag = classify(value)
        instance._display_name = name
        instance._raw_value = value
        instance._effective_value = value
        instance._type_tag = tag
        instance._lock_flags = LockFlags()
        instance._config = config
        instance._track_history = True
        instance._type_history = (tag,)
        return instance

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def effective_value(self) -> Any:
        """Значение после конверсии."""
        return self._effective_value

    @property
    def value(self) -> Any:
        return self._effective_value

    @property
    def raw_value(self) -> Any:
        """Значение в точности как передано при конструировании."""
        return self._raw_value

    @property
    def type_tag(self) -> TypeTag:
        """Тег эффективного значения."""
        return self._type_tag

    @property
    def type(self) -> TypeTag:
        return self._type_tag

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def name(self) -> str:
        return self._display_name

    @property
    def type_history(self) -> Tuple[TypeTag, ...]:
        """Последовательность различных тегов (без подряд идущих дубликатов)."""
        return self._type_history

    @property
    def lock_flags(self) -> LockFlags:
        return self._lock_flags

    @property
    def is_locked(self) -> bool:
        return self._lock_flags.is_locked

    @property
    def config(self) -> FlexConfig:
        return self._config

    # ===== TYPE PREDICATES =====

    def is_null(self) -> bool:
        return self._type_tag == TypeTag.NULL

    def is_undefined(self) -> bool:
        return self._type_tag == TypeTag.UNDEFINED

    def is_boolean(self) -> bool:
        return self._type_tag == TypeTag.BOOLEAN

    def is_number(self) -> bool:
        return self._type_tag == TypeTag.NUMBER

    def is_nan(self) -> bool:
        return self._type_tag == TypeTag.NAN

    def is_string(self) -> bool:
        return self._type_tag == TypeTag.STRING

    def is_array(self) -> bool:
        return self._type_tag == TypeTag.ARRAY

    def is_object(self) -> bool:
        return self._type_tag == TypeTag.OBJECT

    def is_date(self) -> bool:
        return self._type_tag == TypeTag.DATE

    def is_regexp(self) -> bool:
        return self._type_tag == TypeTag.REGEXP

    def is_map(self) -> bool:
        return self._type_tag == TypeTag.MAP

    def is_set(self) -> bool:
        return self._type_tag == TypeTag.SET

    @staticmethod
    def is_typed_value(obj: Any) -> bool:
        return isinstance(obj, TypedValue)

    # =========================================================================
    # LOCKS
    # =========================================================================

    def _relock(self, transition: LockTransition) -> "TypedValue":
        result = _LOCK_MACHINE.apply(self._lock_flags, transition)
        return TypedValue._create(
            self._display_name,
            self._effective_value,
            self._config,
            flags=result.new_flags,
            track_history=self._track_history,
            history_prefix=self._type_history,
        )

    def lock_string(self) -> "TypedValue":
        """Копия со string_locked: строка больше не реинтерпретируется."""
        return self._relock(LockTransition.LOCK_STRING)

    def lock_bool(self) -> "TypedValue":
        """Копия с bool_locked: арифметика над boolean насыщается в [0, 1]."""
        return self._relock(LockTransition.LOCK_BOOL)

    def lock_type(self) -> "TypedValue":
        """Копия с type_locked: конверсия не выполняется."""
        return self._relock(LockTransition.LOCK_TYPE)

    def unlock(self) -> "TypedValue":
        """Копия без lock-флагов (эффективное значение конвертируется заново)."""
        return self._relock(LockTransition.UNLOCK)

    # =========================================================================
    # ARITHMETIC
    # =========================================================================

    def _arithmetic(self, op: ArithmeticOp, other: Any) -> "TypedValue":
        check_arithmetic_permitted(self._lock_flags, self._type_tag, self._display_name)

        other_value = _unwrap(other)
        name = f"({self._display_name} {op.value} {_name_of(other)})"
        policy = self._config.division_policy

        if is_saturating(self._lock_flags, self._type_tag):
            bit = 1 if self._effective_value else 0
            result = saturate_unit(compute(op, bit, primitives.to_number(other_value), policy))
        else:
            result = compute_values(op, self._effective_value, other_value, policy)

        return TypedValue._create(name, result, self._config)

    def add(self, other: Any) -> "TypedValue":
        return self._arithmetic(ArithmeticOp.ADD, other)

    def subtract(self, other: Any) -> "TypedValue":
        return self._arithmetic(ArithmeticOp.SUBTRACT, other)

    def multiply(self, other: Any) -> "TypedValue":
        return self._arithmetic(ArithmeticOp.MULTIPLY, other)

    def divide(self, other: Any) -> "TypedValue":
        """
        Деление.

        Raises:
            DivisionByZero: делитель 0 при DivisionPolicy.STRICT
        """
        return self._arithmetic(ArithmeticOp.DIVIDE, other)

    def modulus(self, other: Any) -> "TypedValue":
        """Остаток с усечением к нулю (знак делимого)."""
        return self._arithmetic(ArithmeticOp.MODULUS, other)

    def power(self, other: Any) -> "TypedValue":
        return self._arithmetic(ArithmeticOp.POWER, other)

    def _reflected(self, op: ArithmeticOp, other: Any) -> "TypedValue":
        # Литерал слева: guard-ы применяются к обоим операндам
        check_arithmetic_permitted(self._lock_flags, self._type_tag, self._display_name)
        return TypedValue._create(LITERAL_NAME, other, self._config)._arithmetic(op, self)

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply
    __truediv__ = divide
    __mod__ = modulus
    __pow__ = power

    def __radd__(self, other: Any) -> "TypedValue":
        return self._reflected(ArithmeticOp.ADD, other)

    def __rsub__(self, other: Any) -> "TypedValue":
        return self._reflected(ArithmeticOp.SUBTRACT, other)

    def __rmul__(self, other: Any) -> "TypedValue":
        return self._reflected(ArithmeticOp.MULTIPLY, other)

    def __rtruediv__(self, other: Any) -> "TypedValue":
        return self._reflected(ArithmeticOp.DIVIDE, other)

    def __rmod__(self, other: Any) -> "TypedValue":
        return self._reflected(ArithmeticOp.MODULUS, other)

    def __rpow__(self, other: Any) -> "TypedValue":
        return self._reflected(ArithmeticOp.POWER, other)

    # =========================================================================
    # COMPARISONS
    # =========================================================================

    def _compare(self, op: ComparisonOp, other: Any) -> "TypedValue":
        name = f"({self._display_name} {op.value} {_name_of(other)})"
        result = compare(op, self._effective_value, _unwrap(other))
        return TypedValue._create(name, result, self._config)

    def equals(self, other: Any) -> "TypedValue":
        """Нестрогое равенство (==)."""
        return self._compare(ComparisonOp.EQUALS, other)

    def strict_equals(self, other: Any) -> "TypedValue":
        """Строгое равенство (===): тег и значение."""
        return self._compare(ComparisonOp.STRICT_EQUALS, other)

    def greater_than(self, other: Any) -> "TypedValue":
        return self._compare(ComparisonOp.GREATER_THAN, other)

    def less_than(self, other: Any) -> "TypedValue":
        return self._compare(ComparisonOp.LESS_THAN, other)

    def greater_equal(self, other: Any) -> "TypedValue":
        return self._compare(ComparisonOp.GREATER_EQUAL, other)

    def less_equal(self, other: Any) -> "TypedValue":
        return self._compare(ComparisonOp.LESS_EQUAL, other)

    def __bool__(self) -> bool:
        return primitives.is_truthy(self._effective_value)

    # =========================================================================
    # EXPLICIT CONVERSIONS
    # =========================================================================
    # Игнорируют lock-флаги и не запускают реинтерпретацию результата.

    def to_string(self) -> "TypedValue":
        return TypedValue._create_explicit(
            f"str({self._display_name})", primitives.to_string(self._effective_value), self._config
        )

    def to_number(self) -> "TypedValue":
        return TypedValue._create_explicit(
            f"number({self._display_name})", primitives.to_number(self._effective_value), self._config
        )

    def to_boolean(self) -> "TypedValue":
        return TypedValue._create_explicit(
            f"bool({self._display_name})", primitives.is_truthy(self._effective_value), self._config
        )

    def to_integer(self) -> "TypedValue":
        """Целая часть (усечение к нулю); NaN остаётся NaN."""
        return TypedValue._create_explicit(
            f"int({self._display_name})", primitives.to_integer(self._effective_value), self._config
        )

    def to_float(self) -> "TypedValue":
        """Число по префиксу строки (семантика parseFloat)."""
        return TypedValue._create_explicit(
            f"float({self._display_name})", primitives.to_float(self._effective_value), self._config
        )

    def to_json(self) -> "TypedValue":
        """JSON-текст; для несериализуемых значений: строковое представление."""
        text = primitives.to_json_text(self._effective_value)
        if text is None:
            logger.debug(f"Value of '{self._display_name}' is not JSON serializable, using string form")
            text = primitives.to_string(self._effective_value)
        return TypedValue._create_explicit(f"json({self._display_name})", text, self._config)

    # =========================================================================
    # CONTAINERS
    # =========================================================================

    def get(self, key: Any) -> "TypedValue":
        """
        Элемент массива или поле объекта.

        Отсутствующий ключ даёт значение UNDEFINED.

        Raises:
            TypeMismatch: если значение не array/object
            InvalidArgument: если ключ неприменим к значению
        """
        if self._type_tag == TypeTag.ARRAY:
            item = UNDEFINED
            if isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(self._effective_value):
                item = self._effective_value[key]
        elif self._type_tag == TypeTag.OBJECT and isinstance(self._effective_value, dict):
            if not isinstance(key, Hashable):
                raise InvalidArgument(f"Object key must be hashable, got {type(key).__name__}")
            item = self._effective_value.get(key, UNDEFINED)
        elif self._type_tag == TypeTag.OBJECT:
            item = getattr(self._effective_value, _attribute_name(key), UNDEFINED)
        else:
            raise TypeMismatch("get", self._type_tag.value, "array or object")

        return TypedValue._create(f"{self._display_name}.{key}", item, self._config)

    def set(self, key: Any, value: Any) -> "TypedValue":
        """
        Запись элемента массива или поля объекта (in place).

        Для массива key: целый индекс 0..len; индекс len добавляет элемент.

        Returns:
            self

        Raises:
            TypeMismatch: если значение не array/object
            InvalidArgument: если индекс или атрибут некорректен
        """
        item = _unwrap(value)

        if self._type_tag == TypeTag.ARRAY:
            items = self._mutable_array("set")
            if not isinstance(key, int) or isinstance(key, bool):
                raise InvalidArgument(f"Array index must be an integer, got {type(key).__name__}")
            if key < 0 or key > len(items):
                raise InvalidArgument(f"Array index {key} out of range for length {len(items)}")
            if key == len(items):
                items.append(item)
            else:
                items[key] = item
            return self

        if self._type_tag == TypeTag.OBJECT and isinstance(self._effective_value, dict):
            if not isinstance(key, Hashable):
                raise InvalidArgument(f"Object key must be hashable, got {type(key).__name__}")
            self._effective_value[key] = item
            return self

        if self._type_tag == TypeTag.OBJECT:
            name = _attribute_name(key)
            try:
                setattr(self._effective_value, name, item)
            except (AttributeError, TypeError) as e:
                raise InvalidArgument(
                    f"Cannot set attribute '{name}' on {type(self._effective_value).__name__}: {e}"
                ) from e
            return self

        raise TypeMismatch("set", self._type_tag.value, "array or object")

    def push(self, *items: Any) -> "TypedValue":
        """
        Добавление элементов в конец массива (in place).

        Returns:
            self

        Raises:
            TypeMismatch: если значение не list
        """
        if self._type_tag != TypeTag.ARRAY:
            raise TypeMismatch("push", self._type_tag.value, "array")
        self._mutable_array("push").extend(_unwrap(item) for item in items)
        return self

    def _mutable_array(self, operation: str) -> list:
        if not isinstance(self._effective_value, list):
            raise TypeMismatch(operation, f"{self._type_tag.value} (tuple)", "mutable array")
        return self._effective_value

    # =========================================================================
    # MISC
    # =========================================================================

    def char_shift(self, offset: int) -> "TypedValue":
        """
        Сдвиг каждого code point строки на offset (по модулю диапазона Unicode).

        Raises:
            TypeMismatch: если значение не string
            OperationNotPermitted: если значение string-locked
        """
        if self._type_tag != TypeTag.STRING:
            raise TypeMismatch("char_shift", self._type_tag.value, "string")
        check_arithmetic_permitted(
            self._lock_flags, self._type_tag, self._display_name, operation="char_shift"
        )
        if not isinstance(offset, int) or isinstance(offset, bool):
            raise InvalidArgument(f"Offset must be an integer, got {type(offset).__name__}")

        shifted = "".join(chr((ord(ch) + offset) % _CODE_POINTS) for ch in self._effective_value)
        return TypedValue._create(
            f"char_shift({self._display_name}, {offset})", shifted, self._config
        )

    def pipe(self, fn: Callable[[Any], Any]) -> "TypedValue":
        """
        Применение функции к эффективному значению.

        Raises:
            InvalidArgument: если fn не callable
        """
        if not callable(fn):
            raise InvalidArgument("pipe() requires a callable")
        result = _unwrap(fn(self._effective_value))
        return TypedValue._create(f"pipe({self._display_name})", result, self._config)

    def clone(self) -> "TypedValue":
        """Независимая копия (контейнеры копируются глубоко)."""
        instance = TypedValue.__new__(TypedValue)
        instance.__dict__.update(self.__dict__)
        if self._type_tag in (TypeTag.ARRAY, TypeTag.OBJECT):
            effective = copy.deepcopy(self._effective_value)
            if self._raw_value is self._effective_value:
                instance._raw_value = effective
            instance._effective_value = effective
        return instance

    def profile(self) -> TypeProfile:
        """Детальный профиль эффективного значения."""
        return profile(self._effective_value)

    def debug(self) -> TypedValueSnapshot:
        """Диагностический снапшот состояния."""
        return TypedValueSnapshot(
            name=self._display_name,
            raw=self._raw_value,
            effective=self._effective_value,
            tag=self._type_tag,
            history=self._type_history,
            lock_flags=self._lock_flags,
            is_locked=self.is_locked,
        )

    inspect = debug

    def __repr__(self) -> str:
        return (
            f"TypedValue(name={self._display_name!r}, value={self._effective_value!r}, "
            f"type={self._type_tag.value})"
        )

    def __str__(self) -> str:
        return primitives.to_string(self._effective_value)


def create_batch(
    values: Iterable[Any],
    prefix: str = "item",
    *,
    config: Union[FlexConfig, Mapping[str, Any], None] = None,
    cache: Optional[Any] = None,
) -> Tuple[TypedValue, ...]:
    """Обёртка последовательности значений с именами prefix_0, prefix_1, ..."""
    return tuple(
        TypedValue(f"{prefix}_{index}", value, config=config, cache=cache)
        for index, value in enumerate(values)
    )


def merge(*values: Any) -> TypedValue:
    """
    Массив эффективных значений, имя merge(a,b,...).

    Config берётся у первого TypedValue среди аргументов.
    """
    config = next((v.config for v in values if isinstance(v, TypedValue)), FlexConfig())
    name = f"merge({','.join(_name_of(v) for v in values)})"
    return TypedValue._create(name, [_unwrap(v) for v in values], config)
