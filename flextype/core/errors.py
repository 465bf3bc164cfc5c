"""
Errors — Таксономия ошибок FlexType

Все ошибки наследуются от FlexTypeError. Классификация и
реинтерпретация строк никогда не бросают исключений (деградация
к исходному значению); ошибки сигнализируют только явные операции.

Категории:
- InvalidArgument: некорректный ввод на стороне вызова (fatal для вызова)
- OperationNotPermitted: lock-guard отклонил операцию (recoverable: unlock + retry)
- TypeMismatch: контейнерный оператор на неконтейнерном значении
- DivisionByZero: только при DivisionPolicy.STRICT
"""

from typing import Optional


class FlexTypeError(Exception):
    """Базовый класс всех ошибок FlexType."""
    pass


class InvalidArgument(FlexTypeError, ValueError):
    """
    Некорректный аргумент на стороне вызова.

    Примеры: имя переменной не строка, невалидные options/config,
    pipe() с не-callable аргументом.
    """
    pass


class OperationNotPermitted(FlexTypeError):
    """
    Lock-guard отклонил операцию.

    Возникает при арифметике над string-locked значением, которое всё ещё
    имеет тег string. Вызывающий может снять lock (unlock) и повторить.
    """

    def __init__(self, variable_name: str, operation: str, message: Optional[str] = None):
        self.variable_name = variable_name
        self.operation = operation
        super().__init__(
            message
            or f"String locked variable '{variable_name}' cannot be used in {operation}"
        )


class TypeMismatch(FlexTypeError, TypeError):
    """
    Оператор вызван на значении с неподходящим тегом.

    Например: get/set на number, push на object, char_shift на array.
    """

    def __init__(self, operation: str, actual_tag: str, expected: str):
        self.operation = operation
        self.actual_tag = actual_tag
        self.expected = expected
        super().__init__(
            f"{operation}() can only be used on {expected} types. "
            f"Current type: {actual_tag}"
        )


class DivisionByZero(FlexTypeError, ZeroDivisionError):
    """
    Деление (или остаток) на ноль при строгой политике.

    При DivisionPolicy.IEEE это условие не возникает:
    пропагируются inf/NaN.
    """
    pass
