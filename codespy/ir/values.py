"""IR values and the use lists that link them to the instructions using them."""

from __future__ import annotations

import enum
from typing import Any

from codespy.ir.types import Type


class ValueKind(enum.Enum):
    """What sort of value an object is."""

    ARGUMENT = enum.auto()
    BASIC_BLOCK = enum.auto()
    CONSTANT_DOUBLE = enum.auto()
    CONSTANT_FLOAT = enum.auto()
    CONSTANT_INT = enum.auto()
    CONSTANT_NULL = enum.auto()
    CONSTANT_STRING = enum.auto()
    FUNCTION = enum.auto()
    INSTRUCTION = enum.auto()
    JAVA_FIELD = enum.auto()
    LOCAL = enum.auto()
    POISON = enum.auto()


class Use:
    """One operand slot of a user, registered in the use list of its value."""

    __slots__ = ("user", "_value")

    def __init__(self, user: Any = None, value: Value | None = None) -> None:
        self.user = user
        self._value: Value | None = None
        if value is not None:
            self.set(value)

    @property
    def value(self) -> Value | None:
        return self._value

    def set(self, value: Value | None) -> None:
        """Point this use at *value*, moving it between use lists."""
        old = self._value
        self._value = value
        if old is not None:
            old._remove_use(self)
        if value is not None:
            value.add_use(self)


class Value:
    """Anything that can be an operand; tracks the uses that refer to it."""

    def __init__(self, kind: ValueKind, type: Type | None) -> None:
        self.kind = kind
        self.type = type
        self._uses: dict[Use, None] = {}

    def add_use(self, use: Use) -> None:
        self._uses[use] = None

    def _remove_use(self, use: Use) -> None:
        self._uses.pop(use, None)

    @property
    def uses(self) -> list[Use]:
        """Uses of this value, most recently added first."""
        return list(reversed(self._uses))

    def has_uses(self) -> bool:
        return bool(self._uses)

    def users(self) -> list[Any]:
        """The users of this value, most recently added first."""
        return [use.user for use in reversed(self._uses)]

    def replace_all_uses_with(self, value: Value | None) -> None:
        if value is self:
            return
        while self._uses:
            next(reversed(self._uses)).set(value)


class Argument(Value):
    """A function parameter."""

    def __init__(self, type: Type, index: int) -> None:
        super().__init__(ValueKind.ARGUMENT, type)
        self.index = index


class Local(Value):
    """A function-local variable slot accessed with loads and stores."""

    def __init__(self, type: Type, index: int) -> None:
        super().__init__(ValueKind.LOCAL, type)
        self.index = index


class ConstantInt(Value):
    def __init__(self, type: Type, value: int) -> None:
        super().__init__(ValueKind.CONSTANT_INT, type)
        self.value = value


class ConstantFloat(Value):
    def __init__(self, type: Type, value: float) -> None:
        super().__init__(ValueKind.CONSTANT_FLOAT, type)
        self.value = value


class ConstantDouble(Value):
    def __init__(self, type: Type, value: float) -> None:
        super().__init__(ValueKind.CONSTANT_DOUBLE, type)
        self.value = value


class ConstantString(Value):
    def __init__(self, type: Type, value: str) -> None:
        super().__init__(ValueKind.CONSTANT_STRING, type)
        self.value = value


class ConstantNull(Value):
    def __init__(self, type: Type) -> None:
        super().__init__(ValueKind.CONSTANT_NULL, type)


class PoisonValue(Value):
    """An undefined value of some type."""

    def __init__(self, type: Type) -> None:
        super().__init__(ValueKind.POISON, type)