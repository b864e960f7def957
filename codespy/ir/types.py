"""IR type objects; instances are interned by a Context and compared by identity."""

from __future__ import annotations

import enum
from collections.abc import Iterable


class TypeKind(enum.Enum):
    """The broad category a type belongs to."""

    ANY = enum.auto()
    ARRAY = enum.auto()
    DOUBLE = enum.auto()
    FLOAT = enum.auto()
    FUNCTION = enum.auto()
    INTEGER = enum.auto()
    LABEL = enum.auto()
    REFERENCE = enum.auto()
    VOID = enum.auto()


class Type:
    """A type with no further parameters (any, void, float, double, label)."""

    def __init__(self, kind: TypeKind) -> None:
        self.kind = kind

    def __repr__(self) -> str:
        return f"Type({self.kind.name})"


class IntType(Type):
    """An integer type of a fixed bit width."""

    def __init__(self, bit_width: int) -> None:
        if not 0 < bit_width < (1 << 16):
            raise ValueError(f"invalid integer bit width {bit_width}")
        super().__init__(TypeKind.INTEGER)
        self.bit_width = bit_width

    def __repr__(self) -> str:
        return f"IntType({self.bit_width})"


class ArrayType(Type):
    """An array of some element type."""

    def __init__(self, element_type: Type) -> None:
        super().__init__(TypeKind.ARRAY)
        self.element_type = element_type

    def __repr__(self) -> str:
        return f"ArrayType({self.element_type!r})"


class ReferenceType(Type):
    """A reference to an instance of a named class."""

    def __init__(self, class_name: str) -> None:
        super().__init__(TypeKind.REFERENCE)
        self.class_name = class_name

    def __repr__(self) -> str:
        return f"ReferenceType({self.class_name!r})"


class FunctionType(Type):
    """A function signature: a return type and parameter types."""

    def __init__(self, return_type: Type, parameter_types: Iterable[Type]) -> None:
        super().__init__(TypeKind.FUNCTION)
        self.return_type = return_type
        self.parameter_types = tuple(parameter_types)

    def __repr__(self) -> str:
        return f"FunctionType({self.return_type!r}, {self.parameter_types!r})"