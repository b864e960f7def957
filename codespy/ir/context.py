"""Owner of interned types and constants."""

from __future__ import annotations

import struct
from collections.abc import Iterable

from codespy.ir.types import ArrayType, FunctionType, IntType, ReferenceType, Type, TypeKind
from codespy.ir.values import (
    ConstantDouble,
    ConstantFloat,
    ConstantInt,
    ConstantNull,
    ConstantString,
    PoisonValue,
)


def _to_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


class Context:
    """Interns types and constants so that equal ones are the same object."""

    def __init__(self) -> None:
        self.any_type = Type(TypeKind.ANY)
        self.double_type = Type(TypeKind.DOUBLE)
        self.float_type = Type(TypeKind.FLOAT)
        self.label_type = Type(TypeKind.LABEL)
        self.void_type = Type(TypeKind.VOID)
        self._array_types: dict[Type, ArrayType] = {}
        self._function_types: dict[tuple[Type, tuple[Type, ...]], FunctionType] = {}
        self._int_types: dict[int, IntType] = {}
        self._reference_types: dict[str, ReferenceType] = {}
        self._double_constants: dict[float, ConstantDouble] = {}
        self._float_constants: dict[float, ConstantFloat] = {}
        self._int_constants: dict[tuple[int, int], ConstantInt] = {}
        self._string_constants: dict[str, ConstantString] = {}
        self._poison_values: dict[Type, PoisonValue] = {}
        self.constant_null = ConstantNull(self.reference_type("java/lang/Object"))

    def array_type(self, element_type: Type) -> ArrayType:
        if element_type not in self._array_types:
            self._array_types[element_type] = ArrayType(element_type)
        return self._array_types[element_type]

    def function_type(self, return_type: Type, parameter_types: Iterable[Type]) -> FunctionType:
        parameters = tuple(parameter_types)
        key = (return_type, parameters)
        if key not in self._function_types:
            self._function_types[key] = FunctionType(return_type, parameters)
        return self._function_types[key]

    def int_type(self, bit_width: int) -> IntType:
        if bit_width not in self._int_types:
            self._int_types[bit_width] = IntType(bit_width)
        return self._int_types[bit_width]

    def reference_type(self, class_name: str) -> ReferenceType:
        if class_name not in self._reference_types:
            self._reference_types[class_name] = ReferenceType(class_name)
        return self._reference_types[class_name]

    def constant_double(self, value: float) -> ConstantDouble:
        value = float(value)
        if value not in self._double_constants:
            self._double_constants[value] = ConstantDouble(self.double_type, value)
        return self._double_constants[value]

    def constant_float(self, value: float) -> ConstantFloat:
        """Return the float constant; *value* is rounded to single precision."""
        value = _to_float32(value)
        if value not in self._float_constants:
            self._float_constants[value] = ConstantFloat(self.float_type, value)
        return self._float_constants[value]

    def constant_int(self, type: IntType, value: int) -> ConstantInt:
        key = (value, type.bit_width)
        if key not in self._int_constants:
            self._int_constants[key] = ConstantInt(type, value)
        return self._int_constants[key]

    def constant_string(self, value: str) -> ConstantString:
        if value not in self._string_constants:
            string_type = self.reference_type("java/lang/String")
            self._string_constants[value] = ConstantString(string_type, value)
        return self._string_constants[value]

    def poison_value(self, type: Type) -> PoisonValue:
        if type not in self._poison_values:
            self._poison_values[type] = PoisonValue(type)
        return self._poison_values[type]