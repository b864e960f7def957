"""Java classes and fields as seen by the IR."""

from __future__ import annotations

from typing import Any

from codespy.ir.function import Function
from codespy.ir.types import FunctionType, Type
from codespy.ir.values import Value, ValueKind


class JavaField(Value):
    """A static or instance field of a class."""

    def __init__(self, parent: JavaClass, name: str, type: Type, is_instance: bool) -> None:
        super().__init__(ValueKind.JAVA_FIELD, type)
        self.parent = parent
        self.name = name
        self.is_instance = is_instance


class JavaClass:
    """A class holding the fields and methods referenced or defined in it."""

    def __init__(self, context: Any, name: str) -> None:
        self.context = context
        self.name = name
        self._fields: list[JavaField] = []
        self._methods: list[Function] = []

    @property
    def fields(self) -> list[JavaField]:
        return list(self._fields)

    @property
    def methods(self) -> list[Function]:
        return list(self._methods)

    def ensure_field(self, name: str, type: Type, is_instance: bool) -> JavaField:
        """Return the matching field, creating it if there is none."""
        for field in self._fields:
            if field.type is type and field.is_instance == is_instance and field.name == name:
                return field
        field = JavaField(self, name, type, is_instance)
        self._fields.append(field)
        return field

    def ensure_method(self, name: str, type: FunctionType) -> Function:
        """Return the matching method, creating it if there is none."""
        for method in self._methods:
            if method.function_type() is type and method.name == name:
                return method
        method = Function(self.context, name, type)
        method.set_name_prefix(self.name)
        self._methods.append(method)
        return method