"""Textual listing of a function's IR."""

from __future__ import annotations

from typing import Any

from codespy.ir.block import BasicBlock
from codespy.ir.function import Function
from codespy.ir.instructions import BinaryOp, CompareOp, MonitorOp
from codespy.ir.java import JavaField
from codespy.ir.types import ArrayType, IntType, ReferenceType, Type, TypeKind
from codespy.ir.values import (
    Argument,
    ConstantDouble,
    ConstantFloat,
    ConstantInt,
    ConstantString,
    Local,
    Value,
    ValueKind,
)
from codespy.support.formatting import format_string

_BINARY_NAMES = {
    BinaryOp.ADD: "add",
    BinaryOp.SUB: "sub",
    BinaryOp.MUL: "mul",
    BinaryOp.DIV: "div",
    BinaryOp.REM: "rem",
    BinaryOp.SHL: "shl",
    BinaryOp.SHR: "shr",
    BinaryOp.USHR: "ushr",
    BinaryOp.AND: "and",
    BinaryOp.OR: "or",
    BinaryOp.XOR: "xor",
}

_COMPARE_NAMES = {
    CompareOp.EQUAL: "cmp_eq",
    CompareOp.NOT_EQUAL: "cmp_ne",
    CompareOp.LESS_THAN: "cmp_lt",
    CompareOp.GREATER_THAN: "cmp_gt",
    CompareOp.LESS_EQUAL: "cmp_le",
    CompareOp.GREATER_EQUAL: "cmp_ge",
}


def type_string(type: Type) -> str:
    """The textual name of a type, e.g. 'i32', 'f64', '#java/lang/Object[]'."""
    kind = type.kind
    if kind is TypeKind.ANY:
        return "any"
    if kind is TypeKind.FLOAT:
        return "f32"
    if kind is TypeKind.DOUBLE:
        return "f64"
    if kind is TypeKind.VOID:
        return "void"
    if isinstance(type, ArrayType):
        return f"{type_string(type.element_type)}[]"
    if isinstance(type, IntType):
        return f"i{type.bit_width}"
    if isinstance(type, ReferenceType):
        return f"#{type.class_name}"
    raise ValueError(f"type of kind {kind.name} has no textual form")


def _reverse_post_order(entry: BasicBlock) -> list[BasicBlock]:
    order: list[BasicBlock] = []
    visited = {entry}
    stack = [(entry, iter(entry.successors()))]
    while stack:
        block, successors = stack[-1]
        for succ in successors:
            if succ not in visited:
                visited.add(succ)
                stack.append((succ, iter(succ.successors())))
                break
        else:
            stack.pop()
            order.append(block)
    order.reverse()
    return order


class _Dumper:
    def __init__(self) -> None:
        self._block_map: dict[BasicBlock, int] = {}
        self._value_map: dict[Value, int] = {}

    def value_string(self, value: Value) -> str:
        if isinstance(value, Argument):
            return f"{type_string(value.type)} %a{value.index}"
        if isinstance(value, BasicBlock):
            return f"L{self._block_map[value]}"
        if value.kind is ValueKind.CONSTANT_NULL:
            return f"{type_string(value.type)} null"
        if value.kind is ValueKind.POISON:
            return f"{type_string(value.type)} poison"
        if isinstance(value, (ConstantDouble, ConstantFloat, ConstantInt)):
            return format_string("{} ${}", type_string(value.type), value.value)
        if isinstance(value, ConstantString):
            return f'{type_string(value.type)} "{value.value}"'
        if isinstance(value, Function):
            return f"{type_string(value.function_type().return_type)} @{value.display_name}"
        if isinstance(value, JavaField):
            return f"{type_string(value.type)} {value.parent.name}.{value.name}"
        if isinstance(value, Local):
            return f"{type_string(value.type)} %l{value.index}"
        return f"{type_string(value.type)} %v{self._value_map[value]}"

    def run_on(self, function: Function) -> str:
        return_type = type_string(function.function_type().return_type)
        parameters = ", ".join(
            f"%a{argument.index}: {type_string(argument.type)}" for argument in function.arguments
        )
        lines = [f"{return_type} @{function.display_name}({parameters}"]
        if not function.blocks:
            return lines[0] + ");\n"

        void_type = function.context.void_type
        block_order = _reverse_post_order(function.entry_block())
        for block in block_order:
            self._block_map[block] = len(self._block_map)
            for inst in block:
                if inst.type is not void_type:
                    self._value_map[inst] = len(self._value_map)

        lines[0] += ") {"
        lines.extend(f"  %l{local.index}: {type_string(local.type)}" for local in function.locals)
        for block in block_order:
            lines.append(f"  {self.value_string(block)} {{")
            for handler in block.handlers:
                lines.append(f"    {self.visit_exception_handler(handler)}")
            for inst in block:
                prefix = "" if inst.type is void_type else f"%v{self._value_map[inst]} = "
                lines.append(f"    {prefix}{inst.accept(self)}")
            lines.append("  }")
        lines.append("}")
        return "\n".join(lines) + "\n"

    def visit_array_length(self, inst: Any) -> str:
        return f"array_length {self.value_string(inst.array_ref)}"

    def visit_binary(self, inst: Any) -> str:
        return f"{_BINARY_NAMES[inst.op]} {self.value_string(inst.lhs)}, {self.value_string(inst.rhs)}"

    def visit_branch(self, inst: Any) -> str:
        if inst.is_conditional:
            return (f"br {self.value_string(inst.condition)}, {self.value_string(inst.true_target)}, "
                    f"{self.value_string(inst.false_target)}")
        return f"br {self.value_string(inst.target)}"

    def visit_call(self, inst: Any) -> str:
        special = "special " if inst.is_invoke_special else ""
        arguments = ", ".join(self.value_string(argument) for argument in inst.arguments())
        return f"call {special}{self.value_string(inst.callee)}({arguments})"

    def visit_cast(self, inst: Any) -> str:
        return f"cast {self.value_string(inst.value)} to {type_string(inst.type)}"

    def visit_catch(self, inst: Any) -> str:
        return f"catch {type_string(inst.type)}"

    def visit_compare(self, inst: Any) -> str:
        return f"{_COMPARE_NAMES[inst.op]} {self.value_string(inst.lhs)}, {self.value_string(inst.rhs)}"

    def visit_exception_handler(self, inst: Any) -> str:
        return f"@handler {type_string(inst.type)} -> {self.value_string(inst.target)}"

    def visit_instance_of(self, inst: Any) -> str:
        return f"instance_of {self.value_string(inst.value)}, {type_string(inst.check_type)}"

    def visit_java_compare(self, inst: Any) -> str:
        operand_type = inst.operand_type
        kind = operand_type.kind
        if kind is TypeKind.INTEGER:
            if operand_type.bit_width != 64:
                raise ValueError("integer three-way comparison requires 64-bit operands")
            name = "lcmp"
        elif kind in (TypeKind.FLOAT, TypeKind.DOUBLE):
            prefix = "f" if kind is TypeKind.FLOAT else "d"
            name = f"{prefix}cmp{'g' if inst.greater_on_nan else 'l'}"
        else:
            raise ValueError(f"cannot compare operands of kind {kind.name}")
        return f"{name} {self.value_string(inst.lhs)}, {self.value_string(inst.rhs)}"

    def visit_load(self, inst: Any) -> str:
        return f"load {self.value_string(inst.pointer)}"

    def visit_load_array(self, inst: Any) -> str:
        return f"load_array {self.value_string(inst.array_ref)}[{self.value_string(inst.index)}]"

    def visit_load_field(self, inst: Any) -> str:
        return f"load_field {self.value_string(inst.object_ref)}, {self.value_string(inst.field)}"

    def visit_monitor(self, inst: Any) -> str:
        name = "monitor_enter" if inst.op is MonitorOp.ENTER else "monitor_exit"
        return f"{name} {self.value_string(inst.object_ref)}"

    def visit_negate(self, inst: Any) -> str:
        return f"neg {self.value_string(inst.value)}"

    def visit_new(self, inst: Any) -> str:
        return f"new {type_string(inst.type)}"

    def visit_new_array(self, inst: Any) -> str:
        counts = ", ".join(self.value_string(inst.count(i)) for i in range(inst.dimensions))
        return f"new_array {type_string(inst.type)} [{counts}]"

    def visit_phi(self, inst: Any) -> str:
        incoming = ", ".join(
            f"{self.value_string(inst.incoming_block(i))}: {self.value_string(inst.incoming_value(i))}"
            for i in range(inst.incoming_count)
        )
        return f"phi ({incoming})"

    def visit_return(self, inst: Any) -> str:
        if inst.is_void:
            return "ret void"
        return f"ret {self.value_string(inst.value)}"

    def visit_store(self, inst: Any) -> str:
        return f"store {self.value_string(inst.pointer)}, {self.value_string(inst.value)}"

    def visit_store_array(self, inst: Any) -> str:
        return (f"store_array {self.value_string(inst.array_ref)}[{self.value_string(inst.index)}], "
                f"{self.value_string(inst.value)}")

    def visit_store_field(self, inst: Any) -> str:
        return (f"store_field {self.value_string(inst.object_ref)}, {self.value_string(inst.field)}, "
                f"{self.value_string(inst.value)}")

    def visit_switch(self, inst: Any) -> str:
        lines = [f"switch {self.value_string(inst.value)}, {self.value_string(inst.default_target)}, ["]
        lines.extend(
            f"      {self.value_string(inst.case_value(i))}, {self.value_string(inst.case_target(i))}"
            for i in range(inst.case_count)
        )
        lines.append("    ]")
        return "\n".join(lines)

    def visit_throw(self, inst: Any) -> str:
        return f"throw {self.value_string(inst.exception_ref)}"


def dump_code(function: Function) -> str:
    """Render *function* as text, blocks in reverse post order from the entry."""
    return _Dumper().run_on(function)