"""IR instructions."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import Any, ClassVar

from codespy.ir.types import Type
from codespy.ir.values import Use, Value, ValueKind


class Opcode(enum.Enum):
    """Instruction opcodes; the value names the visitor method, prefixed with 'visit_'."""

    ARRAY_LENGTH = "array_length"
    BINARY = "binary"
    BRANCH = "branch"
    CALL = "call"
    CAST = "cast"
    CATCH = "catch"
    COMPARE = "compare"
    EXCEPTION_HANDLER = "exception_handler"
    INSTANCE_OF = "instance_of"
    JAVA_COMPARE = "java_compare"
    LOAD = "load"
    LOAD_ARRAY = "load_array"
    LOAD_FIELD = "load_field"
    MONITOR = "monitor"
    NEGATE = "negate"
    NEW = "new"
    NEW_ARRAY = "new_array"
    PHI = "phi"
    RETURN = "return"
    STORE = "store"
    STORE_ARRAY = "store_array"
    STORE_FIELD = "store_field"
    SWITCH = "switch"
    THROW = "throw"


_TERMINATORS = frozenset({Opcode.BRANCH, Opcode.RETURN, Opcode.SWITCH, Opcode.THROW})


class BinaryOp(enum.Enum):
    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    REM = enum.auto()
    SHL = enum.auto()
    SHR = enum.auto()
    USHR = enum.auto()
    AND = enum.auto()
    OR = enum.auto()
    XOR = enum.auto()


class CompareOp(enum.Enum):
    EQUAL = enum.auto()
    NOT_EQUAL = enum.auto()
    LESS_THAN = enum.auto()
    GREATER_THAN = enum.auto()
    LESS_EQUAL = enum.auto()
    GREATER_EQUAL = enum.auto()


class MonitorOp(enum.Enum):
    ENTER = enum.auto()
    EXIT = enum.auto()


class Instruction(Value):
    """An instruction inside a basic block, with a fixed number of operands."""

    opcode: ClassVar[Opcode]

    def __init__(self, parent: Any, type: Type | None, operand_count: int) -> None:
        super().__init__(ValueKind.INSTRUCTION, type)
        self.parent = parent
        self._operands = [Use(self) for _ in range(operand_count)]

    @property
    def operands(self) -> list[Value | None]:
        return [use.value for use in self._operands]

    def operand(self, index: int) -> Value | None:
        return self._operands[index].value

    def set_operand(self, index: int, value: Value | None) -> None:
        self._operands[index].set(value)

    def accept(self, visitor: Any) -> Any:
        """Call the visitor's visit_<opcode> method with this instruction."""
        return getattr(visitor, "visit_" + self.opcode.value)(self)

    def remove_from_parent(self) -> None:
        self.parent.remove(self)

    def successor(self, index: int) -> Any:
        raise ValueError(f"{type(self).__name__} has no successors")

    def successor_count(self) -> int:
        return 0

    def is_terminator(self) -> bool:
        return self.opcode in _TERMINATORS

    def _destroy(self) -> None:
        self.replace_all_uses_with(None)
        for use in self._operands:
            use.set(None)
        self.parent = None


def _check_index(index: int, count: int, what: str) -> None:
    if not 0 <= index < count:
        raise IndexError(f"{what} index {index} out of range for {count}")


class ArrayLengthInst(Instruction):
    opcode = Opcode.ARRAY_LENGTH

    def __init__(self, parent: Any, array_ref: Value) -> None:
        super().__init__(parent, parent.context.int_type(32), 1)
        self.set_operand(0, array_ref)

    @property
    def array_ref(self) -> Value:
        return self.operand(0)


class BinaryInst(Instruction):
    opcode = Opcode.BINARY

    def __init__(self, parent: Any, type: Type, op: BinaryOp, lhs: Value, rhs: Value) -> None:
        super().__init__(parent, type, 2)
        self.op = op
        self.set_operand(0, lhs)
        self.set_operand(1, rhs)

    @property
    def lhs(self) -> Value:
        return self.operand(0)

    @property
    def rhs(self) -> Value:
        return self.operand(1)


class BranchInst(Instruction):
    """An unconditional branch, or a conditional one when a false target is given."""

    opcode = Opcode.BRANCH

    def __init__(self, parent: Any, true_target: Value, false_target: Value | None = None,
                 condition: Value | None = None) -> None:
        self.is_conditional = false_target is not None
        super().__init__(parent, parent.context.void_type, 3 if self.is_conditional else 1)
        self.set_operand(0, true_target)
        if self.is_conditional:
            self.set_operand(1, false_target)
            self.set_operand(2, condition)

    @property
    def target(self) -> Any:
        return self.operand(0)

    @property
    def true_target(self) -> Any:
        return self.operand(0)

    @property
    def false_target(self) -> Any:
        return self.operand(1)

    @property
    def condition(self) -> Value:
        return self.operand(2)

    def successor(self, index: int) -> Any:
        return self.true_target if index == 0 else self.false_target

    def successor_count(self) -> int:
        return 2 if self.is_conditional else 1


class CallInst(Instruction):
    opcode = Opcode.CALL

    def __init__(self, parent: Any, callee: Any, arguments: Iterable[Value] = (),
                 invoke_special: bool = False) -> None:
        arguments = list(arguments)
        super().__init__(parent, callee.function_type().return_type, len(arguments) + 1)
        self.is_invoke_special = invoke_special
        self.set_operand(0, callee)
        for index, argument in enumerate(arguments, start=1):
            self.set_operand(index, argument)

    @property
    def callee(self) -> Any:
        return self.operand(0)

    def arguments(self) -> list[Value]:
        count = len(self.callee.function_type().parameter_types)
        return self.operands[1:count + 1]


class CastInst(Instruction):
    opcode = Opcode.CAST

    def __init__(self, parent: Any, type: Type, value: Value) -> None:
        super().__init__(parent, type, 1)
        self.set_operand(0, value)

    @property
    def value(self) -> Value:
        return self.operand(0)


class CatchInst(Instruction):
    """Produces the caught exception at the start of a handler block."""

    opcode = Opcode.CATCH

    def __init__(self, parent: Any, type: Type) -> None:
        super().__init__(parent, type, 0)


class CompareInst(Instruction):
    opcode = Opcode.COMPARE

    def __init__(self, parent: Any, op: CompareOp, lhs: Value, rhs: Value) -> None:
        super().__init__(parent, parent.context.int_type(1), 2)
        self.op = op
        self.set_operand(0, lhs)
        self.set_operand(1, rhs)

    @property
    def lhs(self) -> Value:
        return self.operand(0)

    @property
    def rhs(self) -> Value:
        return self.operand(1)


class ExceptionHandler(Instruction):
    """An exception edge from a block to a handler block; its type is the caught type."""

    opcode = Opcode.EXCEPTION_HANDLER

    def __init__(self, parent: Any, exception_type: Type, target: Value) -> None:
        super().__init__(parent, exception_type, 1)
        self.set_operand(0, target)

    @property
    def target(self) -> Any:
        return self.operand(0)


class InstanceOfInst(Instruction):
    opcode = Opcode.INSTANCE_OF

    def __init__(self, parent: Any, check_type: Type, value: Value) -> None:
        super().__init__(parent, parent.context.int_type(1), 1)
        self.check_type = check_type
        self.set_operand(0, value)

    @property
    def value(self) -> Value:
        return self.operand(0)


class JavaCompareInst(Instruction):
    """A three-way comparison yielding -1, 0 or 1."""

    opcode = Opcode.JAVA_COMPARE

    def __init__(self, parent: Any, operand_type: Type, lhs: Value, rhs: Value,
                 greater_on_nan: bool = False) -> None:
        super().__init__(parent, parent.context.int_type(32), 2)
        self.operand_type = operand_type
        self.greater_on_nan = greater_on_nan
        self.set_operand(0, lhs)
        self.set_operand(1, rhs)

    @property
    def lhs(self) -> Value:
        return self.operand(0)

    @property
    def rhs(self) -> Value:
        return self.operand(1)


class LoadInst(Instruction):
    opcode = Opcode.LOAD

    def __init__(self, parent: Any, type: Type, pointer: Value) -> None:
        super().__init__(parent, type, 1)
        self.set_operand(0, pointer)

    @property
    def pointer(self) -> Value:
        return self.operand(0)


class LoadArrayInst(Instruction):
    opcode = Opcode.LOAD_ARRAY

    def __init__(self, parent: Any, type: Type, array_ref: Value, index: Value) -> None:
        super().__init__(parent, type, 2)
        self.set_operand(0, array_ref)
        self.set_operand(1, index)

    @property
    def array_ref(self) -> Value:
        return self.operand(0)

    @property
    def index(self) -> Value:
        return self.operand(1)


class LoadFieldInst(Instruction):
    opcode = Opcode.LOAD_FIELD

    def __init__(self, parent: Any, type: Type, field: Value, object_ref: Value | None) -> None:
        super().__init__(parent, type, 2)
        self.set_operand(0, field)
        self.set_operand(1, object_ref)

    @property
    def field(self) -> Any:
        return self.operand(0)

    @property
    def object_ref(self) -> Value | None:
        return self.operand(1)


class MonitorInst(Instruction):
    opcode = Opcode.MONITOR

    def __init__(self, parent: Any, op: MonitorOp, object_ref: Value) -> None:
        super().__init__(parent, parent.context.void_type, 1)
        self.op = op
        self.set_operand(0, object_ref)

    @property
    def object_ref(self) -> Value:
        return self.operand(0)


class NegateInst(Instruction):
    opcode = Opcode.NEGATE

    def __init__(self, parent: Any, type: Type, value: Value) -> None:
        super().__init__(parent, type, 1)
        self.set_operand(0, value)

    @property
    def value(self) -> Value:
        return self.operand(0)


class NewInst(Instruction):
    opcode = Opcode.NEW

    def __init__(self, parent: Any, type: Type) -> None:
        super().__init__(parent, type, 0)


class NewArrayInst(Instruction):
    """Allocates an array with one count operand per dimension."""

    opcode = Opcode.NEW_ARRAY

    def __init__(self, parent: Any, type: Type, counts: Iterable[Value]) -> None:
        counts = list(counts)
        super().__init__(parent, type, len(counts))
        self.dimensions = len(counts)
        for index, count in enumerate(counts):
            self.set_operand(index, count)

    def count(self, index: int) -> Value:
        _check_index(index, self.dimensions, "dimension")
        return self.operand(index)


class PhiInst(Instruction):
    """Selects a value by incoming block; takes the type of its incoming values."""

    opcode = Opcode.PHI

    def __init__(self, parent: Any, incoming_count: int) -> None:
        super().__init__(parent, parent.context.any_type, incoming_count * 2)
        self.incoming_count = incoming_count

    def set_incoming(self, index: int, block: Value, value: Value) -> None:
        _check_index(index, self.incoming_count, "incoming")
        self.set_operand(index * 2, block)
        self.set_operand(index * 2 + 1, value)
        self.type = value.type

    def incoming_block(self, index: int) -> Any:
        _check_index(index, self.incoming_count, "incoming")
        return self.operand(index * 2)

    def incoming_value(self, index: int) -> Value | None:
        _check_index(index, self.incoming_count, "incoming")
        return self.operand(index * 2 + 1)


class ReturnInst(Instruction):
    opcode = Opcode.RETURN

    def __init__(self, parent: Any, value: Value | None = None) -> None:
        super().__init__(parent, parent.context.void_type, 0 if value is None else 1)
        if value is not None:
            self.set_operand(0, value)

    @property
    def is_void(self) -> bool:
        return not self._operands

    @property
    def value(self) -> Value | None:
        return None if self.is_void else self.operand(0)


class StoreInst(Instruction):
    opcode = Opcode.STORE

    def __init__(self, parent: Any, pointer: Value, value: Value) -> None:
        super().__init__(parent, parent.context.void_type, 2)
        self.set_operand(0, pointer)
        self.set_operand(1, value)

    @property
    def pointer(self) -> Value:
        return self.operand(0)

    @property
    def value(self) -> Value:
        return self.operand(1)


class StoreArrayInst(Instruction):
    opcode = Opcode.STORE_ARRAY

    def __init__(self, parent: Any, array_ref: Value, index: Value, value: Value) -> None:
        super().__init__(parent, parent.context.void_type, 3)
        self.set_operand(0, array_ref)
        self.set_operand(1, index)
        self.set_operand(2, value)

    @property
    def array_ref(self) -> Value:
        return self.operand(0)

    @property
    def index(self) -> Value:
        return self.operand(1)

    @property
    def value(self) -> Value:
        return self.operand(2)


class StoreFieldInst(Instruction):
    opcode = Opcode.STORE_FIELD

    def __init__(self, parent: Any, field: Value, value: Value, object_ref: Value | None) -> None:
        super().__init__(parent, parent.context.void_type, 3)
        self.set_operand(0, field)
        self.set_operand(1, value)
        self.set_operand(2, object_ref)

    @property
    def field(self) -> Any:
        return self.operand(0)

    @property
    def value(self) -> Value:
        return self.operand(1)

    @property
    def object_ref(self) -> Value | None:
        return self.operand(2)


class SwitchInst(Instruction):
    opcode = Opcode.SWITCH

    def __init__(self, parent: Any, value: Value, default_target: Value,
                 targets: Iterable[tuple[Value, Value]] = ()) -> None:
        targets = list(targets)
        super().__init__(parent, parent.context.void_type, 2 + len(targets) * 2)
        self.case_count = len(targets)
        self.set_operand(0, value)
        self.set_operand(1, default_target)
        for index, (case_value, target) in enumerate(targets):
            self.set_operand(2 + index * 2, case_value)
            self.set_operand(3 + index * 2, target)

    @property
    def value(self) -> Value:
        return self.operand(0)

    @property
    def default_target(self) -> Any:
        return self.operand(1)

    def case_value(self, index: int) -> Value:
        _check_index(index, self.case_count, "case")
        return self.operand(index * 2 + 2)

    def case_target(self, index: int) -> Any:
        _check_index(index, self.case_count, "case")
        return self.operand(index * 2 + 3)

    def successor(self, index: int) -> Any:
        if index == 0:
            return self.default_target
        return self.case_target(index - 1)

    def successor_count(self) -> int:
        return self.case_count + 1


class ThrowInst(Instruction):
    opcode = Opcode.THROW

    def __init__(self, parent: Any, exception_ref: Value) -> None:
        super().__init__(parent, parent.context.void_type, 1)
        self.set_operand(0, exception_ref)

    @property
    def exception_ref(self) -> Value:
        return self.operand(0)