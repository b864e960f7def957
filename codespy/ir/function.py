"""Functions: arguments, locals and basic blocks."""

from __future__ import annotations

from typing import Any

from codespy.ir.block import BasicBlock
from codespy.ir.types import FunctionType, Type
from codespy.ir.values import Argument, Local, Value, ValueKind


class Function(Value):
    """A function with a signature, named arguments, local slots and a CFG."""

    def __init__(self, context: Any, name: str, type: FunctionType) -> None:
        super().__init__(ValueKind.FUNCTION, type)
        self.context = context
        self.name = name
        self.display_name = name
        self._arguments = [Argument(parameter, index) for index, parameter in enumerate(type.parameter_types)]
        self._blocks: list[BasicBlock] = []
        self._locals: list[Local] = []

    @property
    def arguments(self) -> list[Argument]:
        return list(self._arguments)

    @property
    def blocks(self) -> list[BasicBlock]:
        return list(self._blocks)

    @property
    def locals(self) -> list[Local]:
        return list(self._locals)

    def append_block(self) -> BasicBlock:
        block = BasicBlock(self.context, self)
        self._blocks.append(block)
        return block

    def append_local(self, type: Type) -> Local:
        local = Local(type, len(self._locals))
        self._locals.append(local)
        return local

    def argument(self, index: int) -> Argument:
        return self._arguments[index]

    def remove_block(self, block: BasicBlock) -> None:
        if block.has_uses():
            raise ValueError("cannot remove a block that is still used")
        self._blocks.remove(block)
        block._destroy()

    def remove_local(self, local: Local) -> None:
        if local.has_uses():
            raise ValueError("cannot remove a local that is still used")
        self._locals.remove(local)

    def set_name_prefix(self, name_prefix: str) -> None:
        self.display_name = f"{name_prefix}.{self.name}"

    def entry_block(self) -> BasicBlock:
        if not self._blocks:
            raise ValueError(f"function {self.display_name} has no blocks")
        return self._blocks[0]

    def function_type(self) -> FunctionType:
        return self.type

    def parameter_count(self) -> int:
        return len(self.function_type().parameter_types)