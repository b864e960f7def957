"""Basic blocks: ordered instruction lists with exception handler edges."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from codespy.ir.instructions import ExceptionHandler, Instruction
from codespy.ir.types import Type
from codespy.ir.values import Value, ValueKind


class BasicBlock(Value):
    """A straight-line run of instructions ending in a terminator."""

    def __init__(self, context: Any, parent: Any = None) -> None:
        super().__init__(ValueKind.BASIC_BLOCK, context.label_type)
        self.context = context
        self.parent = parent
        self._insts: list[Instruction] = []
        self._handlers: list[ExceptionHandler] = []

    def __iter__(self) -> Iterator[Instruction]:
        return iter(list(self._insts))

    def __len__(self) -> int:
        return len(self._insts)

    @property
    def insts(self) -> list[Instruction]:
        return list(self._insts)

    @property
    def handlers(self) -> list[ExceptionHandler]:
        return list(self._handlers)

    def append(self, cls: type[Instruction], *args: Any) -> Instruction:
        """Create an instruction of class *cls* at the end of this block."""
        inst = cls(self, *args)
        self._insts.append(inst)
        return inst

    def prepend(self, cls: type[Instruction], *args: Any) -> Instruction:
        """Create an instruction of class *cls* at the start of this block."""
        inst = cls(self, *args)
        self._insts.insert(0, inst)
        return inst

    def add_handler(self, exception_type: Type, target: BasicBlock) -> ExceptionHandler:
        handler = ExceptionHandler(self, exception_type, target)
        self._handlers.append(handler)
        return handler

    def remove(self, inst: Instruction) -> None:
        """Remove and destroy *inst*; raises ValueError if it is not in this block."""
        if isinstance(inst, ExceptionHandler):
            self._handlers.remove(inst)
        else:
            self._insts.remove(inst)
        inst._destroy()

    def remove_from_parent(self) -> None:
        self.parent.remove_block(self)

    def successor(self, index: int) -> BasicBlock:
        terminator = self.terminator()
        count = terminator.successor_count()
        if index < count:
            return terminator.successor(index)
        return self._handlers[index - count].target

    def successor_count(self) -> int:
        return self.terminator().successor_count() + len(self._handlers)

    def successors(self) -> list[BasicBlock]:
        """Terminator targets followed by exception handler targets."""
        terminator = self.terminator()
        targets = [terminator.successor(i) for i in range(terminator.successor_count())]
        return targets + [handler.target for handler in self._handlers]

    def predecessors(self) -> list[BasicBlock]:
        """Blocks whose terminator or handlers lead here, once per edge."""
        return [
            user.parent
            for user in self.users()
            if isinstance(user, Instruction) and (user.is_terminator() or isinstance(user, ExceptionHandler))
        ]

    def has_terminator(self) -> bool:
        return bool(self._insts) and self._insts[-1].is_terminator()

    def terminator(self) -> Instruction:
        if not self.has_terminator():
            raise ValueError("block has no terminator")
        return self._insts[-1]

    def _destroy(self) -> None:
        self.replace_all_uses_with(None)
        for inst in self._insts + self._handlers:
            inst._destroy()
        self._insts.clear()
        self._handlers.clear()
        self.parent = None