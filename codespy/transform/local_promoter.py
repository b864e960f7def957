"""Promotion of local variable slots to SSA values."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from codespy.ir.block import BasicBlock
from codespy.ir.dominance import DominanceInfo, compute_dominance
from codespy.ir.function import Function
from codespy.ir.instructions import Instruction, LoadInst, PhiInst, StoreInst
from codespy.ir.values import Local, Value


@dataclass
class _PhiInfo:
    local: Local
    incoming_index: int = 0


class _LocalPromoter:
    def __init__(self, function: Function, dom_info: DominanceInfo) -> None:
        self._function = function
        self._dom_info = dom_info
        self._reaching: dict[Local, list[Value]] = {}
        self._phi_info: dict[PhiInst, _PhiInfo] = {}
        self._visited: set[BasicBlock] = set()

    def _poison(self, value: Value) -> Value:
        return self._function.context.poison_value(value.type)

    def _handle_trivial_local(self, local: Local) -> bool:
        if not local.has_uses():
            # Trivially dead.
            return True

        in_single_block = True
        has_single_store = True
        single_block = None
        single_store = None
        for user in local.users():
            if isinstance(user, Instruction):
                if single_block is None:
                    single_block = user.parent
                elif single_block is not user.parent:
                    in_single_block = False
            if isinstance(user, StoreInst):
                if single_store is not None:
                    has_single_store = False
                single_store = user

        # No stores: every load is undefined.
        if has_single_store and single_store is None:
            for user in local.users():
                if isinstance(user, LoadInst):
                    user.replace_all_uses_with(self._poison(user))
                    user.remove_from_parent()
            return True

        if has_single_store:
            # Every load sees either the stored value, when the store dominates it, or nothing.
            for user in local.users():
                if isinstance(user, LoadInst):
                    if self._dom_info.dominates(single_store, user):
                        reaching = single_store.value
                    else:
                        reaching = self._poison(user)
                    user.replace_all_uses_with(reaching)
                    user.remove_from_parent()
            single_store.remove_from_parent()
            return True

        if not in_single_block:
            return False

        # Symbolic execution of memory operations within the block.
        reaching_value = None
        for inst in single_block:
            if isinstance(inst, LoadInst):
                if inst.pointer is local:
                    inst.replace_all_uses_with(reaching_value if reaching_value is not None else self._poison(inst))
                    inst.remove_from_parent()
            elif isinstance(inst, StoreInst):
                if inst.pointer is local:
                    reaching_value = inst.value
                    inst.remove_from_parent()
        return True

    def _enter_block(self, block: BasicBlock) -> None:
        for inst in block:
            if isinstance(inst, LoadInst):
                if isinstance(inst.pointer, Local):
                    inst.replace_all_uses_with(self._reaching[inst.pointer][-1])
            elif isinstance(inst, StoreInst):
                if isinstance(inst.pointer, Local):
                    self._reaching[inst.pointer].append(inst.value)
            elif inst in self._phi_info:
                self._reaching[self._phi_info[inst].local].append(inst)

        # Feed reaching values into the PHIs of successors.
        for succ in block.successors():
            for inst in succ:
                if not isinstance(inst, PhiInst):
                    # PHIs are contiguous at the top of a block.
                    break
                info = self._phi_info.get(inst)
                if info is None:
                    continue
                inst.set_incoming(info.incoming_index, block, self._reaching[info.local][-1])
                info.incoming_index += 1

    def _leave_block(self, block: BasicBlock) -> None:
        for inst in block:
            if isinstance(inst, LoadInst):
                if isinstance(inst.pointer, Local):
                    inst.remove_from_parent()
            elif isinstance(inst, StoreInst):
                if isinstance(inst.pointer, Local):
                    self._reaching[inst.pointer].pop()
                    inst.remove_from_parent()
            elif inst in self._phi_info:
                self._reaching[self._phi_info[inst].local].pop()

    def _rename(self, entry: BasicBlock) -> None:
        self._visited.add(entry)
        self._enter_block(entry)
        stack: list[tuple[BasicBlock, Iterator[BasicBlock]]] = [(entry, iter(entry.successors()))]
        while stack:
            block, successors = stack[-1]
            for succ in successors:
                if succ not in self._visited:
                    self._visited.add(succ)
                    self._enter_block(succ)
                    stack.append((succ, iter(succ.successors())))
                    break
            else:
                stack.pop()
                self._leave_block(block)

    def run(self) -> None:
        function = self._function
        for local in function.locals:
            if self._handle_trivial_local(local):
                function.remove_local(local)
                continue

            # Multiple stores: place PHIs at the join points they reach.
            placed: set[BasicBlock] = set()
            for user in local.users():
                if not isinstance(user, StoreInst):
                    continue
                for frontier in self._dom_info.frontiers(user.parent):
                    if frontier in placed:
                        continue
                    placed.add(frontier)
                    phi = frontier.prepend(PhiInst, len(frontier.predecessors()))
                    self._phi_info[phi] = _PhiInfo(local)

        if not function.locals:
            return

        for local in function.locals:
            self._reaching.setdefault(local, []).append(function.context.poison_value(local.type))

        self._rename(function.entry_block())

        for local in function.locals:
            if not local.has_uses():
                function.remove_local(local)


def promote_locals(function: Function) -> None:
    """Replace loads and stores of locals with direct value uses and PHIs."""
    _LocalPromoter(function, compute_dominance(function)).run()