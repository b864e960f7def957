"""Dominator tree and dominance frontiers of a function's control flow graph.

Uses the iterative algorithm of Cooper, Harvey and Kennedy: immediate
dominators are refined in reverse post order until nothing changes, and
frontiers are found by walking up the tree from the predecessors of every
join point.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from codespy.ir.block import BasicBlock
from codespy.ir.instructions import Instruction


class DominanceInfo:
    """Immediate dominators and dominance frontiers computed for one function."""

    def __init__(self, idoms: dict[BasicBlock, BasicBlock | None],
                 frontiers: dict[BasicBlock, set[BasicBlock]]) -> None:
        self._idoms = idoms
        self._frontiers = frontiers

    def immediate_dominator(self, block: BasicBlock) -> BasicBlock | None:
        """The immediate dominator of *block*; the entry block is its own."""
        return self._idoms.get(block)

    def dominates(self, dominator: Any, block: Any) -> bool:
        """Whether *dominator* dominates *block*.

        Both may be blocks, or both instructions. A block dominates itself; an
        instruction does not.
        """
        if isinstance(dominator, Instruction) and isinstance(block, Instruction):
            return self._instruction_dominates(dominator, block)
        idom = block
        while idom is not None:
            if idom is dominator:
                return True
            if idom is idom.parent.entry_block():
                return False
            idom = self._idoms.get(idom)
        return False

    def strictly_dominates(self, dominator: BasicBlock, block: BasicBlock) -> bool:
        return dominator is not block and self.dominates(dominator, block)

    def _instruction_dominates(self, definition: Instruction, user: Instruction) -> bool:
        if definition is user:
            return False
        def_block = definition.parent
        if def_block is not user.parent:
            return self.dominates(def_block, user.parent)
        for inst in def_block:
            if inst is definition:
                return True
            if inst is user:
                return False
        raise ValueError("instructions are not in their parent block")

    def frontiers(self, block: BasicBlock) -> frozenset[BasicBlock]:
        """The dominance frontier of *block*, empty if it has none."""
        return frozenset(self._frontiers.get(block, ()))


def _post_order(entry: BasicBlock) -> list[BasicBlock]:
    order: list[BasicBlock] = []
    visited = {entry}
    stack: list[tuple[BasicBlock, Iterator[BasicBlock]]] = [(entry, iter(entry.successors()))]
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
    return order


def compute_dominance(function: Any) -> DominanceInfo:
    """Compute dominance information for the blocks reachable from the entry."""
    if not function.blocks:
        return DominanceInfo({}, {})

    entry = function.entry_block()
    order = _post_order(entry)
    index_map = {block: index for index, block in enumerate(order)}

    idoms: dict[BasicBlock, BasicBlock | None] = {entry: entry}

    def intersect(finger1: BasicBlock, finger2: BasicBlock) -> BasicBlock:
        while finger1 is not finger2:
            while index_map[finger1] < index_map[finger2]:
                finger1 = idoms[finger1]
            while index_map[finger2] < index_map[finger1]:
                finger2 = idoms[finger2]
        return finger1

    changed = True
    while changed:
        changed = False
        for block in reversed(order[:-1]):
            new_idom = None
            for pred in block.predecessors():
                if pred not in idoms:
                    continue
                new_idom = pred if new_idom is None else intersect(pred, new_idom)
            if idoms.get(block) is not new_idom:
                changed = True
            idoms[block] = new_idom

    frontiers: dict[BasicBlock, set[BasicBlock]] = {}
    for block in function.blocks:
        if block not in idoms:
            continue
        preds = block.predecessors()
        if len(preds) < 2:
            # Not a join point.
            continue
        for runner in preds:
            if runner not in idoms:
                continue
            while runner is not idoms[block]:
                frontiers.setdefault(runner, set()).add(block)
                runner = idoms[runner]
    return DominanceInfo(idoms, frontiers)