"""Removal of dead blocks and blocks that only forward control flow."""

from __future__ import annotations

from codespy.ir.function import Function
from codespy.ir.instructions import BranchInst


def _simplify_once(function: Function) -> bool:
    blocks = function.blocks
    if not blocks:
        return False
    entry = function.entry_block()
    changed = False
    for block in blocks:
        # Don't touch the entry block.
        if block is entry:
            continue

        if not block.has_uses():
            block.remove_from_parent()
            changed = True
            continue

        insts = block.insts
        if len(insts) != 1:
            continue
        branch = insts[0]
        if not isinstance(branch, BranchInst) or branch.is_conditional:
            continue
        target = branch.target
        if target is block:
            # A block looping onto itself cannot be bypassed.
            continue
        block.replace_all_uses_with(target)
        block.remove_from_parent()
        changed = True
    return changed


def simplify_cfg(function: Function) -> None:
    """Repeatedly drop unreachable blocks and fold single-branch blocks until stable."""
    while _simplify_once(function):
        pass