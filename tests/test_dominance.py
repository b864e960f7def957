import pytest

from codespy.ir.context import Context
from codespy.ir.dominance import compute_dominance
from codespy.ir.function import Function
from codespy.ir.instructions import BranchInst, LoadInst, ReturnInst, StoreInst


def _function(ctx):
    return Function(ctx, "f", ctx.function_type(ctx.void_type, []))


def _diamond():
    ctx = Context()
    function = _function(ctx)
    entry, left, right, join = (function.append_block() for _ in range(4))
    cond = ctx.constant_int(ctx.int_type(1), 1)
    entry.append(BranchInst, left, right, cond)
    left.append(BranchInst, join)
    right.append(BranchInst, join)
    join.append(ReturnInst)
    return function, entry, left, right, join


def _loop():
    ctx = Context()
    function = _function(ctx)
    entry, header, body, exit_block = (function.append_block() for _ in range(4))
    cond = ctx.constant_int(ctx.int_type(1), 0)
    entry.append(BranchInst, header)
    header.append(BranchInst, body, exit_block, cond)
    body.append(BranchInst, header)
    exit_block.append(ReturnInst)
    return function, entry, header, body, exit_block


def test_entry_dominates_everything_in_diamond():
    function, entry, left, right, join = _diamond()
    info = compute_dominance(function)
    assert all(info.dominates(entry, block) for block in (entry, left, right, join))


def test_branches_do_not_dominate_join():
    function, entry, left, right, join = _diamond()
    info = compute_dominance(function)
    assert not info.dominates(left, join)
    assert not info.dominates(right, join)
    assert not info.dominates(left, right)
    assert info.immediate_dominator(join) is entry


def test_strict_dominance_excludes_self():
    function, entry, left, _, _ = _diamond()
    info = compute_dominance(function)
    assert info.dominates(left, left)
    assert not info.strictly_dominates(left, left)
    assert info.strictly_dominates(entry, left)


def test_diamond_frontiers():
    function, entry, left, right, join = _diamond()
    info = compute_dominance(function)
    assert info.frontiers(left) == {join}
    assert info.frontiers(right) == {join}
    assert info.frontiers(entry) == frozenset()
    assert info.frontiers(join) == frozenset()


def test_loop_frontiers():
    function, entry, header, body, exit_block = _loop()
    info = compute_dominance(function)
    assert info.frontiers(body) == {header}
    assert info.frontiers(header) == {header}
    assert info.frontiers(exit_block) == frozenset()
    assert info.dominates(header, body)
    assert info.dominates(header, exit_block)
    assert not info.dominates(body, header)


def test_empty_function_has_no_frontiers():
    ctx = Context()
    function = _function(ctx)
    other = Function(ctx, "g", ctx.function_type(ctx.void_type, []))
    block = other.append_block()
    info = compute_dominance(function)
    assert info.frontiers(block) == frozenset()


def test_instruction_dominance_within_block():
    ctx = Context()
    function = _function(ctx)
    block = function.append_block()
    i32 = ctx.int_type(32)
    local = function.append_local(i32)
    store = block.append(StoreInst, local, ctx.constant_int(i32, 1))
    load = block.append(LoadInst, i32, local)
    block.append(ReturnInst)
    info = compute_dominance(function)
    assert info.dominates(store, load)
    assert not info.dominates(load, store)
    assert not info.dominates(store, store)


def test_instruction_dominance_across_blocks():
    function, entry, left, right, join = _diamond()
    ctx = function.context
    i32 = ctx.int_type(32)
    local = function.append_local(i32)
    entry_store = entry.prepend(StoreInst, local, ctx.constant_int(i32, 2))
    left_store = left.prepend(StoreInst, local, ctx.constant_int(i32, 3))
    load = join.prepend(LoadInst, i32, local)
    info = compute_dominance(function)
    assert info.dominates(entry_store, load)
    assert not info.dominates(left_store, load)


def test_unreachable_block_is_not_dominated():
    function, entry, left, right, join = _diamond()
    orphan = function.append_block()
    orphan.append(BranchInst, join)
    info = compute_dominance(function)
    assert not info.dominates(entry, orphan)
    assert info.frontiers(left) == {join}


def test_missing_terminator_raises():
    ctx = Context()
    function = _function(ctx)
    function.append_block()
    with pytest.raises(ValueError):
        compute_dominance(function)