import pytest

from codespy.ir.context import Context
from codespy.ir.function import Function
from codespy.ir.instructions import (
    BinaryInst,
    BinaryOp,
    BranchInst,
    CompareInst,
    CompareOp,
    LoadInst,
    PhiInst,
    ReturnInst,
    StoreInst,
)
from codespy.transform.local_promoter import promote_locals


@pytest.fixture
def env():
    ctx = Context()
    i32 = ctx.int_type(32)
    fn = Function(ctx, "f", ctx.function_type(i32, [i32]))
    return ctx, i32, fn


def _memory_ops(fn):
    return [inst for block in fn.blocks for inst in block if isinstance(inst, (LoadInst, StoreInst))]


def test_unused_local_is_removed(env):
    _, i32, fn = env
    fn.append_local(i32)
    promote_locals(fn)
    assert fn.locals == []


def test_load_without_store_becomes_poison(env):
    ctx, i32, fn = env
    local = fn.append_local(i32)
    entry = fn.append_block()
    load = entry.append(LoadInst, i32, local)
    ret = entry.append(ReturnInst, load)
    promote_locals(fn)
    assert ret.value is ctx.poison_value(i32)
    assert entry.insts == [ret]
    assert fn.locals == []


def test_single_dominating_store_forwards_value(env):
    _, i32, fn = env
    local = fn.append_local(i32)
    entry = fn.append_block()
    entry.append(StoreInst, local, fn.argument(0))
    load = entry.append(LoadInst, i32, local)
    ret = entry.append(ReturnInst, load)
    promote_locals(fn)
    assert ret.value is fn.argument(0)
    assert entry.insts == [ret]
    assert fn.locals == []


def test_store_only_local_is_removed(env):
    _, i32, fn = env
    local = fn.append_local(i32)
    entry = fn.append_block()
    entry.append(StoreInst, local, fn.argument(0))
    ret = entry.append(ReturnInst)
    promote_locals(fn)
    assert entry.insts == [ret]
    assert fn.locals == []


def _diamond(ctx, i32, fn):
    entry = fn.append_block()
    left = fn.append_block()
    right = fn.append_block()
    join = fn.append_block()
    cmp = entry.append(CompareInst, CompareOp.EQUAL, fn.argument(0), ctx.constant_int(i32, 0))
    return entry, left, right, join, cmp


def test_single_store_not_dominating_gives_poison(env):
    ctx, i32, fn = env
    local = fn.append_local(i32)
    entry, left, right, join, cmp = _diamond(ctx, i32, fn)
    entry.append(BranchInst, left, right, cmp)
    left.append(StoreInst, local, fn.argument(0))
    left.append(BranchInst, join)
    right.append(BranchInst, join)
    load = join.append(LoadInst, i32, local)
    ret = join.append(ReturnInst, load)
    promote_locals(fn)
    assert ret.value is ctx.poison_value(i32)
    assert _memory_ops(fn) == []
    assert fn.locals == []


def test_multiple_stores_in_one_block(env):
    ctx, i32, fn = env
    local = fn.append_local(i32)
    one = ctx.constant_int(i32, 1)
    two = ctx.constant_int(i32, 2)
    entry = fn.append_block()
    before = entry.append(LoadInst, i32, local)
    entry.append(StoreInst, local, one)
    first = entry.append(LoadInst, i32, local)
    entry.append(StoreInst, local, two)
    second = entry.append(LoadInst, i32, local)
    add = entry.append(BinaryInst, i32, BinaryOp.ADD, first, second)
    sub = entry.append(BinaryInst, i32, BinaryOp.SUB, before, add)
    entry.append(ReturnInst, sub)
    promote_locals(fn)
    assert add.lhs is one
    assert add.rhs is two
    assert sub.lhs is ctx.poison_value(i32)
    assert _memory_ops(fn) == []
    assert fn.locals == []


def test_diamond_inserts_phi(env):
    ctx, i32, fn = env
    local = fn.append_local(i32)
    zero = ctx.constant_int(i32, 0)
    one = ctx.constant_int(i32, 1)
    entry, left, right, join, cmp = _diamond(ctx, i32, fn)
    entry.append(StoreInst, local, zero)
    entry.append(BranchInst, left, right, cmp)
    left.append(StoreInst, local, one)
    left.append(BranchInst, join)
    right.append(BranchInst, join)
    load = join.append(LoadInst, i32, local)
    ret = join.append(ReturnInst, load)
    promote_locals(fn)

    phi = join.insts[0]
    assert isinstance(phi, PhiInst)
    assert ret.value is phi
    assert phi.incoming_count == 2
    assert (phi.incoming_block(0), phi.incoming_value(0)) == (left, one)
    assert (phi.incoming_block(1), phi.incoming_value(1)) == (right, zero)
    assert phi.type is i32
    assert _memory_ops(fn) == []
    assert fn.locals == []


def test_local_without_blocks_is_removed(env):
    _, i32, fn = env
    fn.append_local(i32)
    fn.append_local(i32)
    promote_locals(fn)
    assert fn.locals == []
    assert fn.blocks == []