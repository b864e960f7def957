import pytest

from codespy.ir.context import Context
from codespy.ir.function import Function
from codespy.ir.instructions import (
    ArrayLengthInst,
    BinaryInst,
    BinaryOp,
    BranchInst,
    CallInst,
    CompareInst,
    CompareOp,
    LoadInst,
    NewArrayInst,
    Opcode,
    PhiInst,
    ReturnInst,
    StoreInst,
    SwitchInst,
    ThrowInst,
)


@pytest.fixture
def ctx():
    return Context()


@pytest.fixture
def func(ctx):
    i32 = ctx.int_type(32)
    return Function(ctx, "run", ctx.function_type(i32, [i32, i32]))


def test_binary_operands_and_uses(ctx, func):
    block = func.append_block()
    lhs, rhs = func.argument(0), func.argument(1)
    inst = block.append(BinaryInst, ctx.int_type(32), BinaryOp.ADD, lhs, rhs)
    assert (inst.lhs, inst.rhs, inst.op) == (lhs, rhs, BinaryOp.ADD)
    assert lhs.users() == [inst]
    assert inst.operands == [lhs, rhs]
    assert not inst.is_terminator()


def test_result_types_fixed_by_instruction(ctx, func):
    block = func.append_block()
    arg = func.argument(0)
    compare = block.append(CompareInst, CompareOp.EQUAL, arg, arg)
    length = block.append(ArrayLengthInst, arg)
    assert compare.type is ctx.int_type(1)
    assert length.type is ctx.int_type(32)


def test_unconditional_branch(func):
    entry, target = func.append_block(), func.append_block()
    branch = entry.append(BranchInst, target)
    assert not branch.is_conditional
    assert branch.successor_count() == 1
    assert branch.successor(0) is target
    assert branch.is_terminator()


def test_conditional_branch(func):
    entry, yes, no = func.append_block(), func.append_block(), func.append_block()
    condition = func.argument(0)
    branch = entry.append(BranchInst, yes, no, condition)
    assert branch.successor_count() == 2
    assert [branch.successor(0), branch.successor(1)] == [yes, no]
    assert branch.condition is condition


def test_switch_successors(ctx, func):
    entry, default, first, second = (func.append_block() for _ in range(4))
    i32 = ctx.int_type(32)
    one, two = ctx.constant_int(i32, 1), ctx.constant_int(i32, 2)
    inst = entry.append(SwitchInst, func.argument(0), default, [(one, first), (two, second)])
    assert inst.case_count == 2
    assert inst.successor_count() == 3
    assert [inst.successor(0), inst.successor(1), inst.successor(2)] == [default, first, second]
    assert inst.case_value(1) is two
    with pytest.raises(IndexError):
        inst.case_target(2)


def test_phi_set_incoming_updates_type(ctx, func):
    entry, join = func.append_block(), func.append_block()
    phi = join.append(PhiInst, 1)
    assert phi.type is ctx.any_type
    phi.set_incoming(0, entry, func.argument(0))
    assert phi.type is ctx.int_type(32)
    assert phi.incoming_block(0) is entry
    assert phi.incoming_value(0) is func.argument(0)
    with pytest.raises(IndexError):
        phi.set_incoming(1, entry, func.argument(0))


def test_call_arguments(ctx, func):
    block = func.append_block()
    args = [func.argument(1), func.argument(0)]
    call = block.append(CallInst, func, args)
    assert call.callee is func
    assert call.arguments() == args
    assert call.type is ctx.int_type(32)
    assert not call.is_invoke_special


def test_return_void_and_value(func):
    block = func.append_block()
    void_ret = block.append(ReturnInst)
    value_ret = block.append(ReturnInst, func.argument(0))
    assert void_ret.is_void and void_ret.value is None
    assert not value_ret.is_void and value_ret.value is func.argument(0)


def test_new_array_counts(ctx, func):
    block = func.append_block()
    counts = [func.argument(0), func.argument(1)]
    inst = block.append(NewArrayInst, ctx.array_type(ctx.array_type(ctx.int_type(32))), counts)
    assert inst.dimensions == 2
    assert [inst.count(0), inst.count(1)] == counts


def test_successor_of_non_terminator_raises(func):
    block = func.append_block()
    local = func.append_local(func.argument(0).type)
    load = block.append(LoadInst, local.type, local)
    assert load.successor_count() == 0
    with pytest.raises(ValueError):
        load.successor(0)


def test_accept_dispatches_on_opcode(func):
    block = func.append_block()

    class Recorder:
        def __init__(self):
            self.seen = []

        def visit_throw(self, inst):
            self.seen.append(inst)
            return "visited"

    inst = block.append(ThrowInst, func.argument(0))
    recorder = Recorder()
    assert inst.accept(recorder) == "visited"
    assert recorder.seen == [inst]
    assert inst.opcode is Opcode.THROW


def test_remove_from_parent_drops_uses(func):
    block = func.append_block()
    local = func.append_local(func.argument(0).type)
    store = block.append(StoreInst, local, func.argument(0))
    store.remove_from_parent()
    assert list(block) == []
    assert not local.has_uses()
    assert not func.argument(0).has_uses()


def test_set_operand_replaces_use(ctx, func):
    block = func.append_block()
    inst = block.append(BinaryInst, ctx.int_type(32), BinaryOp.SUB, func.argument(0), func.argument(0))
    inst.set_operand(1, func.argument(1))
    assert inst.operand(1) is func.argument(1)
    assert func.argument(0).users() == [inst]