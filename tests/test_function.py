import pytest

from codespy.ir.context import Context
from codespy.ir.function import Function
from codespy.ir.instructions import BranchInst, LoadInst, ReturnInst


@pytest.fixture
def ctx():
    return Context()


@pytest.fixture
def func(ctx):
    params = [ctx.int_type(32), ctx.double_type]
    return Function(ctx, "compute", ctx.function_type(ctx.void_type, params))


def test_arguments_follow_parameters(ctx, func):
    assert [argument.index for argument in func.arguments] == [0, 1]
    assert func.argument(1).type is ctx.double_type
    assert func.parameter_count() == 2


def test_function_type(ctx, func):
    assert func.function_type().return_type is ctx.void_type
    assert func.display_name == "compute"


def test_entry_block(func):
    with pytest.raises(ValueError):
        func.entry_block()
    first = func.append_block()
    func.append_block()
    assert func.entry_block() is first
    assert first.parent is func


def test_remove_used_block_raises(func):
    entry, target = func.append_block(), func.append_block()
    entry.append(BranchInst, target)
    with pytest.raises(ValueError):
        func.remove_block(target)
    assert func.blocks == [entry, target]


def test_remove_unused_block(func):
    entry, dead = func.append_block(), func.append_block()
    dead.append(ReturnInst)
    func.remove_block(dead)
    assert func.blocks == [entry]


def test_locals(ctx, func):
    first = func.append_local(ctx.int_type(32))
    second = func.append_local(ctx.double_type)
    assert [local.index for local in func.locals] == [0, 1]
    func.remove_local(first)
    assert func.locals == [second]


def test_remove_used_local_raises(ctx, func):
    block = func.append_block()
    local = func.append_local(ctx.int_type(32))
    block.append(LoadInst, local.type, local)
    with pytest.raises(ValueError):
        func.remove_local(local)


def test_set_name_prefix(func):
    func.set_name_prefix("pkg/Main")
    assert func.display_name == "pkg/Main.compute"
    assert func.name == "compute"