import pytest

from codespy.ir.context import Context
from codespy.ir.function import Function
from codespy.ir.instructions import CatchInst, ReturnInst
from codespy.transform.exception_pruner import prune_exceptions


@pytest.fixture
def env():
    ctx = Context()
    fn = Function(ctx, "f", ctx.function_type(ctx.void_type, []))
    entry = fn.append_block()
    entry.append(ReturnInst)
    return ctx, fn, entry


def _handler_block(ctx, fn, type_name):
    block = fn.append_block()
    block.append(CatchInst, ctx.reference_type(type_name))
    block.append(ReturnInst)
    return block


def test_runtime_exception_handler_is_removed(env):
    ctx, fn, entry = env
    runtime = _handler_block(ctx, fn, "java/lang/RuntimeException")
    io = _handler_block(ctx, fn, "java/io/IOException")
    entry.add_handler(ctx.reference_type("java/lang/RuntimeException"), runtime)
    entry.add_handler(ctx.reference_type("java/io/IOException"), io)
    prune_exceptions(fn)
    assert [h.type for h in entry.handlers] == [ctx.reference_type("java/io/IOException")]
    assert entry.successors() == [io]
    assert not runtime.has_uses()


def test_other_exception_types_are_kept(env):
    ctx, fn, entry = env
    target = _handler_block(ctx, fn, "java/lang/Exception")
    entry.add_handler(ctx.reference_type("java/lang/Exception"), target)
    prune_exceptions(fn)
    assert [h.target for h in entry.handlers] == [target]
    assert target.predecessors() == [entry]


def test_every_block_is_pruned(env):
    ctx, fn, entry = env
    runtime_type = ctx.reference_type("java/lang/RuntimeException")
    target = _handler_block(ctx, fn, "java/lang/RuntimeException")
    entry.add_handler(runtime_type, target)
    target.add_handler(runtime_type, target)
    prune_exceptions(fn)
    assert all(not block.handlers for block in fn.blocks)
    assert not target.has_uses()


def test_function_without_handlers_is_unchanged(env):
    ctx, fn, entry = env
    prune_exceptions(fn)
    assert fn.blocks == [entry]
    assert entry.successor_count() == 0