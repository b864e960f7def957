"""Removal of handlers for unchecked runtime exceptions."""

from __future__ import annotations

from codespy.ir.function import Function


def prune_exceptions(function: Function) -> None:
    """Drop every exception edge whose caught type is java/lang/RuntimeException."""
    runtime_exception_type = function.context.reference_type("java/lang/RuntimeException")
    for block in function.blocks:
        for handler in block.handlers:
            if handler.type is runtime_exception_type:
                handler.remove_from_parent()