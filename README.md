# codespy

codespy models Java methods as a small SSA-style intermediate representation
and gives you the tools to inspect and clean it up:

- `codespy.ir` – types (`codespy.ir.types`), values and use lists
  (`codespy.ir.values`), instructions (`codespy.ir.instructions`), basic
  blocks (`codespy.ir.block`), functions (`codespy.ir.function`) and Java
  classes and fields (`codespy.ir.java`). Types and constants are interned
  by a shared `Context` (`codespy.ir.context`), so equal ones are the same
  object. Dominance analysis lives in `codespy.ir.dominance`
  (`compute_dominance`) and a textual listing in `codespy.ir.dumper`
  (`dump_code`, `type_string`).
- `codespy.transform` – passes that rewrite a function in place:
  `prune_exceptions`, `simplify_cfg` and `promote_locals`.
- `codespy.support` – a byte `Stream` API (`codespy.support.stream`:
  `SpanStream`, big-endian integers, varints, length-prefixed strings) and a
  `{}`-placeholder `StringBuilder` with `format_string`
  (`codespy.support.formatting`).
- `codespy.highlight` – regular-expression highlighting rules for the IR
  text and for bytecode listings (`ir_highlighter`, `bytecode_highlighter`).

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Building and printing a method

```python
from codespy.ir.context import Context
from codespy.ir.java import JavaClass
from codespy.ir.instructions import ReturnInst
from codespy.ir.dumper import dump_code

context = Context()
clazz = JavaClass(context, "com/example/Answer")
i32 = context.int_type(32)
method = clazz.ensure_method("get", context.function_type(i32, [i32]))

entry = method.append_block()
entry.append(ReturnInst, context.constant_int(i32, 42))

print(dump_code(method))
```

prints

```
i32 @com/example/Answer.get(%a0: i32) {
  L0 {
    ret i32 $42
  }
}
```

Blocks are listed in reverse post order from the entry block; instructions
that produce a value are numbered `%v0`, `%v1`, … in that order. A function
with no blocks is printed as a declaration ending in `);`.

Instructions are created through `BasicBlock.append` and `BasicBlock.prepend`,
which take the instruction class and its constructor arguments after the
parent block. Exception edges are added with `BasicBlock.add_handler`.

## Cleaning up a method

The passes are meant to run in this order:

```python
from codespy.transform.exception_pruner import prune_exceptions
from codespy.transform.cfg_simplifier import simplify_cfg
from codespy.transform.local_promoter import promote_locals

prune_exceptions(method)   # drop java/lang/RuntimeException handlers
simplify_cfg(method)       # remove unused blocks and blocks holding only a jump
promote_locals(method)     # turn local loads/stores into SSA values and phis
simplify_cfg(method)
```

`promote_locals` relies on `compute_dominance` from `codespy.ir.dominance`,
which you can also use directly to query `dominates` (between blocks, or
between instructions), `strictly_dominates` and dominance `frontiers`.

## Reading binary data

```python
from codespy.support.stream import SpanStream

stream = SpanStream(b"\xca\xfe\xba\xbe")
magic = stream.read_be(4, False)   # 0xCAFEBABE
```

Reads past the end raise `StreamTruncatedError`, a subclass of `StreamError`.
`SpanStream` is read-only; the base `Stream` raises `StreamError` for any
operation a subclass does not provide.

## Highlighting

```python
from codespy.highlight import ir_highlighter

for start, length, fmt in ir_highlighter().highlight_block("%v0 = add i32 %a0, i32 $1"):
    ...
```

`highlight_block` returns `(start, length, TextFormat)` ranges, one per rule
match, in rule order. Setting `underline = True` on the IR highlighter marks
matches of the type, label and function rules as underlined anchors.

## What the package does not do

- It does not read `.class` files or jar archives; methods have to be built
  through the IR API shown above.
- It has no command-line program and no viewer window. The highlighters only
  compute formatting ranges; drawing them is left to the caller.