"""Regex-driven syntax highlighting for IR and bytecode listings."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field

_DARK_BLUE = "#000080"
_RED = "#ff0000"
_DARK_GREEN = "#008000"
_ORANGE = "#ffa500"
_TYPE_GREEN = "#499F68"
_CONSTANT_BLUE = "#2E86AB"
_ANCHOR_HREF = "ababa"


@dataclass(frozen=True)
class TextFormat:
    """Character formatting applied to a highlighted range."""

    foreground: str
    bold: bool = False
    underline: bool = False
    anchor_href: str | None = None


@dataclass
class HighlightRule:
    """A pattern, the format its matches get, and whether it may be underlined."""

    pattern: str
    format: TextFormat
    underline: bool = False
    regex: re.Pattern = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.regex = re.compile(self.pattern)


class Highlighter:
    """Applies rules in order to a line of text; later ranges override earlier ones."""

    def __init__(self, rules: list[HighlightRule]) -> None:
        self.rules = list(rules)
        self.underline = False

    def highlight_block(self, text: str) -> list[tuple[int, int, TextFormat]]:
        """Return (start, length, format) ranges for every rule match in *text*."""
        ranges = []
        for rule in self.rules:
            for match in rule.regex.finditer(text):
                fmt = rule.format
                if rule.underline and self.underline:
                    fmt = dataclasses.replace(fmt, underline=True, anchor_href=_ANCHOR_HREF)
                ranges.append((match.start(), match.end() - match.start(), fmt))
        return ranges


_IR_KEYWORDS = (
    "array_length|add|sub|mul|div|rem|shl|shr|ushr|and|or|xor|br|call|special|cast|to|catch"
    "|cmp_eq|cmp_ne|cmp_lt|cmp_gt|cmp_le|cmp_ge|instance_of|lcmp|fcmpl|fcmpg|dcmpl|dcmpg"
    "|load|load_array|load_field|monitor_enter|monitor_exit|neg|new|new_array|phi|ret"
    "|store|store_array|store_field|switch|throw"
)

_BYTECODE_KEYWORDS = (
    "class|extends|field|method"
    "|a?[ilfdabcs](load|store)"
    "|[ilfdabcs]?return"
    "|[ilfdbcs]2[ilfdbcs]"
    "|aconst_null|iconst_m1|iconst_[0-5]|lconst_[01]|fconst_[012]|dconst_[01]"
    "|[bs]ipush|ldc|[fd]cmp[gl]|new|getfield|getstatic|putfield|putstatic"
    "|invoke(interface|special|static|virtual)"
    "|[ilfd](add|sub|mul|div|rem|neg)"
    "|[il](shl|and|or|xor)"
    "|[il]u?shr"
    "|monitor(enter|exit)"
    "|arraylength|athrow"
    r"|dup2?(_x[12])?"
    "|pop2?|swap|checkcast|instanceof|iinc|goto"
    "|if(non)?null"
    "|if(_[ai]cmp)?(eq|ne|lt|ge|gt|le)"
    "|(lookup|table)switch"
)


def ir_highlighter() -> Highlighter:
    keyword = TextFormat(_DARK_BLUE, bold=True)
    type_format = TextFormat(_TYPE_GREEN, bold=True)
    label = TextFormat(_RED, bold=True)
    value = TextFormat(_DARK_GREEN)
    function = TextFormat(_ORANGE)
    constant = TextFormat(_CONSTANT_BLUE)
    return Highlighter([
        HighlightRule(rf"\b({_IR_KEYWORDS})\b", keyword),
        HighlightRule(r"\b(any|void)\b", type_format),
        HighlightRule(r"\b[if][0-9]+\b", type_format),
        HighlightRule(r"#[a-zA-Z/]+", type_format, underline=True),
        HighlightRule(r"\bL[0-9]+\b", label, underline=True),
        HighlightRule(r"%[alv][0-9]+", value),
        HighlightRule(r"@[a-zA-Z./<>]+", function, underline=True),
        HighlightRule(r"\b(poison|null)\b", constant),
        HighlightRule(r"\$[0-9.]+", constant),
        HighlightRule(r'".*"', constant),
    ])


def bytecode_highlighter() -> Highlighter:
    keyword = TextFormat(_DARK_BLUE, bold=True)
    return Highlighter([HighlightRule(rf"\b({_BYTECODE_KEYWORDS})\b", keyword)])