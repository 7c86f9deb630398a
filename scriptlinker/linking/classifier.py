"""Per-line classification for the heuristic source scan.

Each call looks at one raw line in isolation. Brace tracking is limited to
per-line open/close flags with ``//`` masking; block comments and string
literals are not understood, so a brace inside either still counts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

COMMENT_MARKER = "//"
ENTRY_INTERFACE = "GameScriptInterface"

USING_PATTERN = re.compile(r"^\s*using\s+([A-Za-z_][\w.]*)\s*;")
NAMESPACE_PATTERN = re.compile(r"^\s*namespace\s+([A-Za-z_][\w.]*)")
CLASS_PATTERN = re.compile(
    r"^\s*(?:(?:public|private|protected|internal|static|sealed|abstract|unsafe|new)\s+)*"
    r"(?P<partial>partial\s+)?class\s+(?P<name>[A-Za-z_]\w*)"
    r"(?:\s*<[^>]*>)?"
    r"(?:\s*:\s*(?P<base>[A-Za-z_][\w.]*))?"
)
# Constructor the runtime generates for every script class.
CONSTRUCTOR_PATTERN = re.compile(r"^\s*public\s+GameScript\s*\(\s*\)\s*:\s*base\s*\(\s*null\s*\)")


@dataclass(frozen=True)
class ClassDeclaration:
    name: str
    is_partial: bool
    base_type: str

    def implements(self, interface: str) -> bool:
        return self.base_type == interface


@dataclass(frozen=True)
class LineInfo:
    """Everything the extractor needs to know about one line."""

    opens_block: bool
    closes_block: bool
    using: Optional[str] = None
    namespace: Optional[str] = None
    class_declaration: Optional[ClassDeclaration] = None
    is_constructor: bool = False


def code_portion(line: str) -> str:
    """Return the part of ``line`` before the first comment marker."""
    index = line.find(COMMENT_MARKER)
    return line if index == -1 else line[:index]


def brace_flags(line: str) -> tuple[bool, bool]:
    """Return ``(opens, closes)`` for the unmasked part of ``line``."""
    code = code_portion(line)
    return "{" in code, "}" in code


def match_using(line: str) -> Optional[str]:
    match = USING_PATTERN.match(line)
    return match.group(1).strip() if match else None


def match_namespace(line: str) -> Optional[str]:
    match = NAMESPACE_PATTERN.match(line)
    return match.group(1).strip() if match else None


def match_class(line: str) -> Optional[ClassDeclaration]:
    match = CLASS_PATTERN.match(line)
    if not match:
        return None
    return ClassDeclaration(
        name=match.group("name"),
        is_partial=bool(match.group("partial")),
        base_type=match.group("base") or "",
    )


def is_constructor(line: str, pattern: re.Pattern[str] = CONSTRUCTOR_PATTERN) -> bool:
    return pattern.match(code_portion(line)) is not None


def classify_line(
    line: str,
    *,
    constructor_pattern: re.Pattern[str] = CONSTRUCTOR_PATTERN,
) -> LineInfo:
    """Classify a single raw source line."""
    opens, closes = brace_flags(line)
    return LineInfo(
        opens_block=opens,
        closes_block=closes,
        using=match_using(line),
        namespace=match_namespace(line),
        class_declaration=match_class(line),
        is_constructor=is_constructor(line, constructor_pattern),
    )


def next_depth(depth: int, info: LineInfo) -> tuple[int, int]:
    """Return ``(emit_depth, depth_after)`` for a line read at ``depth``.

    Opening is applied before the emit decision and closing after it, each at
    most once per line regardless of how many braces the line holds.
    """
    emit_depth = depth + 1 if info.opens_block else depth
    depth_after = emit_depth - 1 if info.closes_block else emit_depth
    return emit_depth, depth_after


__all__ = [
    "CLASS_PATTERN",
    "COMMENT_MARKER",
    "CONSTRUCTOR_PATTERN",
    "ClassDeclaration",
    "ENTRY_INTERFACE",
    "LineInfo",
    "NAMESPACE_PATTERN",
    "USING_PATTERN",
    "brace_flags",
    "classify_line",
    "code_portion",
    "is_constructor",
    "match_class",
    "match_namespace",
    "match_using",
    "next_depth",
]
