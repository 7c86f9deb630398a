"""Configuration shared by the extractor and resolver."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .classifier import CONSTRUCTOR_PATTERN, ENTRY_INTERFACE

BREAKPOINT_STATEMENT = "System.Diagnostics.Debugger.Break();"
DEFAULT_SOURCE_SUFFIX = ".cs"


class ExtractionMode(Enum):
    """Depth threshold at which a file's lines start to be emitted."""

    ENTRY_POINT = 2
    SUPPORT = 1

    @property
    def body_depth(self) -> int:
        return self.value


@dataclass(frozen=True)
class LinkerOptions:
    """Knobs for a link run.

    ``inject_breakpoints`` turns the debug-break statements on; with it off the
    engine behaves as a plain importer.
    """

    inject_breakpoints: bool = True
    entry_interface: str = ENTRY_INTERFACE
    breakpoint_statement: str = BREAKPOINT_STATEMENT
    constructor_pattern: re.Pattern[str] = CONSTRUCTOR_PATTERN
    source_suffix: str = DEFAULT_SOURCE_SUFFIX
    generator: str = "ScriptLinker"


__all__ = ["BREAKPOINT_STATEMENT", "ExtractionMode", "LinkerOptions"]
