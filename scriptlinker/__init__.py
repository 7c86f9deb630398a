"""Flatten multi-file script projects into a single linked source file."""

from .linking import Linker, LinkerOptions
from .models import Breakpoint, LinkResult, ProjectInfo, ScriptMetadata

__all__ = [
    "Breakpoint",
    "LinkResult",
    "Linker",
    "LinkerOptions",
    "ProjectInfo",
    "ScriptMetadata",
]
