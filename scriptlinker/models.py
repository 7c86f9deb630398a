"""Core data models shared across scriptlinker components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Set


@dataclass(frozen=True)
class Breakpoint:
    """Source location where a debug-break statement is injected."""

    file: Path
    line: int


@dataclass
class ProjectInfo:
    """Project inputs for a single link run."""

    project_dir: Path
    root_namespace: str
    entry_point: Path
    breakpoints: List[Breakpoint] = field(default_factory=list)


@dataclass
class ScriptMetadata:
    """Values rendered into the linked file header."""

    author: str = ""
    description: str = ""
    map_modes: str = ""


@dataclass
class ExtractedFile:
    """Filtered view of one source file produced by the extractor."""

    namespace: str = ""
    using_namespaces: Set[str] = field(default_factory=set)
    class_name: str = ""
    is_partial: bool = False
    is_entry_point: bool = False
    content: str = ""


@dataclass
class LinkResult:
    """Merged text and bookkeeping for one link run."""

    content: str = ""
    linked_files: List[Path] = field(default_factory=list)
    elapsed_ms: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.content and not self.linked_files
