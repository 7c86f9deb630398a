"""Brace-depth driven extraction of a single source file."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Set

from ..logging import get_logger
from ..models import Breakpoint, ExtractedFile, ProjectInfo
from .assembler import file_banner
from .classifier import classify_line, match_namespace, next_depth
from .options import ExtractionMode, LinkerOptions

SourceReader = Callable[[Path], List[str]]

logger = get_logger("linking.extractor")


def read_source_lines(path: Path) -> List[str]:
    """Read ``path`` as text lines without their line terminators."""
    with Path(path).open(encoding="utf-8-sig", errors="replace", newline=None) as handle:
        return [line.rstrip("\n") for line in handle]


def resolve_in_project(path: Path, base: Path) -> Path:
    """Resolve ``path`` against ``base`` unless it is already absolute."""
    path = Path(path).expanduser()
    if not path.is_absolute():
        path = base / path
    return path.resolve()


def index_breakpoints(
    breakpoints: Iterable[Breakpoint], project_dir: Path
) -> Dict[Path, FrozenSet[int]]:
    """Group breakpoint line numbers by normalised file path."""
    grouped: Dict[Path, Set[int]] = {}
    for breakpoint in breakpoints:
        key = resolve_in_project(breakpoint.file, project_dir)
        grouped.setdefault(key, set()).add(breakpoint.line)
    return {key: frozenset(lines) for key, lines in grouped.items()}


class ContentExtractor:
    """Filters a file down to the lines that belong in the linked output."""

    def __init__(
        self,
        project: ProjectInfo,
        options: LinkerOptions | None = None,
        *,
        reader: SourceReader = read_source_lines,
    ) -> None:
        self.project = project
        self.options = options or LinkerOptions()
        self._reader = reader
        self._breakpoints = (
            index_breakpoints(project.breakpoints, project.project_dir)
            if self.options.inject_breakpoints
            else {}
        )

    def probe_namespace(self, path: Path) -> str:
        """Return the namespace ``extract`` would record for ``path``, or ``""``.

        Only declarations in the header region (depth <= 1) count and the last
        one wins, without building any output.
        """
        try:
            lines = self._reader(path)
        except OSError as exc:
            logger.warning("Cannot read %s, skipping: %s", path, exc)
            return ""
        namespace = ""
        depth = 0
        for line in lines:
            if depth <= 1:
                namespace = match_namespace(line) or namespace
            _, depth = next_depth(depth, classify_line(line))
        return namespace

    def extract(
        self,
        path: Path,
        mode: ExtractionMode = ExtractionMode.SUPPORT,
        *,
        entry: Optional[ExtractedFile] = None,
    ) -> ExtractedFile:
        """Extract ``path`` under ``mode``.

        In support mode a class implementing the entry interface is either
        rerouted through entry-point mode (a partial fragment of ``entry``) or
        dropped entirely.
        """
        try:
            lines = self._reader(path)
        except OSError as exc:
            logger.warning("Cannot read %s, skipping: %s", path, exc)
            return ExtractedFile()

        result = ExtractedFile()
        breakpoints = self._breakpoints.get(resolve_in_project(path, self.project.project_dir), frozenset())
        threshold = mode.body_depth
        body: List[str] = []
        depth = 0

        for number, line in enumerate(lines, start=1):
            info = classify_line(line, constructor_pattern=self.options.constructor_pattern)

            if depth <= 1:
                if info.using:
                    result.using_namespaces.add(info.using)
                if info.namespace:
                    result.namespace = info.namespace
                    result.using_namespaces.add(info.namespace)
                declaration = info.class_declaration
                if declaration is not None and not result.class_name:
                    result.class_name = declaration.name
                    result.is_partial = declaration.is_partial
                    result.is_entry_point = declaration.implements(self.options.entry_interface)
                    if mode is ExtractionMode.SUPPORT and result.is_entry_point:
                        return self._reroute(path, result, entry)

            emit_depth, depth = next_depth(depth, info)
            if info.is_constructor:
                continue

            bare = not info.opens_block and not info.closes_block
            if (emit_depth == threshold and bare) or emit_depth > threshold:
                body.append(line)
            if number in breakpoints:
                body.append(self.options.breakpoint_statement)

        banner = file_banner(path, self.project.project_dir)
        result.content = banner + "\n" + "".join(f"{line}\n" for line in body)
        return result

    def _reroute(
        self, path: Path, found: ExtractedFile, entry: Optional[ExtractedFile]
    ) -> ExtractedFile:
        if (
            entry is not None
            and found.is_partial
            and found.namespace == entry.namespace
            and found.class_name == entry.class_name
        ):
            logger.debug("Linking %s as a partial fragment of %s", path, entry.class_name)
            return self.extract(path, ExtractionMode.ENTRY_POINT)
        logger.debug("Ignoring unrelated entry-point class %s in %s", found.class_name, path)
        return ExtractedFile()


__all__ = [
    "ContentExtractor",
    "SourceReader",
    "index_breakpoints",
    "read_source_lines",
    "resolve_in_project",
]
