"""Namespace closure resolution and the top-level link run."""

from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Set

from ..logging import get_logger
from ..models import LinkResult, ProjectInfo, ScriptMetadata
from ..scanner import SourceScanner
from .assembler import HeaderRenderer, OutputAssembler
from .extractor import ContentExtractor, SourceReader, read_source_lines, resolve_in_project
from .options import ExtractionMode, LinkerOptions

FileLister = Callable[[Path], Iterable[Path]]

logger = get_logger("linking.resolver")


def select_pending(
    namespaces: Iterable[str], settled: Set[str], root_namespace: str
) -> List[str]:
    """Return root-prefixed namespaces not yet settled, in first-seen order."""
    pending: Dict[str, None] = {}
    for namespace in namespaces:
        namespace = namespace.strip()
        if namespace in settled or not namespace.startswith(root_namespace):
            continue
        pending.setdefault(namespace, None)
    return list(pending)


class Linker:
    """Flattens a project into a single source file, starting from its entry point."""

    def __init__(
        self,
        options: LinkerOptions | None = None,
        *,
        file_lister: FileLister | None = None,
        reader: SourceReader = read_source_lines,
        templates_dir: Path | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.options = options or LinkerOptions()
        self._file_lister = file_lister or SourceScanner(suffix=self.options.source_suffix)
        self._reader = reader
        self._header_renderer = HeaderRenderer(
            templates_dir, generator=self.options.generator, clock=clock
        )

    def link(self, project: ProjectInfo, metadata: ScriptMetadata | None = None) -> LinkResult:
        """Merge the entry point and its namespace closure into one document."""
        entry_path = resolve_in_project(project.entry_point, project.project_dir)
        if not entry_path.is_file():
            logger.warning("Entry point not found: %s", project.entry_point)
            return LinkResult()

        started = time.perf_counter()
        extractor = ContentExtractor(project, self.options, reader=self._reader)
        assembler = OutputAssembler(self._header_renderer)
        assembler.add_header(metadata or ScriptMetadata())

        entry = extractor.extract(entry_path, ExtractionMode.ENTRY_POINT)
        assembler.add_entry_point(entry)
        linked: Dict[Path, None] = {entry_path: None}

        settled: Set[str] = {entry.namespace} if entry.namespace else set()
        pending = select_pending(entry.using_namespaces, set(), project.root_namespace)
        rounds = 0

        while pending:
            rounds += 1
            logger.debug("Round %d resolving namespaces: %s", rounds, ", ".join(sorted(pending)))
            wanted = set(pending)
            collected: List[str] = []

            for candidate in self._file_lister(project.project_dir):
                path = Path(candidate).resolve()
                if path in linked:
                    continue
                if extractor.probe_namespace(path) not in wanted:
                    continue

                extracted = extractor.extract(path, ExtractionMode.SUPPORT, entry=entry)
                # Missing files and dropped entry-point classes come back without a namespace.
                if extracted.namespace not in wanted:
                    continue

                assembler.add(extracted)
                linked[path] = None
                settled.add(extracted.namespace)
                collected.extend(sorted(extracted.using_namespaces))
                logger.debug("Linked %s (%s)", path, extracted.namespace)

            settled.update(wanted)
            pending = select_pending(collected, settled, project.root_namespace)

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        return LinkResult(
            content=assembler.text(),
            linked_files=list(linked),
            elapsed_ms=elapsed_ms,
        )


__all__ = ["FileLister", "Linker", "select_pending"]
