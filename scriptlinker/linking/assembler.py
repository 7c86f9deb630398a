"""Output assembly: document header, file banners and concatenation."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, List

from jinja2 import Environment, FileSystemLoader

from ..models import ExtractedFile, ScriptMetadata

HEADER_TEMPLATE = "header.j2"
TIMESTAMP_FORMAT = "%H:%M:%S %d/%m/%Y"

_DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def relative_source_path(path: Path, project_dir: Path) -> str:
    """Return ``path`` relative to ``project_dir`` with forward slashes."""
    resolved = Path(path).resolve()
    try:
        return resolved.relative_to(Path(project_dir).resolve()).as_posix()
    except ValueError:
        return resolved.as_posix()


def file_banner(path: Path, project_dir: Path) -> str:
    """Render the comment box that marks where a file's contribution begins.

    // ------------------------
    // File: Weapons/Rifle.cs
    // ------------------------
    """
    relative = relative_source_path(path, project_dir)
    bar = "-" * (len(relative) + 6)
    return f"\n// {bar}\n// File: {relative}\n// {bar}\n"


class HeaderRenderer:
    """Renders the document header from a Jinja2 template."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        generator: str = "ScriptLinker",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        search_path = [str(_DEFAULT_TEMPLATES_DIR)]
        if templates_dir is not None:
            search_path.insert(0, str(templates_dir))
        self.generator = generator
        self._clock = clock
        self._env = Environment(
            loader=FileSystemLoader(search_path),
            keep_trailing_newline=True,
        )

    def render(self, metadata: ScriptMetadata) -> str:
        template = self._env.get_template(HEADER_TEMPLATE)
        return template.render(
            generator=self.generator,
            timestamp=self._clock().strftime(TIMESTAMP_FORMAT),
            metadata=metadata,
        )


class OutputAssembler:
    """Accumulates the merged document for one link run."""

    def __init__(self, header_renderer: HeaderRenderer) -> None:
        self._header_renderer = header_renderer
        self._parts: List[str] = []

    def add_header(self, metadata: ScriptMetadata) -> None:
        self._parts.append(self._header_renderer.render(metadata))

    def add_entry_point(self, extracted: ExtractedFile) -> None:
        self._parts.append(f"{extracted.content}\n")

    def add(self, extracted: ExtractedFile) -> None:
        self._parts.append(extracted.content)

    def text(self) -> str:
        return "".join(self._parts) + "\n"


__all__ = [
    "HeaderRenderer",
    "OutputAssembler",
    "file_banner",
    "relative_source_path",
]
