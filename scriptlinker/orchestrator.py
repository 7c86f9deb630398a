"""Pipeline orchestration for link runs."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .config import BreakpointConfig, ConfigError, LinkerConfig, load_config, parse_breakpoint_arg
from .linking import Linker, LinkerOptions
from .linking.classifier import match_namespace
from .linking.extractor import read_source_lines, resolve_in_project
from .logging import get_logger
from .models import Breakpoint, LinkResult, ProjectInfo, ScriptMetadata
from .scanner import SourceScanner, read_root_namespace


class LinkError(RuntimeError):
    """Raised when a link run cannot produce any output."""


@dataclass
class LinkOutcome:
    """Result of a link operation."""

    result: LinkResult
    project: ProjectInfo
    output_path: Optional[Path]
    dry_run: bool


LinkerFactory = Callable[[LinkerOptions, LinkerConfig], Linker]


def _default_linker_factory(options: LinkerOptions, config: LinkerConfig) -> Linker:
    scanner = SourceScanner(config.exclude_paths, suffix=options.source_suffix)
    return Linker(options, file_lister=scanner, templates_dir=config.templates_dir)


class Orchestrator:
    """Resolves configuration into a link run and writes the result."""

    def __init__(self, linker_factory: LinkerFactory = _default_linker_factory) -> None:
        self._linker_factory = linker_factory
        self.logger = get_logger("orchestrator")

    def run_link(
        self,
        path: str,
        *,
        entry_point: str | None = None,
        root_namespace: str | None = None,
        output: str | None = None,
        breakpoints: Iterable[str] = (),
        inject_breakpoints: bool | None = None,
        dry_run: bool = False,
    ) -> LinkOutcome:
        """Link the project configured at ``path``."""
        config_path = Path(path).expanduser().resolve()
        if not config_path.exists():
            raise FileNotFoundError(f"Project path not found: {path}")

        config = load_config(config_path)
        self.logger.info("Starting link run for %s", config.project_dir)

        project = self._build_project(config, entry_point, root_namespace, breakpoints)
        options = LinkerOptions(
            inject_breakpoints=(
                config.output.inject_breakpoints if inject_breakpoints is None else inject_breakpoints
            )
        )
        metadata = ScriptMetadata(
            author=config.script.author,
            description=config.script.description,
            map_modes=config.script.map_modes,
        )

        linker = self._linker_factory(options, config)
        result = linker.link(project, metadata)
        if result.is_empty:
            raise LinkError(f"Entry point not found: {project.entry_point}")

        self.logger.info(
            "Linked %d file(s) in %d ms", len(result.linked_files), result.elapsed_ms
        )
        for linked in result.linked_files:
            self.logger.debug("  %s", linked)

        output_path = Path(output).expanduser().resolve() if output else config.output.path
        if output_path is not None and not dry_run:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(result.content, encoding="utf-8")
            self.logger.info("Linked script written to %s", output_path)

        return LinkOutcome(result=result, project=project, output_path=output_path, dry_run=dry_run)

    def _build_project(
        self,
        config: LinkerConfig,
        entry_point: str | None,
        root_namespace: str | None,
        extra_breakpoints: Iterable[str],
    ) -> ProjectInfo:
        project_dir = config.project_dir
        if entry_point:
            entry = resolve_in_project(Path(entry_point), project_dir)
        elif config.entry_point is not None:
            entry = config.entry_point
        else:
            raise ConfigError("No entry point configured; set project.entry_point or pass --entry")

        requests: List[BreakpointConfig] = list(config.breakpoints)
        requests.extend(parse_breakpoint_arg(value) for value in extra_breakpoints)
        breakpoints = [
            Breakpoint(file=resolve_in_project(Path(request.file), project_dir), line=request.line)
            for request in requests
        ]

        namespace = root_namespace or config.root_namespace or self._discover_root_namespace(
            project_dir, entry
        )
        self.logger.debug("Root namespace: %r", namespace)
        return ProjectInfo(
            project_dir=project_dir,
            root_namespace=namespace,
            entry_point=entry,
            breakpoints=breakpoints,
        )

    def _discover_root_namespace(self, project_dir: Path, entry: Path) -> str:
        namespace = read_root_namespace(project_dir)
        if namespace:
            return namespace
        try:
            lines = read_source_lines(entry)
        except OSError:
            return ""
        for line in lines:
            found = match_namespace(line)
            if found:
                prefix = found.split(".")[0]
                self.logger.debug("No <RootNamespace> found; using %s from the entry namespace", prefix)
                return prefix
        return ""


__all__ = ["LinkError", "LinkOutcome", "Orchestrator"]
