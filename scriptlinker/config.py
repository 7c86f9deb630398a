"""Configuration loading for scriptlinker (.scriptlinker.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".scriptlinker.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class BreakpointConfig:
    """Breakpoint request as written in the config file."""

    file: str
    line: int


@dataclass
class ScriptConfig:
    """Header metadata for the linked script."""

    author: str = ""
    description: str = ""
    map_modes: str = ""


@dataclass
class OutputConfig:
    """Where and how the linked file is written."""

    path: Optional[Path] = None
    inject_breakpoints: bool = True


@dataclass
class LinkerConfig:
    """Represents the high-level settings defined in .scriptlinker.yml."""

    root: Path
    project_dir: Path
    entry_point: Optional[Path] = None
    root_namespace: Optional[str] = None
    script: ScriptConfig = field(default_factory=ScriptConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    breakpoints: List[BreakpointConfig] = field(default_factory=list)
    exclude_paths: List[str] = field(default_factory=list)
    templates_dir: Optional[Path] = None


def load_config(config_path: Path) -> LinkerConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return LinkerConfig(root=root, project_dir=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    project_data = _as_dict(data.get("project"))
    project_dir_str = _as_str(project_data.get("dir"))
    project_dir = (root / project_dir_str).resolve() if project_dir_str else root
    entry_str = _as_str(project_data.get("entry_point"))
    entry_point = (project_dir / entry_str).resolve() if entry_str else None
    root_namespace = _as_str(project_data.get("root_namespace"))

    script_data = _as_dict(data.get("script"))
    script = ScriptConfig(
        author=_as_str(script_data.get("author")) or "",
        description=_as_str(script_data.get("description")) or "",
        map_modes=_as_str(script_data.get("map_modes")) or "",
    )

    output_data = _as_dict(data.get("output"))
    output_str = _as_str(output_data.get("path"))
    inject = _as_bool(output_data.get("inject_breakpoints"))
    output = OutputConfig(
        path=(root / output_str).resolve() if output_str else None,
        inject_breakpoints=True if inject is None else inject,
    )

    breakpoints = [_parse_breakpoint(item) for item in _as_list(data.get("breakpoints"))]

    templates_dir_str = _as_str(data.get("templates_dir"))

    return LinkerConfig(
        root=root,
        project_dir=project_dir,
        entry_point=entry_point,
        root_namespace=root_namespace,
        script=script,
        output=output,
        breakpoints=breakpoints,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        templates_dir=root / templates_dir_str if templates_dir_str else None,
    )


def parse_breakpoint_arg(value: str) -> BreakpointConfig:
    """Parse a ``FILE:LINE`` breakpoint string."""
    file_part, sep, line_part = value.rpartition(":")
    if not sep or not file_part.strip():
        raise ConfigError(f"Breakpoint must look like FILE:LINE, got {value!r}")
    line = _as_int(line_part.strip())
    if line is None or line < 1:
        raise ConfigError(f"Breakpoint line must be a positive integer, got {value!r}")
    return BreakpointConfig(file=file_part.strip(), line=line)


def _parse_breakpoint(value: Any) -> BreakpointConfig:
    if isinstance(value, str):
        return parse_breakpoint_arg(value)
    if isinstance(value, dict):
        file = _as_str(value.get("file"))
        line = _as_int(value.get("line"))
        if file and line is not None and line >= 1:
            return BreakpointConfig(file=file, line=line)
    raise ConfigError(f"Invalid breakpoint entry: {value!r}")


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
