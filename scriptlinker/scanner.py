"""Source file enumeration for script projects."""

from __future__ import annotations

import os
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

SOURCE_SUFFIX = ".cs"

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".vs",
    ".vscode",
    ".idea",
    "bin",
    "obj",
    "packages",
    "node_modules",
}


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .scriptlinker.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            if self.directory_only and rel_path.startswith(f"{self.pattern}/"):
                return True
            return False

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def _build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = _build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


class SourceScanner:
    """Walks a project directory and yields candidate source files."""

    def __init__(
        self,
        exclude_paths: Iterable[str] = (),
        *,
        suffix: str = SOURCE_SUFFIX,
    ) -> None:
        self.suffix = suffix.lower()
        self._extra_rules = [
            rule for rule in (_build_ignore_rule(p) for p in exclude_paths) if rule is not None
        ]

    def iter_source_files(self, root: Path) -> Iterator[Path]:
        """Yield absolute source file paths under ``root`` in a stable order."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {root}")

        rules = _parse_gitignore(root_path / ".gitignore") + self._extra_rules

        for dirpath, dirnames, filenames in os.walk(root_path):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root_path).as_posix() if current_dir != root_path else ""

            kept_dirs = []
            for name in sorted(dirnames):
                if name in _EXCLUDED_DIRS:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _should_ignore(rel_path, True, rules):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in sorted(filenames):
                if not filename.lower().endswith(self.suffix):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, rules):
                    continue
                yield current_dir / filename

    def __call__(self, root: Path) -> Iterator[Path]:
        return self.iter_source_files(root)


def read_root_namespace(project_dir: Path) -> str | None:
    """Return ``<RootNamespace>`` from the first .csproj in ``project_dir``."""
    for csproj in sorted(Path(project_dir).glob("*.csproj")):
        try:
            root = ET.fromstring(csproj.read_text(encoding="utf-8-sig"))
        except (ET.ParseError, OSError):
            continue

        namespace = _detect_xml_namespace(root)
        tag = f"{{{namespace}}}RootNamespace" if namespace else "RootNamespace"
        element = root.find(f".//{tag}")
        if element is not None and element.text and element.text.strip():
            return element.text.strip()
    return None


def _detect_xml_namespace(element: ET.Element) -> str | None:
    match = re.match(r"\{(.+)}", element.tag)
    return match.group(1) if match else None


__all__ = ["IgnoreRule", "SourceScanner", "read_root_namespace"]
