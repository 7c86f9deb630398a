"""The merging engine: line classification, extraction and namespace closure."""

from .assembler import HeaderRenderer, OutputAssembler, file_banner
from .extractor import ContentExtractor, read_source_lines
from .options import BREAKPOINT_STATEMENT, ExtractionMode, LinkerOptions
from .resolver import Linker, select_pending

__all__ = [
    "BREAKPOINT_STATEMENT",
    "ContentExtractor",
    "ExtractionMode",
    "HeaderRenderer",
    "Linker",
    "LinkerOptions",
    "OutputAssembler",
    "file_banner",
    "read_source_lines",
    "select_pending",
]
