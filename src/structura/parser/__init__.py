"""Heuristic import parsing and resolution."""

from .imports import parse_exports, parse_imports
from .resolver import resolve_import_path

__all__ = ["parse_exports", "parse_imports", "resolve_import_path"]
