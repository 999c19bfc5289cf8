"""
Path-based module classification and color lookup.

Classification is an ordered list of rules over the lowercased path; the
first rule that matches decides the module type. Directory markers such as
``/api/`` are matched against the path with a leading slash so that
top-level directories count as segments too.

"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import TYPE_CHECKING, NamedTuple

from structura.graph.models import ModuleType

if TYPE_CHECKING:
	from collections.abc import Mapping


class ClassificationRule(NamedTuple):
	"""A single classification rule."""

	module_type: ModuleType
	contains: tuple[str, ...] = ()
	suffixes: tuple[str, ...] = ()
	pattern: re.Pattern[str] | None = None

	def matches(self, lowered: str) -> bool:
		"""Check the rule against a lowercased, slash-prefixed path."""
		if self.pattern is not None and self.pattern.search(lowered):
			return True
		if any(marker in lowered for marker in self.contains):
			return True
		return lowered.endswith(self.suffixes) if self.suffixes else False


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
	ClassificationRule(
		ModuleType.TEST,
		contains=("__tests__",),
		pattern=re.compile(r"\.(test|spec)\.(ts|tsx|js|jsx)$"),
	),
	ClassificationRule(
		ModuleType.API,
		contains=("/api/", "/routes/", "/controllers/", "/handlers/", "server."),
	),
	ClassificationRule(
		ModuleType.FRONTEND,
		contains=("/components/", "/pages/", "/views/", "/app/"),
		suffixes=(".tsx", ".jsx", ".vue", ".svelte"),
	),
	ClassificationRule(
		ModuleType.DATABASE,
		contains=("/models/", "/schema/", "/migrations/", "/prisma/", "/drizzle/"),
		suffixes=(".sql",),
	),
	ClassificationRule(
		ModuleType.CONFIG,
		contains=("config", "dockerfile"),
		suffixes=(".json", ".yaml", ".yml", ".toml", ".env"),
	),
	ClassificationRule(
		ModuleType.DOCS,
		contains=("/docs/",),
		suffixes=(".md",),
	),
	ClassificationRule(
		ModuleType.LIB,
		contains=("/lib/", "/utils/", "/helpers/"),
	),
)

MODULE_COLORS: Mapping[ModuleType, str] = MappingProxyType(
	{
		ModuleType.API: "#ef4444",
		ModuleType.FRONTEND: "#3b82f6",
		ModuleType.DATABASE: "#f59e0b",
		ModuleType.CONFIG: "#6b7280",
		ModuleType.TEST: "#8b5cf6",
		ModuleType.DOCS: "#10b981",
		ModuleType.LIB: "#06b6d4",
		ModuleType.UNKNOWN: "#9ca3af",
	}
)
DEFAULT_MODULE_COLOR = "#9ca3af"

EXTENSION_COLORS: Mapping[str, str] = MappingProxyType(
	{
		"ts": "#3178c6",
		"tsx": "#3178c6",
		"js": "#f7df1e",
		"jsx": "#f7df1e",
		"py": "#3776ab",
		"rs": "#dea584",
		"go": "#00add8",
		"java": "#b07219",
		"rb": "#cc342d",
		"php": "#4f5d95",
		"css": "#563d7c",
		"scss": "#c6538c",
		"html": "#e34c26",
		"json": "#292929",
		"md": "#083fa1",
		"yaml": "#cb171e",
		"yml": "#cb171e",
		"toml": "#9c4121",
		"sql": "#e38c00",
		"sh": "#89e051",
		"dockerfile": "#384d54",
		"vue": "#41b883",
		"svelte": "#ff3e00",
	}
)
DEFAULT_EXTENSION_COLOR = "#6b7280"

ROOT_COLOR = "#ffffff"


def classify(path: str) -> ModuleType:
	"""
	Classify a repository path into a module type.

	Args:
	    path: Slash-separated repository path (file or folder)

	Returns:
	    ModuleType: The first matching rule's type, or ``UNKNOWN``

	"""
	if not path:
		return ModuleType.UNKNOWN
	lowered = "/" + path.lower().lstrip("/")
	for rule in CLASSIFICATION_RULES:
		if rule.matches(lowered):
			return rule.module_type
	return ModuleType.UNKNOWN


def file_extension(filename: str) -> str:
	"""Return the lowercased text after the last dot (the whole name when there is none)."""
	return filename.rsplit(".", 1)[-1].lower()


def module_color(module_type: ModuleType) -> str:
	"""Color used for folders of the given module type."""
	return MODULE_COLORS.get(module_type, DEFAULT_MODULE_COLOR)


def extension_color(filename: str) -> str:
	"""Color used for a file, keyed by its extension."""
	return EXTENSION_COLORS.get(file_extension(filename), DEFAULT_EXTENSION_COLOR)
