"""Resolution of relative and aliased import targets to repository paths."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from collections.abc import Container

INTERNAL_PREFIXES: tuple[str, ...] = (".", "@/", "~/")

SRC_ALIAS = "@/"
ROOT_ALIAS = "~/"

CANDIDATE_SUFFIXES: tuple[str, ...] = (
	"",
	".ts",
	".tsx",
	".js",
	".jsx",
	".mjs",
	"/index.ts",
	"/index.tsx",
	"/index.js",
	"/index.jsx",
)


def _join_relative(source_path: str, target: str) -> str:
	"""Walk ``target``'s segments from the directory containing ``source_path``."""
	stack = [part for part in source_path.split("/")[:-1] if part]
	for part in target.split("/"):
		if part == "..":
			if stack:
				stack.pop()
		elif part not in (".", ""):
			stack.append(part)
	return "/".join(stack)


def resolve_import_path(source_path: str, raw_target: str, known_paths: Container[str]) -> str | None:
	"""
	Map an import target to a file that exists in the repository.

	Only intra-repository references are considered: relative targets
	(starting with ``.``), ``@/`` (rewritten to ``src/``) and ``~/``
	(repository root). Anything else is an external package.

	Args:
	    source_path: Repository path of the importing file
	    raw_target: Import target as written in the source
	    known_paths: Repository file paths

	Returns:
	    Optional[str]: The first existing candidate path, or None

	"""
	if not raw_target.startswith(INTERNAL_PREFIXES):
		return None

	if raw_target.startswith(SRC_ALIAS):
		resolved = "src/" + raw_target[len(SRC_ALIAS) :]
	elif raw_target.startswith(ROOT_ALIAS):
		resolved = raw_target[len(ROOT_ALIAS) :]
	else:
		resolved = _join_relative(source_path, raw_target)

	for suffix in CANDIDATE_SUFFIXES:
		candidate = resolved + suffix
		if candidate in known_paths:
			return candidate
	return None
