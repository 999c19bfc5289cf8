"""
Regex-based import extraction.

Each language family runs a fixed battery of pattern scans over the whole
file and reports one dependency per match, in scan order. The scans do not
understand comments, strings or multi-line constructs they do not special
case, so both false positives and false negatives are expected.

"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import TYPE_CHECKING

from structura.graph.classifier import file_extension
from structura.graph.models import DependencyKind, ParsedDependency

if TYPE_CHECKING:
	from collections.abc import Callable, Mapping

# JavaScript / TypeScript family
ES_IMPORT_RE = re.compile(r"""import\s+(?:[\w*{}\s,]+\s+from\s+)?['"]([^'"]+)['"]""")
REQUIRE_RE = re.compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)""")
DYNAMIC_IMPORT_RE = re.compile(r"""import\s*\(\s*['"]([^'"]+)['"]\s*\)""")
REEXPORT_RE = re.compile(r"""export\s+(?:[\w*{}\s,]+\s+from\s+)['"]([^'"]+)['"]""")

# Python
PY_FROM_IMPORT_RE = re.compile(r"^from\s+([\w.]+)\s+import", re.MULTILINE)
PY_IMPORT_RE = re.compile(r"^import\s+([\w.]+)", re.MULTILINE)

# Go
GO_IMPORT_RE = re.compile(r'import\s+(?:\(\s*(.*?)\s*\)|"([^"]+)")', re.DOTALL)
GO_QUOTED_PATH_RE = re.compile(r'"([^"]+)"')

# Rust
RUST_USE_RE = re.compile(r"use\s+([\w:]+)")
RUST_MOD_RE = re.compile(r"mod\s+(\w+)")

# Java
JAVA_IMPORT_RE = re.compile(r"import\s+([\w.]+)")

# Exports (JavaScript / TypeScript)
NAMED_EXPORT_RE = re.compile(r"export\s+(?:const|let|var|function|class|interface|type|enum)\s+(\w+)")
DEFAULT_EXPORT_RE = re.compile(r"export\s+default")
MODULE_EXPORTS_RE = re.compile(r"module\.exports")


def _scan(
	file_path: str,
	content: str,
	pattern: re.Pattern[str],
	kind: DependencyKind = DependencyKind.IMPORT,
) -> list[ParsedDependency]:
	return [ParsedDependency(source=file_path, target=m.group(1), kind=kind) for m in pattern.finditer(content)]


def parse_js_imports(file_path: str, content: str) -> list[ParsedDependency]:
	"""ES imports, then CommonJS requires, then dynamic imports, then re-exports."""
	return [
		*_scan(file_path, content, ES_IMPORT_RE),
		*_scan(file_path, content, REQUIRE_RE, DependencyKind.REQUIRE),
		*_scan(file_path, content, DYNAMIC_IMPORT_RE, DependencyKind.DYNAMIC),
		*_scan(file_path, content, REEXPORT_RE),
	]


def parse_python_imports(file_path: str, content: str) -> list[ParsedDependency]:
	"""``from X import`` lines, then ``import X`` lines."""
	return [
		*_scan(file_path, content, PY_FROM_IMPORT_RE),
		*_scan(file_path, content, PY_IMPORT_RE),
	]


def parse_go_imports(file_path: str, content: str) -> list[ParsedDependency]:
	"""Single-line imports and every quoted path inside grouped import blocks."""
	deps: list[ParsedDependency] = []
	for match in GO_IMPORT_RE.finditer(content):
		block, single = match.group(1), match.group(2)
		if single:
			deps.append(ParsedDependency(source=file_path, target=single, kind=DependencyKind.IMPORT))
		elif block:
			deps.extend(_scan(file_path, block, GO_QUOTED_PATH_RE))
	return deps


def parse_rust_imports(file_path: str, content: str) -> list[ParsedDependency]:
	"""``use`` paths, then ``mod`` declarations."""
	return [
		*_scan(file_path, content, RUST_USE_RE),
		*_scan(file_path, content, RUST_MOD_RE),
	]


def parse_java_imports(file_path: str, content: str) -> list[ParsedDependency]:
	"""``import`` statements."""
	return _scan(file_path, content, JAVA_IMPORT_RE)


EXTRACTORS: Mapping[str, Callable[[str, str], list[ParsedDependency]]] = MappingProxyType(
	{
		"ts": parse_js_imports,
		"tsx": parse_js_imports,
		"js": parse_js_imports,
		"jsx": parse_js_imports,
		"mjs": parse_js_imports,
		"cjs": parse_js_imports,
		"vue": parse_js_imports,
		"svelte": parse_js_imports,
		"py": parse_python_imports,
		"go": parse_go_imports,
		"rs": parse_rust_imports,
		"java": parse_java_imports,
	}
)


def parse_imports(file_path: str, content: str) -> list[ParsedDependency]:
	"""
	Extract raw import targets from a file.

	Args:
	    file_path: Repository path of the file, used for dispatch and as the dependency source
	    content: Full text of the file

	Returns:
	    List[ParsedDependency]: Dependencies in scan order; empty for unsupported extensions

	"""
	extractor = EXTRACTORS.get(file_extension(file_path.rsplit("/", 1)[-1]))
	if extractor is None:
		return []
	return extractor(file_path, content)


def parse_exports(content: str) -> list[str]:
	"""
	Detect exported names in JavaScript/TypeScript source.

	Named declarations are listed in source order; ``export default`` and
	``module.exports`` each add ``"default"``.

	Args:
	    content: File text

	Returns:
	    List[str]: Exported names

	"""
	exports = [m.group(1) for m in NAMED_EXPORT_RE.finditer(content)]
	if DEFAULT_EXPORT_RE.search(content):
		exports.append("default")
	if MODULE_EXPORTS_RE.search(content):
		exports.append("default")
	return exports
