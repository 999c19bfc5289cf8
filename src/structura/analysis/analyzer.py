"""
File and module analysis.

Uses the Gemini API when a key is available and falls back to a
deterministic heuristic otherwise. The AI path never raises: transport
errors, bad status codes, unparsable replies and schema mismatches all
produce the heuristic result instead.

"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any, Literal

import requests
from pydantic import BaseModel, Field, ValidationError

from structura.config import DEFAULT_CONFIG
from structura.graph.builder import MODULE_DESCRIPTIONS, find_entry_points
from structura.graph.classifier import file_extension
from structura.graph.models import ModuleSummary, ModuleType

if TYPE_CHECKING:
	from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)

Complexity = Literal["low", "medium", "high"]

HIGH_COMPLEXITY_LINES = 300
MEDIUM_COMPLEXITY_LINES = 100
MAX_LISTED_ITEMS = 20
MODULE_MAX_OUTPUT_TOKENS = 400

HEURISTIC_IMPORT_RE = re.compile(r"""(?:import|require|from)\s+['"]([^'"]+)['"]""")
HEURISTIC_EXPORT_RE = re.compile(r"export\s+(?:default\s+)?(?:const|function|class|interface|type)\s+(\w+)")
DEFAULT_EXPORT_RE = re.compile(r"export\s+default")
JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

# Ordered: the first pattern found in the file name or path wins
PURPOSE_PATTERNS: tuple[tuple[str, str], ...] = (
	("route.ts", "API route handler"),
	("route.js", "API route handler"),
	("page.tsx", "Page component (Next.js)"),
	("page.jsx", "Page component (Next.js)"),
	("layout.tsx", "Layout wrapper component"),
	("layout.jsx", "Layout wrapper component"),
	("middleware.ts", "Request middleware"),
	(".config.", "Configuration file"),
	(".test.", "Test suite"),
	(".spec.", "Test specification"),
)


class FileAnalysis(BaseModel):
	"""Structured description of a single file."""

	path: str
	summary: str = "No summary available"
	purpose: str = "Unknown purpose"
	dependencies: list[str] = Field(default_factory=list)
	exports: list[str] = Field(default_factory=list)
	complexity: Complexity = "medium"


class AnalysisError(Exception):
	"""Raised internally when the AI service cannot produce a usable answer."""


def _settings(config: Mapping[str, Any] | None) -> dict[str, Any]:
	return {**DEFAULT_CONFIG["analysis"], **(config or {})}


def heuristic_file_analysis(path: str, content: str) -> FileAnalysis:
	"""
	Describe a file from regex-derived counts and its name.

	Args:
	    path: Repository path of the file
	    content: File text

	Returns:
	    FileAnalysis: The heuristic record

	"""
	filename = path.rsplit("/", 1)[-1] or path
	ext = file_extension(filename)
	lines = content.count("\n") + 1

	deps = [m.group(1) for m in HEURISTIC_IMPORT_RE.finditer(content)]
	exports = [m.group(1) for m in HEURISTIC_EXPORT_RE.finditer(content)]
	if DEFAULT_EXPORT_RE.search(content):
		exports.append("default")

	complexity: Complexity
	if lines > HIGH_COMPLEXITY_LINES:
		complexity = "high"
	elif lines > MEDIUM_COMPLEXITY_LINES:
		complexity = "medium"
	else:
		complexity = "low"

	purpose = f"{ext.upper()} source file"
	for pattern, description in PURPOSE_PATTERNS:
		if pattern in filename or pattern in path:
			purpose = description
			break

	return FileAnalysis(
		path=path,
		summary=f"{filename} - {lines} lines, {len(deps)} dependencies, {len(exports)} exports",
		purpose=purpose,
		dependencies=deps[:MAX_LISTED_ITEMS],
		exports=exports[:MAX_LISTED_ITEMS],
		complexity=complexity,
	)


def heuristic_module_analysis(name: str, module_type: ModuleType, files: Sequence[str]) -> ModuleSummary:
	"""Describe a module from its type and the names of its files."""
	return ModuleSummary(
		name=name,
		type=module_type,
		description=MODULE_DESCRIPTIONS[module_type],
		files=list(files),
		entry_points=find_entry_points(files),
	)


def _extract_json(text: str) -> dict[str, Any]:
	"""Pull the first JSON object out of a model reply, tolerating markdown fences."""
	match = JSON_OBJECT_RE.search(text)
	if not match:
		msg = "No JSON object in model response"
		raise AnalysisError(msg)
	try:
		data = json.loads(match.group(0))
	except json.JSONDecodeError as e:
		msg = f"Invalid JSON in model response: {e}"
		raise AnalysisError(msg) from e
	if not isinstance(data, dict):
		msg = "Model response is not a JSON object"
		raise AnalysisError(msg)
	return data


def _generate(prompt: str, api_key: str, settings: Mapping[str, Any], max_output_tokens: int) -> str:
	"""
	Send a prompt to Gemini and return the text of the first candidate.

	Raises:
	    AnalysisError: On any transport, status or response-shape failure

	"""
	url = f"{settings['gemini_api_url'].rstrip('/')}/{settings['gemini_model']}:generateContent"
	body = {
		"contents": [{"parts": [{"text": prompt}]}],
		"generationConfig": {
			"temperature": settings["temperature"],
			"maxOutputTokens": max_output_tokens,
		},
	}
	try:
		response = requests.post(url, params={"key": api_key}, json=body, timeout=settings["timeout"])
	except requests.RequestException as e:
		msg = f"Gemini request failed: {e}"
		raise AnalysisError(msg) from e

	if not response.ok:
		msg = f"Gemini API error: {response.status_code}"
		raise AnalysisError(msg)

	try:
		data = response.json()
		text = data["candidates"][0]["content"]["parts"][0]["text"]
	except (ValueError, KeyError, IndexError, TypeError) as e:
		msg = f"Unexpected Gemini response shape: {e}"
		raise AnalysisError(msg) from e

	if not isinstance(text, str):
		msg = f"Gemini response text is {type(text).__name__}, not a string"
		raise AnalysisError(msg)
	return text


def _file_prompt(path: str, content: str) -> str:
	return f"""Analyze this source code file and respond ONLY with valid JSON (no markdown, no code fences).

File: {path}

```
{content}
```

Return this exact JSON structure:
{{
  "path": "{path}",
  "summary": "One sentence describing what this file does",
  "purpose": "Its role in the project architecture",
  "dependencies": ["list of imports/dependencies"],
  "exports": ["list of exports"],
  "complexity": "low|medium|high"
}}"""


def _module_prompt(name: str, module_type: ModuleType, files: Sequence[str]) -> str:
	file_list = ", ".join(files)
	return f"""Analyze this code module and respond ONLY with valid JSON (no markdown, no code fences).

Module: {name}
Type: {module_type.value}
Files: {file_list}

Return this exact JSON structure:
{{
  "name": "{name}",
  "type": "{module_type.value}",
  "description": "What this module does in the project",
  "files": {json.dumps(list(files))},
  "entryPoints": ["main entry files"],
  "recommendations": ["architectural suggestions"]
}}"""


def analyze_file(
	path: str,
	content: str,
	api_key: str | None = None,
	config: Mapping[str, Any] | None = None,
) -> FileAnalysis:
	"""
	Analyze a file, preferring the AI service when a key is given.

	Args:
	    path: Repository path of the file
	    content: File text
	    api_key: Gemini API key; without it the heuristic is used directly
	    config: The ``analysis`` configuration section

	Returns:
	    FileAnalysis: The AI record, or the heuristic one on any failure

	"""
	settings = _settings(config)
	content = content[: settings["max_content_chars"]]
	if not api_key:
		return heuristic_file_analysis(path, content)

	try:
		text = _generate(
			_file_prompt(path, content[: settings["max_prompt_chars"]]),
			api_key,
			settings,
			settings["max_output_tokens"],
		)
		data = _extract_json(text)
		data.setdefault("path", path)
		return FileAnalysis.model_validate({k: v for k, v in data.items() if v is not None})
	except (AnalysisError, ValidationError) as e:
		logger.warning("AI analysis unavailable for %s, falling back to heuristic analysis: %s", path, e)
		return heuristic_file_analysis(path, content)


def analyze_module(
	name: str,
	module_type: ModuleType,
	files: Sequence[str],
	api_key: str | None = None,
	config: Mapping[str, Any] | None = None,
) -> ModuleSummary:
	"""
	Describe a module, preferring the AI service when a key is given.

	Args:
	    name: Display name of the module
	    module_type: Module type shared by the files
	    files: Repository paths of the module's files
	    api_key: Gemini API key; without it the heuristic is used directly
	    config: The ``analysis`` configuration section

	Returns:
	    ModuleSummary: The AI summary, or the heuristic one on any failure

	"""
	if not api_key:
		return heuristic_module_analysis(name, module_type, files)

	settings = _settings(config)
	try:
		text = _generate(_module_prompt(name, module_type, files), api_key, settings, MODULE_MAX_OUTPUT_TOKENS)
		data = _extract_json(text)
		return ModuleSummary(
			name=str(data.get("name") or name),
			type=ModuleType(data.get("type") or module_type.value),
			description=str(data.get("description") or "No description available"),
			files=[str(f) for f in data.get("files") or files],
			entry_points=[str(f) for f in data.get("entryPoints") or []],
			recommendations=[str(r) for r in data.get("recommendations") or []],
		)
	except (AnalysisError, ValueError, TypeError) as e:
		logger.warning("AI analysis unavailable for module %s, falling back to heuristic analysis: %s", name, e)
		return heuristic_module_analysis(name, module_type, files)
