"""Tests for path-based module classification."""

from __future__ import annotations

import pytest

from structura.graph.classifier import (
	DEFAULT_EXTENSION_COLOR,
	EXTENSION_COLORS,
	MODULE_COLORS,
	classify,
	extension_color,
	file_extension,
	module_color,
)
from structura.graph.models import ModuleType


@pytest.mark.unit
@pytest.mark.parametrize(
	("path", "expected"),
	[
		("api/users/route.ts", ModuleType.API),
		("components/Button.tsx", ModuleType.FRONTEND),
		("db/schema/user.sql", ModuleType.DATABASE),
		("README.md", ModuleType.DOCS),
		(".github/workflows/ci.yml", ModuleType.CONFIG),
		("lib/utils.ts", ModuleType.LIB),
		("random.xyz", ModuleType.UNKNOWN),
		("src/server.ts", ModuleType.API),
		("src/routes/index.js", ModuleType.API),
		("src/views/Home.vue", ModuleType.FRONTEND),
		("src/widget.svelte", ModuleType.FRONTEND),
		("migrations/0001_init.py", ModuleType.DATABASE),
		("Dockerfile", ModuleType.CONFIG),
		("tsconfig.base.ts", ModuleType.CONFIG),
		(".env", ModuleType.CONFIG),
		("pyproject.toml", ModuleType.CONFIG),
		("site/docs/intro.txt", ModuleType.DOCS),
		("pkg/helpers/strings.go", ModuleType.LIB),
		("src/__tests__/math.ts", ModuleType.TEST),
	],
)
def test_classification_table(path: str, expected: ModuleType) -> None:
	"""Each path maps to the first rule that matches it."""
	assert classify(path) is expected


@pytest.mark.unit
class TestRulePriority:
	"""Rule order decides between overlapping matches."""

	def test_test_rule_precedes_api(self) -> None:
		"""Test files inside an API directory are tests."""
		assert classify("src/api/user.test.ts") is ModuleType.TEST

	def test_spec_files_are_tests(self) -> None:
		"""``.spec.`` files of the JS family are tests."""
		assert classify("src/components/Card.spec.jsx") is ModuleType.TEST

	def test_python_test_naming_is_not_a_test(self) -> None:
		"""The test rule only covers JS/TS suffixes."""
		assert classify("tests/test_user.py") is ModuleType.UNKNOWN

	def test_api_precedes_frontend(self) -> None:
		"""Route handlers under ``app/`` are API files."""
		assert classify("src/app/api/users/route.ts") is ModuleType.API

	def test_frontend_precedes_config(self) -> None:
		"""JSON under a components directory is frontend, not config."""
		assert classify("src/components/config.json") is ModuleType.FRONTEND

	def test_database_precedes_config(self) -> None:
		"""``.sql`` files win over a ``config`` substring."""
		assert classify("config/seed.sql") is ModuleType.DATABASE

	def test_config_precedes_docs(self) -> None:
		"""A markdown file mentioning config in its name is config."""
		assert classify("docs/configuration.md") is ModuleType.CONFIG


@pytest.mark.unit
class TestDatabaseSchemaNaming:
	"""Schema file names only count through their directory or extension."""

	def test_prisma_schema_inside_prisma_directory(self) -> None:
		"""``prisma/`` is a directory segment, so the schema file is database."""
		assert classify("prisma/schema.prisma") is ModuleType.DATABASE

	def test_prisma_schema_at_root_is_unknown(self) -> None:
		"""The ``.prisma`` extension alone is not a database marker."""
		assert classify("schema.prisma") is ModuleType.UNKNOWN

	def test_folder_without_trailing_segment(self) -> None:
		"""A folder path itself does not contain its own ``/name/`` marker."""
		assert classify("src/api") is ModuleType.UNKNOWN
		assert classify("src/api/v1") is ModuleType.API


@pytest.mark.unit
class TestClassifyEdgeCases:
	"""Classification is total and case-insensitive."""

	def test_empty_path(self) -> None:
		"""Empty paths degrade to unknown."""
		assert classify("") is ModuleType.UNKNOWN

	def test_case_insensitive(self) -> None:
		"""Upper-case paths classify like lower-case ones."""
		assert classify("SRC/API/Users.TS") is ModuleType.API
		assert classify("Docs/README.MD") is ModuleType.DOCS

	def test_deterministic(self) -> None:
		"""Repeated calls agree."""
		paths = ["a/b/c.ts", "src/app/page.tsx", "x.sql", "weird//path"]
		assert [classify(p) for p in paths] == [classify(p) for p in paths]


@pytest.mark.unit
def test_colors() -> None:
	"""Folder colors come from the module type, file colors from the extension."""
	assert module_color(ModuleType.API) == MODULE_COLORS[ModuleType.API]
	assert extension_color("index.TS") == EXTENSION_COLORS["ts"]
	assert extension_color("Dockerfile") == EXTENSION_COLORS["dockerfile"]
	assert extension_color("archive.xyz") == DEFAULT_EXTENSION_COLOR


@pytest.mark.unit
def test_file_extension() -> None:
	"""Extensions are the lowercased text after the last dot."""
	assert file_extension("Button.test.TSX") == "tsx"
	assert file_extension("Makefile") == "makefile"
	assert file_extension(".env") == "env"
