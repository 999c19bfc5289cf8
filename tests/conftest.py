"""Global test fixtures and configuration."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from structura.graph.builder import build_graph
from structura.graph.models import Entry, Graph
from structura.utils.config_loader import ConfigLoader
from tests.factories import blob, submodule, tree


@pytest.fixture
def sample_entries() -> list[Entry]:
	"""A small Next.js-style repository listing."""
	return [
		blob("README.md", 120),
		blob("package.json", 800),
		tree("src"),
		tree("src/app"),
		blob("src/app/page.tsx", 900),
		blob("src/app/layout.tsx", 400),
		blob("src/app/api/users/route.ts", 650),
		blob("src/lib/utils.ts", 300),
		blob("src/lib/db/index.ts", 200),
		blob("src/components/Button.tsx", 350),
		blob("src/components/Button.test.tsx", 150),
		submodule("vendor/submodule"),
	]


@pytest.fixture
def sample_graph(sample_entries: list[Entry]) -> Graph:
	"""Base graph built from the sample listing."""
	return build_graph(sample_entries)


@pytest.fixture(autouse=True)
def reset_config_singleton(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
	"""Keep the shared ConfigLoader and STRUCTURA_* variables from leaking between tests."""
	monkeypatch.setattr(ConfigLoader, "_instance", None)
	for name in [key for key in os.environ if key.startswith("STRUCTURA_")]:
		monkeypatch.delenv(name, raising=False)
	yield
