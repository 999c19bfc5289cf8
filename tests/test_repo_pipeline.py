"""Tests for the repository analysis pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests
import yaml

from structura.github.client import GitHubClient
from structura.github.errors import GitHubError, InvalidRepositoryError, RepositoryNotFoundError
from structura.github.models import GitHubRepo, GitHubTree
from structura.graph.builder import build_graph
from structura.graph.models import Graph, ModuleType
from structura.pipeline import (
	RepoAnalysis,
	analyze_repository,
	extract_resolved_pairs,
	link_dependencies,
	select_files_to_parse,
)
from structura.utils.config_loader import ConfigLoader
from tests.factories import blob

SOURCES: dict[str, str] = {
	"src/app/page.tsx": (
		"import { cn } from '@/lib/utils';\nimport Button from '../components/Button';\nimport React from 'react';\n"
	),
	"src/components/Button.tsx": "import { cn } from '../lib/utils';\nexport default function Button() {}\n",
	"src/lib/utils.ts": "export function cn() {}\n",
}

BROKEN_PATH = "src/lib/broken.ts"

EXPECTED_PAIRS = [
	("src/app/page.tsx", "src/lib/utils.ts"),
	("src/app/page.tsx", "src/components/Button.tsx"),
	("src/components/Button.tsx", "src/lib/utils.ts"),
]


def _fetch(path: str) -> str:
	if path == BROKEN_PATH:
		msg = "boom"
		raise GitHubError(msg)
	return SOURCES.get(path, "")


def _response(status_code: int = 200, payload: Any = None, text: str = "") -> MagicMock:
	response = MagicMock(spec=requests.Response)
	response.status_code = status_code
	response.ok = status_code < 400
	response.reason = "Error" if status_code >= 400 else "OK"
	response.json.return_value = payload
	response.text = text
	return response


@pytest.fixture
def app_graph() -> Graph:
	"""Base graph of a tiny Next.js app with one unreachable file."""
	return build_graph(
		[
			blob("src/app/page.tsx"),
			blob("src/components/Button.tsx"),
			blob("src/lib/utils.ts"),
			blob(BROKEN_PATH),
			blob("README.md"),
		]
	)


@pytest.fixture
def config_loader(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigLoader:
	"""Configuration loaded from an empty working directory."""
	monkeypatch.chdir(tmp_path)
	return ConfigLoader(None)


@pytest.fixture
def fake_client() -> MagicMock:
	"""A GitHub client that serves a fixed repository."""
	client = MagicMock(spec=GitHubClient)
	client.fetch_repo.return_value = GitHubRepo.model_validate(
		{
			"id": 7,
			"name": "demo",
			"full_name": "octo/demo",
			"description": "Demo app",
			"default_branch": "main",
			"stargazers_count": 5,
			"forks_count": 1,
			"language": "TypeScript",
			"html_url": "https://github.com/octo/demo",
			"private": False,
		}
	)
	tree: dict[str, Any] = {
		"sha": "s",
		"url": "u",
		"truncated": False,
		"tree": [
			{"path": "src", "type": "tree", "sha": "1"},
			{"path": "src/app/page.tsx", "type": "blob", "sha": "2", "size": 90},
			{"path": "src/components/Button.tsx", "type": "blob", "sha": "3", "size": 60},
			{"path": "src/lib/utils.ts", "type": "blob", "sha": "4", "size": 30},
			{"path": BROKEN_PATH, "type": "blob", "sha": "5", "size": 10},
			{"path": "README.md", "type": "blob", "sha": "6", "size": 10},
		],
	}
	client.fetch_tree.return_value = GitHubTree.model_validate(tree)
	client.fetch_raw_content.side_effect = lambda _owner, _name, path, _branch: _fetch(path)
	return client


@pytest.mark.unit
class TestSelection:
	"""Choosing which files to parse."""

	def test_only_parsable_extensions(self, app_graph: Graph) -> None:
		"""Files the parser does not understand are skipped."""
		assert select_files_to_parse(app_graph) == [
			"src/app/page.tsx",
			"src/components/Button.tsx",
			"src/lib/utils.ts",
			BROKEN_PATH,
		]

	def test_parse_limit(self, app_graph: Graph) -> None:
		"""Selection keeps graph order up to the limit."""
		assert select_files_to_parse(app_graph, parse_limit=2) == ["src/app/page.tsx", "src/components/Button.tsx"]
		assert select_files_to_parse(app_graph, parse_limit=0) == []

	def test_custom_extensions(self, app_graph: Graph) -> None:
		"""The extension set is configurable."""
		assert select_files_to_parse(app_graph, extensions={"ts"}) == ["src/lib/utils.ts", BROKEN_PATH]

	def test_extract_resolved_pairs(self) -> None:
		"""External packages and unknown files are dropped."""
		known = {"src/lib/utils.ts", "src/components/Button.tsx"}

		assert extract_resolved_pairs("src/app/page.tsx", SOURCES["src/app/page.tsx"], known) == [
			("src/app/page.tsx", "src/lib/utils.ts"),
			("src/app/page.tsx", "src/components/Button.tsx"),
		]


@pytest.mark.processor
class TestLinkDependencies:
	"""Dependency enrichment over fetched contents."""

	async def test_links_resolved_imports(self, app_graph: Graph) -> None:
		"""Resolved imports become edges; the failing fetch is skipped."""
		linked = await link_dependencies(app_graph, _fetch)

		assert [edge.key for edge in linked.dependency_edges()] == EXPECTED_PAIRS
		assert app_graph.dependency_edges() == []

	async def test_fetch_limit(self, app_graph: Graph) -> None:
		"""Only the first fetch_limit selected files are fetched."""
		fetch = MagicMock(side_effect=_fetch)

		linked = await link_dependencies(app_graph, fetch, fetch_limit=1)

		fetch.assert_called_once_with("src/app/page.tsx")
		assert [edge.key for edge in linked.dependency_edges()] == EXPECTED_PAIRS[:2]

	async def test_fetch_limit_never_exceeds_parse_limit(self, app_graph: Graph) -> None:
		"""The fetched sample is a subset of the selected one."""
		fetch = MagicMock(side_effect=_fetch)

		await link_dependencies(app_graph, fetch, parse_limit=2, fetch_limit=10)

		assert fetch.call_count == 2

	async def test_nothing_selected(self, app_graph: Graph) -> None:
		"""With nothing to fetch the input graph is returned as is."""
		fetch = MagicMock(side_effect=_fetch)

		linked = await link_dependencies(app_graph, fetch, fetch_limit=0)

		assert linked is app_graph
		fetch.assert_not_called()

	async def test_all_fetches_fail(self, app_graph: Graph) -> None:
		"""Total failure still yields the base graph's edges."""
		fetch = MagicMock(side_effect=GitHubError("down"))

		linked = await link_dependencies(app_graph, fetch)

		assert linked.edges == app_graph.edges

	async def test_serialized_fetches(self, app_graph: Graph) -> None:
		"""A concurrency of one still processes every file."""
		linked = await link_dependencies(app_graph, _fetch, max_concurrency=1)

		assert len(linked.dependency_edges()) == 3

	async def test_relative_import_becomes_edge(self) -> None:
		"""A sibling import written without an extension links the two files."""
		graph = build_graph([blob("src/a.ts"), blob("src/b.ts")])
		contents = {"src/a.ts": "import { b } from './b';\n", "src/b.ts": "export const b = 1;\n"}

		linked = await link_dependencies(graph, contents.__getitem__)

		assert [edge.key for edge in linked.dependency_edges()] == [("src/a.ts", "src/b.ts")]


@pytest.mark.processor
class TestAnalyzeRepository:
	"""End-to-end pipeline with a fake GitHub client."""

	async def test_full_run(self, fake_client: MagicMock, config_loader: ConfigLoader) -> None:
		"""Metadata, graph, modules and stats are all produced."""
		analysis = await analyze_repository("https://github.com/octo/demo", fake_client, config_loader=config_loader)

		assert isinstance(analysis, RepoAnalysis)
		assert analysis.repo.owner == "octo"
		assert analysis.repo.stars == 5
		fake_client.fetch_tree.assert_called_once_with("octo", "demo", "main")
		assert [edge.key for edge in analysis.graph.dependency_edges()] == EXPECTED_PAIRS
		assert analysis.stats is not None
		assert analysis.stats.dependency_edges == 3
		assert analysis.stats.total_files == 5
		assert {module.type for module in analysis.modules} == {
			ModuleType.FRONTEND,
			ModuleType.LIB,
			ModuleType.DOCS,
		}

		data = analysis.to_dict()
		assert data["repo"]["defaultBranch"] == "main"
		assert set(data["graph"]) == {"nodes", "links"}
		assert data["stats"]["dependencyEdges"] == 3

	async def test_explicit_branch(self, fake_client: MagicMock, config_loader: ConfigLoader) -> None:
		"""The requested branch is used for the tree and raw contents."""
		await analyze_repository("octo/demo", fake_client, branch="dev", config_loader=config_loader)

		fake_client.fetch_tree.assert_called_once_with("octo", "demo", "dev")
		branches = {call.args[3] for call in fake_client.fetch_raw_content.call_args_list}
		assert branches == {"dev"}

	async def test_without_dependencies(self, fake_client: MagicMock, config_loader: ConfigLoader) -> None:
		"""Skipping enrichment makes no content requests."""
		analysis = await analyze_repository(
			"octo/demo", fake_client, with_dependencies=False, config_loader=config_loader
		)

		fake_client.fetch_raw_content.assert_not_called()
		assert analysis.graph.dependency_edges() == []

	async def test_configured_limits(
		self, fake_client: MagicMock, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
	) -> None:
		"""Sample sizes come from the dependencies section."""
		config_file = tmp_path / "limits.yml"
		config_file.write_text(yaml.dump({"dependencies": {"parse_limit": 3, "fetch_limit": 2}}))
		monkeypatch.chdir(tmp_path)

		await analyze_repository("octo/demo", fake_client, config_loader=ConfigLoader(str(config_file)))

		assert fake_client.fetch_raw_content.call_count == 2

	async def test_invalid_reference(self, fake_client: MagicMock, config_loader: ConfigLoader) -> None:
		"""Unparsable references fail before any request."""
		with pytest.raises(InvalidRepositoryError, match="Invalid repository reference"):
			await analyze_repository("not a repo", fake_client, config_loader=config_loader)

		fake_client.fetch_repo.assert_not_called()

	async def test_github_errors_propagate(self, fake_client: MagicMock, config_loader: ConfigLoader) -> None:
		"""Metadata failures are not swallowed."""
		fake_client.fetch_repo.side_effect = RepositoryNotFoundError()

		with pytest.raises(RepositoryNotFoundError):
			await analyze_repository("octo/missing", fake_client, config_loader=config_loader)

		fake_client.fetch_tree.assert_not_called()


@pytest.mark.processor
@pytest.mark.github
class TestBranchFallbackRun:
	"""A repository that only has a master branch, served over a mocked session."""

	RAW_MASTER = {
		"src/a.ts": "import { b } from './b';\n",
		"src/b.ts": "export const b = 1;\n",
	}

	@staticmethod
	def _serve(url: str, **_: Any) -> MagicMock:
		if url.endswith("/repos/octo/legacy"):
			return _response(
				payload={
					"id": 9,
					"name": "legacy",
					"full_name": "octo/legacy",
					"default_branch": "main",
					"stargazers_count": 0,
					"forks_count": 0,
					"html_url": "https://github.com/octo/legacy",
					"private": False,
				}
			)
		if url.endswith("/git/trees/master"):
			return _response(
				payload={
					"sha": "m1",
					"url": "u",
					"truncated": False,
					"tree": [
						{"path": "src", "type": "tree", "sha": "1"},
						{"path": "src/a.ts", "type": "blob", "sha": "2", "size": 25},
						{"path": "src/b.ts", "type": "blob", "sha": "3", "size": 20},
					],
				}
			)
		prefix = "https://raw.githubusercontent.com/octo/legacy/master/"
		if url.startswith(prefix) and url[len(prefix) :] in TestBranchFallbackRun.RAW_MASTER:
			return _response(text=TestBranchFallbackRun.RAW_MASTER[url[len(prefix) :]])
		return _response(404)

	async def test_contents_come_from_fallback_branch(self, config_loader: ConfigLoader) -> None:
		"""Raw files are read from the branch the tree was listed on."""
		session = MagicMock(spec=requests.Session)
		session.get.side_effect = self._serve
		client = GitHubClient(token="", session=session)

		analysis = await analyze_repository("octo/legacy", client, config_loader=config_loader)

		assert analysis.stats is not None
		assert analysis.stats.dependency_edges == 1
		assert [edge.key for edge in analysis.graph.dependency_edges()] == [("src/a.ts", "src/b.ts")]
		assert analysis.repo.branch == "master"
		assert analysis.repo.default_branch == "main"
		raw_urls = [call.args[0] for call in session.get.call_args_list if "raw.githubusercontent" in call.args[0]]
		assert raw_urls
		assert all("/master/" in url for url in raw_urls)
