"""
Repository analysis pipeline.

Orchestrates the GitHub client and the pure graph core: fetch metadata and
the recursive tree, build the base graph, enrich it with dependency edges
from a bounded sample of file contents, then derive module summaries and
statistics.

"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from structura.config import DEFAULT_CONFIG
from structura.github.client import GitHubClient, parse_github_url
from structura.github.errors import InvalidRepositoryError
from structura.graph.builder import add_dependency_edges, build_graph, compute_stats, group_by_module
from structura.graph.classifier import file_extension
from structura.parser.imports import parse_imports
from structura.parser.resolver import resolve_import_path
from structura.utils.config_loader import ConfigLoader

if TYPE_CHECKING:
	from collections.abc import Callable, Collection, Container, Iterable

	from structura.github.models import GitHubRepo
	from structura.graph.models import Graph, ModuleSummary, RepoStats

logger = logging.getLogger(__name__)

DEFAULT_DEPENDENCY_CONFIG = DEFAULT_CONFIG["dependencies"]


@dataclass(frozen=True)
class RepoInfo:
	"""Repository metadata shown alongside the graph."""

	owner: str
	name: str
	description: str | None
	default_branch: str
	stars: int
	forks: int
	language: str | None
	branch: str | None = None

	@classmethod
	def from_github(cls, owner: str, name: str, repo: GitHubRepo, branch: str | None = None) -> RepoInfo:
		"""Build from the validated GitHub metadata response and the analyzed branch."""
		return cls(
			owner=owner,
			name=name,
			description=repo.description,
			default_branch=repo.default_branch,
			stars=repo.stargazers_count,
			forks=repo.forks_count,
			language=repo.language,
			branch=branch,
		)

	def to_dict(self) -> dict[str, Any]:
		"""Serialize the metadata."""
		return {
			"owner": self.owner,
			"name": self.name,
			"description": self.description,
			"defaultBranch": self.default_branch,
			"stars": self.stars,
			"forks": self.forks,
			"language": self.language,
			"branch": self.branch,
		}


@dataclass
class RepoAnalysis:
	"""Everything produced for one repository snapshot."""

	repo: RepoInfo
	graph: Graph
	modules: list[ModuleSummary] = field(default_factory=list)
	stats: RepoStats | None = None
	truncated: bool = False

	def to_dict(self) -> dict[str, Any]:
		"""Serialize to a JSON-ready dictionary."""
		return {
			"repo": self.repo.to_dict(),
			"graph": self.graph.to_dict(),
			"modules": [module.to_dict() for module in self.modules],
			"stats": self.stats.to_dict() if self.stats else None,
			"truncated": self.truncated,
		}


def select_files_to_parse(
	graph: Graph,
	parse_limit: int = DEFAULT_DEPENDENCY_CONFIG["parse_limit"],
	extensions: Collection[str] = tuple(DEFAULT_DEPENDENCY_CONFIG["parsable_extensions"]),
) -> list[str]:
	"""
	Pick the files whose imports are worth extracting.

	Args:
	    graph: Base graph
	    parse_limit: Maximum number of files selected
	    extensions: Extensions the parser understands

	Returns:
	    List[str]: At most ``parse_limit`` file paths in graph order

	"""
	selected = [node.path for node in graph.files() if file_extension(node.name) in extensions]
	return selected[: max(parse_limit, 0)]


def extract_resolved_pairs(path: str, content: str, known_paths: Container[str]) -> list[tuple[str, str]]:
	"""Parse one file and keep the imports that resolve to repository files."""
	pairs: list[tuple[str, str]] = []
	for dep in parse_imports(path, content):
		resolved = resolve_import_path(path, dep.target, known_paths)
		if resolved is not None:
			pairs.append((path, resolved))
	return pairs


async def link_dependencies(
	graph: Graph,
	fetch_content: Callable[[str], str],
	*,
	parse_limit: int = DEFAULT_DEPENDENCY_CONFIG["parse_limit"],
	fetch_limit: int = DEFAULT_DEPENDENCY_CONFIG["fetch_limit"],
	max_concurrency: int = DEFAULT_DEPENDENCY_CONFIG["max_concurrency"],
	extensions: Iterable[str] = DEFAULT_DEPENDENCY_CONFIG["parsable_extensions"],
) -> Graph:
	"""
	Enrich a graph with dependency edges from a bounded sample of files.

	Each sampled file is fetched in a worker thread. Fetches are independent:
	a failing one contributes no edges and does not affect the others, so the
	result may be a partial dependency graph.

	Args:
	    graph: Base graph
	    fetch_content: Blocking callable returning the text of a repository path
	    parse_limit: Maximum number of files selected for parsing
	    fetch_limit: Maximum number of selected files actually fetched
	    max_concurrency: Maximum number of fetches in flight
	    extensions: Extensions the parser understands

	Returns:
	    Graph: A new snapshot with the resolved dependency edges merged in

	"""
	known_paths = frozenset(node.path for node in graph.files())
	selected = select_files_to_parse(graph, parse_limit, frozenset(extensions))
	to_fetch = selected[: max(min(fetch_limit, parse_limit), 0)]
	if not to_fetch:
		return graph

	semaphore = asyncio.Semaphore(max(max_concurrency, 1))

	async def process(path: str) -> list[tuple[str, str]]:
		async with semaphore:
			content = await asyncio.to_thread(fetch_content, path)
		return extract_resolved_pairs(path, content, known_paths)

	results = await asyncio.gather(*(process(path) for path in to_fetch), return_exceptions=True)

	pairs: list[tuple[str, str]] = []
	failures = 0
	for path, result in zip(to_fetch, results, strict=True):
		if isinstance(result, BaseException):
			failures += 1
			logger.debug("Skipping dependencies of %s: %s", path, result)
			continue
		pairs.extend(result)

	logger.info(
		"Resolved %d dependency pairs from %d files (%d failed)", len(pairs), len(to_fetch) - failures, failures
	)
	return add_dependency_edges(graph, pairs)


async def analyze_repository(
	repo_ref: str,
	client: GitHubClient | None = None,
	*,
	branch: str | None = None,
	with_dependencies: bool = True,
	config_loader: ConfigLoader | None = None,
) -> RepoAnalysis:
	"""
	Run the full pipeline for one repository.

	Args:
	    repo_ref: ``owner/repo`` or a GitHub URL
	    client: GitHub client; created from configuration when omitted
	    branch: Branch to map; defaults to the repository's default branch
	    with_dependencies: Whether to enrich the graph with dependency edges
	    config_loader: Configuration source; the shared instance when omitted

	Returns:
	    RepoAnalysis: Graph, module summaries and statistics

	Raises:
	    InvalidRepositoryError: If ``repo_ref`` cannot be parsed
	    GitHubError: If metadata or the tree cannot be fetched

	"""
	parsed = parse_github_url(repo_ref)
	if parsed is None:
		msg = f"Invalid repository reference: {repo_ref!r}. Use owner/repo or a GitHub URL."
		raise InvalidRepositoryError(msg)
	owner, name = parsed

	config_loader = config_loader or ConfigLoader.get_instance()
	client = client or GitHubClient(config=config_loader.get_github_config())

	repo = await asyncio.to_thread(client.fetch_repo, owner, name)
	branch = branch or repo.default_branch
	tree = await asyncio.to_thread(client.fetch_tree, owner, name, branch)
	branch = tree.branch or branch

	graph = build_graph(tree.entries())
	logger.info("Built graph for %s/%s@%s with %d nodes", owner, name, branch, len(graph.nodes))

	if with_dependencies:
		deps_config = config_loader.get_dependency_config()

		def fetch_content(path: str) -> str:
			return client.fetch_raw_content(owner, name, path, branch)

		graph = await link_dependencies(
			graph,
			fetch_content,
			parse_limit=deps_config["parse_limit"],
			fetch_limit=deps_config["fetch_limit"],
			max_concurrency=deps_config.get("max_concurrency", DEFAULT_DEPENDENCY_CONFIG["max_concurrency"]),
			extensions=deps_config.get("parsable_extensions", DEFAULT_DEPENDENCY_CONFIG["parsable_extensions"]),
		)

	return RepoAnalysis(
		repo=RepoInfo.from_github(owner, name, repo, branch=branch),
		graph=graph,
		modules=group_by_module(graph.nodes),
		stats=compute_stats(graph),
		truncated=tree.truncated,
	)
