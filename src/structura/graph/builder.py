"""
Graph construction from a flat repository listing.

Builds the node set and hierarchy edges, merges resolved dependency pairs
into an existing snapshot, and derives the module summaries and statistics
shown next to the graph.

"""

from __future__ import annotations

import logging
from collections import Counter
from types import MappingProxyType
from typing import TYPE_CHECKING

from structura.graph.classifier import ROOT_COLOR, classify, extension_color, file_extension, module_color
from structura.graph.models import (
	ROOT_ID,
	ROOT_NAME,
	EdgeKind,
	EntryKind,
	Graph,
	GraphEdge,
	GraphNode,
	ModuleSummary,
	ModuleType,
	NodeKind,
	RepoStats,
)

if TYPE_CHECKING:
	from collections.abc import Iterable, Mapping, Sequence

	from structura.graph.models import Entry

logger = logging.getLogger(__name__)

MODULE_NAMES: Mapping[ModuleType, str] = MappingProxyType(
	{
		ModuleType.API: "API Layer",
		ModuleType.FRONTEND: "Frontend / UI",
		ModuleType.DATABASE: "Database Layer",
		ModuleType.CONFIG: "Configuration",
		ModuleType.TEST: "Tests",
		ModuleType.DOCS: "Documentation",
		ModuleType.LIB: "Shared Libraries",
		ModuleType.UNKNOWN: "Other Files",
	}
)

MODULE_DESCRIPTIONS: Mapping[ModuleType, str] = MappingProxyType(
	{
		ModuleType.API: "Server-side API endpoints and request handlers",
		ModuleType.FRONTEND: "Client-side UI components and pages",
		ModuleType.DATABASE: "Database schemas, models, and migrations",
		ModuleType.CONFIG: "Project configuration and environment setup",
		ModuleType.TEST: "Test suites and testing utilities",
		ModuleType.DOCS: "Documentation and guides",
		ModuleType.LIB: "Shared utilities and helper functions",
		ModuleType.UNKNOWN: "Miscellaneous project files",
	}
)

ENTRY_POINT_STEMS: tuple[str, ...] = ("index.", "main.", "app.", "server.", "route.", "page.")
MAX_ENTRY_POINTS = 5


def _split(path: str) -> list[str]:
	return [part for part in path.split("/") if part]


def _parent_id(parts: Sequence[str]) -> str:
	return "/".join(parts[:-1]) if len(parts) > 1 else ROOT_ID


def _folder_paths(entries: Iterable[Entry]) -> list[str]:
	"""Every non-empty proper prefix of every entry path, sorted."""
	folders: set[str] = set()
	for entry in entries:
		parts = _split(entry.path)
		for i in range(1, len(parts)):
			folders.add("/".join(parts[:i]))
	return sorted(folders)


def build_graph(entries: Sequence[Entry]) -> Graph:
	"""
	Build the base graph from a flat repository listing.

	Folders are synthesized for every intermediate path prefix, so every
	non-root node has a parent and the hierarchy edges form a tree rooted at
	``"."``. Only ``blob`` entries become file nodes; ``tree`` entries only
	contribute their prefixes and submodules are otherwise ignored.

	Args:
	    entries: Repository entries in listing order

	Returns:
	    Graph: Root, folder and file nodes with one hierarchy edge per non-root node

	"""
	nodes: list[GraphNode] = [
		GraphNode(
			id=ROOT_ID,
			name=ROOT_NAME,
			path=ROOT_ID,
			kind=NodeKind.FOLDER,
			module_type=ModuleType.UNKNOWN,
			depth=0,
			color=ROOT_COLOR,
		)
	]
	edges: list[GraphEdge] = []

	folder_paths = _folder_paths(entries)
	for folder_path in folder_paths:
		parts = folder_path.split("/")
		module_type = classify(folder_path)
		nodes.append(
			GraphNode(
				id=folder_path,
				name=parts[-1],
				path=folder_path,
				kind=NodeKind.FOLDER,
				module_type=module_type,
				depth=len(parts),
				color=module_color(module_type),
			)
		)
		edges.append(GraphEdge(source=_parent_id(parts), target=folder_path, kind=EdgeKind.HIERARCHY))

	seen = set(folder_paths)
	seen.add(ROOT_ID)
	for entry in entries:
		if entry.kind is not EntryKind.BLOB:
			continue
		parts = _split(entry.path)
		if not parts:
			continue
		path = "/".join(parts)
		if path in seen:
			logger.debug("Skipping duplicate or folder-shadowed file entry: %s", path)
			continue
		seen.add(path)

		name = parts[-1]
		nodes.append(
			GraphNode(
				id=path,
				name=name,
				path=path,
				kind=NodeKind.FILE,
				module_type=classify(path),
				depth=len(parts),
				size=entry.size,
				extension=file_extension(name),
				color=extension_color(name),
			)
		)
		edges.append(GraphEdge(source=_parent_id(parts), target=path, kind=EdgeKind.HIERARCHY))

	logger.debug("Built graph with %d nodes and %d hierarchy edges", len(nodes), len(edges))
	return Graph(nodes=tuple(nodes), edges=tuple(edges))


def add_dependency_edges(graph: Graph, pairs: Iterable[tuple[str, str]]) -> Graph:
	"""
	Merge resolved dependency pairs into a graph snapshot.

	A pair is added only when both ids are nodes and no edge of any kind
	already exists for the same ordered pair.

	Args:
	    graph: The snapshot to extend; it is not modified
	    pairs: Resolved ``(source, target)`` ids

	Returns:
	    Graph: A new snapshot with the accepted dependency edges appended

	"""
	node_ids = graph.node_ids()
	existing = {edge.key for edge in graph.edges}

	new_edges: list[GraphEdge] = []
	for source, target in pairs:
		key = (source, target)
		if source not in node_ids or target not in node_ids or key in existing:
			continue
		new_edges.append(GraphEdge(source=source, target=target, kind=EdgeKind.DEPENDENCY))
		existing.add(key)

	return Graph(nodes=graph.nodes, edges=graph.edges + tuple(new_edges))


def find_entry_points(files: Iterable[str]) -> list[str]:
	"""Files whose name starts with a recognized entry-point stem, at most five."""
	entry_points = [path for path in files if path.rsplit("/", 1)[-1].startswith(ENTRY_POINT_STEMS)]
	return entry_points[:MAX_ENTRY_POINTS]


def group_by_module(nodes: Iterable[GraphNode]) -> list[ModuleSummary]:
	"""
	Partition file nodes by module type.

	Args:
	    nodes: Graph nodes; folders are ignored

	Returns:
	    List[ModuleSummary]: One summary per module type present, in order of first appearance

	"""
	groups: dict[ModuleType, list[str]] = {}
	for node in nodes:
		if node.kind is not NodeKind.FILE:
			continue
		groups.setdefault(node.module_type, []).append(node.path)

	return [
		ModuleSummary(
			name=MODULE_NAMES[module_type],
			type=module_type,
			description=MODULE_DESCRIPTIONS[module_type],
			files=files,
			entry_points=find_entry_points(files),
		)
		for module_type, files in groups.items()
	]


def compute_stats(graph: Graph) -> RepoStats:
	"""Count files, folders (root included), extensions and dependency edges."""
	files = graph.files()
	languages = Counter(node.extension or "unknown" for node in files)
	return RepoStats(
		total_files=len(files),
		total_folders=len(graph.folders()),
		languages=dict(languages),
		dependency_edges=len(graph.dependency_edges()),
	)


def top_dependency_targets(graph: Graph, limit: int = 5) -> list[tuple[str, int]]:
	"""
	Rank files by how many other files import them.

	Args:
	    graph: Graph snapshot, usually after dependency enrichment
	    limit: Maximum number of files returned

	Returns:
	    List[Tuple[str, int]]: ``(path, importer count)`` pairs, most imported first, ties by path

	"""
	digraph = graph.to_networkx()
	dependencies = digraph.edge_subgraph(
		(source, target) for source, target, kind in digraph.edges(data="kind") if kind == EdgeKind.DEPENDENCY.value
	)
	ranked = sorted(dependencies.in_degree(), key=lambda item: (-item[1], item[0]))
	return [(node_id, degree) for node_id, degree in ranked if degree > 0][:limit]
