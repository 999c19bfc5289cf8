"""Data models for repository graph elements."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import networkx as nx

ROOT_ID = "."
"""Sentinel id (and path) of the repository root node."""

ROOT_NAME = "root"


class EntryKind(str, Enum):
	"""Kind of a record in a flat repository listing."""

	BLOB = "blob"
	TREE = "tree"
	COMMIT = "commit"


class NodeKind(str, Enum):
	"""Kind of a graph vertex."""

	FILE = "file"
	FOLDER = "folder"


class EdgeKind(str, Enum):
	"""Kind of a graph edge."""

	HIERARCHY = "hierarchy"
	DEPENDENCY = "dependency"


class ModuleType(str, Enum):
	"""Coarse architectural classification derived from a path."""

	API = "api"
	FRONTEND = "frontend"
	DATABASE = "database"
	CONFIG = "config"
	TEST = "test"
	DOCS = "docs"
	LIB = "lib"
	UNKNOWN = "unknown"


class DependencyKind(str, Enum):
	"""How a dependency was expressed in source."""

	IMPORT = "import"
	REQUIRE = "require"
	DYNAMIC = "dynamic"


@dataclass(frozen=True)
class Entry:
	"""One record from a flat repository file/directory listing."""

	path: str
	"""Slash-separated path without a leading slash."""

	kind: EntryKind
	"""Whether the record is a file, a directory or a submodule."""

	size: int | None = None
	"""Byte size, files only."""


@dataclass(frozen=True)
class GraphNode:
	"""A file or folder vertex."""

	id: str
	name: str
	path: str
	kind: NodeKind
	module_type: ModuleType
	depth: int
	size: int | None = None
	extension: str | None = None
	color: str | None = None

	@property
	def is_file(self) -> bool:
		"""Whether this node represents a file."""
		return self.kind is NodeKind.FILE

	def to_dict(self) -> dict[str, Any]:
		"""Serialize the node, omitting unset optional fields."""
		data: dict[str, Any] = {
			"id": self.id,
			"name": self.name,
			"path": self.path,
			"type": self.kind.value,
			"moduleType": self.module_type.value,
			"depth": self.depth,
		}
		if self.size is not None:
			data["size"] = self.size
		if self.extension is not None:
			data["extension"] = self.extension
		if self.color is not None:
			data["color"] = self.color
		return data


@dataclass(frozen=True)
class GraphEdge:
	"""A directed edge between two node ids."""

	source: str
	target: str
	kind: EdgeKind

	@property
	def key(self) -> tuple[str, str]:
		"""Ordered pair used to deduplicate edges regardless of kind."""
		return (self.source, self.target)

	def to_dict(self) -> dict[str, str]:
		"""Serialize the edge."""
		return {"source": self.source, "target": self.target, "type": self.kind.value}


@dataclass(frozen=True)
class Graph:
	"""
	Immutable snapshot of a repository graph.

	Operations over a graph return a new snapshot; the node and edge tuples of
	an existing instance never change.

	"""

	nodes: tuple[GraphNode, ...] = ()
	edges: tuple[GraphEdge, ...] = ()

	def node_ids(self) -> frozenset[str]:
		"""Return the set of all node ids."""
		return frozenset(node.id for node in self.nodes)

	def get_node(self, node_id: str) -> GraphNode | None:
		"""Look up a node by id."""
		for node in self.nodes:
			if node.id == node_id:
				return node
		return None

	def files(self) -> list[GraphNode]:
		"""Return file nodes in graph order."""
		return [node for node in self.nodes if node.is_file]

	def folders(self) -> list[GraphNode]:
		"""Return folder nodes in graph order, root included."""
		return [node for node in self.nodes if node.kind is NodeKind.FOLDER]

	def hierarchy_edges(self) -> list[GraphEdge]:
		"""Return parent-to-child containment edges."""
		return [edge for edge in self.edges if edge.kind is EdgeKind.HIERARCHY]

	def dependency_edges(self) -> list[GraphEdge]:
		"""Return inferred import edges."""
		return [edge for edge in self.edges if edge.kind is EdgeKind.DEPENDENCY]

	def to_dict(self) -> dict[str, list[dict[str, Any]]]:
		"""Serialize to the ``{"nodes": [...], "links": [...]}`` wire shape."""
		return {
			"nodes": [node.to_dict() for node in self.nodes],
			"links": [edge.to_dict() for edge in self.edges],
		}

	def to_networkx(self) -> nx.DiGraph:
		"""
		Convert the snapshot to a directed networkx graph.

		Node attributes mirror :meth:`GraphNode.to_dict`; every edge carries a
		``kind`` attribute. Edges are unique per ordered pair, so no edge is
		lost in the conversion.

		Returns:
		    nx.DiGraph: The converted graph

		"""
		digraph = nx.DiGraph()
		for node in self.nodes:
			digraph.add_node(node.id, **node.to_dict())
		for edge in self.edges:
			digraph.add_edge(edge.source, edge.target, kind=edge.kind.value)
		return digraph


@dataclass(frozen=True)
class ParsedDependency:
	"""A raw, unresolved import found in a file."""

	source: str
	target: str
	kind: DependencyKind


@dataclass
class ModuleSummary:
	"""Files sharing a module type, for the stats/legend surface."""

	name: str
	type: ModuleType
	description: str
	files: list[str] = field(default_factory=list)
	entry_points: list[str] = field(default_factory=list)
	recommendations: list[str] = field(default_factory=list)

	def to_dict(self) -> dict[str, Any]:
		"""Serialize the summary."""
		return {
			"name": self.name,
			"type": self.type.value,
			"description": self.description,
			"files": list(self.files),
			"entryPoints": list(self.entry_points),
			"recommendations": list(self.recommendations),
		}


@dataclass(frozen=True)
class RepoStats:
	"""Aggregate counts over a graph snapshot."""

	total_files: int
	total_folders: int
	languages: dict[str, int]
	dependency_edges: int = 0

	def to_dict(self) -> dict[str, Any]:
		"""Serialize the statistics."""
		return {
			"totalFiles": self.total_files,
			"totalFolders": self.total_folders,
			"languages": dict(self.languages),
			"dependencyEdges": self.dependency_edges,
		}
