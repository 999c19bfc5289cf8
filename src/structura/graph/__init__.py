"""Repository graph construction and module classification."""

from .builder import add_dependency_edges, build_graph, compute_stats, group_by_module, top_dependency_targets
from .classifier import classify
from .models import (
	ROOT_ID,
	DependencyKind,
	EdgeKind,
	Entry,
	EntryKind,
	Graph,
	GraphEdge,
	GraphNode,
	ModuleSummary,
	ModuleType,
	NodeKind,
	ParsedDependency,
	RepoStats,
)

__all__ = [
	"ROOT_ID",
	"DependencyKind",
	"EdgeKind",
	"Entry",
	"EntryKind",
	"Graph",
	"GraphEdge",
	"GraphNode",
	"ModuleSummary",
	"ModuleType",
	"NodeKind",
	"ParsedDependency",
	"RepoStats",
	"add_dependency_edges",
	"build_graph",
	"classify",
	"compute_stats",
	"group_by_module",
	"top_dependency_targets",
]
