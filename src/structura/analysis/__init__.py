"""File and module analysis with an optional AI backend."""

from .analyzer import FileAnalysis, analyze_file, analyze_module, heuristic_file_analysis, heuristic_module_analysis

__all__ = [
	"FileAnalysis",
	"analyze_file",
	"analyze_module",
	"heuristic_file_analysis",
	"heuristic_module_analysis",
]
