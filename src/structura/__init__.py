"""Structura - map a GitHub repository into a typed file and dependency graph."""

__version__ = "0.1.0"
