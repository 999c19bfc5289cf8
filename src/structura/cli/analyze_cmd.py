"""Implementation of the analyze command for summarizing a single file."""

import json
import logging
import os
from pathlib import Path
from typing import Annotated

import typer

logger = logging.getLogger(__name__)

FileArg = Annotated[
	Path,
	typer.Argument(exists=True, dir_okay=False, readable=True, help="Local file to analyze"),
]

RepoPathOpt = Annotated[
	str | None,
	typer.Option("--path", "-p", help="Repository path to report for the file (defaults to the file name)"),
]

JsonFlag = Annotated[
	bool,
	typer.Option("--json", help="Print the analysis as JSON"),
]


def register_command(app: typer.Typer) -> None:
	"""Register the analyze command with the CLI app."""

	@app.command(name="analyze")
	def analyze_command(
		file: FileArg,
		path: RepoPathOpt = None,
		as_json: JsonFlag = False,
	) -> None:
		"""
		Summarize a source file.

		Uses the Gemini API when GEMINI_API_KEY is set, otherwise a
		deterministic heuristic.

		"""
		_analyze_command_impl(file=file, repo_path=path, as_json=as_json)


def _analyze_command_impl(file: Path, repo_path: str | None, as_json: bool) -> None:
	"""Actual implementation of the analyze command."""
	from rich.table import Table

	from structura.analysis.analyzer import analyze_file
	from structura.utils.cli_utils import exit_with_error
	from structura.utils.config_loader import ConfigError, ConfigLoader
	from structura.utils.log_setup import console

	try:
		content = file.read_text(encoding="utf-8", errors="replace")
	except OSError as e:
		exit_with_error(f"Could not read {file}", exception=e)
		return

	try:
		config = ConfigLoader.get_instance().get_analysis_config()
	except ConfigError as e:
		exit_with_error(str(e), exception=e)
		return

	analysis = analyze_file(repo_path or file.name, content, os.environ.get("GEMINI_API_KEY"), config)

	if as_json:
		typer.echo(json.dumps(analysis.model_dump(), indent=2))
		return

	table = Table(title=analysis.path, show_header=False)
	table.add_column("Field", style="bold")
	table.add_column("Value")
	table.add_row("Summary", analysis.summary)
	table.add_row("Purpose", analysis.purpose)
	table.add_row("Complexity", analysis.complexity)
	table.add_row("Dependencies", ", ".join(analysis.dependencies) or "-")
	table.add_row("Exports", ", ".join(analysis.exports) or "-")
	console.print(table)
