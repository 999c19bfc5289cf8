"""Implementation of the graph command for mapping a GitHub repository."""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import asyncer
import typer

if TYPE_CHECKING:
	from structura.pipeline import RepoAnalysis

logger = logging.getLogger(__name__)

RepoArg = Annotated[
	str,
	typer.Argument(help="Repository as owner/repo or a GitHub URL"),
]

BranchOpt = Annotated[
	str | None,
	typer.Option("--branch", "-b", help="Branch to map (defaults to the repository's default branch)"),
]

NoDepsFlag = Annotated[
	bool,
	typer.Option("--no-deps", help="Skip fetching file contents for dependency edges"),
]

OutputOpt = Annotated[
	Path | None,
	typer.Option("--output", "-o", help="Write the full analysis as JSON to this file"),
]

ConfigOpt = Annotated[
	Path | None,
	typer.Option("--config", "-c", help="Path to config file"),
]

MAX_LISTED_FILES = 5


def register_command(app: typer.Typer) -> None:
	"""Register the graph command with the CLI app."""

	@app.command(name="graph")
	@asyncer.runnify
	async def graph_command(
		repo: RepoArg,
		branch: BranchOpt = None,
		no_deps: NoDepsFlag = False,
		output: OutputOpt = None,
		config: ConfigOpt = None,
	) -> None:
		"""Build the file and dependency graph of a GitHub repository."""
		await _graph_command_impl(
			repo=repo,
			branch=branch,
			with_dependencies=not no_deps,
			output=output,
			config_file=config,
		)


async def _graph_command_impl(
	repo: str,
	branch: str | None,
	with_dependencies: bool,
	output: Path | None,
	config_file: Path | None,
) -> None:
	"""Actual implementation of the graph command."""
	from structura.github.errors import GitHubError
	from structura.pipeline import analyze_repository
	from structura.utils.cli_utils import exit_with_error, handle_keyboard_interrupt, loading_spinner, show_warning
	from structura.utils.config_loader import ConfigError, ConfigLoader
	from structura.utils.log_setup import console

	try:
		config_loader = ConfigLoader.get_instance(str(config_file) if config_file else None, reload=bool(config_file))
		with loading_spinner(f"Mapping {repo}..."):
			analysis = await analyze_repository(
				repo,
				branch=branch,
				with_dependencies=with_dependencies,
				config_loader=config_loader,
			)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
		return
	except (GitHubError, ConfigError) as e:
		exit_with_error(str(e), exception=e)
		return

	print_analysis(analysis)
	if analysis.truncated:
		show_warning("GitHub truncated the file tree of this repository; the graph is incomplete.")

	if output:
		output.parent.mkdir(parents=True, exist_ok=True)
		output.write_text(json.dumps(analysis.to_dict(), indent=2), encoding="utf-8")
		console.print(f"[green]Analysis written to {output}[/green]")


def print_analysis(analysis: "RepoAnalysis") -> None:
	"""Render repository stats, languages and modules as rich tables."""
	from rich.table import Table

	from structura.graph.builder import top_dependency_targets
	from structura.utils.log_setup import console

	repo = analysis.repo
	console.print(f"[bold]{repo.owner}/{repo.name}[/bold] ({repo.branch or repo.default_branch})")
	if repo.description:
		console.print(repo.description)
	console.print(f"Stars: {repo.stars}  Forks: {repo.forks}  Language: {repo.language or '-'}")

	stats = analysis.stats
	if stats:
		summary = Table(title="Repository")
		summary.add_column("Files", justify="right")
		summary.add_column("Folders", justify="right")
		summary.add_column("Dependency edges", justify="right")
		summary.add_row(str(stats.total_files), str(stats.total_folders), str(stats.dependency_edges))
		console.print(summary)

		languages = Table(title="Languages")
		languages.add_column("Extension")
		languages.add_column("Files", justify="right")
		languages.add_column("Share", justify="right")
		for ext, count in sorted(stats.languages.items(), key=lambda item: item[1], reverse=True):
			share = round(count / stats.total_files * 100) if stats.total_files else 0
			languages.add_row(ext, str(count), f"{share}%")
		console.print(languages)

	modules = Table(title="Modules")
	modules.add_column("Module")
	modules.add_column("Files", justify="right")
	modules.add_column("Entry points")
	for module in analysis.modules:
		modules.add_row(module.name, str(len(module.files)), ", ".join(module.entry_points[:MAX_LISTED_FILES]) or "-")
	console.print(modules)

	hubs = top_dependency_targets(analysis.graph, limit=MAX_LISTED_FILES)
	if hubs:
		hub_table = Table(title="Most imported files")
		hub_table.add_column("File")
		hub_table.add_column("Importers", justify="right")
		for path, count in hubs:
			hub_table.add_row(path, str(count))
		console.print(hub_table)
