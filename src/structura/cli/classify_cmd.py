"""Implementation of the classify command."""

from typing import Annotated

import typer

PathsArg = Annotated[
	list[str],
	typer.Argument(help="Repository paths to classify"),
]


def register_command(app: typer.Typer) -> None:
	"""Register the classify command with the CLI app."""

	@app.command(name="classify")
	def classify_command(paths: PathsArg) -> None:
		"""Print the module type each path would be given in the graph."""
		from structura.graph.classifier import classify

		for path in paths:
			typer.echo(f"{path}\t{classify(path).value}")
