"""Validated shapes of GitHub REST API responses."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from structura.graph.models import Entry, EntryKind


class GitHubTreeItem(BaseModel):
	"""One item of a recursive git tree listing."""

	model_config = ConfigDict(extra="ignore")

	path: str
	mode: str | None = None
	type: Literal["blob", "tree", "commit"]
	sha: str
	size: int | None = None
	url: str | None = None

	def to_entry(self) -> Entry:
		"""Convert to the graph builder's input record."""
		return Entry(path=self.path, kind=EntryKind(self.type), size=self.size)


class GitHubTree(BaseModel):
	"""Response of ``GET /repos/{owner}/{repo}/git/trees/{sha}?recursive=1``."""

	model_config = ConfigDict(extra="ignore")

	sha: str
	url: str
	tree: list[GitHubTreeItem]
	truncated: bool
	# Not part of the API payload; the client records the branch it listed.
	branch: str | None = None

	def entries(self) -> list[Entry]:
		"""Tree items as graph builder entries, in listing order."""
		return [item.to_entry() for item in self.tree]


class GitHubFileContent(BaseModel):
	"""Response of ``GET /repos/{owner}/{repo}/contents/{path}`` for a file."""

	model_config = ConfigDict(extra="ignore")

	name: str
	path: str
	sha: str
	size: int
	type: Literal["file"]
	content: str | None = None
	encoding: str | None = None
	download_url: str | None = None


class GitHubRepo(BaseModel):
	"""Subset of ``GET /repos/{owner}/{repo}`` used by the pipeline."""

	model_config = ConfigDict(extra="ignore")

	id: int
	name: str
	full_name: str
	description: str | None = None
	default_branch: str
	stargazers_count: int
	forks_count: int
	language: str | None = None
	topics: list[str] = Field(default_factory=list)
	html_url: str
	private: bool
