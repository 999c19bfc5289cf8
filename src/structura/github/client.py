"""
Client for the GitHub REST API.

Fetches repository metadata, recursive file trees and file contents. Every
response body is validated with the pydantic models in
:mod:`structura.github.models`.

"""

from __future__ import annotations

import base64
import binascii
import logging
import os
import re
from typing import TYPE_CHECKING, Any, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from structura.config import DEFAULT_CONFIG
from structura.github.errors import (
	HTTP_FORBIDDEN,
	HTTP_NOT_FOUND,
	GitHubError,
	RateLimitError,
	RepositoryNotFoundError,
)
from structura.github.models import GitHubFileContent, GitHubRepo, GitHubTree

if TYPE_CHECKING:
	from collections.abc import Mapping

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

GITHUB_URL_RE = re.compile(r"(?:https?://)?(?:www\.)?github\.com/([a-zA-Z0-9._-]+)/([a-zA-Z0-9._-]+)")
SHORTHAND_RE = re.compile(r"^([a-zA-Z0-9._-]+)/([a-zA-Z0-9._-]+)$")


def parse_github_url(text: str) -> tuple[str, str] | None:
	"""
	Extract owner and repository name from a GitHub reference.

	Supports ``https://github.com/owner/repo``, ``github.com/owner/repo`` and
	``owner/repo``. Trailing slashes and a ``.git`` suffix are ignored.

	Args:
	    text: User supplied repository reference

	Returns:
	    Optional[Tuple[str, str]]: ``(owner, repo)`` or None if unrecognized

	"""
	cleaned = re.sub(r"/+$", "", text.strip())
	cleaned = re.sub(r"\.git$", "", cleaned)

	match = GITHUB_URL_RE.search(cleaned) or SHORTHAND_RE.match(cleaned)
	if match:
		return match.group(1), match.group(2)
	return None


def decode_content(content: str) -> str:
	"""Decode a base64 ``content`` field, returning the input unchanged if it is not base64."""
	try:
		return base64.b64decode(content.replace("\n", ""), validate=True).decode("utf-8")
	except (binascii.Error, UnicodeDecodeError):
		return content


class GitHubClient:
	"""Thin synchronous client over ``requests`` for the endpoints the pipeline needs."""

	def __init__(
		self,
		token: str | None = None,
		config: Mapping[str, Any] | None = None,
		session: requests.Session | None = None,
	) -> None:
		"""
		Initialize the client.

		Args:
		    token: Personal access token; defaults to the ``GITHUB_TOKEN`` environment variable
		    config: The ``github`` configuration section
		    session: Optional pre-configured session, mainly for tests

		"""
		settings = {**DEFAULT_CONFIG["github"], **(config or {})}
		self.api_url = str(settings["api_url"]).rstrip("/")
		self.raw_url = str(settings["raw_url"]).rstrip("/")
		self.default_branch = str(settings["default_branch"])
		self.fallback_branch = str(settings["fallback_branch"])
		self.timeout = float(settings["timeout"])
		self.user_agent = str(settings["user_agent"])
		self.token = token if token is not None else os.environ.get("GITHUB_TOKEN")
		self.session = session or requests.Session()

	def _headers(self, *, api: bool = True) -> dict[str, str]:
		headers = {"User-Agent": self.user_agent}
		if api:
			headers["Accept"] = "application/vnd.github.v3+json"
		if self.token:
			headers["Authorization"] = f"Bearer {self.token}"
		return headers

	def _get(self, url: str, *, api: bool = True, params: dict[str, Any] | None = None) -> requests.Response:
		"""
		Issue a GET request and map failures to :class:`GitHubError` subclasses.

		Raises:
		    RepositoryNotFoundError: On HTTP 404
		    RateLimitError: On HTTP 403
		    GitHubError: On any other HTTP or transport failure

		"""
		try:
			response = self.session.get(url, headers=self._headers(api=api), params=params, timeout=self.timeout)
		except requests.RequestException as e:
			msg = f"GitHub request failed: {e}"
			raise GitHubError(msg) from e

		if response.status_code == HTTP_NOT_FOUND:
			raise RepositoryNotFoundError
		if response.status_code == HTTP_FORBIDDEN:
			raise RateLimitError
		if not response.ok:
			msg = f"GitHub API error: {response.status_code} {response.reason}"
			raise GitHubError(msg, response.status_code)
		return response

	def _get_model(self, url: str, model: type[M], params: dict[str, Any] | None = None) -> M:
		response = self._get(url, params=params)
		try:
			return model.model_validate(response.json())
		except (ValueError, ValidationError) as e:
			msg = f"Unexpected response from {url}: {e}"
			raise GitHubError(msg, response.status_code) from e

	def fetch_repo(self, owner: str, repo: str) -> GitHubRepo:
		"""Fetch repository metadata."""
		logger.debug("Fetching repository metadata for %s/%s", owner, repo)
		return self._get_model(f"{self.api_url}/repos/{owner}/{repo}", GitHubRepo)

	def fetch_tree(self, owner: str, repo: str, branch: str | None = None) -> GitHubTree:
		"""
		Fetch the full recursive file tree of a branch.

		When the default branch is requested and cannot be fetched, the
		fallback branch is tried once.

		Args:
		    owner: Repository owner
		    repo: Repository name
		    branch: Branch name; defaults to the configured default branch

		Returns:
		    GitHubTree: The validated tree listing, with ``branch`` set to the
		    branch it was actually read from

		Raises:
		    GitHubError: If no tree could be fetched

		"""
		branch = branch or self.default_branch
		try:
			tree = self._fetch_tree(owner, repo, branch)
		except GitHubError:
			if branch != self.default_branch or branch == self.fallback_branch:
				raise
			logger.info("Branch %s not available for %s/%s, trying %s", branch, owner, repo, self.fallback_branch)
			tree = self._fetch_tree(owner, repo, self.fallback_branch)

		if tree.truncated:
			logger.warning("Tree for %s/%s is truncated; the graph will be incomplete", owner, repo)
		return tree

	def _fetch_tree(self, owner: str, repo: str, branch: str) -> GitHubTree:
		logger.debug("Fetching tree for %s/%s@%s", owner, repo, branch)
		tree = self._get_model(
			f"{self.api_url}/repos/{owner}/{repo}/git/trees/{branch}",
			GitHubTree,
			params={"recursive": "1"},
		)
		return tree.model_copy(update={"branch": branch})

	def fetch_file_content(self, owner: str, repo: str, path: str) -> GitHubFileContent:
		"""Fetch a file through the contents API (body is usually base64 encoded)."""
		return self._get_model(f"{self.api_url}/repos/{owner}/{repo}/contents/{path}", GitHubFileContent)

	def fetch_decoded_content(self, owner: str, repo: str, path: str) -> str:
		"""Fetch a file through the contents API and return its decoded text."""
		file_content = self.fetch_file_content(owner, repo, path)
		if not file_content.content:
			return ""
		if file_content.encoding == "base64":
			return decode_content(file_content.content)
		return file_content.content

	def fetch_raw_content(self, owner: str, repo: str, path: str, branch: str | None = None) -> str:
		"""
		Fetch the raw text of a file from ``raw.githubusercontent.com``.

		Args:
		    owner: Repository owner
		    repo: Repository name
		    path: File path within the repository
		    branch: Branch name; defaults to the configured default branch

		Returns:
		    str: File text

		Raises:
		    GitHubError: If the file cannot be fetched

		"""
		branch = branch or self.default_branch
		response = self._get(f"{self.raw_url}/{owner}/{repo}/{branch}/{path}", api=False)
		return response.text

	def close(self) -> None:
		"""Close the underlying HTTP session."""
		self.session.close()

	def __enter__(self) -> GitHubClient:
		"""Enter the context manager."""
		return self

	def __exit__(self, *_: object) -> None:
		"""Close the session on exit."""
		self.close()
