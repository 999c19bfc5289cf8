"""Errors raised while talking to GitHub."""

from __future__ import annotations

HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404

ERR_NOT_FOUND = "Repository not found. Make sure it's public."
ERR_RATE_LIMIT = "GitHub API rate limit exceeded. Try again later or add a token."


class GitHubError(Exception):
	"""Base error for GitHub requests."""

	def __init__(self, message: str, status_code: int | None = None) -> None:
		"""
		Initialize the error.

		Args:
		    message: Human readable description
		    status_code: HTTP status of the failed response, if any

		"""
		super().__init__(message)
		self.status_code = status_code


class RepositoryNotFoundError(GitHubError):
	"""The repository, branch or path does not exist or is private."""

	def __init__(self, message: str = ERR_NOT_FOUND) -> None:
		"""Initialize with the standard not-found message."""
		super().__init__(message, HTTP_NOT_FOUND)


class RateLimitError(GitHubError):
	"""The API refused the request, usually because of rate limiting."""

	def __init__(self, message: str = ERR_RATE_LIMIT) -> None:
		"""Initialize with the standard rate-limit message."""
		super().__init__(message, HTTP_FORBIDDEN)


class InvalidRepositoryError(GitHubError):
	"""The repository identifier could not be parsed."""
