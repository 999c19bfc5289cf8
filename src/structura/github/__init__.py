"""GitHub access for Structura."""

from .client import GitHubClient, decode_content, parse_github_url
from .errors import GitHubError, InvalidRepositoryError, RateLimitError, RepositoryNotFoundError
from .models import GitHubFileContent, GitHubRepo, GitHubTree, GitHubTreeItem

__all__ = [
	"GitHubClient",
	"GitHubError",
	"GitHubFileContent",
	"GitHubRepo",
	"GitHubTree",
	"GitHubTreeItem",
	"InvalidRepositoryError",
	"RateLimitError",
	"RepositoryNotFoundError",
	"decode_content",
	"parse_github_url",
]
