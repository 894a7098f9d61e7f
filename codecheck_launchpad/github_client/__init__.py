"""GitHub API access: cache, client, models and URL builders."""

from .cache import HttpCache
from .client import GitHubClient
from .models import GitHubIssue, GitHubLabel

__all__ = ["GitHubClient", "GitHubIssue", "GitHubLabel", "HttpCache"]
