"""Abstract base class for repository providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from repofetch.models import RateLimitInfo, TreeSnapshot


class RepoProvider(ABC):
    """Base class for the remote side of a fetch: tree listing and blobs."""

    @abstractmethod
    def get_default_branch(self, repo: str) -> str:
        """Return the default branch name for the repository."""

    @abstractmethod
    def get_tree(self, repo: str, branch: str) -> tuple[TreeSnapshot, str]:
        """Return the recursive tree for *branch* and the branch actually used."""

    @abstractmethod
    def get_blob(self, repo: str, sha: str) -> bytes:
        """Return the raw bytes of one blob."""

    def get_blob_content(self, repo: str, sha: str) -> str:
        """Return a blob decoded as UTF-8 text."""
        return self.get_blob(repo, sha).decode("utf-8", errors="replace")

    @property
    def rate_limit(self) -> RateLimitInfo | None:
        return None

    @property
    def is_authenticated(self) -> bool:
        return False
