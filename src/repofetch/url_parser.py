"""Repository identifier parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse

_NAME_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class RepoParseError(Exception):
    """Raised when a repository identifier cannot be parsed."""


@dataclass(frozen=True)
class RepoRef:
    owner: str
    repo: str
    branch: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def parse_repo(value: str) -> RepoRef:
    """Parse a repository identifier and return a RepoRef.

    Supported formats:
      - owner/repo
      - https://github.com/owner/repo
      - https://github.com/owner/repo.git
      - https://github.com/owner/repo/tree/branch/with/slashes
    """
    value = value.strip()
    if not value:
        raise RepoParseError("Repository is empty.")

    if "://" not in value:
        parts = value.strip("/").split("/")
        if len(parts) != 2:
            raise RepoParseError(f"Expected owner/repo, got: {value}")
        return _make_ref(parts[0], parts[1], None, value)

    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https"):
        raise RepoParseError(f"Unsupported scheme: {parsed.scheme}")
    host = parsed.hostname or ""
    if host not in ("github.com", "www.github.com"):
        raise RepoParseError(f"Unsupported host: {host}")

    # path: owner/repo[/tree/branch[/...]]
    parts = parsed.path.strip("/").split("/")
    if len(parts) < 2:
        raise RepoParseError(f"GitHub URL must include owner/repo: {value}")

    branch = None
    if len(parts) >= 4 and parts[2] == "tree":
        # Everything after /tree/ is the branch name (may contain slashes)
        branch = "/".join(parts[3:])

    return _make_ref(parts[0], parts[1], branch, value)


def _make_ref(owner: str, repo: str, branch: str | None, raw: str) -> RepoRef:
    repo = repo.removesuffix(".git")
    if not (_NAME_RE.match(owner) and _NAME_RE.match(repo)):
        raise RepoParseError(f"Invalid repository name: {raw}")
    return RepoRef(owner=owner, repo=repo, branch=branch)
