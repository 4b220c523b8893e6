"""Data classes for repofetch."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

DEFAULT_BRANCH = "main"
DEFAULT_MAX_FILE_SIZE = 1024 * 1024  # 1MB
DEFAULT_CONCURRENCY = 5


class EntryType(Enum):
    FILE = "file"
    DIR = "dir"
    ALL = "all"

    @classmethod
    def _missing_(cls, value):
        if value == "directory":
            return cls.DIR
        return None


@dataclass(frozen=True)
class TreeItem:
    """One row of the recursive tree listing returned by the API."""

    path: str
    type: str  # "blob" | "tree"
    sha: str
    mode: str = ""
    size: int | None = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> TreeItem:
        return cls(
            path=data["path"],
            type=data["type"],
            sha=data.get("sha", ""),
            mode=data.get("mode", ""),
            size=data.get("size"),
        )


@dataclass(frozen=True)
class TreeSnapshot:
    sha: str
    items: list[TreeItem]
    truncated: bool = False


@dataclass
class FileEntry:
    path: str
    type: str  # "file" | "directory"
    sha: str
    size: int | None = None
    extension: str | None = None
    content: str | None = None

    @property
    def is_file(self) -> bool:
        return self.type == "file"

    @property
    def is_dir(self) -> bool:
        return self.type == "directory"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"path": self.path, "type": self.type, "sha": self.sha}
        for key in ("size", "extension", "content"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class RateLimitInfo:
    limit: int
    remaining: int
    used: int
    reset: datetime

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> RateLimitInfo | None:
        """Build a snapshot from ``X-RateLimit-*`` headers.

        Returns None unless all four headers are present.
        """
        limit = headers.get("X-RateLimit-Limit")
        remaining = headers.get("X-RateLimit-Remaining")
        used = headers.get("X-RateLimit-Used")
        reset = headers.get("X-RateLimit-Reset")
        if not (limit and remaining and used and reset):
            return None
        try:
            return cls(
                limit=int(limit),
                remaining=int(remaining),
                used=int(used),
                reset=datetime.fromtimestamp(int(reset), tz=timezone.utc),
            )
        except ValueError:
            return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "limit": self.limit,
            "remaining": self.remaining,
            "used": self.used,
            "reset": self.reset.isoformat(),
        }


@dataclass
class FetchResult:
    repo: str
    branch: str
    truncated: bool
    files: list[FileEntry] = field(default_factory=list)
    rate_limit: RateLimitInfo | None = None
    is_authenticated: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "repo": self.repo,
            "branch": self.branch,
            "truncated": self.truncated,
            "files": [f.to_dict() for f in self.files],
        }
        if self.rate_limit is not None:
            data["rateLimit"] = self.rate_limit.to_dict()
        if self.is_authenticated is not None:
            data["isAuthenticated"] = self.is_authenticated
        return data


@dataclass
class FetchOptions:
    branch: str = DEFAULT_BRANCH
    token: str | None = None
    extensions: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    include: list[str] = field(default_factory=list)
    type: EntryType = EntryType.ALL
    content: bool = False
    shas: list[str] = field(default_factory=list)
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    concurrency: int = DEFAULT_CONCURRENCY


@dataclass(frozen=True)
class FetchProgress:
    completed: int
    total: int
    path: str = ""
    sha: str = ""
    error: str | None = None
