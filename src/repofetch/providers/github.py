"""GitHub REST API provider."""

from __future__ import annotations

import base64
import binascii
import logging
import threading
import time

import requests

from repofetch.models import RateLimitInfo, TreeItem, TreeSnapshot
from repofetch.providers.base import RepoProvider

logger = logging.getLogger(__name__)


class GitHubError(Exception):
    """Raised for GitHub API errors."""


class NotFoundError(GitHubError):
    """Repository or reference is missing, or private without access."""


class RateLimitError(GitHubError):
    """Raised when GitHub rate limit is exceeded."""

    def __init__(self, reset_at: int):
        self.reset_at = reset_at
        wait = max(0, reset_at - int(time.time()))
        super().__init__(
            f"GitHub API rate limit exceeded. Resets in {wait} seconds. "
            "Use a token to authenticate."
        )


class UpstreamError(GitHubError):
    """Any other failed exchange with the API."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


# Commit lookups answer 422 for malformed or unknown refs.
_FALLBACK_STATUSES = (404, 422)


class GitHubProvider(RepoProvider):
    """Provider for GitHub repositories using the REST API."""

    API_BASE = "https://api.github.com"

    def __init__(
        self,
        token: str | None = None,
        api_base: str | None = None,
        timeout: float = 30,
    ):
        self.api_base = (api_base or self.API_BASE).rstrip("/")
        self.timeout = timeout
        self._token = token
        self._rate_limit: RateLimitInfo | None = None
        self._rate_limit_lock = threading.Lock()

        self.session = requests.Session()
        self.session.headers["Accept"] = "application/vnd.github+json"
        self.session.headers["User-Agent"] = "repofetch/1.0"
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    @property
    def rate_limit(self) -> RateLimitInfo | None:
        with self._rate_limit_lock:
            return self._rate_limit

    def _update_rate_limit(self, response: requests.Response) -> None:
        info = RateLimitInfo.from_headers(response.headers)
        if info is None:
            return
        with self._rate_limit_lock:
            self._rate_limit = info

    def _request(self, path: str, params: dict | None = None) -> requests.Response:
        url = f"{self.api_base}{path}"
        logger.debug("GET %s", url)
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise UpstreamError(f"Network error fetching {url}: {exc}") from exc
        self._update_rate_limit(resp)
        return resp

    def _raise_for_status(self, resp: requests.Response, not_found: str) -> None:
        if resp.ok:
            return

        status = resp.status_code
        if status == 404:
            raise NotFoundError(not_found)
        if status in (403, 429) and _is_rate_limited(resp):
            raise RateLimitError(int(resp.headers.get("X-RateLimit-Reset", 0)))
        if status == 401:
            raise UpstreamError(
                "Authentication failed. Check your GitHub token.", status
            )
        if status == 403:
            raise UpstreamError(
                "Access denied. The token may lack permissions for this repository.",
                status,
            )
        raise UpstreamError(f"GitHub API error: {status} {resp.reason}", status)

    def _api_get(
        self, path: str, params: dict | None = None, not_found: str = "Not found"
    ) -> dict:
        resp = self._request(path, params)
        self._raise_for_status(resp, not_found)
        return _json_body(resp)

    def get_default_branch(self, repo: str) -> str:
        data = self._api_get(
            f"/repos/{repo}",
            not_found=f'Repository "{repo}" not found or is private',
        )
        try:
            return data["default_branch"]
        except KeyError as exc:
            raise UpstreamError(
                f"Unexpected response for repository \"{repo}\": missing default_branch"
            ) from exc

    def get_tree(self, repo: str, branch: str) -> tuple[TreeSnapshot, str]:
        target = branch
        resp = self._request(f"/repos/{repo}/commits/{target}")

        if resp.status_code in _FALLBACK_STATUSES:
            logger.info(
                'Branch "%s" not found in %s, falling back to default branch',
                branch,
                repo,
            )
            target = self.get_default_branch(repo)
            resp = self._request(f"/repos/{repo}/commits/{target}")

        self._raise_for_status(
            resp, f'Branch "{target}" not found in repository "{repo}"'
        )
        try:
            tree_sha = _json_body(resp)["commit"]["tree"]["sha"]
        except (KeyError, TypeError) as exc:
            raise UpstreamError(
                f"Unexpected response for commit \"{target}\": missing tree sha"
            ) from exc

        data = self._api_get(
            f"/repos/{repo}/git/trees/{tree_sha}",
            params={"recursive": "1"},
            not_found=f'Tree {tree_sha} not found in repository "{repo}"',
        )
        try:
            snapshot = TreeSnapshot(
                sha=data.get("sha", tree_sha),
                items=[TreeItem.from_api(item) for item in data.get("tree", [])],
                truncated=bool(data.get("truncated", False)),
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise UpstreamError(f"Malformed tree {tree_sha}: {exc}") from exc
        if snapshot.truncated:
            logger.warning("Tree for %s@%s was truncated by the API", repo, target)
        return snapshot, target

    def get_blob(self, repo: str, sha: str) -> bytes:
        data = self._api_get(
            f"/repos/{repo}/git/blobs/{sha}",
            not_found=f'Blob {sha} not found in repository "{repo}"',
        )
        content = data.get("content", "")
        if data.get("encoding", "base64") != "base64":
            return content.encode("utf-8")
        try:
            return base64.b64decode(content)
        except (binascii.Error, ValueError) as exc:
            raise UpstreamError(f"Malformed blob {sha}: {exc}") from exc


def _json_body(resp: requests.Response) -> dict:
    try:
        body = resp.json()
    except ValueError as exc:
        raise UpstreamError(
            f"Invalid JSON from GitHub API ({resp.status_code})", resp.status_code
        ) from exc
    if not isinstance(body, dict):
        raise UpstreamError(
            f"Unexpected JSON from GitHub API ({resp.status_code})", resp.status_code
        )
    return body


def _is_rate_limited(resp: requests.Response) -> bool:
    if resp.headers.get("X-RateLimit-Remaining") == "0":
        return True
    try:
        body = resp.json()
    except ValueError:
        return False
    message = body.get("message", "") if isinstance(body, dict) else ""
    return "rate limit" in str(message).lower()
