"""Top-level fetch: tree, filter, sort, and optional contents."""

from __future__ import annotations

import logging

from repofetch.content import ProgressCallback, fetch_content
from repofetch.file_filter import filter_tree, sort_entries
from repofetch.models import FetchOptions, FetchResult
from repofetch.providers.base import RepoProvider
from repofetch.providers.github import GitHubProvider

logger = logging.getLogger(__name__)


def repofetch(
    repo: str,
    options: FetchOptions | None = None,
    *,
    provider: RepoProvider | None = None,
    on_progress: ProgressCallback | None = None,
) -> FetchResult:
    """Fetch the tree of *repo* and, if requested, the contents of its files.

    Errors raised while resolving the branch or listing the tree propagate
    unchanged; failures fetching individual files only leave those files
    without content.
    """
    options = options or FetchOptions()
    if provider is None:
        provider = GitHubProvider(token=options.token)

    snapshot, branch = provider.get_tree(repo, options.branch)

    entries = filter_tree(
        snapshot.items,
        extensions=options.extensions,
        exclude=options.exclude,
        include=options.include,
        type=options.type,
        max_file_size=options.max_file_size if options.content else None,
    )
    entries = sort_entries(entries)
    logger.debug("%d of %d tree entries kept", len(entries), len(snapshot.items))

    if options.content or options.shas:
        entries = fetch_content(
            provider,
            repo,
            entries,
            concurrency=options.concurrency,
            max_file_size=options.max_file_size,
            filter_shas=set(options.shas) if options.shas else None,
            on_progress=on_progress,
        )

    return FetchResult(
        repo=repo,
        branch=branch,
        truncated=snapshot.truncated,
        files=entries,
        rate_limit=provider.rate_limit,
        is_authenticated=provider.is_authenticated,
    )
