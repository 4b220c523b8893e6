"""Bounded-concurrency retrieval of file contents."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import replace
from typing import Callable, Collection

from repofetch.models import (
    DEFAULT_CONCURRENCY,
    DEFAULT_MAX_FILE_SIZE,
    FetchProgress,
    FileEntry,
)
from repofetch.providers.base import RepoProvider

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[FetchProgress], None]


def select_fetchable(
    entries: list[FileEntry],
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    filter_shas: Collection[str] | None = None,
) -> list[FileEntry]:
    """Return the files whose content should be fetched, in input order."""
    selected: list[FileEntry] = []
    for entry in entries:
        if not entry.is_file:
            continue
        if entry.size is not None and entry.size > max_file_size:
            continue
        if filter_shas is not None and entry.sha not in filter_shas:
            continue
        selected.append(entry)
    return selected


def fetch_content(
    provider: RepoProvider,
    repo: str,
    entries: list[FileEntry],
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    filter_shas: Collection[str] | None = None,
    on_progress: ProgressCallback | None = None,
) -> list[FileEntry]:
    """Attach file contents to the qualifying entries.

    Qualifying files are fetched in consecutive groups of at most
    *concurrency*; all fetches of a group run in parallel and the next group
    starts only once every member of the current one has finished. A failed
    fetch leaves its entry without content and does not stop the batch.

    Args:
        provider: Source of blob contents.
        repo: Repository identifier (``owner/repo``).
        entries: Filtered and sorted entries.
        concurrency: Maximum number of fetches in flight.
        max_file_size: Skip files larger than this (bytes).
        filter_shas: If given, only fetch entries whose sha is in this set.
        on_progress: Called once per finished fetch, in completion order.

    Returns:
        A list with the same order and length as *entries*.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {concurrency}")

    to_fetch = select_fetchable(entries, max_file_size, filter_shas)
    if not to_fetch:
        return list(entries)

    total = len(to_fetch)
    completed = 0
    results: dict[str, str] = {}
    failed = 0

    for start in range(0, total, concurrency):
        group = to_fetch[start:start + concurrency]

        with ThreadPoolExecutor(max_workers=len(group)) as pool:
            futures: dict[Future[str], FileEntry] = {
                pool.submit(provider.get_blob_content, repo, entry.sha): entry
                for entry in group
            }
            for future in as_completed(futures):
                entry = futures[future]
                error: str | None = None
                try:
                    results[entry.path] = future.result()
                except Exception as exc:
                    failed += 1
                    error = str(exc)
                    logger.warning("Failed to fetch %s: %s", entry.path, exc)

                completed += 1
                if on_progress is not None:
                    on_progress(
                        FetchProgress(
                            completed=completed,
                            total=total,
                            path=entry.path,
                            sha=entry.sha,
                            error=error,
                        )
                    )

    if failed:
        logger.info("Fetched %d of %d files (%d failed)", total - failed, total, failed)

    # Keyed by path: entries sharing a blob sha succeed or fail independently.
    return [
        replace(entry, content=results[entry.path]) if entry.path in results else entry
        for entry in entries
    ]
