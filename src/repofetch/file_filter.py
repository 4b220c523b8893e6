"""Tree entry filtering, wildcard path matching, and hierarchical ordering."""

from __future__ import annotations

import posixpath
import re
from functools import lru_cache
from typing import Iterable

from repofetch.models import EntryType, FileEntry, TreeItem


def get_extension(path: str) -> str:
    """Return the lower-cased extension of *path* (``".ts"``), or ``""``."""
    return posixpath.splitext(path)[1].lower()


def normalize_extensions(extensions: Iterable[str]) -> set[str]:
    """Lower-case each extension and make sure it starts with a dot.

    ``["ts", ".TS"]`` and ``[".ts"]`` both normalize to ``{".ts"}``.
    """
    normalized: set[str] = set()
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        normalized.add(ext if ext.startswith(".") else f".{ext}")
    return normalized


def parse_list_input(raw: str | None) -> list[str]:
    """Split a comma-separated string into individual values.

    Whitespace around each value is stripped. Empty segments are ignored.
    """
    if not raw or not raw.strip():
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]


# ---------------------------------------------------------------------------
# Path patterns
# ---------------------------------------------------------------------------


@lru_cache(maxsize=256)
def _compile_wildcard(pattern: str) -> re.Pattern[str]:
    # Only "*" is special; every other character, dots included, is literal.
    body = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.compile(body, re.DOTALL)


def matches_pattern(path: str, pattern: str) -> bool:
    """Return True if *pattern* matches the full path or its last segment.

    A pattern containing ``*`` must match the whole target; ``*`` stands for
    any sequence of characters. A pattern without ``*`` matches when it occurs
    as a substring of either target.
    """
    name = posixpath.basename(path)
    if "*" in pattern:
        regex = _compile_wildcard(pattern)
        return bool(regex.fullmatch(path) or regex.fullmatch(name))
    return pattern in path or pattern in name


def matches_any_pattern(path: str, patterns: Iterable[str]) -> bool:
    return any(matches_pattern(path, p) for p in patterns)


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def filter_tree(
    items: Iterable[TreeItem],
    *,
    extensions: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
    include: Iterable[str] | None = None,
    type: EntryType = EntryType.ALL,
    max_file_size: int | None = None,
) -> list[FileEntry]:
    """Turn raw tree items into file entries, dropping the ones filtered out.

    Checks run in a fixed order: entry type, include patterns, exclude
    patterns, then (files only) extension and size. Items of an unknown
    type (e.g. submodule ``commit`` entries) are skipped.
    """
    include = list(include or [])
    exclude = list(exclude or [])
    wanted_exts = normalize_extensions(extensions or [])

    entries: list[FileEntry] = []
    for item in items:
        is_file = item.type == "blob"
        is_dir = item.type == "tree"
        if not (is_file or is_dir):
            continue

        if type is EntryType.FILE and not is_file:
            continue
        if type is EntryType.DIR and not is_dir:
            continue

        if include and not matches_any_pattern(item.path, include):
            continue
        if exclude and matches_any_pattern(item.path, exclude):
            continue

        ext = get_extension(item.path) if is_file else ""
        if is_file:
            if wanted_exts and ext not in wanted_exts:
                continue
            # Size is unknown for some blobs; those pass.
            if max_file_size and item.size is not None and item.size > max_file_size:
                continue

        entries.append(
            FileEntry(
                path=item.path,
                type="file" if is_file else "directory",
                sha=item.sha,
                size=item.size,
                extension=ext or None,
            )
        )
    return entries


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


def name_sort_key(name: str) -> tuple[str, str]:
    """Locale-like ordering: case-insensitive, lower case before upper case."""
    return name.casefold(), name.swapcase()


def _entry_sort_key(entry: FileEntry) -> tuple:
    parts = entry.path.split("/")
    last = len(parts) - 1
    # Directories, explicit or implied by a deeper path, rank ahead of files.
    return tuple(
        (0 if i < last or entry.is_dir else 1, name_sort_key(part))
        for i, part in enumerate(parts)
    )


def sort_entries(entries: Iterable[FileEntry]) -> list[FileEntry]:
    """Return *entries* in a deterministic, segment-wise hierarchical order.

    At each level directories come before files and names are compared
    alphabetically; a directory is immediately followed by its contents.
    """
    return sorted(entries, key=_entry_sort_key)
