"""Output formats for a fetch result."""

from __future__ import annotations

import json

from repofetch.models import FetchResult
from repofetch.tree_builder import build_tree, format_size

OUTPUT_FORMATS = ("ascii", "json", "json-pretty", "paths")

TRUNCATED_NOTICE = "⚠️  Tree was truncated (repository too large)"


def format_output(
    result: FetchResult,
    format: str = "ascii",
    *,
    icons: bool = False,
    show_size: bool = False,
) -> str:
    """Render *result* in one of :data:`OUTPUT_FORMATS`."""
    if format == "json":
        return json.dumps(result.to_dict(), ensure_ascii=False)
    if format == "json-pretty":
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if format == "paths":
        return "\n".join(f.path for f in result.files)
    if format == "ascii":
        return _format_ascii(result, icons=icons, show_size=show_size)
    raise ValueError(f"Unknown output format: {format}")


def _format_ascii(result: FetchResult, icons: bool, show_size: bool) -> str:
    lines = [build_tree(result.files, icons=icons, show_size=show_size)]
    if result.truncated:
        lines.append("")
        lines.append(TRUNCATED_NOTICE)
    return "\n".join(lines)


def format_content_output(result: FetchResult) -> str:
    """Dump every fetched file body under a banner with its path and size."""
    banner = "=" * 60
    parts: list[str] = []

    for entry in result.files:
        if not entry.is_file or entry.content is None:
            continue
        parts.append(f"\n{banner}")
        parts.append(f"FILE: {entry.path}")
        if entry.size:
            parts.append(f"SIZE: {format_size(entry.size)}")
        parts.append(banner)
        parts.append(entry.content)

    return "\n".join(parts)
