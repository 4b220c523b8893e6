"""ASCII tree builder for file structure display."""

from __future__ import annotations

from dataclasses import dataclass, field

from repofetch.file_filter import name_sort_key
from repofetch.models import FileEntry


@dataclass
class _Node:
    name: str
    entry: FileEntry | None = None
    children: dict[str, _Node] = field(default_factory=dict)

    @property
    def is_dir(self) -> bool:
        return bool(self.children) or (self.entry is not None and self.entry.is_dir)


def format_size(size: int) -> str:
    """Human-readable byte count: ``512B``, ``1.5KB``, ``2.0MB``."""
    if size < 1024:
        return f"{size}B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f}KB"
    return f"{size / (1024 * 1024):.1f}MB"


def build_tree(
    entries: list[FileEntry],
    icons: bool = False,
    show_size: bool = False,
) -> str:
    """Build an ASCII directory tree from a list of entries.

    Directories come before files at every level, each group alphabetical.
    Directories that only appear as a prefix of a deeper path are shown too.

    Example output:
        ├── src/
        │   ├── main.py
        │   └── utils.py
        └── README.md
    """
    if not entries:
        return ""

    root = _Node(name="")
    for entry in entries:
        node = root
        for part in entry.path.split("/"):
            node = node.children.setdefault(part, _Node(name=part))
        node.entry = entry

    lines: list[str] = []
    _render_tree(root, lines, prefix="", icons=icons, show_size=show_size)
    return "\n".join(lines)


def _sorted_children(node: _Node) -> list[_Node]:
    return sorted(
        node.children.values(),
        key=lambda n: (not n.is_dir, name_sort_key(n.name)),
    )


def _render_tree(
    node: _Node,
    lines: list[str],
    prefix: str,
    icons: bool,
    show_size: bool,
) -> None:
    """Recursively render the tree into lines."""
    children = _sorted_children(node)
    for i, child in enumerate(children):
        is_last = i == len(children) - 1
        connector = "└── " if is_last else "├── "

        icon = ""
        suffix = ""
        if icons:
            icon = "📁 " if child.is_dir else "📄 "
        elif child.is_dir:
            suffix = "/"
        if show_size and child.entry is not None and child.entry.size is not None:
            suffix += f" ({format_size(child.entry.size)})"

        lines.append(f"{prefix}{connector}{icon}{child.name}{suffix}")

        if child.children:
            extension = "    " if is_last else "│   "
            _render_tree(child, lines, prefix + extension, icons, show_size)
