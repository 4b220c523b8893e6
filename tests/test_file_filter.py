"""Tests for file_filter module."""

import itertools

from repofetch.file_filter import (
    filter_tree,
    get_extension,
    matches_pattern,
    normalize_extensions,
    parse_list_input,
    sort_entries,
)
from repofetch.models import EntryType, FileEntry, TreeItem


def _blob(path: str, size: int | None = 10, sha: str | None = None) -> TreeItem:
    return TreeItem(path=path, type="blob", sha=sha or f"sha-{path}", size=size)


def _tree(path: str) -> TreeItem:
    return TreeItem(path=path, type="tree", sha=f"sha-{path}")


ITEMS = [
    _blob("README.md", 100),
    _tree("src"),
    _blob("src/index.ts", 200),
    _blob("src/App.TSX", 300),
    _tree("node_modules"),
    _blob("node_modules/lib/index.js", 50),
    _blob("Makefile", 20),
    _blob("assets/logo.png", 5_000_000),
]


def _paths(entries):
    return [e.path for e in entries]


class TestGetExtension:
    def test_simple(self):
        assert get_extension("src/main.py") == ".py"

    def test_lower_cased(self):
        assert get_extension("src/App.TSX") == ".tsx"

    def test_no_extension(self):
        assert get_extension("Makefile") == ""

    def test_dotfile_has_no_extension(self):
        assert get_extension(".gitignore") == ""

    def test_dot_in_directory_only(self):
        assert get_extension("v1.2/README") == ""

    def test_last_suffix_only(self):
        assert get_extension("archive.tar.gz") == ".gz"


class TestNormalizeExtensions:
    def test_adds_dot_and_lowercases(self):
        assert normalize_extensions(["ts", ".TS", "Md"]) == {".ts", ".md"}

    def test_ignores_blank(self):
        assert normalize_extensions(["", "  "]) == set()


class TestParseListInput:
    def test_empty_string(self):
        assert parse_list_input("") == []

    def test_none(self):
        assert parse_list_input(None) == []

    def test_whitespace_only(self):
        assert parse_list_input("   ") == []

    def test_multiple(self):
        assert parse_list_input(".ts, .js ,.tsx") == [".ts", ".js", ".tsx"]

    def test_ignores_empty_segments(self):
        assert parse_list_input("a,,b,") == ["a", "b"]


class TestMatchesPattern:
    def test_substring_in_path(self):
        assert matches_pattern("node_modules/lib/index.js", "node_modules") is True
        assert matches_pattern("src/index.ts", "node_modules") is False

    def test_substring_in_name(self):
        assert matches_pattern("src/index.ts", "index") is True

    def test_wildcard_matches_last_segment(self):
        assert matches_pattern("src/index.ts", "*.ts") is True
        assert matches_pattern("src/index.tsx", "*.ts") is False

    def test_wildcard_anchored_on_full_path(self):
        assert matches_pattern("src/deep/a.ts", "src/*") is True
        assert matches_pattern("lib/src/a.ts", "src/*") is False

    def test_wildcard_dot_is_literal(self):
        assert matches_pattern("file.md", "*.md") is True
        assert matches_pattern("filexmd", "*.md") is False

    def test_other_regex_characters_are_literal(self):
        assert matches_pattern("a+b.txt", "a+b*") is True
        assert matches_pattern("aab.txt", "a+b*") is False
        assert matches_pattern("a?.txt", "a?*") is True
        assert matches_pattern("ab.txt", "a?*") is False

    def test_wildcard_in_middle(self):
        assert matches_pattern("test_utils.py", "test_*.py") is True
        assert matches_pattern("tests/conftest.py", "test_*.py") is False


class TestFilterTree:
    def test_no_filters_keeps_everything(self):
        entries = filter_tree(ITEMS)
        assert _paths(entries) == [i.path for i in ITEMS]

    def test_entry_kinds_and_extensions(self):
        entries = {e.path: e for e in filter_tree(ITEMS)}
        assert entries["src"].type == "directory"
        assert entries["src"].extension is None
        assert entries["src/App.TSX"].type == "file"
        assert entries["src/App.TSX"].extension == ".tsx"
        assert entries["Makefile"].extension is None
        assert entries["README.md"].size == 100
        assert entries["README.md"].sha == "sha-README.md"

    def test_type_file(self):
        entries = filter_tree(ITEMS, type=EntryType.FILE)
        assert all(e.is_file for e in entries)
        assert "src" not in _paths(entries)

    def test_type_dir(self):
        entries = filter_tree(ITEMS, type=EntryType.DIR)
        assert _paths(entries) == ["src", "node_modules"]

    def test_directory_alias_selects_directories(self):
        assert EntryType("directory") is EntryType.DIR
        entries = filter_tree(ITEMS, type=EntryType("directory"))
        assert _paths(entries) == ["src", "node_modules"]

    def test_include(self):
        entries = filter_tree(ITEMS, include=["src"])
        assert _paths(entries) == ["src", "src/index.ts", "src/App.TSX"]

    def test_exclude(self):
        entries = filter_tree(ITEMS, exclude=["node_modules", "*.png"])
        assert "node_modules" not in _paths(entries)
        assert "node_modules/lib/index.js" not in _paths(entries)
        assert "assets/logo.png" not in _paths(entries)
        assert "README.md" in _paths(entries)

    def test_exclude_evaluated_after_include(self):
        entries = filter_tree(ITEMS, include=["src"], exclude=["*.TSX"])
        assert _paths(entries) == ["src", "src/index.ts"]

    def test_extensions_apply_to_files_only(self):
        entries = filter_tree(ITEMS, extensions=[".ts"])
        assert _paths(entries) == ["src", "src/index.ts", "node_modules"]

    def test_extension_normalization_is_idempotent(self):
        a = filter_tree(ITEMS, extensions=["ts", ".TS"])
        b = filter_tree(ITEMS, extensions=[".ts"])
        assert a == b

    def test_extension_match_is_case_insensitive(self):
        entries = filter_tree(ITEMS, extensions=["tsx"], type=EntryType.FILE)
        assert _paths(entries) == ["src/App.TSX"]

    def test_max_file_size_drops_large_files(self):
        entries = filter_tree(ITEMS, max_file_size=1000)
        assert "assets/logo.png" not in _paths(entries)
        assert "README.md" in _paths(entries)

    def test_unknown_size_passes_size_check(self):
        entries = filter_tree([_blob("big.bin", None)], max_file_size=1)
        assert _paths(entries) == ["big.bin"]

    def test_size_check_does_not_apply_to_directories(self):
        entries = filter_tree([_tree("huge")], max_file_size=1)
        assert _paths(entries) == ["huge"]

    def test_submodule_entries_skipped(self):
        item = TreeItem(path="vendor/lib", type="commit", sha="c1")
        assert filter_tree([item]) == []


class TestSortEntries:
    def _entries(self, *paths):
        # A trailing "/" marks a directory entry.
        return [
            FileEntry(
                path=p.rstrip("/"),
                type="directory" if p.endswith("/") else "file",
                sha=p,
            )
            for p in paths
        ]

    def test_ancestor_before_descendant(self):
        entries = self._entries("src/index.ts", "src/")
        assert _paths(sort_entries(entries)) == ["src", "src/index.ts"]

    def test_directories_first_with_contents_grouped(self):
        entries = self._entries("README.md", "src/a.ts", "docs/", "src/", "docs/x.md")
        assert _paths(sort_entries(entries)) == [
            "docs",
            "docs/x.md",
            "src",
            "src/a.ts",
            "README.md",
        ]

    def test_implied_directories_before_files(self):
        entries = self._entries("src/a.ts", "README.md", "lib/b.ts", "LICENSE")
        assert _paths(sort_entries(entries)) == [
            "lib/b.ts",
            "src/a.ts",
            "LICENSE",
            "README.md",
        ]

    def test_nested_levels(self):
        entries = self._entries("src/z.ts", "src/lib/x.ts", "src/a.ts", "src/lib/")
        assert _paths(sort_entries(entries)) == [
            "src/lib",
            "src/lib/x.ts",
            "src/a.ts",
            "src/z.ts",
        ]

    def test_alphabetical_within_level(self):
        entries = self._entries("src/zeta.ts", "src/alpha.ts", "src/Beta.ts")
        assert _paths(sort_entries(entries)) == [
            "src/alpha.ts",
            "src/Beta.ts",
            "src/zeta.ts",
        ]

    def test_lower_case_before_upper_case_on_tie(self):
        entries = self._entries("B", "b", "a")
        assert _paths(sort_entries(entries)) == ["a", "b", "B"]

    def test_matches_filtered_tree_order(self):
        items = [
            _blob("README.md"),
            _tree("docs"),
            _blob("docs/x.md"),
            _tree("src"),
            _blob("src/a.ts"),
        ]
        assert _paths(sort_entries(filter_tree(items))) == [
            "docs",
            "docs/x.md",
            "src",
            "src/a.ts",
            "README.md",
        ]

    def test_deterministic_for_any_permutation(self):
        paths = ["src/", "src/a.ts", "src/lib/x.ts", "README.md", "docs/guide.md", "docs/"]
        expected = _paths(sort_entries(self._entries(*paths)))
        for perm in itertools.permutations(paths):
            assert _paths(sort_entries(self._entries(*perm))) == expected

    def test_returns_new_list(self):
        entries = self._entries("b", "a")
        result = sort_entries(entries)
        assert _paths(entries) == ["b", "a"]
        assert _paths(result) == ["a", "b"]

    def test_empty(self):
        assert sort_entries([]) == []
