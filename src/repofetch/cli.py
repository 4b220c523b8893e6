"""Command line interface for repofetch."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from importlib import metadata

from repofetch import token_store
from repofetch.clipboard import copy_to_clipboard
from repofetch.fetcher import repofetch
from repofetch.file_filter import parse_list_input
from repofetch.models import (
    DEFAULT_BRANCH,
    DEFAULT_CONCURRENCY,
    DEFAULT_MAX_FILE_SIZE,
    EntryType,
    FetchOptions,
    FetchProgress,
)
from repofetch.output import OUTPUT_FORMATS, format_content_output, format_output
from repofetch.providers.github import GitHubError, RateLimitError
from repofetch.url_parser import RepoParseError, parse_repo

EPILOG = """\
examples:
  repofetch facebook/react
  repofetch microsoft/typescript -b main --ext .ts,.tsx
  repofetch owner/repo --exclude node_modules,dist --format json
  repofetch owner/repo --ext .md --content --format json-pretty
"""


def _version() -> str:
    try:
        return metadata.version("repofetch")
    except metadata.PackageNotFoundError:
        return "unknown"


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repofetch",
        description="Fetch and explore remote repository structures and contents.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("repo", nargs="?", help="owner/repo or a GitHub URL")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    auth = parser.add_argument_group("repository")
    auth.add_argument(
        "-b", "--branch",
        help=f"Branch to fetch (default: {DEFAULT_BRANCH}, falls back to the default branch)",
    )
    auth.add_argument("-t", "--token", help="GitHub personal access token")
    auth.add_argument("--save-token", metavar="TOKEN", help="Save a token to the OS keychain")
    auth.add_argument("--forget-token", action="store_true", help="Remove the saved token")

    filters = parser.add_argument_group("filtering")
    filters.add_argument("-e", "--ext", default="", help="File extensions (comma-separated: .ts,.js)")
    filters.add_argument(
        "--type", choices=["file", "dir", "directory", "all"], default=EntryType.ALL.value,
        help="Entry type; \"directory\" is the same as \"dir\" (default: all)",
    )
    filters.add_argument("--exclude", default="", help="Exclude patterns (comma-separated: node_modules,dist)")
    filters.add_argument("--include", default="", help="Include only matching patterns")

    content = parser.add_argument_group("content")
    content.add_argument("-c", "--content", action="store_true", help="Fetch file contents")
    content.add_argument("--sha", default="", help="Fetch content for specific files by SHA (comma-separated)")
    content.add_argument(
        "--max-size", type=_positive_int, default=DEFAULT_MAX_FILE_SIZE,
        help="Max file size to fetch content, in bytes (default: 1MB)",
    )
    content.add_argument(
        "--concurrency", type=_positive_int, default=DEFAULT_CONCURRENCY,
        help=f"Concurrent requests for content (default: {DEFAULT_CONCURRENCY})",
    )

    out = parser.add_argument_group("output")
    out.add_argument("-f", "--format", choices=OUTPUT_FORMATS, default="ascii")
    out.add_argument("--icons", action="store_true", help="Show file/folder icons in ascii output")
    out.add_argument("--size", action="store_true", help="Show file sizes in ascii output")
    out.add_argument("--no-clipboard", action="store_true", help="Don't copy ascii output to the clipboard")
    return parser


def resolve_token(explicit: str | None) -> str | None:
    """Pick a token: explicit flag, then keychain, then environment."""
    if explicit:
        return explicit.strip()
    saved = token_store.load(token_store.GITHUB_TOKEN_KEY)
    if saved:
        return saved
    return os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN") or None


def _print_progress(progress: FetchProgress) -> None:
    end = "\n" if progress.completed == progress.total else ""
    print(f"\rFetching content: {progress.completed}/{progress.total}", end=end, file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
    )

    if args.save_token:
        if token_store.save(token_store.GITHUB_TOKEN_KEY, args.save_token.strip()):
            print("Token saved to the OS keychain.")
            return 0
        print("Error: could not save the token (keychain unavailable).", file=sys.stderr)
        return 1
    if args.forget_token:
        token_store.delete(token_store.GITHUB_TOKEN_KEY)
        print("Saved token removed.")
        return 0

    if not args.repo:
        parser.print_help(sys.stderr)
        return 1

    is_json = args.format in ("json", "json-pretty")
    token = resolve_token(args.token)

    try:
        ref = parse_repo(args.repo)
        options = FetchOptions(
            branch=args.branch or ref.branch or DEFAULT_BRANCH,
            token=token,
            extensions=parse_list_input(args.ext),
            exclude=parse_list_input(args.exclude),
            include=parse_list_input(args.include),
            type=EntryType(args.type),
            content=args.content,
            shas=parse_list_input(args.sha),
            max_file_size=args.max_size,
            concurrency=args.concurrency,
        )

        if not is_json:
            print(f"Fetching {ref.full_name}...", file=sys.stderr)

        result = repofetch(
            ref.full_name,
            options,
            on_progress=None if is_json else _print_progress,
        )
    except (GitHubError, RepoParseError) as exc:
        if is_json:
            print(json.dumps({"error": str(exc)}))
        else:
            print(f"Error: {exc}", file=sys.stderr)
            if isinstance(exc, RateLimitError) and not token:
                print("Tip: pass --token or set GITHUB_TOKEN to raise the limit.", file=sys.stderr)
        return 1

    output = format_output(result, args.format, icons=args.icons, show_size=args.size)
    print(output)

    if not is_json:
        if args.content:
            print(format_content_output(result))
        if args.format == "ascii" and not args.no_clipboard and copy_to_clipboard(output):
            print("\nTree copied to clipboard!", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
