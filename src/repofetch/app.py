"""Streamlit UI for repofetch."""

from __future__ import annotations

import streamlit as st

from repofetch import token_store
from repofetch.fetcher import repofetch
from repofetch.file_filter import parse_list_input
from repofetch.models import (
    DEFAULT_BRANCH,
    DEFAULT_CONCURRENCY,
    DEFAULT_MAX_FILE_SIZE,
    EntryType,
    FetchOptions,
    FetchProgress,
    FetchResult,
)
from repofetch.output import format_content_output, format_output
from repofetch.providers.github import GitHubError, RateLimitError
from repofetch.url_parser import RepoParseError, parse_repo


def _qp(key: str, default: str = "") -> str:
    """Read a query parameter, returning *default* if absent."""
    params = st.query_params
    return params.get(key, default)


def main() -> None:
    st.set_page_config(
        page_title="repofetch",
        page_icon="📦",
        layout="wide",
    )

    # --- Header with settings popover ---
    header_left, header_right = st.columns([8, 1])
    with header_left:
        st.title("repofetch")
    with header_right:
        st.markdown("<div style='height: 1.5rem'></div>", unsafe_allow_html=True)
        with st.popover("⚙", use_container_width=True):
            st.subheader("Settings")

            saved_token = token_store.load(token_store.GITHUB_TOKEN_KEY) or ""
            github_token = st.text_input(
                "GitHub Token (optional)",
                value=_qp("token") or saved_token,
                type="password",
                help="Required for private repos. Increases rate limit from 60 to 5,000 requests/hour.",
            )

            if token_store.is_available():
                remember = st.checkbox(
                    "Save token to OS keychain",
                    value=bool(saved_token),
                )
                if remember and github_token:
                    token_store.save(token_store.GITHUB_TOKEN_KEY, github_token.strip())
                elif not remember and saved_token:
                    token_store.delete(token_store.GITHUB_TOKEN_KEY)

            max_file_size = st.number_input(
                "Max file size (bytes)",
                min_value=1,
                value=int(_qp("max_size", str(DEFAULT_MAX_FILE_SIZE))),
                step=1024,
                help="Files larger than this are not downloaded.",
            )
            concurrency = st.number_input(
                "Concurrent requests",
                min_value=1,
                max_value=32,
                value=DEFAULT_CONCURRENCY,
            )

    st.caption("Explore the file tree of a GitHub repository and fetch file contents.")

    # --- Main area ---
    repo_input = st.text_input(
        "Repository",
        value=_qp("repo"),
        placeholder="owner/repo or https://github.com/owner/repo",
    )
    branch = st.text_input("Branch", value=_qp("branch"), placeholder=DEFAULT_BRANCH)

    col_ext, col_inc, col_exc, col_type = st.columns(4)
    with col_ext:
        extensions = st.text_input("Extensions", value=_qp("ext"), placeholder=".ts, .py")
    with col_inc:
        include = st.text_input("Include", value=_qp("include"), placeholder="src, *.md")
    with col_exc:
        exclude = st.text_input("Exclude", value=_qp("exclude"), placeholder="node_modules, dist")
    with col_type:
        entry_type = st.selectbox("Type", [t.value for t in EntryType], index=2)

    fetch_content = st.checkbox("Fetch file contents", value=_qp("content") == "1")

    fetch_clicked = st.button("Fetch", type="primary", use_container_width=True)

    if fetch_clicked and repo_input:
        options = FetchOptions(
            branch=branch.strip(),
            token=github_token.strip() or None,
            extensions=parse_list_input(extensions),
            include=parse_list_input(include),
            exclude=parse_list_input(exclude),
            type=EntryType(entry_type),
            content=fetch_content,
            max_file_size=int(max_file_size),
            concurrency=int(concurrency),
        )
        _run_fetch(repo_input, options)
    elif fetch_clicked:
        st.error("Please enter a repository.")

    # Show previous result after rerun (e.g. download button click)
    if not fetch_clicked and "result" in st.session_state:
        _show_result(st.session_state["result"])


def _run_fetch(repo_input: str, options: FetchOptions) -> None:
    try:
        ref = parse_repo(repo_input)
    except RepoParseError as exc:
        st.error(f"Invalid repository: {exc}")
        return

    if not options.branch:
        options.branch = ref.branch or DEFAULT_BRANCH

    progress_bar = st.progress(0, text="Fetching file tree...")

    def on_progress(progress: FetchProgress) -> None:
        progress_bar.progress(
            progress.completed / progress.total,
            text=f"Fetching: {progress.path}",
        )

    try:
        result = repofetch(ref.full_name, options, on_progress=on_progress)
    except RateLimitError as exc:
        progress_bar.empty()
        st.error(str(exc))
        st.info(
            "Tip: Add a GitHub token in Settings (⚙) to increase your rate limit "
            "from 60 to 5,000 requests per hour."
        )
        return
    except GitHubError as exc:
        progress_bar.empty()
        st.error(str(exc))
        return

    progress_bar.progress(1.0, text="Done!")
    st.session_state["result"] = result
    _show_result(result)


def _show_result(result: FetchResult) -> None:
    """Display tree, download button and rate-limit info for a result."""
    files = [f for f in result.files if f.is_file]
    missing = [f for f in files if f.content is None]
    st.info(
        f"{result.repo}@{result.branch}: {len(result.files)} entries, {len(files)} files."
    )
    if result.truncated:
        st.warning("The tree was truncated by GitHub (repository too large).")

    st.download_button(
        label="Download JSON",
        data=format_output(result, "json-pretty"),
        file_name=f"{result.repo.replace('/', '_')}.json",
        mime="application/json",
        use_container_width=True,
    )

    with st.expander("Tree", expanded=True):
        st.code(format_output(result, "ascii", show_size=True), language="text")

    if any(f.content is not None for f in files):
        if missing:
            st.caption(f"{len(missing)} files have no content (skipped or failed).")
        with st.expander("Contents", expanded=False):
            st.code(format_content_output(result), language="text")

    if result.rate_limit is not None:
        st.caption(
            f"Rate limit: {result.rate_limit.remaining}/{result.rate_limit.limit} "
            f"remaining, resets at {result.rate_limit.reset:%Y-%m-%d %H:%M:%S} UTC"
        )


if __name__ == "__main__":
    main()
