from __future__ import annotations

import json
import subprocess

from nutracker.models import ResultFormatError


class GithubError(Exception):
    def __init__(self, message: str, stdout: str = "", stderr: str = "") -> None:
        super().__init__(message)
        self.stdout = stdout
        self.stderr = stderr


def command_line(args: list[str]) -> str:
    return " ".join(["gh", "search", "issues", *args])


def _run_gh(args: list[str]) -> str:
    try:
        result = subprocess.run(["gh", *args], capture_output=True, text=True)
    except OSError as exc:
        raise GithubError(f"Unable to run 'gh': {exc}") from exc
    if result.returncode != 0:
        raise GithubError("'gh' did not run successfully", result.stdout, result.stderr)
    return result.stdout


def search_issues(args: list[str]) -> list[dict]:
    out = _run_gh(["search", "issues", *args])
    if not out.strip():
        return []
    try:
        found = json.loads(out)
    except json.JSONDecodeError as exc:
        raise ResultFormatError(f"Invalid JSON from gh: {out[:200]}") from exc
    if not isinstance(found, list):
        raise ResultFormatError(f"Expected a list of issues from gh, got: {out[:200]}")
    return found


def show_search(args: list[str]) -> None:
    """Let gh print, or open in the browser, the search results itself."""
    try:
        result = subprocess.run(["gh", "search", "issues", *args])
    except OSError as exc:
        raise GithubError(f"Unable to run 'gh': {exc}") from exc
    if result.returncode != 0:
        raise GithubError("'gh' did not run successfully")
