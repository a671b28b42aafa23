import json
import subprocess
from unittest.mock import patch

import pytest

from nutracker.github import GithubError, command_line, search_issues, show_search
from nutracker.models import ResultFormatError


def _mock_run(stdout="", returncode=0, stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@patch("nutracker.github.subprocess.run")
def test_search_issues(mock_run):
    issues = [{"number": 42, "title": "Test"}]
    mock_run.return_value = _mock_run(stdout=json.dumps(issues))
    result = search_issues(["--repo", "w3c/apa", "--json", "number,title"])
    assert result == issues
    cmd = mock_run.call_args[0][0]
    assert cmd == ["gh", "search", "issues", "--repo", "w3c/apa", "--json", "number,title"]


@patch("nutracker.github.subprocess.run")
def test_search_issues_empty_output(mock_run):
    mock_run.return_value = _mock_run(stdout="\n")
    assert search_issues(["--repo", "w3c/apa"]) == []


@patch("nutracker.github.subprocess.run")
def test_search_issues_gh_error(mock_run):
    mock_run.return_value = _mock_run(returncode=1, stdout="partial", stderr="auth required")
    with pytest.raises(GithubError) as exc:
        search_issues(["--repo", "w3c/apa"])
    assert exc.value.stderr == "auth required"
    assert exc.value.stdout == "partial"


@patch("nutracker.github.subprocess.run")
def test_search_issues_bad_json(mock_run):
    mock_run.return_value = _mock_run(stdout="not json")
    with pytest.raises(ResultFormatError, match="Invalid JSON"):
        search_issues(["--repo", "w3c/apa"])


@patch("nutracker.github.subprocess.run")
def test_search_issues_not_a_list(mock_run):
    mock_run.return_value = _mock_run(stdout='{"number": 1}')
    with pytest.raises(ResultFormatError, match="Expected a list"):
        search_issues(["--repo", "w3c/apa"])


@patch("nutracker.github.subprocess.run")
def test_show_search_does_not_capture(mock_run):
    mock_run.return_value = _mock_run()
    show_search(["--repo", "w3c/apa", "--web"])
    mock_run.assert_called_once_with(["gh", "search", "issues", "--repo", "w3c/apa", "--web"])


@patch("nutracker.github.subprocess.run")
def test_show_search_failure(mock_run):
    mock_run.return_value = _mock_run(returncode=1)
    with pytest.raises(GithubError):
        show_search(["--repo", "w3c/apa"])


def test_command_line():
    assert command_line(["--repo", "w3c/apa"]) == "gh search issues --repo w3c/apa"


@patch("nutracker.github.subprocess.run", side_effect=FileNotFoundError(2, "No such file or directory", "gh"))
def test_gh_not_installed(mock_run):
    with pytest.raises(GithubError, match="Unable to run 'gh'"):
        search_issues(["--repo", "w3c/apa"])
    with pytest.raises(GithubError, match="Unable to run 'gh'"):
        show_search(["--repo", "w3c/apa"])
