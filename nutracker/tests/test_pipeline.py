from unittest.mock import patch

import pytest

from nutracker.models import Issue, ReportFormat, ResultFormatError
from nutracker.pipeline import FormatNotSupported, Report, decode, run, showing
from nutracker.query import Query

FIELDS = ["number", "title"]


def _report(**overrides):
    defaults = dict(
        description="widgets",
        query=Query("Widgets").repo("w3c/apa"),
        fields=FIELDS,
        classify=lambda issue: issue.title,
        renderers={
            ReportFormat.TABLE: lambda items: "TABLE " + ",".join(items),
            ReportFormat.MEETING: lambda items: "MEETING " + ",".join(items),
        },
    )
    defaults.update(overrides)
    return Report(**defaults)


def _raw(*titles):
    return [{"number": i + 1, "title": t} for i, t in enumerate(titles)]


def test_showing():
    assert showing(3) == "Showing 3"
    assert showing(30) == "Showing the top 30"


@patch("nutracker.github.search_issues")
def test_fetches_once_for_several_formats(mock_search, capsys):
    mock_search.return_value = _raw("b", "a")
    result = run(_report(), [ReportFormat.TABLE, ReportFormat.MEETING])
    assert result == ["b", "a"]
    mock_search.assert_called_once()
    out = capsys.readouterr().out
    assert "Showing 2 widgets" in out
    assert "TABLE b,a" in out
    assert "MEETING b,a" in out


@patch("nutracker.github.search_issues")
def test_json_fields_requested(mock_search):
    mock_search.return_value = []
    run(_report(), [ReportFormat.TABLE])
    args = mock_search.call_args[0][0]
    assert args[args.index("--json") + 1] == "number,title"


@patch("nutracker.github.search_issues")
def test_no_results(mock_search, capsys):
    mock_search.return_value = []
    result = run(_report(), [ReportFormat.TABLE, ReportFormat.MEETING])
    assert result == []
    out = capsys.readouterr().out
    assert "No widgets found" in out
    assert "TABLE" not in out
    assert "MEETING" not in out


@patch("nutracker.github.show_search")
@patch("nutracker.github.search_issues")
def test_unsupported_format_fails_before_any_query(mock_search, mock_show):
    with pytest.raises(FormatNotSupported, match="'agenda' output is not supported for widgets"):
        run(_report(), [ReportFormat.GH, ReportFormat.AGENDA])
    mock_search.assert_not_called()
    mock_show.assert_not_called()


@patch("nutracker.github.show_search")
@patch("nutracker.github.search_issues")
def test_delegated_formats_run_gh_each_time(mock_search, mock_show):
    result = run(_report(), [ReportFormat.GH, ReportFormat.WEB])
    assert result is None
    mock_search.assert_not_called()
    assert mock_show.call_count == 2
    assert "--web" not in mock_show.call_args_list[0][0][0]
    assert "--web" in mock_show.call_args_list[1][0][0]


@patch("nutracker.github.show_search")
@patch("nutracker.github.search_issues")
def test_mixed_formats(mock_search, mock_show, capsys):
    mock_search.return_value = _raw("a")
    run(_report(), [ReportFormat.TABLE, ReportFormat.GH, ReportFormat.MEETING])
    mock_search.assert_called_once()
    mock_show.assert_called_once()
    out = capsys.readouterr().out
    assert out.index("TABLE a") < out.index("MEETING a")


@patch("nutracker.github.search_issues")
def test_classify_can_drop_items(mock_search):
    mock_search.return_value = _raw("keep", "drop", "keep too")
    report = _report(classify=lambda issue: None if issue.title == "drop" else issue.title)
    assert run(report, [ReportFormat.TABLE]) == ["keep", "keep too"]


@patch("nutracker.github.search_issues")
def test_sort_is_stable(mock_search):
    mock_search.return_value = _raw("b1", "a1", "b2", "a2")
    report = _report(sort_key=lambda title: title[0])
    assert run(report, [ReportFormat.TABLE]) == ["a1", "a2", "b1", "b2"]


@patch("nutracker.github.search_issues")
def test_verbose_prints_command(mock_search, capsys):
    mock_search.return_value = []
    run(_report(), [ReportFormat.TABLE], verbose=True)
    assert "Widgets: running: gh search issues --repo w3c/apa" in capsys.readouterr().out


def test_decode():
    issues = decode(_raw("a"), FIELDS)
    assert issues == [Issue(number=1, title="a")]


def test_decode_missing_field():
    with pytest.raises(ResultFormatError, match="missing field"):
        decode([{"number": 1}], FIELDS)
