from datetime import date
from unittest.mock import patch

from nutracker.models import AssigneeQuery, Issue, ReportFormat
from nutracker.specs import SpecReviewRequest, make_spec_request, spec_agenda, spec_meeting, spec_table, specs


def _request(id=1, spec="CSS View Transitions", due=date(2022, 12, 11)):
    return SpecReviewRequest(id=id, title=f"{spec} 2022-11-20", spec=spec, due=due, assignees="UNASSIGNED")


def test_make_spec_request():
    request = make_spec_request(Issue(number=4, title="CSS View Transitions 2022-11-20", assignees=("a",)))
    assert request.spec == "CSS View Transitions"
    assert request.due == date(2022, 12, 11)
    assert request.assignees == "a"


def test_make_spec_request_without_dates_warns(capsys):
    assert make_spec_request(Issue(number=4, title="Please review")) is None
    assert "Warning: Unable to identify due date for request #4: 'Please review'" in capsys.readouterr().out


def test_spec_table():
    lines = spec_table([_request()], width=200).splitlines()
    assert lines[0].split() == ["DUE", "ID", "SPEC", "ASSIGNEES"]
    assert lines[1].split() == ["2022-12-11", "1", "CSS", "View", "Transitions", "UNASSIGNED"]


def test_spec_meeting():
    out = spec_meeting("w3c/a11y-request", [_request()])
    assert "subtopic: CSS View Transitions\nhttps://github.com/w3c/a11y-request/issues/1\nDue: 2022-12-11" in out


def test_spec_agenda():
    assert spec_agenda("w3c/a11y-request", [_request()]) == (
        "* [CSS View Transitions (due 2022-12-11)](https://github.com/w3c/a11y-request/issues/1)"
    )


@patch("nutracker.github.search_issues")
def test_specs_sorted_by_due(mock_search, gh_issue, capsys):
    mock_search.return_value = [
        gh_issue(1, "Later spec 2023-02-23 > 2023-04-01"),
        gh_issue(2, "Undated spec"),
        gh_issue(3, "Sooner spec 2023-01-01"),
    ]
    result = specs("w3c/a11y-request", AssigneeQuery(nobody=True), [ReportFormat.AGENDA])
    assert [r.id for r in result] == [3, 1]
    out = capsys.readouterr().out
    assert "Showing 3 open review requests in w3c/a11y-request" in out
    assert "--no-assignee" in mock_search.call_args[0][0]
