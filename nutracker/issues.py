from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from nutracker import pipeline, render
from nutracker.locator import issue_url
from nutracker.models import AssigneeQuery, Issue, ReportFormat
from nutracker.parsing import get_due
from nutracker.pipeline import Report
from nutracker.query import Query

ACTION_LABEL = "action"
ACTION_FIELDS = ["assignees", "body", "number", "repository", "title"]
NO_DATE = "(no date)"


@dataclass(frozen=True)
class Action:
    issue: Issue
    due: date | None

    @property
    def locator(self) -> str:
        return f"{self.issue.repository}#{self.issue.number}"

    @property
    def url(self) -> str:
        return issue_url(self.issue.repository, self.issue.number)

    @property
    def due_text(self) -> str:
        return self.due.isoformat() if self.due else NO_DATE


def due_sort_key(due: date | None) -> tuple[bool, date]:
    # Undated items sort first.
    return (due is not None, due or date.min)


def make_action(issue: Issue) -> Action:
    due = get_due(issue.body)
    if due is None:
        print(f"Warning: Unable to identify due date for action {issue.repository}#{issue.number}: '{issue.title}'")
    return Action(issue=issue, due=due)


def action_table(actions: list[Action], width: int | None = None) -> str:
    rows = [[a.due_text, a.locator, a.issue.title, a.issue.flat_assignees] for a in actions]
    return render.make_table(["DUE", "LOCATOR", "TITLE", "ASSIGNEES"], rows, width=width)


def action_meeting(actions: list[Action]) -> str:
    return render.meeting([
        (a.issue.title, [a.url, f"Due: {a.due_text}", f"Assignees: {a.issue.flat_assignees}"])
        for a in actions
    ])


def action_agenda(actions: list[Action]) -> str:
    return render.agenda([(f"{a.issue.title} (due {a.due_text})", a.url) for a in actions])


def actions(
    repos: list[str],
    assignee: AssigneeQuery,
    labels: list[str],
    closed: bool,
    formats: list[ReportFormat],
    verbose: bool = False,
) -> list[Action] | None:
    """Query for action issues in the given repos; report them by due date."""
    query = (
        Query("Actions")
        .repos(repos)
        .assignee(assignee)
        .labels(labels)
        .label(ACTION_LABEL)
        .include_closed(closed)
    )
    report = Report(
        description="actions",
        query=query,
        fields=ACTION_FIELDS,
        classify=make_action,
        renderers={
            ReportFormat.TABLE: action_table,
            ReportFormat.MEETING: action_meeting,
            ReportFormat.AGENDA: action_agenda,
        },
        sort_key=lambda a: due_sort_key(a.due),
    )
    return pipeline.run(report, formats, verbose)


def issues(
    repos: list[str],
    assignee: AssigneeQuery,
    labels: list[str],
    closed: bool,
    include_actions: bool,
    formats: list[ReportFormat],
    verbose: bool = False,
) -> None:
    """Query for issues in the given repos; gh prints the results itself."""
    query = Query("Issues").repos(repos).labels(labels).include_closed(closed).assignee(assignee)
    if ACTION_LABEL not in labels and not include_actions:
        query.not_label(ACTION_LABEL)

    report: Report[Issue] = Report(description="issues", query=query, fields=[], classify=lambda issue: issue)
    # gh's own table output is the table format for plain issues.
    formats = [ReportFormat.GH if f is ReportFormat.TABLE else f for f in formats]
    pipeline.run(report, formats, verbose)
