from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from functools import partial

from nutracker import pipeline, render
from nutracker.locator import issue_url
from nutracker.models import AssigneeQuery, Issue, ReportFormat
from nutracker.parsing import spec_and_due
from nutracker.pipeline import Report
from nutracker.query import Query

SPEC_FIELDS = ["assignees", "number", "title"]


@dataclass(frozen=True)
class SpecReviewRequest:
    id: int
    title: str
    spec: str
    due: date
    assignees: str


def make_spec_request(issue: Issue) -> SpecReviewRequest | None:
    parsed = spec_and_due(issue.title)
    if parsed is None:
        print(f"Warning: Unable to identify due date for request #{issue.number}: '{issue.title}'")
        return None
    return SpecReviewRequest(
        id=issue.number,
        title=issue.title,
        spec=parsed.spec,
        due=parsed.due,
        assignees=issue.flat_assignees,
    )


def spec_table(requests: list[SpecReviewRequest], width: int | None = None) -> str:
    rows = [[r.due.isoformat(), str(r.id), r.spec, r.assignees] for r in requests]
    return render.make_table(["DUE", "ID", "SPEC", "ASSIGNEES"], rows, width=width)


def spec_meeting(repo: str, requests: list[SpecReviewRequest]) -> str:
    return render.meeting([
        (r.spec, [issue_url(repo, r.id), f"Due: {r.due.isoformat()}"]) for r in requests
    ])


def spec_agenda(repo: str, requests: list[SpecReviewRequest]) -> str:
    return render.agenda([(f"{r.spec} (due {r.due.isoformat()})", issue_url(repo, r.id)) for r in requests])


def specs(
    repo: str,
    assignee: AssigneeQuery,
    formats: list[ReportFormat],
    verbose: bool = False,
) -> list[SpecReviewRequest] | None:
    """Query for spec review requests; report them by due date."""
    query = Query("Specs").repo(repo).assignee(assignee)
    report = Report(
        description=f"open review requests in {repo}",
        query=query,
        fields=SPEC_FIELDS,
        classify=make_spec_request,
        renderers={
            ReportFormat.TABLE: spec_table,
            ReportFormat.MEETING: partial(spec_meeting, repo),
            ReportFormat.AGENDA: partial(spec_agenda, repo),
        },
        sort_key=lambda r: r.due,
    )
    return pipeline.run(report, formats, verbose)
