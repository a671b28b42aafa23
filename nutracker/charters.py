from __future__ import annotations

from dataclasses import dataclass
from functools import partial

from nutracker import pipeline, render
from nutracker.labels import CHARTER, Status
from nutracker.locator import issue_url
from nutracker.models import Issue, ReportFormat
from nutracker.pipeline import Report
from nutracker.query import Query

CHARTER_LABELS = ["charter", "Horizontal review requested"]
CHARTER_FIELDS = ["labels", "number", "title"]


@dataclass(frozen=True)
class CharterReviewRequest:
    id: int
    title: str
    status: Status


def make_charter_request(issue: Issue) -> CharterReviewRequest:
    return CharterReviewRequest(id=issue.number, title=issue.title, status=CHARTER.status(issue.labels))


def charter_table(requests: list[CharterReviewRequest], width: int | None = None) -> str:
    rows = [[str(r.id), r.title, str(r.status)] for r in requests]
    return render.make_table(["ID", "TITLE", "STATUS"], rows, width=width)


def charter_meeting(repo: str, requests: list[CharterReviewRequest]) -> str:
    return render.meeting([(r.title, [issue_url(repo, r.id)]) for r in requests])


def charter_agenda(repo: str, requests: list[CharterReviewRequest]) -> str:
    return render.agenda([(r.title, issue_url(repo, r.id)) for r in requests])


def charters(
    repo: str,
    status: list[str],
    not_status: list[str],
    formats: list[ReportFormat],
    verbose: bool = False,
) -> list[CharterReviewRequest] | None:
    """Query for charter review requests across all groups."""
    query = Query("Charters").labels(CHARTER_LABELS).labels(status).not_labels(not_status).repo(repo)
    report = Report(
        description="charter review requests",
        query=query,
        fields=CHARTER_FIELDS,
        classify=make_charter_request,
        renderers={
            ReportFormat.TABLE: charter_table,
            ReportFormat.MEETING: partial(charter_meeting, repo),
            ReportFormat.AGENDA: partial(charter_agenda, repo),
        },
    )
    return pipeline.run(report, formats, verbose)
