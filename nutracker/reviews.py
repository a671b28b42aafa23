from __future__ import annotations

from dataclasses import dataclass
from functools import partial

from nutracker import pipeline, render
from nutracker.labels import COMMENT, DESIGN, Status, Taxonomy
from nutracker.locator import Locator, issue_url
from nutracker.models import AssigneeQuery, Issue, OriginQuery, ReportFormat
from nutracker.parsing import OriginParser, get_source_locator
from nutracker.pipeline import Report
from nutracker.query import Query

# Requests filed on behalf of other groups are opened by this bot.
BOT_AUTHOR = "w3cbot"
UNKNOWN = "???"


class UnknownColumn(Exception):
    pass


REVIEW_FIELDS = ["assignees", "author", "body", "labels", "number", "title"]
MAX_WIDTHS = {"assignees": 15, "group": 11, "spec": 15}

COLUMN_HELP = {
    "assignees": "Assigned users",
    "group": "The group the request is from/relates to",
    "id": "The tracking issue's number",
    "our": "Whether the issue comes from our group",
    "source": "The source issue",
    "spec": "The spec the request relates to",
    "status": "The status of the request",
    "title": "The request's title",
}


@dataclass(frozen=True)
class ReviewKind:
    name: str
    taxonomy: Taxonomy
    spec_parser: OriginParser
    group_parser: OriginParser
    columns: tuple[str, ...]


COMMENT_KIND = ReviewKind(
    name="comment review requests",
    taxonomy=COMMENT,
    spec_parser=OriginParser(("s",)),
    group_parser=OriginParser(("wg", "cg", "ig", "bg"), whole=("whatwg",)),
    columns=("assignees", "group", "id", "our", "source", "spec", "status", "title"),
)

DESIGN_KIND = ReviewKind(
    name="design review requests",
    taxonomy=DESIGN,
    spec_parser=OriginParser(("s", "Topic")),
    group_parser=OriginParser(("wg", "cg", "ig", "bg", "Venue"), whole=("whatwg",)),
    columns=("assignees", "group", "id", "source", "spec", "status", "title"),
)


@dataclass(frozen=True)
class ReviewRequest:
    id: int
    title: str
    status: Status
    group: str | None
    spec: str | None
    source: Locator | None
    assignees: str
    our: bool

    def value(self, column: str) -> str:
        if column == "assignees":
            return self.assignees
        if column == "group":
            return self.group or UNKNOWN
        if column == "id":
            return str(self.id)
        if column == "our":
            return "Yes" if self.our else " - "
        if column == "source":
            return str(self.source) if self.source else UNKNOWN
        if column == "spec":
            return self.spec or UNKNOWN
        if column == "status":
            return str(self.status)
        if column == "title":
            return self.title
        raise ValueError(f"Invalid review request field name: '{column}'")


def make_request(kind: ReviewKind, issue: Issue) -> ReviewRequest:
    group = None
    spec = None
    status_labels = []
    for label in issue.labels:
        group_value = kind.group_parser.parse(label)
        if group_value is not None:
            group = group_value
            continue
        spec_value = kind.spec_parser.parse(label)
        if spec_value is not None:
            spec = spec_value
            continue
        status_labels.append(label)

    return ReviewRequest(
        id=issue.number,
        title=issue.title,
        status=kind.taxonomy.status(status_labels),
        group=group,
        spec=spec,
        source=get_source_locator(issue.body),
        assignees=issue.flat_assignees,
        our=issue.author != BOT_AUTHOR,
    )


def table_columns(columns: list[str], show_source: bool) -> list[str]:
    headers = list(columns)
    if show_source and "source" not in headers:
        headers.append("source")
    return headers


def review_table(
    requests: list[ReviewRequest],
    columns: list[str],
    show_source: bool = False,
    spec_filtered: bool = False,
    width: int | None = None,
) -> str:
    headers = table_columns(columns, show_source)
    rows = [[r.value(h) for h in headers] for r in requests]
    invalid = [[str(r.id), r.title, str(r.status)] for r in requests if not r.status.is_valid()]
    max_widths = {i: MAX_WIDTHS[h] for i, h in enumerate(headers) if h in MAX_WIDTHS}

    return render.join_sections(
        render.invalid_statuses(invalid, width=width),
        render.list_domains("Groups", [r.group for r in requests if r.group]),
        "" if spec_filtered else render.list_domains("Specs", [r.spec for r in requests if r.spec]),
        render.make_table(headers, rows, max_widths, width=width),
    )


def review_meeting(repo: str, requests: list[ReviewRequest]) -> str:
    blocks = []
    for r in requests:
        lines = [f"source: {r.source}"] if r.source else []
        lines.append(f"tracking: {issue_url(repo, r.id)}")
        blocks.append((r.title, lines))
    return render.meeting(blocks)


def review_agenda(repo: str, requests: list[ReviewRequest]) -> str:
    return render.agenda([(r.title, issue_url(repo, r.id)) for r in requests])


def _review(
    task_name: str,
    kind: ReviewKind,
    repo: str,
    status: list[str],
    not_status: list[str],
    spec: str | None,
    assignee: AssigneeQuery,
    origin: OriginQuery,
    show_source: bool,
    columns: list[str],
    formats: list[ReportFormat],
    verbose: bool,
) -> list[ReviewRequest] | None:
    for column in columns:
        if column not in kind.columns:
            raise UnknownColumn(f"Unknown column '{column}' for {kind.name}; valid columns are: {', '.join(kind.columns)}")

    query = Query(task_name)
    if spec:
        query.label(f"s:{spec}")
    query.labels(status).not_labels(not_status).repo(repo).assignee(assignee)
    if origin is OriginQuery.OURS:
        query.not_author(BOT_AUTHOR)
    elif origin is OriginQuery.OTHERS:
        query.author(BOT_AUTHOR)

    report = Report(
        description=kind.name,
        query=query,
        fields=REVIEW_FIELDS,
        classify=partial(make_request, kind),
        renderers={
            ReportFormat.TABLE: partial(
                review_table, columns=columns, show_source=show_source, spec_filtered=bool(spec),
            ),
            ReportFormat.MEETING: partial(review_meeting, repo),
            ReportFormat.AGENDA: partial(review_agenda, repo),
        },
    )
    return pipeline.run(report, formats, verbose)


def comments(
    repo: str,
    status: list[str],
    not_status: list[str],
    spec: str | None,
    assignee: AssigneeQuery,
    origin: OriginQuery,
    show_source: bool,
    columns: list[str],
    formats: list[ReportFormat],
    verbose: bool = False,
) -> list[ReviewRequest] | None:
    """Query for requests to comment on other groups' issues."""
    return _review(
        "Comments", COMMENT_KIND, repo, status, not_status, spec, assignee, origin,
        show_source, columns, formats, verbose,
    )


def designs(
    repo: str,
    status: list[str],
    not_status: list[str],
    spec: str | None,
    assignee: AssigneeQuery,
    show_source: bool,
    columns: list[str],
    formats: list[ReportFormat],
    verbose: bool = False,
) -> list[ReviewRequest] | None:
    """Query for requests to comment on other groups' designs."""
    return _review(
        "Designs", DESIGN_KIND, repo, status, not_status, spec, assignee, OriginQuery.ANY,
        show_source, columns, formats, verbose,
    )
