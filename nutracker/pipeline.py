from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

from nutracker import github
from nutracker.models import Issue, ReportFormat, ResultFormatError
from nutracker.query import Query, SearchRequest

T = TypeVar("T")

# gh search returns at most this many results by default.
SEARCH_LIMIT = 30


class FormatNotSupported(Exception):
    def __init__(self, report_format: ReportFormat, description: str) -> None:
        super().__init__(f"'{report_format.value}' output is not supported for {description}")
        self.report_format = report_format


@dataclass
class Report(Generic[T]):
    description: str
    query: Query
    fields: list[str]
    classify: Callable[[Issue], T | None]
    renderers: dict[ReportFormat, Callable[[list[T]], str]] = field(default_factory=dict)
    sort_key: Callable[[T], Any] | None = None


def showing(count: int) -> str:
    if count >= SEARCH_LIMIT:
        return f"Showing the top {SEARCH_LIMIT}"
    return f"Showing {count}"


def check_formats(report: Report, formats: list[ReportFormat]) -> None:
    for fmt in formats:
        if not fmt.delegates and fmt not in report.renderers:
            raise FormatNotSupported(fmt, report.description)


def decode(raw: list[dict], fields: list[str]) -> list[Issue]:
    issues = []
    for item in raw:
        missing = [f for f in fields if f not in item]
        if missing:
            raise ResultFormatError(f"gh result is missing field(s) {', '.join(missing)}: {str(item)[:200]}")
        issues.append(Issue.from_json(item))
    return issues


def fetch(report: Report[T], request: SearchRequest, verbose: bool = False) -> list[T]:
    args = request.gh_args(fields=report.fields)
    if verbose:
        print(f"{request.task_name}: running: {github.command_line(args)}")
    issues = decode(github.search_issues(args), report.fields)

    if not issues:
        print(f"No {report.description} found")
        return []
    print(f"{showing(len(issues))} {report.description}\n")

    items = []
    for issue in issues:
        item = report.classify(issue)
        if item is not None:
            items.append(item)
    if report.sort_key is not None:
        items.sort(key=report.sort_key)
    return items


def run(report: Report[T], formats: list[ReportFormat], verbose: bool = False) -> list[T] | None:
    """Render the report once per requested format.

    gh is queried for JSON at most once; every locally-rendered format reads
    the same classified and sorted list. Returns that list (None if no
    locally-rendered format was requested).
    """
    check_formats(report, formats)
    request = report.query.build()

    cache: list[T] | None = None
    for fmt in formats:
        if fmt.delegates:
            args = request.gh_args(web=fmt is ReportFormat.WEB)
            if verbose:
                print(f"{request.task_name}: running: {github.command_line(args)}")
            github.show_search(args)
            continue

        if cache is None:
            cache = fetch(report, request, verbose)
        if cache:
            print(report.renderers[fmt](cache))
    return cache
