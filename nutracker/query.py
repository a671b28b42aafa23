from __future__ import annotations

from dataclasses import dataclass

from nutracker.models import AssigneeQuery


class QueryError(Exception):
    pass


@dataclass(frozen=True)
class SearchRequest:
    task_name: str
    repos: tuple[str, ...]
    labels: tuple[str, ...] = ()
    not_labels: tuple[str, ...] = ()
    assignee: AssigneeQuery = AssigneeQuery()
    include_closed: bool = False
    author: str | None = None
    not_authors: tuple[str, ...] = ()

    def gh_args(self, fields: list[str] | None = None, web: bool = False) -> list[str]:
        args: list[str] = []
        for repo in self.repos:
            args += ["--repo", repo]
        for label in self.labels:
            args += ["--label", label]
        if not self.include_closed:
            args += ["--state", "open"]
        args += self.assignee.gh_args()
        if self.author:
            args += ["--author", self.author]
        if fields:
            args += ["--json", ",".join(fields)]
        if web:
            args.append("--web")
        # Negated qualifiers are search terms, not flags, so they go after "--".
        if self.not_labels or self.not_authors:
            args.append("--")
            args += [f"-label:{label}" for label in self.not_labels]
            args += [f"-author:{author}" for author in self.not_authors]
        return args


class Query:
    def __init__(self, task_name: str) -> None:
        self.task_name = task_name
        self._repos: list[str] = []
        self._labels: list[str] = []
        self._not_labels: list[str] = []
        self._assignee = AssigneeQuery()
        self._include_closed = False
        self._author: str | None = None
        self._not_authors: list[str] = []

    def repo(self, repo: str) -> Query:
        self._repos.append(repo)
        return self

    def repos(self, repos) -> Query:
        for repo in repos:
            self.repo(repo)
        return self

    def label(self, label: str) -> Query:
        self._labels.append(label)
        return self

    def labels(self, labels) -> Query:
        for label in labels:
            self.label(label)
        return self

    def not_label(self, label: str) -> Query:
        self._not_labels.append(label)
        return self

    def not_labels(self, labels) -> Query:
        for label in labels:
            self.not_label(label)
        return self

    def assignee(self, assignee: AssigneeQuery) -> Query:
        self._assignee = assignee
        return self

    def include_closed(self, include: bool) -> Query:
        self._include_closed = include
        return self

    def author(self, author: str) -> Query:
        self._author = author
        return self

    def not_author(self, author: str) -> Query:
        self._not_authors.append(author)
        return self

    def build(self) -> SearchRequest:
        if not self._repos:
            raise QueryError(f"{self.task_name}: no repos selected")
        return SearchRequest(
            task_name=self.task_name,
            repos=tuple(self._repos),
            labels=tuple(self._labels),
            not_labels=tuple(self._not_labels),
            assignee=self._assignee,
            include_closed=self._include_closed,
            author=self._author,
            not_authors=tuple(self._not_authors),
        )
