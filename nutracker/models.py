from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_COMMENT_COLUMNS = ["id", "title", "group", "spec", "status", "assignees"]
DEFAULT_DESIGN_COLUMNS = ["id", "title", "group", "spec", "status", "assignees"]


class ResultFormatError(Exception):
    pass


class ReportFormat(Enum):
    GH = "gh"
    TABLE = "table"
    MEETING = "meeting"
    AGENDA = "agenda"
    WEB = "web"

    @property
    def delegates(self) -> bool:
        """Whether gh renders this format itself (no local parsing)."""
        return self in (ReportFormat.GH, ReportFormat.WEB)


class OriginQuery(Enum):
    OURS = "ours"
    OTHERS = "others"
    ANY = "any"

    @classmethod
    def from_flags(cls, ours: bool, others: bool) -> OriginQuery:
        if ours and others:
            raise ValueError("Only one of 'ours' and 'others' may be set")
        if ours:
            return cls.OURS
        if others:
            return cls.OTHERS
        return cls.ANY


@dataclass(frozen=True)
class AssigneeQuery:
    user: str | None = None
    nobody: bool = False

    @classmethod
    def from_args(cls, user: str | None, unassigned: bool) -> AssigneeQuery:
        if user:
            return cls(user=user)
        return cls(nobody=unassigned)

    def gh_args(self) -> list[str]:
        if self.user:
            return ["--assignee", self.user]
        if self.nobody:
            return ["--no-assignee"]
        return []


@dataclass(frozen=True)
class Issue:
    number: int
    title: str
    body: str = ""
    labels: tuple[str, ...] = ()
    assignees: tuple[str, ...] = ()
    author: str = ""
    repository: str = ""

    @classmethod
    def from_json(cls, data: dict) -> Issue:
        try:
            return cls(
                number=int(data["number"]),
                title=data["title"],
                body=data.get("body") or "",
                labels=tuple(label["name"] for label in data.get("labels", [])),
                assignees=tuple(a["login"] for a in data.get("assignees", [])),
                author=(data.get("author") or {}).get("login", ""),
                repository=(data.get("repository") or {}).get("nameWithOwner", ""),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ResultFormatError(f"Unexpected issue data from gh ({exc!r}): {str(data)[:200]}") from exc

    @property
    def flat_assignees(self) -> str:
        return ",".join(self.assignees) if self.assignees else "UNASSIGNED"


@dataclass
class Settings:
    group: str = "apa"
    comment_columns: list[str] = field(default_factory=lambda: list(DEFAULT_COMMENT_COLUMNS))
    design_columns: list[str] = field(default_factory=lambda: list(DEFAULT_DESIGN_COLUMNS))
    repos_file: str = ""
