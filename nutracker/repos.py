from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from nutracker.config import ConfigError

DESIGN_REVIEWS_REPO = "w3ctag/design-reviews"
CHARTER_REVIEWS_REPO = "w3c/strategy"

DEFAULT_REPOS: dict = {
    "apa": {
        "horizontal_review": {
            "specs": "w3c/a11y-request",
            "comments": "w3c/a11y-review",
        },
        "working_group": {"main": "w3c/apa", "others": ["w3c/media-accessibility-reqs"]},
        "task_forces": {
            "adapt": {"main": "w3c/adapt"},
            "pronunciation": {"main": "w3c/pronunciation"},
            "maturity": {"main": "w3c/maturity-model"},
        },
    },
    "aria": {
        "working_group": {
            "main": "w3c/aria",
            "others": ["w3c/accname", "w3c/core-aam", "w3c/html-aam", "w3c/svg-aam"],
        },
        "task_forces": {
            "apg": {"main": "w3c/aria-practices"},
            "aria-at": {"main": "w3c/aria-at", "others": ["w3c/aria-at-app"]},
        },
    },
    "i18n": {
        "horizontal_review": {
            "specs": "w3c/i18n-request",
            "comments": "w3c/i18n-activity",
        },
        "working_group": {"main": "w3c/i18n-activity"},
    },
}


class RepoSelectionError(Exception):
    pass


class NoReposSelected(RepoSelectionError):
    def __init__(self) -> None:
        super().__init__("No repos selected")


class NoTaskForces(RepoSelectionError):
    def __init__(self, group: str) -> None:
        super().__init__(f"Group '{group}' has no task forces")


class UnknownTaskForce(RepoSelectionError):
    def __init__(self, task_force: str, known: list[str]) -> None:
        names = ", ".join(f"'{tf}'" for tf in sorted(known))
        super().__init__(
            f"Unknown TF '{task_force}'. Please consider contributing an update to the info "
            f"for this TF's group. Known TFs for this group are: {names}"
        )
        self.task_force = task_force
        self.known = known


class UnknownGroup(Exception):
    def __init__(self, group: str, known: list[str], source: str = "") -> None:
        where = f" {source}" if source else ""
        names = ", ".join(f"'{g}'" for g in sorted(known))
        super().__init__(f"Unknown group name{where}: '{group}'. Known groups are: {names}")
        self.group = group
        self.known = known


@dataclass(frozen=True)
class TeamRepos:
    main: str
    others: tuple[str, ...] = ()

    def all(self, main_only: bool = False) -> list[str]:
        return [self.main] if main_only else [self.main, *self.others]


@dataclass(frozen=True)
class HorizontalReview:
    specs: str
    comments: str


@dataclass(frozen=True)
class GroupInfo:
    name: str
    working_group: TeamRepos
    task_forces: dict[str, TeamRepos] = field(default_factory=dict)
    horizontal_review: HorizontalReview | None = None


def _team(data: dict) -> TeamRepos:
    return TeamRepos(main=data["main"], others=tuple(data.get("others") or ()))


def _group(name: str, data: dict) -> GroupInfo:
    hr = data.get("horizontal_review")
    return GroupInfo(
        name=name,
        working_group=_team(data["working_group"]),
        task_forces={tf: _team(repos) for tf, repos in (data.get("task_forces") or {}).items()},
        horizontal_review=HorizontalReview(specs=hr["specs"], comments=hr["comments"]) if hr else None,
    )


class Repos:
    def __init__(self, data: dict) -> None:
        self._groups = {name: _group(name, info) for name, info in data.items()}

    @classmethod
    def load(cls, path: str | Path | None = None) -> Repos:
        if not path:
            return cls(DEFAULT_REPOS)
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"{path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: expected a mapping of groups")
        try:
            return cls(data.get("groups", data))
        except (KeyError, TypeError, AttributeError) as exc:
            raise ConfigError(f"{path}: malformed repos info ({exc!r})") from exc

    def known_groups(self) -> list[str]:
        return sorted(self._groups)

    def group(self, name: str, source: str = "") -> GroupInfo:
        if name not in self._groups:
            raise UnknownGroup(name, self.known_groups(), source)
        return self._groups[name]


def default_repos_yaml() -> str:
    return yaml.dump({"groups": DEFAULT_REPOS}, default_flow_style=False, sort_keys=False)


def get_repos(
    group: GroupInfo,
    main_only: bool = False,
    include_group: bool = False,
    include_tfs: list[str] | None = None,
) -> list[str]:
    """Repos to search, given the group and the scope the user asked for.

    ``include_tfs`` is None to leave task forces out, or an empty list for
    all of them.
    """
    repos: list[str] = []

    if include_group:
        repos += group.working_group.all(main_only)

    if include_tfs is not None:
        if not group.task_forces:
            raise NoTaskForces(group.name)
        names = include_tfs or list(group.task_forces)
        for name in names:
            if name not in group.task_forces:
                raise UnknownTaskForce(name, list(group.task_forces))
            repos += group.task_forces[name].all(main_only)

    if not repos:
        raise NoReposSelected()
    return repos
