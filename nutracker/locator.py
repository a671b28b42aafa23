from __future__ import annotations

from dataclasses import dataclass


class LocatorError(Exception):
    pass


@dataclass(frozen=True)
class Locator:
    """A concise reference to a GitHub issue, e.g. ``w3c/apa#42``."""

    owner: str
    repo: str
    issue: int

    @classmethod
    def parse(cls, text: str) -> Locator:
        owner, slash, rest = text.partition("/")
        if not slash:
            raise LocatorError(f"Missing '/' in locator: '{text}'")
        repo, hash_, number = rest.partition("#")
        if not hash_:
            raise LocatorError(f"Missing '#' in locator: '{text}'")
        if not owner or not repo:
            raise LocatorError(f"Empty owner or repo in locator: '{text}'")
        if not (number.isascii() and number.isdigit()) or int(number) == 0:
            raise LocatorError(f"Issue number must be a positive integer: '{text}'")
        return cls(owner=owner, repo=repo, issue=int(number))

    def url(self) -> str:
        # GitHub redirects to /pull/ when the number is a PR.
        return f"https://github.com/{self.owner}/{self.repo}/issues/{self.issue}"

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}#{self.issue}"


def issue_url(repo: str, number: int) -> str:
    return f"https://github.com/{repo}/issues/{number}"
