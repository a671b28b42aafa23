from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from nutracker.locator import Locator

DEFAULT_REVIEW_DAYS = 21

# Date formats in use: https://github.com/w3c/GHURLBot/issues/5
_DUE = re.compile(r"^(?i:due):\s+(\d{4}-\d{2}-\d{2})(?:\s+\(.+\))?.?\s*$")
_DUE_LEGACY = re.compile(r"^due  ?(\d\d? [A-Za-z]{3} \d{4})$")

_TWO_DATES = re.compile(r"(\d{4}-\d{2}-\d{2}) -?> (\d{4}-\d{2}-\d{2})$")
_ONE_DATE = re.compile(r"(\d{4}-\d{2}-\d{2})$")

_SOURCE = re.compile(r"§ https://github\.com/([^/\s]+)/([^/\s]+)/(?:issues|pull)/(\d+)")


class OriginParser:
    def __init__(self, prefixes: tuple[str, ...], whole: tuple[str, ...] = ()) -> None:
        self.prefixes = prefixes
        self.whole = whole

    def parse(self, label: str) -> str | None:
        if label in self.whole:
            return label
        prefix, sep, value = label.partition(":")
        if sep and prefix in self.prefixes:
            return value.strip()
        return None


def _parse_date(text: str, fmt: str) -> date | None:
    try:
        return datetime.strptime(text, fmt).date()
    except ValueError:
        return None


def get_due(text: str) -> date | None:
    for line in text.splitlines():
        m = _DUE.match(line)
        if m:
            return _parse_date(m.group(1), "%Y-%m-%d")
        m = _DUE_LEGACY.match(line)
        if m:
            return _parse_date(m.group(1), "%d %b %Y")
    return None


@dataclass(frozen=True)
class SpecAndDue:
    spec: str
    due: date


def spec_and_due(title: str) -> SpecAndDue | None:
    m = _TWO_DATES.search(title)
    if m:
        due = _parse_date(m.group(2), "%Y-%m-%d")
        if due is None:
            return None
        return SpecAndDue(spec=title[:m.start()].rstrip(), due=due)
    m = _ONE_DATE.search(title)
    if m:
        filed = _parse_date(m.group(1), "%Y-%m-%d")
        if filed is None:
            return None
        return SpecAndDue(spec=title[:m.start()].rstrip(), due=filed + timedelta(days=DEFAULT_REVIEW_DAYS))
    return None


def get_source_locator(body: str) -> Locator | None:
    m = _SOURCE.search(body)
    if m is None:
        return None
    return Locator(owner=m.group(1), repo=m.group(2), issue=int(m.group(3)))
