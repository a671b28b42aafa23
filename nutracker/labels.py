from __future__ import annotations

from dataclasses import dataclass


class ParseFlagError(Exception):
    pass


@dataclass(frozen=True)
class Flag:
    name: str
    label: str
    char: str
    conflicts: tuple[str, ...] = ()


class Taxonomy:
    """The status flags known for one kind of report.

    Conflicts may be declared from either side; they are mirrored here so
    that validity does not depend on which flag names the other.
    """

    def __init__(self, name: str, flags: list[Flag]) -> None:
        self.name = name
        self.flags = tuple(flags)
        self._by_name = {f.name: f for f in self.flags}
        self._by_char = {f.char: f for f in self.flags}
        self._by_label = {f.label: f for f in self.flags}
        if len(self._by_name) != len(self.flags):
            raise ValueError(f"{name}: duplicate flag names")
        if len(self._by_char) != len(self.flags):
            raise ValueError(f"{name}: duplicate flag characters")
        if len(self._by_label) != len(self.flags):
            raise ValueError(f"{name}: duplicate flag labels")

        self._conflicts: dict[str, set[str]] = {f.name: set() for f in self.flags}
        for f in self.flags:
            for other in f.conflicts:
                if other not in self._by_name:
                    raise ValueError(f"{name}: flag '{f.name}' conflicts with unknown flag '{other}'")
                if other == f.name:
                    raise ValueError(f"{name}: flag '{f.name}' conflicts with itself")
                self._conflicts[f.name].add(other)
                self._conflicts[other].add(f.name)

    def label_for(self, char: str) -> str | None:
        flag = self._by_char.get(char)
        return flag.label if flag else None

    def flag_for_label(self, label: str) -> Flag | None:
        return self._by_label.get(label)

    def conflicts_of(self, name: str) -> frozenset[str]:
        return frozenset(self._conflicts[name])

    def flags_labels_conflicts(self) -> str:
        lines = []
        for f in self.flags:
            line = f"{f.char}: {f.label}"
            conflicting = [o.label for o in self.flags if o.name in self._conflicts[f.name]]
            if conflicting:
                line += f" (conflicts with: {' '.join(conflicting)})"
            lines.append(line)
        return "\n".join(lines)

    def parse_flags(self, chars: str) -> list[str]:
        labels = []
        for char in chars:
            label = self.label_for(char)
            if label is None:
                raise ParseFlagError(f"Unknown flag '{char}'. Valid flags:\n{self.flags_labels_conflicts()}")
            labels.append(label)
        return labels

    def status(self, labels=()) -> Status:
        """The status given by an issue's labels; labels not in this taxonomy are ignored."""
        names = []
        for label in labels:
            flag = self.flag_for_label(label)
            if flag is not None:
                names.append(flag.name)
        return Status(self, frozenset(names))

    def is_valid(self, status: Status) -> bool:
        for name in status.names:
            if self._conflicts[name] & status.names:
                return False
        return True


@dataclass(frozen=True)
class Status:
    taxonomy: Taxonomy
    names: frozenset[str] = frozenset()

    def is_valid(self) -> bool:
        return self.taxonomy.is_valid(self)

    def __str__(self) -> str:
        return " ".join(f.char for f in self.taxonomy.flags if f.name in self.names)


COMMENT = Taxonomy("comment", [
    Flag("pending", "pending", "P", ("needs_resolution",)),
    Flag("close", "close?", "C"),
    # Also applied, with a group prefix such as "a11y-", in the source repo.
    Flag("tracker", "tracker", "T", ("needs_resolution",)),
    Flag("needs_resolution", "needs-resolution", "N", ("pending", "tracker")),
    Flag("recycle", "recycle", "R"),
    Flag("advice_requested", "advice-requested", "A"),
    Flag("needs_attention", "needs-attention", "X"),
])

DESIGN = Taxonomy("design", [
    Flag("progress_untriaged", "Progress: untriaged", "U"),
    Flag("progress_in_progress", "Progress: in progress", "i"),
    Flag("progress_pending_external_feedback", "Progress: pending external feedback", "x"),
])

CHARTER = Taxonomy("charter", [
    Flag("accessibility_completed", "Accessibility review completed", "a"),
    Flag("accessibility_needs_resolution", "a11y-needs-resolution", "A"),
    Flag("internationalization_completed", "Internationalization review completed", "i"),
    Flag("internationalization_needs_resolution", "i18n-needs-resolution", "I"),
    Flag("privacy_completed", "privacy review completed", "p"),
    Flag("privacy_needs_resolution", "privacy-needs-resolution", "P"),
    Flag("security_completed", "Security review completed", "s"),
    Flag("security_needs_resolution", "security-needs-resolution", "S"),
    Flag("tag_completed", "TAG review completed", "t"),
    Flag("tag_needs_resolution", "tag-needs-resolution", "T"),
])
