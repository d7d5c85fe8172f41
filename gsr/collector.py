"""Result selection: decide which checked repositories get reported."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from gsr.git import RepoRecord


@dataclass(frozen=True)
class Selection:
    """Which repositories to report.

    Dirty repositories are always reported. ``ahead`` and ``behind`` add
    repositories that are ahead of or behind their upstream; ``all``
    reports everything.
    """

    all: bool = False
    ahead: bool = False
    behind: bool = False

    def matches(self, record: RepoRecord) -> bool:
        if self.all:
            return True
        if record.dirty:
            return True
        if self.ahead and record.ahead:
            return True
        if self.behind and record.behind:
            return True
        return False


def collect(records: Iterable[RepoRecord], selection: Selection) -> Iterator[RepoRecord]:
    """Yield the records selection matches, keeping their arrival order."""
    for record in records:
        if selection.matches(record):
            yield record
