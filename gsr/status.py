"""Status interpretation: ahead/behind flags from porcelain status text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from gsr.git import RepoRecord

BRANCH_PREFIX = "## "

AHEAD_RE = re.compile(r"\[.*ahead.*\]")
BEHIND_RE = re.compile(r"\[.*behind.*\]")


@dataclass(frozen=True)
class Tracking:
    ahead: bool = False
    behind: bool = False


def _branch_lines(text: Optional[str]) -> list[str]:
    if not text:
        return []
    return [ln for ln in text.splitlines() if ln.startswith(BRANCH_PREFIX)]


def is_ahead(text: Optional[str]) -> bool:
    """True if the branch line carries an ``[ahead N]`` annotation."""
    return any(AHEAD_RE.search(ln) for ln in _branch_lines(text))


def is_behind(text: Optional[str]) -> bool:
    """True if the branch line carries a ``[behind N]`` annotation."""
    return any(BEHIND_RE.search(ln) for ln in _branch_lines(text))


def parse_tracking(text: Optional[str]) -> Tracking:
    """Parse ``git status --porcelain --branch`` output.

    Only the ``## branch...upstream [...]`` header is looked at, so file
    names that happen to contain "ahead" or "behind" do not count.
    """
    return Tracking(ahead=is_ahead(text), behind=is_behind(text))


def apply_tracking(record: RepoRecord) -> RepoRecord:
    """Set record.ahead/behind from its captured status, if there is one."""
    if record.status_output is None:
        return record
    tracking = parse_tracking(record.status_output.stdout)
    record.ahead = tracking.ahead
    record.behind = tracking.behind
    return record
