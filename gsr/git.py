"""Git probing: subprocess calls that report a repository's sync state."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Optional

from gsr import GsrError
from gsr.status import apply_tracking

logger = logging.getLogger(__name__)


class GitSpawnError(GsrError):
    """The git executable could not be started at all."""

    def __init__(self, executable: str, cause: OSError) -> None:
        super().__init__(f"failed to execute {executable}: {cause}")
        self.executable = executable
        self.cause = cause


class RepoUnavailableError(GsrError):
    """A discovered repository can no longer be entered, e.g. it was removed."""

    def __init__(self, repo_path: str, cause: OSError) -> None:
        super().__init__(str(cause))
        self.repo_path = repo_path
        self.cause = cause


@dataclass
class StatusOutput:
    stdout: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class RepoRecord:
    path: str
    dirty: bool = False
    status_output: Optional[StatusOutput] = None
    ahead: bool = False
    behind: bool = False


@dataclass
class Probe:
    """Runs git inside a repository and captures what the checks need.

    ``timeout`` is in seconds per git call; ``None`` waits indefinitely.
    """

    executable: str = "git"
    timeout: Optional[float] = None

    def _run_git(self, repo_path: str, args: list[str]) -> subprocess.CompletedProcess:
        """Run a git command with repo_path as working directory.

        Raises RepoUnavailableError when repo_path cannot be used as the
        working directory, GitSpawnError when git cannot be launched, and lets
        subprocess.TimeoutExpired through to the caller.
        """
        try:
            return subprocess.run(
                [self.executable] + args,
                cwd=repo_path,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                errors="replace",
            )
        except OSError as err:
            if err.filename == repo_path or not os.path.isdir(repo_path):
                raise RepoUnavailableError(repo_path, err) from err
            raise GitSpawnError(self.executable, err) from err

    def fetch(self, repo_path: str) -> None:
        """Best-effort ``git fetch``; the outcome is ignored."""
        try:
            result = self._run_git(repo_path, ["fetch"])
        except subprocess.TimeoutExpired:
            logger.debug("%s: fetch timed out", repo_path)
            return
        logger.debug("%s: fetch exited %d", repo_path, result.returncode)

    def query_status(self, repo_path: str) -> Optional[StatusOutput]:
        """Capture ``git status --porcelain --branch``."""
        try:
            result = self._run_git(repo_path, ["status", "--porcelain", "--branch"])
        except subprocess.TimeoutExpired:
            logger.debug("%s: status timed out", repo_path)
            return None
        return StatusOutput(stdout=result.stdout, returncode=result.returncode)

    def query_diff(self, repo_path: str) -> bool:
        """Return True when the working tree differs from the index."""
        try:
            result = self._run_git(repo_path, ["diff", "--quiet"])
        except subprocess.TimeoutExpired:
            logger.debug("%s: diff timed out", repo_path)
            return True
        return result.returncode != 0


def check_repo(repo_path: str, probe: Probe, *, fetch: bool = False) -> RepoRecord:
    """Run fetch, status, diff and the tracking checks for one repository."""
    record = RepoRecord(path=repo_path)
    if fetch:
        probe.fetch(repo_path)
    record.status_output = probe.query_status(repo_path)
    record.dirty = probe.query_diff(repo_path)
    apply_tracking(record)
    logger.debug(
        "%s: dirty=%s ahead=%s behind=%s",
        repo_path, record.dirty, record.ahead, record.behind,
    )
    return record
