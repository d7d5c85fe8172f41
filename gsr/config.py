"""Configuration management for gsr."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from gsr.scanner import MARKER

DEFAULT_WORKERS = 8
DEFAULT_GIT = "git"
DEFAULT_ROOT_COMMAND = "ghq"


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class ScanConfig:
    """Settings for one scan.

    Merges environment variables with CLI arguments.
    CLI arguments take precedence over environment variables.
    """

    workers: int = DEFAULT_WORKERS
    fetch: bool = False
    timeout: Optional[float] = None
    git: str = DEFAULT_GIT
    root_command: str = DEFAULT_ROOT_COMMAND
    marker: str = MARKER

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env_and_args(
        cls,
        workers: Optional[int] = None,
        fetch: bool = False,
        timeout: Optional[float] = None,
    ) -> ScanConfig:
        """Create config from GSR_* environment variables and CLI arguments.

        Raises:
            ValueError: If a value is malformed or out of range
        """
        final_workers = workers if workers is not None else _env_int("GSR_WORKERS")
        final_timeout = timeout if timeout is not None else _env_float("GSR_TIMEOUT")

        return cls(
            workers=final_workers if final_workers is not None else DEFAULT_WORKERS,
            fetch=fetch,
            timeout=final_timeout,
            git=os.getenv("GSR_GIT") or DEFAULT_GIT,
            root_command=os.getenv("GSR_ROOT_COMMAND") or DEFAULT_ROOT_COMMAND,
        )
