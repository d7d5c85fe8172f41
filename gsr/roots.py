"""Default scan root resolution."""

from __future__ import annotations

import logging
import subprocess
from typing import Optional

logger = logging.getLogger(__name__)

FALLBACK_ROOT = "."


def resolve_root(path: Optional[str], command: str = "ghq") -> str:
    """Return path, or ``<command> root`` output, or the current directory."""
    if path:
        return path
    try:
        result = subprocess.run(
            [command, "root"],
            capture_output=True,
            text=True,
            errors="replace",
        )
    except OSError as err:
        logger.debug("%s root unavailable (%s), scanning %s", command, err, FALLBACK_ROOT)
        return FALLBACK_ROOT

    root = result.stdout.rstrip()
    if result.returncode != 0 or not root:
        logger.debug("%s root exited %d, scanning %s", command, result.returncode, FALLBACK_ROOT)
        return FALLBACK_ROOT
    logger.debug("Using %s root: %s", command, root)
    return root
