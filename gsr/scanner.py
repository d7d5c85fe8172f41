"""Repo discovery: recursively find all git repositories under a directory."""

from __future__ import annotations

import os
import sys
from typing import Callable, Iterator, Optional

MARKER = ".git"

ErrorHandler = Callable[[OSError], None]


def display_path(path: str) -> str:
    """Printable form of a path; undecodable bytes become U+FFFD."""
    return os.fsencode(path).decode("utf-8", "replace")


def print_error(err: OSError) -> None:
    """Report a traversal error as a single line on stderr."""
    print(display_path(str(err)), file=sys.stderr)


def iter_repos(
    root: str,
    *,
    on_error: Optional[ErrorHandler] = None,
    marker: str = MARKER,
    max_depth: Optional[int] = None,
    skip_dirs: frozenset[str] = frozenset(),
) -> Iterator[str]:
    """Lazily yield the root of every git repository under root.

    A directory is a repository root when it holds a ``marker`` directory.
    Repositories nested inside other repositories are reported too. Errors
    on single entries go to ``on_error`` and the walk carries on.
    """
    report = on_error or print_error
    root = os.path.expanduser(root)

    # Explicit stack so depth is limited by memory, not the recursion limit
    stack: list[tuple[str, int]] = [(root, 0)]
    while stack:
        path, depth = stack.pop()
        try:
            entries = list(os.scandir(path))
        except OSError as err:
            report(err)
            continue

        has_git = False
        subdirs: list[str] = []

        for entry in entries:
            try:
                # Symlinks are never followed, so no directory is seen twice
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError as err:
                report(err)
                continue
            if not is_dir:
                continue
            if entry.name == marker:
                has_git = True
            elif entry.name not in skip_dirs:
                subdirs.append(entry.path)

        if has_git:
            yield path

        if max_depth is not None and depth >= max_depth:
            continue
        # Reversed so subdirectories are visited in scandir order
        stack.extend((d, depth + 1) for d in reversed(subdirs))


def find_repos(root: str, **options) -> list[str]:
    """Recursively find all git repository paths under root.

    Returns a sorted list; accepts the same options as :func:`iter_repos`.
    """
    return sorted(iter_repos(root, **options))
