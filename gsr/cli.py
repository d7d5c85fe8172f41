"""CLI entry point for gsr."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from gsr import __version__
from gsr.collector import Selection, collect
from gsr.config import ScanConfig
from gsr.git import GitSpawnError, RepoRecord
from gsr.pipeline import scan
from gsr.roots import resolve_root
from gsr.scanner import display_path, print_error


def _setup_logging(verbose: bool) -> None:
    """Send log records to stderr through rich; stdout stays for results."""
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def print_paths(records: list[RepoRecord]) -> None:
    """One repository path per line."""
    for record in records:
        print(display_path(record.path))


def print_json(records: list[RepoRecord]) -> None:
    """Dump the matched repositories and their flags as JSON to stdout."""
    data = [
        {
            "path": display_path(r.path),
            "dirty": r.dirty,
            "ahead": r.ahead,
            "behind": r.behind,
        }
        for r in records
    ]
    print(json.dumps(data, indent=2))


def print_summary(records: list[RepoRecord], total: int) -> None:
    """Print a Rich table of the matched repositories."""
    from rich.console import Console
    from rich.table import Table

    from gsr.theme import CYAN, MUTED, SURFACE, flag_cell, render_title

    console = Console()
    if not records:
        console.print(f"[{MUTED}]Nothing to report in {total} repositories.[/{MUTED}]")
        return

    table = Table(title=render_title(len(records), total), border_style=SURFACE, show_edge=True)
    table.add_column("Repository", style=f"bold {CYAN}")
    table.add_column("Dirty", justify="center")
    table.add_column("Ahead", justify="center")
    table.add_column("Behind", justify="center")

    for r in records:
        table.add_row(
            display_path(r.path),
            flag_cell("dirty", r.dirty),
            flag_cell("ahead", r.ahead),
            flag_cell("behind", r.behind),
        )

    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gsr",
        description="List git repositories with uncommitted, unpushed or unpulled work.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default=None,
        help="Directory to scan (default: $(ghq root), or '.' if ghq is unavailable)",
    )
    parser.add_argument(
        "-a", "--all",
        action="store_true",
        help="Print every git repository",
    )
    parser.add_argument(
        "-f", "--fetch",
        action="store_true",
        help="Run git fetch before checking status",
    )
    parser.add_argument(
        "--ahead",
        action="store_true",
        help="Also print repositories ahead of their upstream",
    )
    parser.add_argument(
        "--behind",
        action="store_true",
        help="Also print repositories behind their upstream",
    )
    parser.add_argument(
        "-j", "--workers",
        type=int,
        metavar="N",
        help="Number of repositories checked in parallel (default: 8, env GSR_WORKERS)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Give up on a single git command after this long (default: never)",
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output matched repositories and their flags as JSON",
    )
    output.add_argument(
        "--summary",
        action="store_true",
        help="Print a table instead of bare paths",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log each git check to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"gsr {__version__}",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the gsr CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = ScanConfig.from_env_and_args(
            workers=args.workers,
            fetch=args.fetch,
            timeout=args.timeout,
        )
    except ValueError as err:
        parser.error(str(err))

    selection = Selection(all=args.all, ahead=args.ahead, behind=args.behind)
    root = resolve_root(args.input, config.root_command)

    try:
        records = scan(root, config, on_error=print_error)
    except GitSpawnError as err:
        print(f"gsr: {err}", file=sys.stderr)
        sys.exit(1)

    matched = list(collect(records, selection))
    if args.json_output:
        print_json(matched)
    elif args.summary:
        print_summary(matched, len(records))
    else:
        print_paths(matched)


if __name__ == "__main__":
    main()
