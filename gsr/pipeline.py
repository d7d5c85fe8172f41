"""Scan pipeline: walker thread, bounded worker pool, result channel."""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Iterator, Optional

from gsr.config import DEFAULT_WORKERS, ScanConfig
from gsr.git import Probe, RepoRecord, RepoUnavailableError, check_repo
from gsr.scanner import ErrorHandler, iter_repos, print_error

logger = logging.getLogger(__name__)

# Marks the end of the discovery channel
_DONE = None


class Dispatcher:
    """Run one task per repository path on a fixed-size thread pool.

    At most ``workers`` tasks run at once; further submissions wait in the
    pool's queue. Finished records land on an unbounded result queue in
    completion order; a task may return None to report nothing. If a task
    raises, pending tasks are cancelled and the error is re-raised from
    :meth:`join`. Leaving a ``with`` block early cancels queued tasks.
    """

    def __init__(
        self,
        task: Callable[[str], Optional[RepoRecord]],
        *,
        workers: int = DEFAULT_WORKERS,
    ) -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.workers = workers
        self._task = task
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="gsr-worker")
        self._results: queue.Queue[RepoRecord] = queue.Queue()
        self._error: Optional[BaseException] = None
        self._lock = threading.Lock()
        self.submitted = 0

    def __enter__(self) -> Dispatcher:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._executor.shutdown(wait=True, cancel_futures=exc_type is not None)

    @property
    def failed(self) -> bool:
        with self._lock:
            return self._error is not None

    def submit(self, path: str) -> bool:
        """Schedule the task for path. Returns False once a task has failed."""
        if self.failed:
            return False
        try:
            future = self._executor.submit(self._task, path)
        except RuntimeError:
            # The pool was shut down by a failing task
            if self.failed:
                return False
            raise
        self.submitted += 1
        future.add_done_callback(self._on_done)
        return True

    def _on_done(self, future: Future) -> None:
        if future.cancelled():
            return
        err = future.exception()
        if err is None:
            record = future.result()
            if record is not None:
                self._results.put(record)
            return
        with self._lock:
            first = self._error is None
            if first:
                self._error = err
        if first:
            self._executor.shutdown(wait=False, cancel_futures=True)

    def join(self) -> None:
        """Block until every scheduled task is finished."""
        self._executor.shutdown(wait=True)
        with self._lock:
            err = self._error
        if err is not None:
            raise err

    def results(self) -> Iterator[RepoRecord]:
        """Drain finished records in the order they completed."""
        while True:
            try:
                yield self._results.get_nowait()
            except queue.Empty:
                return


def walk_in_background(
    root: str,
    *,
    on_error: Optional[ErrorHandler] = None,
    **walk_options,
) -> queue.Queue:
    """Walk root on a daemon thread, sending each repository path on a queue.

    The queue is closed with ``None`` once the walk is over.
    """
    paths: queue.Queue[Optional[str]] = queue.Queue()

    def _run() -> None:
        try:
            for path in iter_repos(root, on_error=on_error, **walk_options):
                paths.put(path)
        finally:
            paths.put(_DONE)

    threading.Thread(target=_run, name="gsr-walker", daemon=True).start()
    return paths


def scan(
    root: str,
    config: Optional[ScanConfig] = None,
    *,
    on_error: Optional[ErrorHandler] = None,
) -> list[RepoRecord]:
    """Find every repository under root and check its status.

    Returns the records in completion order. Raises GitSpawnError when git
    cannot be run.
    """
    config = config or ScanConfig()
    probe = Probe(executable=config.git, timeout=config.timeout)
    report = on_error or print_error

    def _check(path: str) -> Optional[RepoRecord]:
        try:
            return check_repo(path, probe, fetch=config.fetch)
        except RepoUnavailableError as err:
            # Vanished since discovery; reported like a traversal error
            report(err.cause)
            return None

    logger.debug("Scanning %s with %d workers", root, config.workers)
    with Dispatcher(_check, workers=config.workers) as dispatcher:
        paths = walk_in_background(root, on_error=report, marker=config.marker)
        for path in iter(paths.get, _DONE):
            if not dispatcher.submit(path):
                break

        dispatcher.join()
        records = list(dispatcher.results())
    logger.debug("Checked %d of %d repositories", len(records), dispatcher.submitted)
    return records
