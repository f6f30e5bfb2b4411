"""Parallel journal walker.

:func:`walk_journal` enumerates every entry file under a root directory and
runs a conversion function on each one in a thread pool, returning one
:class:`WalkResult` per file. Results come back in completion order, so
callers should treat them as a set.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Generic, Iterator, TypeVar

from journal.errors import WalkInvariantError
from journal.parser import is_entry_path

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class WalkResult(Generic[T]):
    """Outcome of converting one entry path."""

    path: Path
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the converted value, re-raising the stored error if any."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def _log_walk_error(exc: OSError) -> None:
    LOGGER.warning("Skipping unreadable path %s: %s", exc.filename, exc.strerror or exc)


def iter_entry_paths(root: Path) -> Iterator[Path]:
    """Yield entry paths under *root*, following symlinks.

    There is no protection against symlink cycles.
    """
    root = Path(root)
    if not root.is_dir():
        if is_entry_path(root):
            yield root
        return
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_log_walk_error, followlinks=True):
        for name in filenames:
            path = Path(dirpath) / name
            if is_entry_path(path):
                yield path


def walk_journal(
    root: Path,
    convert: Callable[[Path], T],
    *,
    max_workers: int | None = None,
) -> list[WalkResult[T]]:
    """Run *convert* on every entry under *root* in parallel.

    *convert* is called from worker threads and must not mutate shared state.
    Any exception it raises is stored on that path's result; the walk itself
    keeps going. The call blocks until every dispatched path has a result.

    Parameters
    ----------
    root:
        Journal directory (or a single entry file).
    convert:
        Path → value function, usually :func:`journal.parser.parse_entry`.
    max_workers:
        Pool size. Defaults to the number of CPUs on the host.
    """
    workers = max_workers or os.cpu_count() or 1
    results: list[WalkResult[T]] = []

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(convert, path): path for path in iter_entry_paths(root)}
        LOGGER.debug("Dispatched %d entries under %s to %d workers", len(futures), root, workers)

        for future in as_completed(futures):
            path = futures[future]
            error = future.exception()
            if error is not None:
                results.append(WalkResult(path=path, error=error))
            else:
                results.append(WalkResult(path=path, value=future.result()))

    if len(results) != len(futures):
        raise WalkInvariantError(
            f"collected {len(results)} results for {len(futures)} dispatched entries"
        )
    return results
