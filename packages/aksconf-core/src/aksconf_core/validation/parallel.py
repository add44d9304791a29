"""Ordered task execution for validation phases.

Each validation phase is a list of independent, pure tasks followed by a join
barrier. Results are always returned in submission order so diagnostics stay
order-stable regardless of worker count or scheduling.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TypeVar

from aksconf_core.errors import ValidationTaskError

R = TypeVar("R")


def run_ordered(
    tasks: Sequence[tuple[str, Callable[[], R]]],
    *,
    max_workers: int,
) -> list[R]:
    """Run tasks, possibly on a thread pool, and return results in task order.

    Args:
        tasks: (key, thunk) pairs. The key identifies the task in errors.
        max_workers: Worker threads. ``max_workers <= 1`` runs sequentially
            on the calling thread.

    Returns:
        One result per task, in the order the tasks were given.

    Raises:
        ValidationTaskError: If any task raised. Every failing task is
            reported, in task order.
    """
    if not tasks:
        return []

    ordered: list[R] = []
    failures: list[tuple[str, str, str]] = []

    if max_workers <= 1:
        for key, fn in tasks:
            try:
                ordered.append(fn())
            except Exception as e:  # noqa: BLE001
                failures.append((key, type(e).__name__, str(e)))
    else:
        workers = min(max_workers, len(tasks))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="aksconf-check") as ex:
            futures: list[tuple[str, Future[R]]] = [(key, ex.submit(fn)) for key, fn in tasks]
            for key, fut in futures:
                try:
                    ordered.append(fut.result())
                except Exception as e:  # noqa: BLE001
                    failures.append((key, type(e).__name__, str(e)))

    if failures:
        raise ValidationTaskError(failures)

    return ordered
