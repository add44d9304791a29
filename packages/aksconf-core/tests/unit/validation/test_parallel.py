"""Unit tests for ordered task execution."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

import pytest

from aksconf_core.errors import ValidationTaskError
from aksconf_core.validation.parallel import run_ordered


def sleeper(value: int, delay: float) -> Callable[[], int]:
    def task() -> int:
        time.sleep(delay)
        return value

    return task


def boom(message: str) -> Callable[[], int]:
    def task() -> int:
        raise ValueError(message)

    return task


class TestRunOrdered:
    """Tests for run_ordered."""

    def test_empty(self) -> None:
        assert run_ordered([], max_workers=4) == []

    @pytest.mark.parametrize("max_workers", [0, 1, 4])
    def test_results_in_task_order(self, max_workers: int) -> None:
        tasks = [(f"t{i}", sleeper(i, 0.01 * (5 - i))) for i in range(5)]
        assert run_ordered(tasks, max_workers=max_workers) == [0, 1, 2, 3, 4]

    def test_sequential_runs_on_calling_thread(self) -> None:
        threads: list[str] = []
        tasks = [("t", lambda: threads.append(threading.current_thread().name))]

        run_ordered(tasks, max_workers=1)

        assert threads == [threading.current_thread().name]

    def test_pool_threads_are_named(self) -> None:
        names = run_ordered(
            [("a", lambda: threading.current_thread().name)] * 2,
            max_workers=2,
        )
        assert all(name.startswith("aksconf-check") for name in names)

    def test_sequential_failure(self) -> None:
        with pytest.raises(ValidationTaskError) as exc_info:
            run_ordered([("ok", lambda: 1), ("bad", boom("nope"))], max_workers=0)
        assert exc_info.value.failures == [("bad", "ValueError", "nope")]

    @pytest.mark.parametrize("max_workers", [0, 1, 3])
    def test_failures_are_all_reported(self, max_workers: int) -> None:
        """Every failing task is reported whatever the worker count."""
        ran: list[str] = []

        def tracked() -> int:
            ran.append("b")
            return 2

        tasks = [("a", boom("first")), ("b", tracked), ("c", boom("second"))]
        with pytest.raises(ValidationTaskError) as exc_info:
            run_ordered(tasks, max_workers=max_workers)

        assert ran == ["b"]
        assert exc_info.value.failures == [
            ("a", "ValueError", "first"),
            ("c", "ValueError", "second"),
        ]
