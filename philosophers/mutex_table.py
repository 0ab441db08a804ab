"""Dining philosophers with one thread per philosopher and a lock per fork."""

from __future__ import annotations

import sys
import threading
import time
from dataclasses import dataclass
from typing import Sequence

from .args import ArgumentError, Settings, parse_arguments
from .clock import now_ms, wait_ms
from .messages import Action, Printer

_MONITOR_POLL_SECONDS = 0.0001
FATAL_MESSAGE = "error: fatal\n"


def left_fork(index: int, count: int) -> int:
    """Fork on the left of philosopher ``index`` at a table of ``count``."""
    return count - 1 if index == 0 else index - 1


def right_fork(index: int) -> int:
    """Fork on the right of philosopher ``index``."""
    return index


@dataclass(eq=False)
class _Philosopher:
    index: int
    left: threading.Lock
    right: threading.Lock
    meals_eaten: int = 0
    hungry: bool = True
    last_meal: int = 0


class MutexTable:
    """A table where forks are locks shared by neighbouring threads."""

    def __init__(self, settings: Settings, printer: Printer | None = None) -> None:
        self.settings = settings
        self.printer = printer if printer is not None else Printer()
        count = settings.philosophers
        self._forks = [threading.Lock() for _ in range(count)]
        self._philosophers = [
            _Philosopher(
                index=index,
                left=self._forks[left_fork(index, count)],
                right=self._forks[right_fork(index)],
            )
            for index in range(count)
        ]
        self._full = 0
        self._full_lock = threading.Lock()
        self._error: BaseException | None = None
        self._start = 0

    def run(self) -> int | None:
        """Run until someone dies or everyone has eaten enough.

        Returns the zero-based index of the philosopher who died, or None
        when every philosopher ate the requested number of meals. Raises
        RuntimeError if a philosopher thread failed.
        """
        self._start = now_ms()
        for philosopher in self._philosophers:
            philosopher.last_meal = self._start
            threading.Thread(
                target=self._live, args=(philosopher,), daemon=True
            ).start()
        return self._monitor()

    def _elapsed(self) -> int:
        return now_ms() - self._start

    def _announce(self, timestamp: int, philosopher: _Philosopher, action: Action) -> None:
        self.printer.announce(timestamp, philosopher.index, action)

    def _live(self, philosopher: _Philosopher) -> None:
        try:
            self._dine(philosopher)
        except Exception as exc:  # reported to the monitor
            self._error = exc

    def _take(self, philosopher: _Philosopher, fork: threading.Lock) -> None:
        fork.acquire()
        self._announce(self._elapsed(), philosopher, Action.TAKEN_A_FORK)

    def _dine(self, philosopher: _Philosopher) -> None:
        if philosopher.index % 2 == 0:
            first, second = philosopher.right, philosopher.left
        else:
            first, second = philosopher.left, philosopher.right
        meals = self.settings.meals
        while True:
            self._take(philosopher, first)
            self._take(philosopher, second)

            started = now_ms()
            self._announce(started - self._start, philosopher, Action.EAT)
            wait_ms(started, self.settings.time_to_eat)
            philosopher.last_meal = now_ms()
            philosopher.meals_eaten += 1

            philosopher.left.release()
            philosopher.right.release()

            if meals and philosopher.meals_eaten == meals:
                with self._full_lock:
                    self._full += 1
                philosopher.hungry = False
                return

            started = now_ms()
            self._announce(started - self._start, philosopher, Action.SLEEP)
            wait_ms(started, self.settings.time_to_sleep)
            self._announce(self._elapsed(), philosopher, Action.THINK)

    def _monitor(self) -> int | None:
        count = self.settings.philosophers
        while True:
            for philosopher in self._philosophers:
                if (
                    philosopher.hungry
                    and now_ms() - philosopher.last_meal > self.settings.time_to_die
                ):
                    self._announce(self._elapsed(), philosopher, Action.DEATH)
                    return philosopher.index
                if self._full and self._full == count:
                    return None
            if self._error is not None:
                raise RuntimeError("fatal") from self._error
            time.sleep(_MONITOR_POLL_SECONDS)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the simulation from command-line arguments; returns the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        settings = parse_arguments(args)
    except ArgumentError as exc:
        sys.stderr.write(str(exc))
        return 1
    try:
        MutexTable(settings, Printer()).run()
    except RuntimeError:
        sys.stderr.write(FATAL_MESSAGE)
        return 1
    return 0