"""Dining philosophers with threads sharing a counting semaphore of forks."""

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
_LAUNCH_GAP_SECONDS = 0.00001
FATAL_MESSAGE = "error: fatal\n"


@dataclass(eq=False)
class _Philosopher:
    index: int
    meals_eaten: int = 0
    hungry: bool = True
    last_meal: int = 0


class SemaphoreTable:
    """A table where all forks lie in the middle, counted by one semaphore."""

    def __init__(self, settings: Settings, printer: Printer | None = None) -> None:
        self.settings = settings
        self.printer = (
            printer if printer is not None else Printer(lock=threading.Semaphore(1))
        )
        self._forks = threading.Semaphore(settings.philosophers)
        self._philosophers = [
            _Philosopher(index=index) for index in range(settings.philosophers)
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
        for philosopher in self._philosophers:
            # Each launch restarts the clock that timestamps are measured from.
            self._start = now_ms()
            philosopher.last_meal = self._start
            threading.Thread(
                target=self._live, args=(philosopher,), daemon=True
            ).start()
            time.sleep(_LAUNCH_GAP_SECONDS)
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

    def _take_fork(self, philosopher: _Philosopher) -> None:
        self._forks.acquire()
        self._announce(self._elapsed(), philosopher, Action.TAKEN_A_FORK)

    def _dine(self, philosopher: _Philosopher) -> None:
        meals = self.settings.meals
        while True:
            self._take_fork(philosopher)
            self._take_fork(philosopher)

            started = now_ms()
            self._announce(started - self._start, philosopher, Action.EAT)
            wait_ms(started, self.settings.time_to_eat)
            philosopher.last_meal = now_ms()
            philosopher.meals_eaten += 1

            self._forks.release()
            self._forks.release()

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
        SemaphoreTable(settings, Printer(lock=threading.Semaphore(1))).run()
    except RuntimeError:
        sys.stderr.write(FATAL_MESSAGE)
        return 1
    return 0