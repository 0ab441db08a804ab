"""Dining philosophers with one process per philosopher and shared semaphores."""

from __future__ import annotations

import multiprocessing
import sys
import threading
import time
from dataclasses import dataclass
from enum import Enum
from multiprocessing.connection import wait as wait_for_sentinels
from typing import Any, Sequence

from .args import ArgumentError, Settings, parse_arguments
from .clock import now_ms, wait_ms
from .messages import Action, Printer

_WATCH_POLL_SECONDS = 0.000021
FATAL_MESSAGE = "error: fatal"


class Outcome(Enum):
    """How a philosopher process ended; the value is its exit status."""

    DEATH = 4
    FATAL = 6
    FULL = 7


@dataclass(eq=False)
class _Seat:
    index: int
    last_meal: int
    meals_eaten: int = 0


def _dine(
    settings: Settings,
    seat: _Seat,
    start_time: int,
    forks: Any,
    printer: Printer,
) -> None:
    def announce(timestamp: int, action: Action) -> None:
        printer.announce(timestamp, seat.index, action)

    while True:
        forks.acquire()
        announce(now_ms() - start_time, Action.TAKEN_A_FORK)
        forks.acquire()
        announce(now_ms() - start_time, Action.TAKEN_A_FORK)

        started = now_ms()
        announce(started - start_time, Action.EAT)
        wait_ms(started, settings.time_to_eat)
        seat.last_meal = now_ms()
        seat.meals_eaten += 1

        forks.release()
        forks.release()

        if settings.meals and seat.meals_eaten == settings.meals:
            return

        started = now_ms()
        announce(started - start_time, Action.SLEEP)
        wait_ms(started, settings.time_to_sleep)
        announce(now_ms() - start_time, Action.THINK)


def run_philosopher(
    settings: Settings,
    index: int,
    start_time: int,
    forks: Any,
    print_lock: Any,
) -> Outcome:
    """Live as philosopher ``index`` until full or dead.

    ``forks`` is a counting semaphore shared by the table and
    ``print_lock`` guards the output. A watchdog checks the time since
    the last meal; on starvation the death is announced, the print lock
    stays held and DEATH is returned.
    """
    printer = Printer(lock=print_lock)
    seat = _Seat(index=index, last_meal=start_time)
    failures: list[BaseException] = []

    def dine() -> None:
        try:
            _dine(settings, seat, start_time, forks, printer)
        except Exception as exc:  # reported through the outcome
            failures.append(exc)

    diner = threading.Thread(target=dine, daemon=True)
    diner.start()
    while True:
        if not diner.is_alive():
            return Outcome.FATAL if failures else Outcome.FULL
        if now_ms() - seat.last_meal > settings.time_to_die:
            printer.announce(now_ms() - start_time, index, Action.DEATH)
            return Outcome.DEATH
        time.sleep(_WATCH_POLL_SECONDS)


def _philosopher_process(
    settings: Settings, index: int, start_time: int, forks: Any, print_lock: Any
) -> None:
    sys.exit(run_philosopher(settings, index, start_time, forks, print_lock).value)


def _context() -> Any:
    if "fork" in multiprocessing.get_all_start_methods():
        return multiprocessing.get_context("fork")
    return multiprocessing.get_context()


class ProcessTable:
    """A table where every philosopher is a separate process."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._context = _context()

    def run(self) -> Outcome:
        """Run until one philosopher dies or all have eaten enough.

        Returns DEATH or FULL. Raises RuntimeError if a philosopher
        process ended for any other reason.
        """
        forks = self._context.Semaphore(self.settings.philosophers)
        print_lock = self._context.Lock()
        start_time = now_ms()
        processes = [
            self._context.Process(
                target=_philosopher_process,
                args=(self.settings, index, start_time, forks, print_lock),
                daemon=True,
            )
            for index in range(self.settings.philosophers)
        ]
        for process in processes:
            process.start()
        try:
            return self._monitor(processes)
        finally:
            for process in processes:
                if process.is_alive():
                    process.kill()
                process.join()

    def _monitor(self, processes: list[Any]) -> Outcome:
        running = {process.sentinel: process for process in processes}
        full = 0
        while running:
            for sentinel in wait_for_sentinels(list(running)):
                process = running.pop(sentinel)
                process.join()
                if process.exitcode == Outcome.FULL.value:
                    full += 1
                elif process.exitcode == Outcome.DEATH.value:
                    return Outcome.DEATH
                else:
                    raise RuntimeError("fatal")
            if full == self.settings.philosophers:
                return Outcome.FULL
        raise RuntimeError("fatal")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the simulation from command-line arguments; returns the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        settings = parse_arguments(args)
    except ArgumentError as exc:
        sys.stderr.write(str(exc))
        return 1
    sys.stdout.flush()
    try:
        ProcessTable(settings).run()
    except RuntimeError:
        sys.stderr.write(FATAL_MESSAGE)
        return 1
    return 0