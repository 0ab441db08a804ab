"""Status lines printed by the simulations."""

from __future__ import annotations

import sys
import threading
from enum import Enum
from typing import Any, TextIO


class Action(Enum):
    """What a philosopher is doing; the value is the text that follows its number."""

    EAT = " is eating"
    SLEEP = " is sleeping"
    THINK = " is thinking"
    TAKEN_A_FORK = " has taken a fork"
    DEATH = " died"


def format_message(timestamp: int, philosopher: int, action: Action) -> str:
    """Render one status line; ``philosopher`` is zero-based and shown from 1."""
    return f"{timestamp} {philosopher + 1}{action.value}\n"


class Printer:
    """Writes status lines under a lock so that lines never interleave.

    After a death is announced the lock is kept, so nothing more is printed.
    """

    def __init__(self, stream: TextIO | None = None, lock: Any = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.lock = lock if lock is not None else threading.Lock()

    def announce(self, timestamp: int, philosopher: int, action: Action) -> None:
        """Print a status line; a death leaves the lock held."""
        self.lock.acquire()
        self.stream.write(format_message(timestamp, philosopher, action))
        self.stream.flush()
        if action is not Action.DEATH:
            self.lock.release()