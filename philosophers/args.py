"""Command-line argument parsing for the dining philosophers simulations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

_WHITESPACE = " \t\n\r\v\f"

BAD_CONTENT = "error arguments count or bad content"
BAD_VALUES = "out of memory"


class ArgumentError(ValueError):
    """Raised when the command-line arguments cannot start a simulation."""


@dataclass(frozen=True)
class Settings:
    """Parameters of one simulation; times are in milliseconds."""

    philosophers: int
    time_to_die: int
    time_to_eat: int
    time_to_sleep: int
    meals: int | None = None


def parse_int(text: str) -> int:
    """Read a leading integer the way the classic ``atoi`` does.

    Leading whitespace is skipped, one optional sign is accepted and
    digits are read until the first non-digit. No digits yields 0.
    """
    rest = text.lstrip(_WHITESPACE)
    sign = 1
    if rest[:1] in ("-", "+"):
        if rest[0] == "-":
            sign = -1
        rest = rest[1:]
    digits = []
    for char in rest:
        if not ("0" <= char <= "9"):
            break
        digits.append(char)
    return sign * int("".join(digits)) if digits else 0


def parse_arguments(args: Sequence[str]) -> Settings:
    """Build settings from the arguments that follow the program name.

    Expects ``philosophers time_to_die time_to_eat time_to_sleep`` and an
    optional number of meals each philosopher must eat.
    """
    if len(args) not in (4, 5) or any(
        not all("0" <= char <= "9" for char in arg) for arg in args
    ):
        raise ArgumentError(BAD_CONTENT)

    count, die, eat, sleep = (parse_int(arg) for arg in args[:4])
    meals = parse_int(args[4]) if len(args) == 5 else None

    if count < 2 or die <= 0 or eat <= 0 or sleep <= 0:
        raise ArgumentError(BAD_VALUES)
    if meals is not None and meals < 1:
        raise ArgumentError(BAD_VALUES)

    return Settings(
        philosophers=count,
        time_to_die=die,
        time_to_eat=eat,
        time_to_sleep=sleep,
        meals=meals,
    )