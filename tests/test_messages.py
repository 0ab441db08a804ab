import io
import threading

import pytest

from philosophers.messages import Action, Printer, format_message


def test_format_eating_example():
    assert format_message(0, 0, Action.EAT) == "0 1 is eating\n"


def test_format_death_example():
    assert format_message(410, 2, Action.DEATH) == "410 3 died\n"


@pytest.mark.parametrize("action", list(Action))
def test_format_structure(action):
    line = format_message(1234, 9, action)
    assert line.startswith("1234 10")
    assert line.endswith(action.value + "\n")
    assert line.count("\n") == 1


def test_action_texts():
    assert format_message(7, 0, Action.TAKEN_A_FORK) == "7 1 has taken a fork\n"
    assert format_message(7, 1, Action.SLEEP) == "7 2 is sleeping\n"
    assert format_message(7, 2, Action.THINK) == "7 3 is thinking\n"


def test_printer_writes_and_releases():
    stream = io.StringIO()
    lock = threading.Lock()
    printer = Printer(stream, lock)
    printer.announce(5, 1, Action.THINK)
    printer.announce(6, 1, Action.SLEEP)
    assert stream.getvalue() == format_message(5, 1, Action.THINK) + format_message(
        6, 1, Action.SLEEP
    )
    assert not lock.locked()


def test_printer_keeps_lock_after_death():
    stream = io.StringIO()
    lock = threading.Lock()
    printer = Printer(stream, lock)
    printer.announce(100, 0, Action.DEATH)
    assert stream.getvalue() == format_message(100, 0, Action.DEATH)
    assert lock.locked()
    assert lock.acquire(blocking=False) is False


def test_printer_lines_do_not_interleave():
    stream = io.StringIO()
    printer = Printer(stream, threading.Lock())

    def worker(index):
        for tick in range(50):
            printer.announce(tick, index, Action.TAKEN_A_FORK)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    lines = stream.getvalue().splitlines()
    assert len(lines) == 200
    assert all(line.endswith(Action.TAKEN_A_FORK.value) for line in lines)


def test_printer_default_lock_released():
    stream = io.StringIO()
    printer = Printer(stream)
    printer.announce(1, 0, Action.EAT)
    assert printer.lock.locked() is False
    assert stream.getvalue() == format_message(1, 0, Action.EAT)