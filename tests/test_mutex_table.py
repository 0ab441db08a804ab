import io
from collections import Counter

import pytest

from philosophers.args import Settings
from philosophers.messages import Printer
from philosophers.mutex_table import MutexTable, left_fork, main, right_fork


def _lines(stream):
    return stream.getvalue().splitlines()


def test_left_fork_wraps_for_first_philosopher():
    assert left_fork(0, 5) == 4
    assert left_fork(3, 5) == 2


def test_right_fork_is_own_index():
    assert right_fork(0) == 0
    assert right_fork(3) == 3


@pytest.mark.parametrize("count", [2, 3, 5, 8])
def test_every_fork_shared_by_exactly_two(count):
    usage = Counter()
    for index in range(count):
        usage[left_fork(index, count)] += 1
        usage[right_fork(index)] += 1
    assert sorted(usage) == list(range(count))
    assert set(usage.values()) == {2}


@pytest.mark.parametrize("count", [2, 3, 5])
def test_left_and_right_forks_differ(count):
    for index in range(count):
        assert left_fork(index, count) != right_fork(index)


def test_everyone_eats_requested_meals():
    stream = io.StringIO()
    settings = Settings(3, 2000, 10, 10, 2)
    result = MutexTable(settings, Printer(stream)).run()
    assert result is None
    lines = _lines(stream)
    eating = Counter(line.split()[1] for line in lines if line.endswith(" is eating"))
    assert eating == {"1": 2, "2": 2, "3": 2}
    assert not any(line.endswith(" died") for line in lines)
    forks = Counter(
        line.split()[1] for line in lines if line.endswith(" has taken a fork")
    )
    assert forks == {"1": 4, "2": 4, "3": 4}


def test_timestamps_are_non_negative_integers():
    stream = io.StringIO()
    MutexTable(Settings(2, 2000, 5, 5, 1), Printer(stream)).run()
    lines = _lines(stream)
    assert lines
    assert all(int(line.split()[0]) >= 0 for line in lines)


def test_starving_philosopher_dies_and_is_last_line():
    stream = io.StringIO()
    settings = Settings(2, 20, 200, 200)
    dead = MutexTable(settings, Printer(stream)).run()
    assert dead in (0, 1)
    last = _lines(stream)[-1]
    assert last.endswith(" died")
    assert last.split()[1] == str(dead + 1)


def test_failing_stream_reports_fatal_error():
    class Broken(io.StringIO):
        def write(self, text):
            raise OSError("broken")

    table = MutexTable(Settings(2, 100000, 10, 10), Printer(Broken()))
    with pytest.raises(RuntimeError):
        table.run()


def test_main_rejects_wrong_count(capsys):
    assert main(["4", "800"]) == 1
    assert capsys.readouterr().err == "error arguments count or bad content"


def test_main_rejects_non_digits(capsys):
    assert main(["4", "800", "-200", "200"]) == 1
    assert capsys.readouterr().err == "error arguments count or bad content"


def test_main_rejects_single_philosopher(capsys):
    assert main(["1", "800", "200", "200"]) == 1
    assert capsys.readouterr().err == "out of memory"


def test_main_runs_to_completion(capsys):
    assert main(["2", "2000", "5", "5", "1"]) == 0
    out = capsys.readouterr().out
    assert out.count(" is eating\n") == 2
    assert " died" not in out