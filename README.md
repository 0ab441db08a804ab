# philosophers

Three runs of the dining philosophers problem. Each one shares the forks
in a different way:

| Command       | Module                         | Forks are                                | Philosophers are |
|---------------|--------------------------------|------------------------------------------|------------------|
| `philo-one`   | `philosophers.mutex_table`     | one lock between each pair of neighbours | threads          |
| `philo-two`   | `philosophers.semaphore_table` | one counting semaphore in the middle     | threads          |
| `philo-three` | `philosophers.process_table`   | one counting semaphore in the middle     | processes        |

No libraries outside the standard library are needed.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Usage

All three commands take the same arguments. Times are in milliseconds:

```
philo-one NUMBER_OF_PHILOSOPHERS TIME_TO_DIE TIME_TO_EAT TIME_TO_SLEEP [MEALS]
```

- `NUMBER_OF_PHILOSOPHERS`: at least 2.
- `TIME_TO_DIE`: a philosopher who goes this long after the end of the
  last meal (or after the start) without finishing another meal dies.
- `TIME_TO_EAT`: how long a meal takes. Two forks are held for the whole meal.
- `TIME_TO_SLEEP`: how long a philosopher sleeps after eating. Thinking
  follows the sleep.
- `MEALS` (optional): a philosopher who has eaten this many times leaves
  the table. The run stops once every philosopher has left.

The arguments must be plain digits. The command exits with status 1 and
writes a message on standard error in these cases:

- the number of arguments is wrong, or an argument holds anything other
  than digits;
- there are fewer than two philosophers, a time is zero, or `MEALS` is zero.

If a philosopher thread or process fails, the command writes
`error: fatal` on standard error and exits with status 1. A run that ends
in a death, or with everyone full, exits with status 0.

Example:

```
philo-two 5 800 200 200 7
```

Each event goes on its own line. A line gives the time in milliseconds
since the start, then the philosopher's number (counted from 1), then
what happened:

```
0 1 has taken a fork
0 1 has taken a fork
0 1 is eating
200 1 is sleeping
400 1 is thinking
810 3 died
```

Once a death is announced the output lock stays held, so nothing more is
printed.

`philo-two` starts its philosophers one after another, with a very short
pause between them. It restarts its clock at each launch, so its
timestamps count from the launch of the last philosopher.

## As a library

```python
import sys
import threading

from philosophers.args import parse_arguments
from philosophers.messages import Printer
from philosophers.mutex_table import MutexTable

settings = parse_arguments(["4", "410", "200", "200", "3"])
table = MutexTable(settings, Printer(sys.stdout, threading.Lock()))
dead = table.run()
```

- `philosophers.args`:
  - `parse_arguments(args)` takes the arguments that follow the program
    name and returns a frozen `Settings` with the fields `philosophers`,
    `time_to_die`, `time_to_eat`, `time_to_sleep` and `meals`. `meals` is
    `None` when no count is given. Bad input raises `ArgumentError`, a
    subclass of `ValueError`.
  - `parse_int(text)` reads a leading integer the way `atoi` does.
- `philosophers.messages`:
  - `Action` lists the events.
  - `format_message(timestamp, philosopher, action)` builds one line
    without printing it. `philosopher` counts from zero.
  - `Printer(stream, lock)` writes lines under a lock.
- `philosophers.clock`: `now_ms()` gives the wall-clock time in
  milliseconds. `wait_ms(start, duration)` blocks until `duration`
  milliseconds have passed since `start`.
- `MutexTable.run()` and `SemaphoreTable.run()` return the zero-based
  index of the philosopher who died, or `None` when everyone ate enough.
  They raise `RuntimeError` if a philosopher thread failed.
- `philosophers.mutex_table` also has `left_fork(index, count)` and
  `right_fork(index)`, which give the forks each seat uses.
- `ProcessTable(settings).run()` returns `Outcome.DEATH` or
  `Outcome.FULL`. It raises `RuntimeError` if a process ended any other
  way.
- `run_philosopher(settings, index, start_time, forks, print_lock)`
  runs one philosopher of the process table in the current process and
  returns its `Outcome`.

## Limits

A table of a single philosopher is rejected, because at least two are
required. The runs print to standard output only. They keep no log or
record of a run.