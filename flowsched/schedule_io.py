#!/usr/bin/env python3
"""
Task-file reader and schedule writers.

Task file format:
  line 1:  processor count
  line 2+: name,execution_time,period

Schedule CSV format:
  Time,Processor 1,...,Processor P
  0,A,B
  1,A,
"""

import math
from functools import reduce
from pathlib import Path
from typing import Iterable, List, NamedTuple, Optional, Sequence

import pandas as pd
import yaml

from .config import SchedulerLimits
from .models import Task
from .palette import background_colors, foreground_color

TASK_COLUMNS = ["name", "execution_time", "period"]
FIELDS_PER_LINE = len(TASK_COLUMNS)
SEPARATOR = ","


class TaskFileError(ValueError):
    """A task file is malformed or violates the input limits."""


class TaskSet(NamedTuple):
    tasks: List[Task]
    processor_count: int
    super_period: int


def lcm(a: int, b: int) -> int:
    return a // math.gcd(a, b) * b


def compute_super_period(periods: Iterable[int]) -> int:
    """LCM of all periods (1 when there are none)."""
    return reduce(lcm, periods, 1)


def required_execution_time(tasks: Sequence[Task], super_period: int) -> int:
    """Execution units all tasks need over one super-period."""
    return sum((super_period // task.period) * task.execution_time for task in tasks)


def is_feasible(tasks: Sequence[Task], processor_count: int, super_period: int) -> bool:
    return required_execution_time(tasks, super_period) <= processor_count * super_period


def _parse_int(text: str) -> Optional[int]:
    try:
        return int(text.strip())
    except ValueError:
        return None


def _split_fields(lines: List[str]) -> pd.DataFrame:
    """One row per line: the stripped task fields plus how many there were."""
    if not lines:
        return pd.DataFrame(columns=TASK_COLUMNS + ["field_count"])

    fields = pd.Series(lines, dtype=object).str.split(SEPARATOR, expand=True)
    field_count = fields.notna().sum(axis=1)

    frame = fields.reindex(columns=range(FIELDS_PER_LINE)).fillna("").astype(str)
    frame.columns = TASK_COLUMNS
    for column in TASK_COLUMNS:
        frame[column] = frame[column].str.strip()
    frame["field_count"] = field_count
    return frame


def read_tasks(path, limits: Optional[SchedulerLimits] = None) -> TaskSet:
    """
    Read and validate a task file.

    Every task's instances are generated for the resulting super-period.
    Raises TaskFileError for any format or limit violation, including an
    infeasible task set.
    """
    limits = limits or SchedulerLimits.from_env()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"task file not found: {path}")

    with open(path, "r", newline="") as f:
        first_line = f.readline()
        if first_line.strip() == "":
            raise TaskFileError("The number of processors is not given.")

        processor_count = _parse_int(first_line)
        if (processor_count is None
                or processor_count < limits.min_processors
                or processor_count > limits.max_processors):
            raise TaskFileError(
                f"The number of processors must be at least {limits.min_processors} "
                f"and at most {limits.max_processors}."
            )

        rows = _split_fields(f.read().splitlines())

    tasks: List[Task] = []
    super_period = 1

    for offset, row in enumerate(rows.itertuples(index=False)):
        line_number = offset + 2
        if row.field_count == 1 and row.name == "":
            continue
        if row.field_count != FIELDS_PER_LINE:
            raise TaskFileError(f"Line {line_number} has {row.field_count} fields.")

        name, execution_text, period_text = row.name, row.execution_time, row.period
        if len(name) > limits.max_name_length:
            raise TaskFileError(f"The task name in line {line_number} is too long.")

        execution_time = _parse_int(execution_text)
        if execution_time is None or execution_time < 1:
            raise TaskFileError(f"Line {line_number} has an execution time of {execution_text}.")

        period = _parse_int(period_text)
        if period is None or period < 1 or period > limits.max_period:
            raise TaskFileError(f"Line {line_number} has a period of {period_text}.")

        if execution_time > period:
            raise TaskFileError(f"Line {line_number} has an execution time larger than its period.")

        tasks.append(Task(name, execution_time, period, index=len(tasks)))

        super_period = lcm(super_period, period)
        if super_period > limits.max_period:
            raise TaskFileError(f"The super-period is greater than {limits.max_period}.")

    if len(tasks) > limits.max_tasks:
        raise TaskFileError(f"The number of tasks is greater than {limits.max_tasks}.")

    if not is_feasible(tasks, processor_count, super_period):
        raise TaskFileError("The task set is infeasible.")

    for task in tasks:
        task.create_instances(super_period)

    return TaskSet(tasks, processor_count, super_period)


def _processor_count(schedule) -> int:
    return len(schedule[0]) if schedule else 0


def schedule_to_frame(schedule) -> pd.DataFrame:
    """One row per time unit: the time, then each processor's task name ('' when idle)."""
    processors = _processor_count(schedule)
    columns = ["Time"] + [f"Processor {i}" for i in range(1, processors + 1)]
    rows = [
        [time] + [decision.task_name if decision is not None else "" for decision in row]
        for time, row in enumerate(schedule)
    ]
    return pd.DataFrame(rows, columns=columns)


def write_schedule(schedule, path) -> None:
    schedule_to_frame(schedule).to_csv(path, index=False)


def schedule_to_records(schedule) -> List[dict]:
    records = []
    for time, row in enumerate(schedule):
        slots = []
        for decision in row:
            if decision is None:
                continue
            slots.append({
                "processor": decision.processor + 1,
                "task": decision.task_name,
                "released": decision.task_instance.available,
                "completed": decision.execution_time_completed,
            })
        records.append({"time": time, "slots": slots})
    return records


def task_legend(tasks: Sequence[Task]) -> List[dict]:
    """Display colours for each task, in task order."""
    legend = []
    for task, color in zip(tasks, background_colors(len(tasks))):
        legend.append({
            "task": task.name,
            "execution_time": task.execution_time,
            "period": task.period,
            "utilization": float(task.utilization),
            "background": color,
            "foreground": foreground_color(color),
        })
    return legend


def write_schedule_yaml(schedule, path, tasks: Optional[Sequence[Task]] = None) -> None:
    document = {
        "super_period": len(schedule),
        "processor_count": _processor_count(schedule),
    }
    if tasks is not None:
        document["tasks"] = task_legend(tasks)
    document["schedule"] = schedule_to_records(schedule)
    with open(path, "w") as fout:
        yaml.safe_dump(document, fout, sort_keys=False)
