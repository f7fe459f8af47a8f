#!/usr/bin/env python3
"""Checks and statistics over a computed schedule.

Functions implemented:
* occupancy(schedule) -> np.ndarray       (busy processors per time unit)
* verify_schedule(schedule, tasks) -> list (human-readable violations, empty if valid)
* schedule_summary(schedule) -> dict      (utilization, peak, idle slots, std-dev)
"""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence

import numpy as np

from .models import Task


def occupancy(schedule) -> np.ndarray:
    """Number of occupied processors at each time unit."""
    return np.array([sum(1 for d in row if d is not None) for row in schedule], dtype=int)


def verify_schedule(schedule, tasks: Sequence[Task]) -> List[str]:
    """Return every way `schedule` fails to run each instance of `tasks` in full.

    Checks that no instance runs twice in one time unit, that every unit
    lies within [available, deadline), and that each instance receives
    exactly its task's execution time.
    """
    problems: List[str] = []
    units: Dict[int, int] = defaultdict(int)

    for time, row in enumerate(schedule):
        seen = set()
        for decision in row:
            if decision is None:
                continue
            instance = decision.task_instance
            if id(instance) in seen:
                problems.append(f"time {time}: {instance} runs on more than one processor")
            seen.add(id(instance))
            if not instance.available <= time < instance.deadline:
                problems.append(
                    f"time {time}: {instance} runs outside [{instance.available}, {instance.deadline})"
                )
            units[id(instance)] += 1

    for task in tasks:
        for instance in task.instances:
            got = units.get(id(instance), 0)
            if got != task.execution_time:
                problems.append(f"{instance}: scheduled {got} of {task.execution_time} units")

    return problems


def schedule_summary(schedule) -> dict:
    busy = occupancy(schedule)
    super_period = len(schedule)
    processors = len(schedule[0]) if schedule else 0
    capacity = super_period * processors
    busy_units = int(busy.sum())
    return {
        "super_period": super_period,
        "processor_count": processors,
        "busy_units": busy_units,
        "utilization": busy_units / capacity if capacity else 0.0,
        "peak_occupancy": int(busy.max()) if busy.size else 0,
        "idle_slots": capacity - busy_units,
        # population std-dev
        "occupancy_std": float(busy.std()) if busy.size else 0.0,
    }
