#!/usr/bin/env python3
"""
Periodic task model

  Task ──creates──▶ TaskInstance (one per period in the super-period)
                        └── SchedulingDecision (one per executed time unit)
"""

from dataclasses import dataclass, field
from fractions import Fraction
from typing import List, Optional

# execution_time_completed of a decision that has not been sequenced yet
UNSET = -1


@dataclass(frozen=True, eq=False)
class Task:
    """
    A periodic workload: `execution_time` units of work every `period` units.

    Instances are regenerated (not accumulated) by create_instances().
    """
    name: str
    execution_time: int
    period: int
    index: int = 0
    instances: List["TaskInstance"] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self):
        if self.execution_time <= 0:
            raise ValueError(f"Task {self.name!r}: execution time must be positive, got {self.execution_time}")
        if self.period <= 0:
            raise ValueError(f"Task {self.name!r}: period must be positive, got {self.period}")

    @property
    def utilization(self) -> Fraction:
        return Fraction(self.execution_time, self.period)

    def create_instances(self, super_period: int) -> List["TaskInstance"]:
        """
        Replace this task's instances with one per release 0, period, 2·period, …
        below `super_period`.
        """
        if super_period <= 0 or super_period % self.period != 0:
            raise ValueError(
                f"Task {self.name!r}: super-period {super_period} must be a positive multiple of period {self.period}"
            )
        self.instances.clear()
        for available in range(0, super_period, self.period):
            self.instances.append(TaskInstance(self, available))
        return self.instances


@dataclass(frozen=True, eq=False)
class TaskInstance:
    """One release of a Task, runnable in [available, deadline)."""
    task: Task
    available: int
    decisions: List["SchedulingDecision"] = field(default_factory=list, repr=False, compare=False)

    @property
    def deadline(self) -> int:
        return self.available + self.task.period

    @property
    def name(self) -> str:
        return self.task.name

    def __str__(self):
        return f"{self.task.name}@{self.available}"


@dataclass(frozen=True, eq=False)
class SchedulingDecision:
    """One unit of execution of `task_instance` at `time` on `processor`."""
    task_instance: TaskInstance
    time: int
    processor: int
    execution_time_completed: int = UNSET

    @property
    def task_name(self) -> str:
        return self.task_instance.task.name

    @property
    def next_decision(self) -> Optional["SchedulingDecision"]:
        """The instance's following execution unit, or None if this is the last."""
        if self.execution_time_completed == UNSET:
            return None
        next_index = self.execution_time_completed + 1
        decisions = self.task_instance.decisions
        if next_index < len(decisions):
            return decisions[next_index]
        return None
