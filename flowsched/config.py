from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Dict, Optional

import yaml

# Bounds enforced on task files (ScheduleIO constants of the desktop tool)
DEFAULT_MAX_NAME_LENGTH = 15
DEFAULT_MAX_PERIOD = 200
DEFAULT_MIN_PROCESSORS = 1
DEFAULT_MAX_PROCESSORS = 5
DEFAULT_MAX_TASKS = 60

DEFAULT_SOLVER = "edmonds-karp"

_ENV_PREFIX = "FLOWSCHED_"


@dataclass(frozen=True)
class SchedulerLimits:
    """Validation bounds applied when reading a task set.

    `max_period` bounds both individual task periods and the super-period.
    """

    max_name_length: int = DEFAULT_MAX_NAME_LENGTH
    max_period: int = DEFAULT_MAX_PERIOD
    min_processors: int = DEFAULT_MIN_PROCESSORS
    max_processors: int = DEFAULT_MAX_PROCESSORS
    max_tasks: int = DEFAULT_MAX_TASKS

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{f.name} must be a positive integer, got {value!r}")
        if self.min_processors > self.max_processors:
            raise ValueError("min_processors must not exceed max_processors")

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "SchedulerLimits":
        """Build limits from FLOWSCHED_* environment variables, falling back to defaults."""
        environ = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            raw = environ.get(_ENV_PREFIX + f.name.upper())
            if raw is None or raw.strip() == "":
                continue
            try:
                values[f.name] = int(raw)
            except ValueError:
                raise ValueError(f"{_ENV_PREFIX}{f.name.upper()} must be an integer, got {raw!r}") from None
        return cls(**values)

    @classmethod
    def from_yaml(cls, path) -> "SchedulerLimits":
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping of limit names to values")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"{path}: unknown limit(s): {', '.join(map(str, unknown))}")
        return cls(**data)


def load_limits(path=None) -> SchedulerLimits:
    if path is not None:
        return SchedulerLimits.from_yaml(path)
    return SchedulerLimits.from_env()


def default_solver_name() -> str:
    return os.getenv(_ENV_PREFIX + "SOLVER", DEFAULT_SOLVER)
