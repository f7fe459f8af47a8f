#!/usr/bin/env python3
"""Compute multiprocessor schedules for periodic task files.

Usage:
  flowsched tasks.txt
  flowsched a.txt b.txt --out-dir schedules --format yaml --solver ortools

Each task file holds the processor count on its first line, then one
`name,execution_time,period` line per task. Without --out-dir the schedule
is printed as a table.
"""

import argparse
import sys
from pathlib import Path

import yaml
from tqdm import tqdm

from .config import default_solver_name, load_limits
from .graph import available_solvers
from .logging_config import LoggingFlags, log_if
from .metrics import schedule_summary, verify_schedule
from .schedule_generator import ScheduleGenerator
from .schedule_io import read_tasks, schedule_to_frame, write_schedule, write_schedule_yaml

EXIT_OK = 0
EXIT_INVALID_SCHEDULE = 1
EXIT_INPUT_ERROR = 2


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Periodic task set → multiprocessor schedule (max flow)")
    p.add_argument("task_files", nargs="+", help="Task file(s) to schedule")
    p.add_argument("--out-dir", default=None, help="Write <stem>.schedule.<format> into this directory")
    p.add_argument("--format", default="csv", choices=["csv", "yaml"], help="Output format for --out-dir")
    p.add_argument("--solver", default=default_solver_name(), choices=available_solvers(),
                   help="Max-flow backend (default: $FLOWSCHED_SOLVER or edmonds-karp)")
    p.add_argument("--limits", default=None, help="YAML file of input limits (default: FLOWSCHED_* env vars)")
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", action="store_true", help="Print scheduling progress")
    verbosity.add_argument("--quiet", action="store_true", help="Print warnings and errors only")
    return p.parse_args(argv)


def schedule_file(path, limits, solver: str, out_dir=None, fmt: str = "csv") -> dict:
    """Read, schedule, verify and optionally write one task file."""
    task_set = read_tasks(path, limits)
    generator = ScheduleGenerator(solver)
    schedule = generator.get_schedule(task_set.tasks, task_set.processor_count, task_set.super_period)

    result = {
        "path": str(path),
        "schedule": schedule,
        "summary": schedule_summary(schedule),
        "problems": verify_schedule(schedule, task_set.tasks),
        "output": None,
    }

    if out_dir is not None:
        out_dir = Path(out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path = out_dir / f"{Path(path).stem}.schedule.{fmt}"
        if fmt == "yaml":
            write_schedule_yaml(schedule, out_path, task_set.tasks)
        else:
            write_schedule(schedule, out_path)
        result["output"] = str(out_path)

    return result


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.verbose:
        LoggingFlags.enable_all_debug()
    elif args.quiet:
        LoggingFlags.set_quiet_mode()

    try:
        limits = load_limits(args.limits)
    except (ValueError, OSError, yaml.YAMLError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    files = args.task_files
    iterator = tqdm(files, desc="task files") if len(files) > 1 else files
    exit_code = EXIT_OK

    for path in iterator:
        try:
            result = schedule_file(path, limits, args.solver, args.out_dir, args.format)
        except (ValueError, FileNotFoundError) as e:
            print(f"{path}: error: {e}", file=sys.stderr)
            exit_code = EXIT_INPUT_ERROR
            continue

        summary = result["summary"]
        log_if(LoggingFlags.CLI_OUTPUT,
               f"✓ {path}: {summary['processor_count']} processors, super-period {summary['super_period']}, "
               f"{summary['busy_units']} busy units ({summary['utilization'] * 100:.1f}% utilization)")

        if result["problems"]:
            for problem in result["problems"]:
                log_if(LoggingFlags.WARNINGS, f"[WARN] {path}: {problem}")
            if exit_code == EXIT_OK:
                exit_code = EXIT_INVALID_SCHEDULE

        if result["output"] is not None:
            log_if(LoggingFlags.CLI_OUTPUT, f"  Written schedule to {result['output']}")
        else:
            log_if(LoggingFlags.CLI_OUTPUT, schedule_to_frame(result["schedule"]).to_string(index=False))

    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
