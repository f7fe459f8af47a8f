"""Tests for schedule extraction, packing and the get_schedule pipeline."""

from collections import Counter

import pytest

from flowsched.graph import EdmondsKarpSolver
from flowsched.logging_config import LoggingFlags
from flowsched.metrics import occupancy, verify_schedule
from flowsched.models import Task, TaskInstance
from flowsched.schedule_generator import (
    ScheduleGenerator,
    get_schedule,
    pack_schedule,
    sequence_decisions,
)


def scheduled_times(instance, schedule):
    return sorted(
        time
        for time, row in enumerate(schedule)
        for decision in row
        if decision is not None and decision.task_instance is instance
    )


@pytest.fixture(params=["edmonds-karp", "ortools"])
def solver(request):
    return request.param


class TestGetSchedule:
    def test_two_tasks_one_processor(self, solver):
        a = Task("A", 1, 2, index=0)
        b = Task("B", 1, 4, index=1)
        schedule = get_schedule([a, b], 1, 4, solver=solver)

        assert len(schedule) == 4
        assert all(len(row) == 1 for row in schedule)

        a0, a1 = a.instances
        assert len(scheduled_times(a0, schedule)) == 1
        assert scheduled_times(a0, schedule)[0] in (0, 1)
        assert len(scheduled_times(a1, schedule)) == 1
        assert scheduled_times(a1, schedule)[0] in (2, 3)

        (b0,) = b.instances
        b_times = scheduled_times(b0, schedule)
        assert len(b_times) == 1
        assert b_times[0] not in scheduled_times(a0, schedule) + scheduled_times(a1, schedule)

        assert int(occupancy(schedule).sum()) == 3

    def test_single_task_fills_every_unit(self, solver):
        task = Task("A", 5, 5)
        schedule = get_schedule([task], 1, 5, solver=solver)
        assert [row[0].task_name for row in schedule] == ["A"] * 5

    def test_fully_loaded_multiprocessor(self, solver):
        tasks = [Task(f"T{i}", 2, 3, index=i) for i in range(3)]
        schedule = get_schedule(tasks, 2, 3, solver=solver)
        assert verify_schedule(schedule, tasks) == []
        assert list(occupancy(schedule)) == [2, 2, 2]

    def test_mixed_periods(self, solver):
        tasks = [
            Task("fast", 3, 4, index=0),
            Task("mid", 2, 6, index=1),
            Task("slow", 5, 12, index=2),
            Task("tiny", 1, 3, index=3),
        ]
        schedule = get_schedule(tasks, 2, 12, solver=solver)
        assert verify_schedule(schedule, tasks) == []
        expected = sum((12 // t.period) * t.execution_time for t in tasks)
        assert int(occupancy(schedule).sum()) == expected
        assert occupancy(schedule).max() <= 2

    def test_no_instance_on_two_processors(self):
        tasks = [Task("A", 2, 2, index=0), Task("B", 1, 2, index=1)]
        schedule = get_schedule(tasks, 3, 2)
        for row in schedule:
            instances = [d.task_instance for d in row if d is not None]
            assert len(instances) == len({id(i) for i in instances})

    def test_repeatable(self):
        tasks = [Task("A", 1, 2, index=0), Task("B", 3, 4, index=1), Task("C", 2, 8, index=2)]
        first = get_schedule(tasks, 2, 8)
        second = get_schedule(tasks, 2, 8)
        assert list(occupancy(first)) == list(occupancy(second))
        names = lambda s: [[d.task_name if d else None for d in row] for row in s]
        assert names(first) == names(second)

    def test_processors_packed_by_task_index(self):
        tasks = [Task("second", 1, 1, index=1), Task("first", 1, 1, index=0)]
        schedule = get_schedule(tasks, 2, 1)
        assert [d.task_name for d in schedule[0]] == ["first", "second"]
        assert [d.processor for d in schedule[0]] == [0, 1]

    def test_decisions_sequenced(self):
        task = Task("A", 3, 6)
        schedule = get_schedule([task], 1, 6)
        (instance,) = task.instances
        assert [d.execution_time_completed for d in instance.decisions] == [0, 1, 2]
        assert [d.time for d in instance.decisions] == scheduled_times(instance, schedule)
        assert instance.decisions[0].next_decision is instance.decisions[1]
        assert instance.decisions[2].next_decision is None

    @pytest.mark.parametrize("processor_count, super_period", [(0, 4), (1, 0), (-2, -2)])
    def test_rejects_bad_arguments(self, processor_count, super_period):
        with pytest.raises(ValueError):
            get_schedule([Task("A", 1, 2)], processor_count, super_period)

    def test_unknown_solver(self):
        with pytest.raises(ValueError):
            get_schedule([Task("A", 1, 2)], 1, 2, solver="simplex")


class TestScheduleGenerator:
    def test_flow_statistics(self):
        generator = ScheduleGenerator()
        generator.get_schedule([Task("A", 1, 2), Task("B", 1, 4)], 1, 4)
        assert generator.flow_value == 3
        assert generator.demand == 3

    def test_infeasible_set_yields_partial_schedule(self, capsys):
        LoggingFlags.WARNINGS = True
        tasks = [Task("A", 2, 2, index=0), Task("B", 2, 2, index=1)]
        generator = ScheduleGenerator()
        schedule = generator.get_schedule(tasks, 1, 2)

        assert generator.flow_value == 2
        assert generator.demand == 4
        assert list(occupancy(schedule)) == [1, 1]
        assert "[WARN]" in capsys.readouterr().out

    def test_progress_logging(self, capsys):
        LoggingFlags.SCHEDULE_PROGRESS = True
        ScheduleGenerator("edmonds-karp").get_schedule([Task("A", 1, 2)], 1, 2)
        out = capsys.readouterr().out
        assert "Flow network" in out
        assert "Max flow 1 / demand 1" in out

    def test_solver_without_name(self, capsys):
        class PlainSolver:
            def solve(self, graph, source, sink):
                return EdmondsKarpSolver().solve(graph, source, sink)

        LoggingFlags.SCHEDULE_PROGRESS = True
        schedule = get_schedule([Task("A", 1, 2)], 1, 2, solver=PlainSolver())
        assert sum(occupancy(schedule)) == 1
        assert "Solving max flow (PlainSolver)" in capsys.readouterr().out


class TestPacking:
    def make_instances(self, count):
        return [TaskInstance(Task(f"T{i}", 1, 1, index=i), 0) for i in range(count)]

    def test_overflow_truncated(self, capsys):
        LoggingFlags.WARNINGS = True
        instances = self.make_instances(3)
        grid = pack_schedule([list(reversed(instances))], processor_count=2)
        assert grid == [[instances[0], instances[1]]]
        assert "dropping 1" in capsys.readouterr().out

    def test_idle_processors_are_none(self):
        instances = self.make_instances(1)
        grid = pack_schedule([instances, []], processor_count=2)
        assert grid == [[instances[0], None], [None, None]]

    def test_sequence_decisions(self):
        (instance,) = self.make_instances(1)
        schedule = sequence_decisions([[instance, None], [None, instance]])
        assert schedule[0][1] is None
        assert (schedule[0][0].time, schedule[0][0].processor) == (0, 0)
        assert (schedule[1][1].time, schedule[1][1].processor) == (1, 1)
        assert Counter(d.execution_time_completed for d in instance.decisions) == Counter([0, 1])
        assert schedule[0][0].next_decision is schedule[1][1]
