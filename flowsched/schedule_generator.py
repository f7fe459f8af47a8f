#!/usr/bin/env python3
"""
Schedule generation by maximum flow

Pipeline:
1. build_flow_network()    tasks → Source/Instance/TimeSlot/Sink network
2. solver.solve()          saturate the network (Edmonds–Karp by default)
3. extract_raw_schedule()  instance → time edges with no capacity left carried flow
4. pack_schedule()         assign each time unit's instances to processor columns
5. sequence_decisions()    build SchedulingDecisions in time order per instance
"""

from typing import Dict, List, Optional, Sequence, Union

from .flow_network import FlowNetwork, NodeType, build_flow_network
from .graph import EdmondsKarpSolver, get_solver
from .logging_config import LoggingFlags, log_if
from .models import SchedulingDecision, Task, TaskInstance

# schedule[time][processor]
Schedule = List[List[Optional[SchedulingDecision]]]


def extract_raw_schedule(network: FlowNetwork) -> List[List[TaskInstance]]:
    """
    Read a saturated network back into, per time unit, the instances that
    execute during it (in instance-id order).
    """
    raw: List[List[TaskInstance]] = [[] for _ in range(network.super_period)]
    graph = network.graph

    # instance nodes were inserted in id order
    for node in graph.nodes:
        if node.type != NodeType.TASK_INSTANCE:
            continue
        instance = network.instance_of(node)
        for edge in graph.outgoing_edges(node):
            if edge.destination.type != NodeType.TIME_SLOT:
                continue
            if edge.value == 0:
                raw[edge.destination.key].append(instance)

    return raw


def _packing_order(instance: TaskInstance):
    return instance.task.index, instance.available


def pack_schedule(raw: List[List[TaskInstance]], processor_count: int) -> List[List[Optional[TaskInstance]]]:
    """
    Place each time unit's instances on processors 0..processor_count-1,
    ordered by task index then release time. Anything beyond the last
    processor is dropped.
    """
    grid: List[List[Optional[TaskInstance]]] = []

    for time, scheduled in enumerate(raw):
        row: List[Optional[TaskInstance]] = [None] * processor_count
        ordered = sorted(scheduled, key=_packing_order)
        if len(ordered) > processor_count:
            log_if(LoggingFlags.WARNINGS,
                   f"[WARN] time {time}: {len(ordered)} instances for {processor_count} processors, "
                   f"dropping {len(ordered) - processor_count}")
        for processor, instance in enumerate(ordered[:processor_count]):
            row[processor] = instance
        grid.append(row)

    return grid


def sequence_decisions(grid: List[List[Optional[TaskInstance]]]) -> Schedule:
    """
    Turn a packed grid into SchedulingDecisions.

    Walking time in increasing order, each instance's n-th executed unit
    gets execution_time_completed = n and is appended to the instance's
    decisions, so next_decision follows the instance through the schedule.
    """
    seen: Dict[int, TaskInstance] = {}
    schedule: Schedule = []

    for time, row in enumerate(grid):
        decisions: List[Optional[SchedulingDecision]] = []
        for processor, instance in enumerate(row):
            if instance is None:
                decisions.append(None)
                continue
            if id(instance) not in seen:
                seen[id(instance)] = instance
                instance.decisions.clear()
            decision = SchedulingDecision(
                task_instance=instance,
                time=time,
                processor=processor,
                execution_time_completed=len(instance.decisions),
            )
            instance.decisions.append(decision)
            decisions.append(decision)
        schedule.append(decisions)

    return schedule


class ScheduleGenerator:
    """
    Compute a time × processor schedule for a periodic task set.

    The task set is assumed feasible; if the maximum flow falls short of
    the total demand, the missing units are simply absent from the result
    and a warning is logged.
    """

    def __init__(self, solver=None):
        if solver is None:
            solver = EdmondsKarpSolver()
        elif isinstance(solver, str):
            solver = get_solver(solver)
        self.solver = solver
        self.flow_value = 0
        self.demand = 0

    def get_schedule(self, tasks: Sequence[Task], processor_count: int, super_period: int) -> Schedule:
        network = build_flow_network(tasks, processor_count, super_period)
        self.demand = network.demand

        solver_name = getattr(self.solver, "name", type(self.solver).__name__)
        log_if(LoggingFlags.SCHEDULE_PROGRESS, f"  Solving max flow ({solver_name})...")
        self.flow_value = self.solver.solve(network.graph, network.source, network.sink)
        log_if(LoggingFlags.SCHEDULE_PROGRESS, f"  Max flow {self.flow_value} / demand {self.demand}")

        if self.flow_value < self.demand:
            log_if(LoggingFlags.WARNINGS,
                   f"[WARN] max flow {self.flow_value} is below demand {self.demand}; "
                   f"the task set is infeasible and the schedule is incomplete")

        raw = extract_raw_schedule(network)
        grid = pack_schedule(raw, processor_count)
        return sequence_decisions(grid)


def get_schedule(tasks: Sequence[Task], processor_count: int, super_period: int,
                 solver: Union[str, object, None] = None) -> Schedule:
    """Compute a schedule; see ScheduleGenerator."""
    return ScheduleGenerator(solver).get_schedule(tasks, processor_count, super_period)
