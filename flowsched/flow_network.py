#!/usr/bin/env python3
"""
Time-expanded flow network for preemptive periodic scheduling.

Flow Network structure:
  Source ──C_i──▶ TaskInstance ──1──▶ TimeSlot t ──m──▶ Sink
                 (one edge per t in [available, deadline))

  C_i = execution time of the instance's task, m = processor count.
A flow saturating every Source edge is a feasible schedule.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Set

from .graph import DirectedGraph
from .logging_config import LoggingFlags, log_if
from .models import Task, TaskInstance


class NodeType(Enum):
    SOURCE = 0
    SINK = 1
    TASK_INSTANCE = 2
    TIME_SLOT = 3


@dataclass(frozen=True)
class FlowNode:
    """
    Node identity in the flow network.

    `key` is the instance id for TASK_INSTANCE nodes and the time unit for
    TIME_SLOT nodes; it is unused for SOURCE and SINK.
    """
    type: NodeType
    key: int = 0

    @classmethod
    def instance(cls, instance_id: int) -> "FlowNode":
        return cls(NodeType.TASK_INSTANCE, instance_id)

    @classmethod
    def time_slot(cls, time: int) -> "FlowNode":
        return cls(NodeType.TIME_SLOT, time)

    def __repr__(self):
        if self.type == NodeType.TASK_INSTANCE:
            return f"instance[{self.key}]"
        if self.type == NodeType.TIME_SLOT:
            return f"t={self.key}"
        return self.type.name.lower()


SOURCE = FlowNode(NodeType.SOURCE)
SINK = FlowNode(NodeType.SINK)


@dataclass
class FlowNetwork:
    """A built network plus what is needed to read a schedule back out of it."""
    graph: DirectedGraph
    source: FlowNode
    sink: FlowNode
    instances: List[TaskInstance]  # FlowNode.key → instance
    processor_count: int
    super_period: int

    def instance_of(self, node: FlowNode) -> TaskInstance:
        if node.type != NodeType.TASK_INSTANCE:
            raise ValueError(f"{node!r} is not a task-instance node")
        return self.instances[node.key]

    @property
    def demand(self) -> int:
        """Total execution units requested by all instances."""
        return sum(instance.task.execution_time for instance in self.instances)


def build_flow_network(tasks: Sequence[Task], processor_count: int, super_period: int) -> FlowNetwork:
    """
    Regenerate every task's instances for `super_period` and build the
    flow network over them.
    """
    if processor_count <= 0:
        raise ValueError(f"processor count must be greater than 0, got {processor_count}")
    if super_period <= 0:
        raise ValueError(f"super-period must be greater than 0, got {super_period}")
    for task in tasks:
        if super_period % task.period != 0:
            raise ValueError(
                f"Task {task.name!r}: super-period {super_period} must be a positive multiple of period {task.period}"
            )

    graph: DirectedGraph = DirectedGraph()
    graph.add_node(SOURCE)
    graph.add_node(SINK)

    # several instances share a time slot; each slot node is added once
    slots: Set[FlowNode] = set()
    instances: List[TaskInstance] = []

    for task in tasks:
        for instance in task.create_instances(super_period):
            node = FlowNode.instance(len(instances))
            instances.append(instance)
            graph.add_node(node)
            graph.add_edge(SOURCE, node, task.execution_time)

            for time in range(instance.available, instance.deadline):
                slot = FlowNode.time_slot(time)
                if slot not in slots:
                    graph.add_node(slot)
                    slots.add(slot)
                graph.add_edge(node, slot, 1)

    for time in range(super_period):
        slot = FlowNode.time_slot(time)
        if slot not in slots:
            graph.add_node(slot)
            slots.add(slot)
        graph.add_edge(slot, SINK, processor_count)

    log_if(LoggingFlags.SCHEDULE_PROGRESS,
           f"  Flow network: {len(instances)} instances, {super_period} time units, "
           f"{graph.num_nodes()} nodes, {graph.num_edges()} edges")

    return FlowNetwork(
        graph=graph,
        source=SOURCE,
        sink=SINK,
        instances=instances,
        processor_count=processor_count,
        super_period=super_period,
    )
