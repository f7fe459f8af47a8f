"""Preemptive multiprocessor scheduling of periodic tasks via maximum flow."""

from .flow_network import SINK, SOURCE, FlowNetwork, FlowNode, NodeType, build_flow_network
from .models import UNSET, SchedulingDecision, Task, TaskInstance
from .schedule_generator import Schedule, ScheduleGenerator, get_schedule

__all__ = [
    "SINK",
    "SOURCE",
    "FlowNetwork",
    "FlowNode",
    "NodeType",
    "build_flow_network",
    "UNSET",
    "SchedulingDecision",
    "Task",
    "TaskInstance",
    "Schedule",
    "ScheduleGenerator",
    "get_schedule",
]
