#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# robot_task_composer/core/__init__.py
"""
Core, ROS-agnostic logic for robot_task_composer.
Exports the state machine driver, the task contract and the task combinators.
"""
from .context import RobotContext, Telemetry, TelemetryLog, Gamepad
from .task import Task, WaitTask, CallbackTask, InstantTask, ElapsedTime
from .combinators import SequentialTask, ParallelTask, QueueTask
from .state_machine import State, StateMachine, TransitionRec
from .behavior import TaskState, IdleState

__all__ = [
    "RobotContext",
    "Telemetry",
    "TelemetryLog",
    "Gamepad",
    "Task",
    "WaitTask",
    "CallbackTask",
    "InstantTask",
    "ElapsedTime",
    "SequentialTask",
    "ParallelTask",
    "QueueTask",
    "State",
    "StateMachine",
    "TransitionRec",
    "TaskState",
    "IdleState",
]
