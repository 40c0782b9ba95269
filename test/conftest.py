# -*- coding: utf-8 -*-

import pytest

from robot_task_composer.core.context import Gamepad, RobotContext, TelemetryLog
from robot_task_composer.core.task import Task


class FakeClock:
    """Manually advanced time source (seconds)."""

    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, dt: float) -> None:
        self.now += dt


class CountingTask(Task):
    """Runs for a fixed number of steps and records every call."""

    def __init__(self, steps: int, log=None, label: str = "") -> None:
        super().__init__()
        self.remaining = steps
        self.init_calls = 0
        self.run_calls = 0
        self.log = log
        self.label = label

    def initialize(self, context) -> None:
        self.init_calls += 1

    def run(self, context) -> bool:
        self.run_calls += 1
        if self.log is not None:
            self.log.append(self.label)
        self.remaining -= 1
        return self.remaining > 0


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def telemetry():
    return TelemetryLog()


@pytest.fixture
def ctx(telemetry):
    return RobotContext(telemetry=telemetry, gamepad1=Gamepad(), gamepad2=Gamepad())
