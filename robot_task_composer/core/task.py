#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Author: Puneet Tiwari
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Single-step task contract.

A Task is polled once per control cycle through step(context):

- first call: reset the elapsed timer, initialize(context), then run(context)
- later calls: run(context) only
- run() returns True to be stepped again next cycle, False when finished

Tasks never block; waiting is expressed by returning True. Tasks are
single-use: once finished they are not re-armed.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
import time

Clock = Callable[[], float]
RunFn = Callable[[Any, "CallbackTask"], bool]
InitFn = Callable[[Any, "CallbackTask"], None]


class ElapsedTime:
    """Stopwatch measuring seconds since the last reset()."""

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._start = clock()

    def reset(self) -> None:
        self._start = self._clock()

    def seconds(self) -> float:
        return self._clock() - self._start

    def milliseconds(self) -> float:
        return self.seconds() * 1000.0


class Task(ABC):
    """
    Base class for resumable robot operations.

    Attributes:
        initialized: False until the first step() has run initialize().
        elapsed: Time since the first step() call (not since construction).
    """

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self.initialized = False
        self.elapsed = ElapsedTime(clock)

    def step(self, context: Any) -> bool:
        """
        Advance the task by one cycle.

        Args:
            context: Shared RobotContext; required.

        Returns:
            True if the task should be stepped again, False once finished.
        """
        if context is None:
            raise ValueError("Context cannot be None")
        if not self.initialized:
            self.elapsed.reset()
            self.initialize(context)
            self.initialized = True
        return bool(self.run(context))

    def initialize(self, context: Any) -> None:
        """One-time setup, called right before the first run()."""

    @abstractmethod
    def run(self, context: Any) -> bool:
        """Per-cycle body. Return True to continue, False when complete."""


class WaitTask(Task):
    """Does nothing for a fixed number of seconds."""

    def __init__(self, seconds: float, clock: Clock = time.monotonic) -> None:
        super().__init__(clock)
        if seconds < 0:
            raise ValueError("Wait duration cannot be negative")
        self.seconds = float(seconds)

    def run(self, context: Any) -> bool:
        return self.elapsed.seconds() < self.seconds


class CallbackTask(Task):
    """
    Task whose behavior is given as callables.

    The callables close over whatever subsystem they drive, so a subsystem
    can hand out tasks without subclassing:

        def raise_arm(arm, target):
            return CallbackTask(
                on_initialize=lambda ctx, task: arm.set_target(target),
                on_run=lambda ctx, task: not arm.at_target(),
            )
    """

    def __init__(
        self,
        on_run: RunFn,
        on_initialize: Optional[InitFn] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        super().__init__(clock)
        if on_run is None:
            raise ValueError("on_run cannot be None")
        self._on_run = on_run
        self._on_initialize = on_initialize

    def initialize(self, context: Any) -> None:
        if self._on_initialize is not None:
            self._on_initialize(context, self)

    def run(self, context: Any) -> bool:
        return bool(self._on_run(context, self))


class InstantTask(Task):
    """Runs an action once and finishes in that same step."""

    def __init__(self, action: Callable[[Any], None], clock: Clock = time.monotonic) -> None:
        super().__init__(clock)
        if action is None:
            raise ValueError("action cannot be None")
        self._action = action
        self._done = False

    def run(self, context: Any) -> bool:
        if not self._done:
            self._action(context)
            self._done = True
        return False
