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


from __future__ import annotations
from typing import Any, Callable

from .state_machine import State
from .task import Task

StateFactory = Callable[[], State]


class TaskState:
    """Steps one task per cycle, then hands over to next_state() when it finishes."""

    def __init__(self, name: str, task: Task, next_state: StateFactory) -> None:
        if task is None:
            raise ValueError("Task cannot be None")
        if next_state is None:
            raise ValueError("next_state cannot be None")
        self.name = name
        self.task = task
        self._next_state = next_state

    def step(self, context: Any) -> State:
        if self.task.step(context):
            return self
        return self._next_state()


class IdleState:
    """Waits for a button on the driver gamepad, then returns on_trigger()."""

    def __init__(self, on_trigger: StateFactory, trigger_button: int = 0, name: str = "Idle") -> None:
        if on_trigger is None:
            raise ValueError("on_trigger cannot be None")
        self.name = name
        self.trigger_button = trigger_button
        self._on_trigger = on_trigger

    def step(self, context: Any) -> State:
        if context.gamepad1.button(self.trigger_button):
            return self._on_trigger()
        return self
