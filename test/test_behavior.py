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

from robot_task_composer.core.behavior import IdleState, TaskState
from robot_task_composer.core.combinators import SequentialTask
from robot_task_composer.core.state_machine import StateMachine
from conftest import CountingTask

def test_task_state_runs_task_then_transitions(ctx):
    done = IdleState(on_trigger=lambda: None, name="Done")
    task = CountingTask(2)
    state = TaskState("Score", task, lambda: done)
    assert state.step(ctx) is state
    assert state.step(ctx) is done
    assert task.run_calls == 2

def test_idle_waits_for_trigger_button(ctx):
    target = TaskState("Routine", CountingTask(1), lambda: idle)
    idle = IdleState(on_trigger=lambda: target, trigger_button=2)
    assert idle.step(ctx) is idle
    ctx.gamepad1.update([0, 0, 1], [])
    assert idle.step(ctx) is target

def test_full_cycle_through_state_machine(ctx, telemetry):
    def routine():
        return TaskState("Routine", SequentialTask(CountingTask(1), CountingTask(1)), idle)

    def idle():
        return IdleState(on_trigger=routine)

    sm = StateMachine(idle(), ctx)
    sm.advance()
    assert sm.current_state.name == "Idle"
    ctx.gamepad1.update([1], [])
    sm.advance()
    ctx.gamepad1.update([0], [])
    names = []
    for _ in range(3):
        sm.advance()
        names.append(telemetry.get("State"))
    assert names == ["Routine", "Routine", "Idle"]
    assert [(r.frm, r.to) for r in sm.history()] == [("Idle", "Routine"), ("Routine", "Idle")]

def test_idle_state_positional_trigger_and_defaults(ctx):
    target = TaskState("Routine", CountingTask(1), lambda: None)
    idle = IdleState(lambda: target)
    assert idle.name == "Idle" and idle.trigger_button == 0
    ctx.gamepad1.update([1], [])
    assert idle.step(ctx) is target
