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

import pytest

from robot_task_composer.core.task import CallbackTask, ElapsedTime, InstantTask, WaitTask
from conftest import CountingTask

def test_initialize_runs_once_before_first_run(ctx):
    task = CountingTask(3)
    assert not task.initialized
    assert task.step(ctx) is True
    assert task.initialized
    assert task.step(ctx) is True
    assert task.step(ctx) is False
    assert task.init_calls == 1
    assert task.run_calls == 3

def test_step_rejects_missing_context():
    task = CountingTask(1)
    with pytest.raises(ValueError):
        task.step(None)
    assert not task.initialized

def test_elapsed_time(clock):
    sw = ElapsedTime(clock)
    clock.advance(1.5)
    assert sw.seconds() == 1.5
    assert sw.milliseconds() == 1500.0
    sw.reset()
    assert sw.seconds() == 0.0

def test_wait_task_measures_from_first_step(ctx, clock):
    wait = WaitTask(2.0, clock=clock)
    clock.advance(10.0)  # time before the first step does not count
    results = []
    for _ in range(6):
        results.append(wait.step(ctx))
        clock.advance(0.5)
    # elapsed: 0.0, 0.5, 1.0, 1.5 -> running; 2.0 -> done
    assert results == [True, True, True, True, False, False]

def test_wait_task_zero_finishes_immediately(ctx, clock):
    assert WaitTask(0.0, clock=clock).step(ctx) is False

def test_wait_task_rejects_negative_duration():
    with pytest.raises(ValueError):
        WaitTask(-1.0)

def test_callback_task_closes_over_subsystem(ctx):
    arm = {"target": None, "pos": 0}

    def advance_arm(context, task):
        arm["pos"] += 1
        return arm["pos"] < arm["target"]

    task = CallbackTask(
        on_initialize=lambda context, task: arm.update(target=3),
        on_run=advance_arm,
    )
    assert task.step(ctx) is True
    assert task.step(ctx) is True
    assert task.step(ctx) is False
    assert arm == {"target": 3, "pos": 3}

def test_instant_task_acts_once(ctx):
    calls = []
    task = InstantTask(lambda context: calls.append(context))
    assert task.step(ctx) is False
    assert task.step(ctx) is False
    assert calls == [ctx]
