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

from robot_task_composer.core.context import Gamepad, RobotContext, Telemetry, TelemetryLog

def test_context_rejects_missing_references():
    log, pad = TelemetryLog(), Gamepad()
    with pytest.raises(ValueError, match="telemetry"):
        RobotContext(telemetry=None, gamepad1=pad, gamepad2=pad)
    with pytest.raises(ValueError, match="gamepad2"):
        RobotContext(telemetry=log, gamepad1=pad, gamepad2=None)
    with pytest.raises(ValueError, match="arm"):
        RobotContext(telemetry=log, gamepad1=pad, gamepad2=pad, subsystems={"arm": None})

def test_context_is_read_only():
    drive = object()
    ctx = RobotContext(telemetry=TelemetryLog(), gamepad1=Gamepad(), gamepad2=Gamepad(), subsystems={"drive": drive})
    assert ctx.subsystem("drive") is drive
    assert ctx.get_subsystem("lift") is None
    with pytest.raises(KeyError):
        ctx.subsystem("lift")
    with pytest.raises(TypeError):
        ctx.subsystems["lift"] = object()
    with pytest.raises(AttributeError):
        ctx.telemetry = TelemetryLog()

def test_telemetry_log_flush():
    log = TelemetryLog()
    assert isinstance(log, Telemetry)
    log.add_data("State", "Idle")
    log.add_data("Arm", 3)
    log.add_data("State", "Intake")
    assert log.items() == [("State", "Intake"), ("Arm", 3)]
    assert log.flush() == {"State": "Intake", "Arm": 3}
    assert log.items() == []

def test_gamepad_defaults_and_update():
    pad = Gamepad()
    assert pad.button(0) is False and pad.axis(1) == 0.0
    pad.update([0, 1], [0.5])
    assert pad.button(1) is True and pad.button(0) is False
    assert pad.axis(0) == 0.5 and pad.axis(4) == 0.0
