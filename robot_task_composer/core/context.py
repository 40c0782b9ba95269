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
Shared resources handed to every State and Task on each step.

- Pure Python (no ROS imports); the node fills these from ROS topics.
- RobotContext is frozen: the core reads through it, never rebinds it.
- Telemetry is a capability (add_data), TelemetryLog is the in-memory sink.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple, runtime_checkable


@runtime_checkable
class Telemetry(Protocol):
    """Key/value sink for per-cycle status output."""

    def add_data(self, key: str, value: Any) -> None: ...


class TelemetryLog:
    """
    Telemetry sink that keeps the entries written during the current cycle.

    A key written twice in one cycle keeps its latest value but its first
    position. flush() hands the cycle over to the publisher and starts a new one.
    """

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}

    def add_data(self, key: str, value: Any) -> None:
        self._data[str(key)] = value

    @property
    def data(self) -> Mapping[str, Any]:
        return MappingProxyType(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def items(self) -> List[Tuple[str, Any]]:
        return list(self._data.items())

    def flush(self) -> Dict[str, Any]:
        """Return this cycle's entries and clear the log."""
        out, self._data = self._data, {}
        return out


class Gamepad:
    """
    Latest sample of one controller.

    The host calls update() whenever a new sample arrives; States and Tasks
    only read. Buttons/axes the controller never reported read as released/0.0.
    """

    def __init__(self) -> None:
        self._buttons: Tuple[bool, ...] = ()
        self._axes: Tuple[float, ...] = ()

    def update(self, buttons: Iterable[Any], axes: Iterable[float]) -> None:
        self._buttons = tuple(bool(b) for b in buttons)
        self._axes = tuple(float(a) for a in axes)

    def button(self, index: int) -> bool:
        if 0 <= index < len(self._buttons):
            return self._buttons[index]
        return False

    def axis(self, index: int) -> float:
        if 0 <= index < len(self._axes):
            return self._axes[index]
        return 0.0

    @property
    def buttons(self) -> Tuple[bool, ...]:
        return self._buttons

    @property
    def axes(self) -> Tuple[float, ...]:
        return self._axes


@dataclass(frozen=True, eq=False)
class RobotContext:
    """
    Bundle of references shared by the whole control system.

    Attributes:
        telemetry: Sink for driver-station style status output.
        gamepad1: Primary (driver) controller.
        gamepad2: Secondary (operator) controller.
        subsystems: Read-only mapping of integrator-supplied handles
            (drivetrain, arm, ...). Subclass to add typed fields instead.
    """
    telemetry: Telemetry
    gamepad1: Gamepad
    gamepad2: Gamepad
    subsystems: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("telemetry", "gamepad1", "gamepad2", "subsystems"):
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be None")
        for key, handle in self.subsystems.items():
            if handle is None:
                raise ValueError(f"Subsystem '{key}' cannot be None")
        # frozen dataclass: bypass __setattr__ to store the read-only view
        object.__setattr__(self, "subsystems", MappingProxyType(dict(self.subsystems)))

    def subsystem(self, name: str) -> Any:
        """Return the handle registered under name."""
        try:
            return self.subsystems[name]
        except KeyError:
            raise KeyError(f"No subsystem named '{name}' in context") from None

    def get_subsystem(self, name: str, default: Optional[Any] = None) -> Any:
        return self.subsystems.get(name, default)
