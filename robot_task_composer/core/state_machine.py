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
State machine driver for the robot control loop.

- Pure Python (no ROS imports) for easy unit testing.
- Exactly one State is active; advance() steps it once per control cycle.
- A State returns the State to run next cycle (itself for "no transition").
- Contract violations (no current state, None returned) raise RuntimeError
  instead of freezing or guessing a successor.

Also records a ring-buffer of recent transitions for traceability.
"""

from __future__ import annotations
from dataclasses import dataclass
from collections import deque
from typing import Any, Callable, Deque, List, Optional, Protocol, runtime_checkable
import logging
import time

logger = logging.getLogger(__name__)


# -------------------------- Public protocol & dataclasses -------------------------- #

@runtime_checkable
class State(Protocol):
    """
    A robot behavior mode (idle, intake, scoring, ...).

    No base class is needed: anything with a ``name`` and a ``step(context)``
    returning the next State qualifies. States differ from Tasks in that the
    order of States follows sensor and driver input at runtime, while Tasks
    run in a predetermined composition.
    """

    @property
    def name(self) -> str: ...

    def step(self, context: Any) -> "State": ...


@dataclass(frozen=True)
class TransitionRec:
    """
    A single transition record captured in the ring buffer.

    Attributes:
        tick: Value of tick_count on the cycle the transition happened.
        t: Clock timestamp (float seconds) when it was recorded.
        frm: Name of the state that was stepped.
        to: Name of the state it handed control to.
    """
    tick: int
    t: float
    frm: str
    to: str


# ------------------------------- State machine --------------------------------- #

class StateMachine:
    """
    Holds the active State and advances it once per call.

    Semantics:
        - advance() writes ("State", name) to telemetry, then steps the state
        - the returned State becomes current (same object => no transition)
        - there is no terminal state; the caller decides when to stop ticking

    Notes:
        - Only the current State is referenced; replaced States are dropped.
        - Transitions are recorded in an in-memory ring buffer (maxlen=64 by default).
    """

    def __init__(
        self,
        initial_state: State,
        context: Any,
        history_size: int = 64,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if initial_state is None:
            raise ValueError("Initial state cannot be None")
        if context is None:
            raise ValueError("Context cannot be None")
        if getattr(context, "telemetry", None) is None:
            raise ValueError("Context must provide a telemetry sink")
        self._current: Optional[State] = initial_state
        self._context = context
        self._clock = clock
        self._ticks = 0
        self._hist: Deque[TransitionRec] = deque(maxlen=max(1, history_size))

    # ------- Public API ------- #

    @property
    def current_state(self) -> Optional[State]:
        return self._current

    @property
    def context(self) -> Any:
        return self._context

    @property
    def tick_count(self) -> int:
        """Number of completed advance() calls."""
        return self._ticks

    def advance(self) -> State:
        """
        Step the current state once and switch to the state it returns.

        Should be called once per iteration of the control loop.

        Returns:
            The state that will be stepped on the next call.
        """
        current = self._current
        if current is None:
            raise RuntimeError("Current state is None. StateMachine cannot operate without a valid state.")

        self._context.telemetry.add_data("State", current.name)
        nxt = current.step(self._context)
        if nxt is None:
            raise RuntimeError(
                f"State '{current.name}' returned None as the next state. "
                "States must return a valid State instance."
            )

        self._ticks += 1
        if nxt is not current:
            rec = TransitionRec(tick=self._ticks, t=self._clock(), frm=current.name, to=nxt.name)
            self._hist.append(rec)
            logger.debug("State transition %s -> %s (tick %d)", rec.frm, rec.to, rec.tick)
        self._current = nxt
        return nxt

    def history(self) -> List[TransitionRec]:
        """Return a copy of the transition history (most-recent last)."""
        return list(self._hist)

    def last_transition(self) -> Optional[TransitionRec]:
        """Return the most recent transition record, or None if empty."""
        try:
            return self._hist[-1]
        except IndexError:
            return None

    def clear_history(self) -> None:
        """Erase the transition ring buffer."""
        self._hist.clear()
