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
Tasks built out of other tasks.

- SequentialTask: children one after another, one child step per cycle.
- ParallelTask: children interleaved within a cycle (single thread).
- QueueTask: growable FIFO, head task stepped once per cycle.
"""

from __future__ import annotations
from collections import deque
from typing import Any, Deque, Iterable, List, Optional, Sequence
import logging
import time

from .task import Clock, Task

logger = logging.getLogger(__name__)


def _check_task(task: Any, index: Optional[int] = None) -> None:
    where = "Task" if index is None else f"Task at index {index}"
    if task is None:
        raise ValueError(f"{where} cannot be None")
    if not isinstance(task, Task):
        raise ValueError(f"{where} must be a Task, got {type(task).__name__}")


def _validate_children(tasks: Sequence[Optional[Task]]) -> List[Task]:
    if tasks is None:
        raise ValueError("Tasks cannot be None")
    if len(tasks) == 0:
        raise ValueError("At least one task is required")
    for i, task in enumerate(tasks):
        _check_task(task, i)
    return list(tasks)


class SequentialTask(Task):
    """
    Runs tasks strictly in order.

    Each cycle steps only the current child. When a child finishes, the cursor
    moves on but the next child is first stepped on the following cycle, so
    every child costs at least one cycle.
    """

    def __init__(self, *tasks: Task, clock: Clock = time.monotonic) -> None:
        super().__init__(clock)
        self._tasks = _validate_children(tasks)
        self._index = 0

    @property
    def current_index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._tasks)

    def run(self, context: Any) -> bool:
        if self._index >= len(self._tasks):
            return False

        if not self._tasks[self._index].step(context):
            self._index += 1

        return self._index < len(self._tasks)


class ParallelTask(Task):
    """
    Runs tasks side by side, interleaved within each cycle.

    Only children that have not finished are stepped. Semantics:
        - stop_on_first_completion=False: finishes once every child has
          finished; children that finish on the same cycle are all dropped.
        - stop_on_first_completion=True: finishes on the cycle the first
          child finishes. Children after it in order are not stepped on that
          cycle, and none are stepped again.
    """

    def __init__(self, stop_on_first_completion: bool, *tasks: Task, clock: Clock = time.monotonic) -> None:
        super().__init__(clock)
        self._tasks = _validate_children(tasks)
        self.stop_on_first_completion = bool(stop_on_first_completion)
        self._active: List[Task] = []
        self._stopped = False

    @property
    def active_count(self) -> int:
        if not self.initialized:
            return len(self._tasks)
        return len(self._active)

    def initialize(self, context: Any) -> None:
        self._active = list(self._tasks)

    def run(self, context: Any) -> bool:
        if self._stopped:
            return False

        finished: List[Task] = []
        for task in self._active:
            if not task.step(context):
                if self.stop_on_first_completion:
                    self._stopped = True
                    self._active = []
                    return False
                finished.append(task)

        if finished:
            done = {id(t) for t in finished}
            self._active = [t for t in self._active if id(t) not in done]

        return len(self._active) > 0


class QueueTask(Task):
    """
    FIFO of tasks consumed one at a time.

    Tasks may be enqueued at any point, including by the head task while it is
    being stepped. By default an empty queue keeps running, so a QueueTask can
    sit inside a ParallelTask next to whatever decides when to stop.

    Args:
        initial_tasks: Tasks to seed the queue with, in order.
        max_size: Optional capacity; enqueue() refuses beyond it.
        stop_on_empty: Finish once the queue drains instead of idling.
    """

    def __init__(
        self,
        initial_tasks: Optional[Iterable[Task]] = None,
        *,
        max_size: Optional[int] = None,
        stop_on_empty: bool = False,
        clock: Clock = time.monotonic,
    ) -> None:
        super().__init__(clock)
        if max_size is not None and max_size < 1:
            raise ValueError("max_size must be at least 1")
        seed = list(initial_tasks) if initial_tasks is not None else []
        for i, task in enumerate(seed):
            _check_task(task, i)
        if max_size is not None and len(seed) > max_size:
            raise ValueError(f"{len(seed)} initial tasks exceed max_size={max_size}")
        self.max_size = max_size
        self.stop_on_empty = bool(stop_on_empty)
        self._queue: Deque[Task] = deque(seed)

    def enqueue(self, task: Task) -> bool:
        """
        Append a task to the tail.

        Returns:
            True if queued, False if the queue is at capacity.
        """
        _check_task(task)
        if self.max_size is not None and len(self._queue) >= self.max_size:
            logger.warning("QueueTask full (max_size=%d), rejecting %s", self.max_size, type(task).__name__)
            return False
        self._queue.append(task)
        return True

    def size(self) -> int:
        return len(self._queue)

    def is_empty(self) -> bool:
        return not self._queue

    def __len__(self) -> int:
        return len(self._queue)

    def peek(self) -> Optional[Task]:
        """Return the head task without stepping it, or None if empty."""
        return self._queue[0] if self._queue else None

    def clear(self) -> None:
        """Drop every pending task without stepping it."""
        self._queue.clear()

    def run(self, context: Any) -> bool:
        if not self._queue:
            return not self.stop_on_empty

        head = self._queue[0]
        if not head.step(context) and self._queue and self._queue[0] is head:
            # head may have enqueued while stepping; it is still at the front
            self._queue.popleft()

        if not self.stop_on_empty:
            return True
        return len(self._queue) > 0
