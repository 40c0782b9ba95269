#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Any, Callable, Mapping, Optional

import rclpy
from rclpy.executors import SingleThreadedExecutor
from rclpy.lifecycle import LifecycleNode, State, TransitionCallbackReturn
from rclpy.qos import QoSProfile, ReliabilityPolicy, HistoryPolicy, DurabilityPolicy
from rclpy.parameter import Parameter
from rcl_interfaces.msg import (
    SetParametersResult,
    ParameterDescriptor,
    IntegerRange,
)

from diagnostic_msgs.msg import DiagnosticStatus, KeyValue
from sensor_msgs.msg import Joy
from std_srvs.srv import Trigger

from .core.context import Gamepad, RobotContext, TelemetryLog
from .core.state_machine import StateMachine
from .core.behavior import IdleState, TaskState
from .core.combinators import SequentialTask
from .core.task import InstantTask, WaitTask

StateFactory = Callable[[RobotContext], Any]


def default_state(context: RobotContext) -> IdleState:
    """Idle until driver button 0, run a short timed routine, back to idle."""

    def routine() -> TaskState:
        task = SequentialTask(
            InstantTask(lambda ctx: ctx.telemetry.add_data("Routine", "started")),
            WaitTask(1.0),
            InstantTask(lambda ctx: ctx.telemetry.add_data("Routine", "done")),
        )
        return TaskState("Routine", task, idle)

    def idle() -> IdleState:
        return IdleState(on_trigger=routine)

    return idle()


class TaskComposerNode(LifecycleNode):
    """Lifecycle node that ticks a StateMachine on a timer."""

    def __init__(
        self,
        state_factory: StateFactory = default_state,
        subsystems: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__('task_composer')

        # ----- Core, ROS-agnostic -----
        self._state_factory = state_factory
        self._subsystems = dict(subsystems or {})
        self._telemetry = TelemetryLog()
        self._gamepad1 = Gamepad()
        self._gamepad2 = Gamepad()
        self._sm: Optional[StateMachine] = None
        self._is_active = False

        # ----- ROS interfaces (created in on_configure) -----
        self._pub = None
        self._joy1_sub = None
        self._joy2_sub = None
        self._timer = None
        self._srv_health = None

        # ---------------- Parameters (declare with descriptors in __init__) ----------------
        self.declare_parameter(
            'tick_period_ms',
            20,
            descriptor=ParameterDescriptor(
                description='Control loop period in milliseconds.',
                integer_range=[IntegerRange(from_value=10, to_value=1000, step=1)],
            ),
        )
        self.declare_parameter(
            'telemetry_topic',
            'telemetry',
            descriptor=ParameterDescriptor(description='DiagnosticStatus topic for per-tick telemetry.'),
        )
        self.declare_parameter(
            'joy1_topic',
            'joy',
            descriptor=ParameterDescriptor(description='sensor_msgs/Joy topic of the driver gamepad.'),
        )
        self.declare_parameter(
            'joy2_topic',
            'joy2',
            descriptor=ParameterDescriptor(description='sensor_msgs/Joy topic of the operator gamepad.'),
        )
        # Dynamic updates
        self._param_cb = self.add_on_set_parameters_callback(self._on_param_update)

        self.get_logger().info('Constructed (UNCONFIGURED)')

    @property
    def state_machine(self) -> Optional[StateMachine]:
        return self._sm

    # ---------------- Lifecycle hooks ----------------
    def on_configure(self, state: State) -> TransitionCallbackReturn:
        self.get_logger().info('on_configure()')
        try:
            qos = QoSProfile(
                depth=10,
                reliability=ReliabilityPolicy.RELIABLE,
                durability=DurabilityPolicy.VOLATILE,
                history=HistoryPolicy.KEEP_LAST,
            )

            # Pub/Sub
            topic = str(self.get_parameter('telemetry_topic').value)
            self._pub = self.create_lifecycle_publisher(DiagnosticStatus, topic, qos)
            self._joy1_sub = self.create_subscription(
                Joy, str(self.get_parameter('joy1_topic').value), self._on_joy1, qos
            )
            self._joy2_sub = self.create_subscription(
                Joy, str(self.get_parameter('joy2_topic').value), self._on_joy2, qos
            )

            # Services
            self._srv_health = self.create_service(Trigger, 'health', self._on_health)

            # Core
            context = RobotContext(
                telemetry=self._telemetry,
                gamepad1=self._gamepad1,
                gamepad2=self._gamepad2,
                subsystems=self._subsystems,
            )
            self._sm = StateMachine(self._state_factory(context), context)

            # Timer (created but stopped until ACTIVE)
            self._timer = self._make_timer(int(self.get_parameter('tick_period_ms').value))

            self.get_logger().info('Configured resources (INACTIVE)')
            return TransitionCallbackReturn.SUCCESS
        except Exception as e:
            self.get_logger().error(f'Configure failed: {e}')
            self._release_resources()
            return TransitionCallbackReturn.FAILURE

    def on_activate(self, state: State) -> TransitionCallbackReturn:
        self.get_logger().info('on_activate()')
        try:
            if self._pub is None or self._timer is None or self._sm is None:
                self.get_logger().error('Missing resources in activate')
                return TransitionCallbackReturn.FAILURE
            self._pub.on_activate(state)
            self._is_active = True
            self._timer.reset()
            self.get_logger().info(f'Activated, state={self._sm.current_state.name}')
            return TransitionCallbackReturn.SUCCESS
        except Exception as e:
            self.get_logger().error(f'Activate failed: {e}')
            return TransitionCallbackReturn.FAILURE

    def on_deactivate(self, state: State) -> TransitionCallbackReturn:
        self.get_logger().info('on_deactivate()')
        try:
            self._is_active = False
            if self._timer:
                self._timer.cancel()
            if self._pub:
                self._pub.on_deactivate(state)
            self.get_logger().info('Deactivated (timer stopped, publisher inactive)')
            return TransitionCallbackReturn.SUCCESS
        except Exception as e:
            self.get_logger().error(f'Deactivate failed: {e}')
            return TransitionCallbackReturn.FAILURE

    def on_cleanup(self, state: State) -> TransitionCallbackReturn:
        self.get_logger().info('on_cleanup()')
        try:
            self._release_resources()

            self.get_logger().info('Cleaned up (UNCONFIGURED)')
            return TransitionCallbackReturn.SUCCESS
        except Exception as e:
            self.get_logger().error(f'Cleanup failed: {e}')
            return TransitionCallbackReturn.FAILURE

    def on_shutdown(self, state: State) -> TransitionCallbackReturn:
        self.get_logger().info('on_shutdown()')
        self._is_active = False
        if self._timer:
            self._timer.cancel()
        return TransitionCallbackReturn.SUCCESS

    def _release_resources(self) -> None:
        self._is_active = False

        # Destroy timer first
        if self._timer:
            self._timer.cancel()
            self.destroy_timer(self._timer)
            self._timer = None

        if self._joy1_sub:
            self.destroy_subscription(self._joy1_sub); self._joy1_sub = None
        if self._joy2_sub:
            self.destroy_subscription(self._joy2_sub); self._joy2_sub = None
        if self._srv_health:
            self.destroy_service(self._srv_health); self._srv_health = None
        if self._pub:
            self.destroy_publisher(self._pub)
            self._pub = None

        # States and tasks are single-use; a new configure builds fresh ones
        self._sm = None
        self._telemetry.flush()

    # ---------------- Parameter handling (pure validate + react) ----------------
    def _on_param_update(self, params: list[Parameter]) -> SetParametersResult:
        per = None
        for p in params:
            if p.name == 'tick_period_ms':
                if p.type_ != Parameter.Type.INTEGER or not 10 <= p.value <= 1000:
                    return SetParametersResult(successful=False, reason='tick_period_ms must be an int in [10, 1000]')
                per = int(p.value)
            elif p.name in ('telemetry_topic', 'joy1_topic', 'joy2_topic'):
                if self._sm is not None:
                    return SetParametersResult(successful=False, reason=f'{p.name} can only change while unconfigured')

        # swap the timer for one with the new period (ROS applies params after we return SUCCESS)
        if per is not None and self._timer is not None:
            self._timer.cancel()
            self.destroy_timer(self._timer)
            self._timer = self._make_timer(per)
            if self._is_active:
                self._timer.reset()

        return SetParametersResult(successful=True)

    # ---------------- Helpers & ROS Callbacks ----------------
    def _make_timer(self, period_ms: int):
        timer = self.create_timer(max(0.01, period_ms / 1000.0), self._on_timer)
        timer.cancel()
        return timer

    def _on_joy1(self, msg: Joy) -> None:
        self._gamepad1.update(msg.buttons, msg.axes)

    def _on_joy2(self, msg: Joy) -> None:
        self._gamepad2.update(msg.buttons, msg.axes)

    def tick(self) -> None:
        """Advance the state machine once and publish this cycle's telemetry."""
        if not self._is_active or self._sm is None:
            return
        try:
            current = self._sm.advance()
        except Exception as e:
            # a half-running control system is unsafe: stop ticking, then surface it
            self.get_logger().error(f'State machine failed, halting control loop: {e}')
            self._is_active = False
            if self._timer:
                self._timer.cancel()
            raise
        self._publish(current.name)

    def _on_timer(self) -> None:
        self.tick()

    def _publish(self, state_name: str) -> None:
        data = self._telemetry.flush()
        if self._pub is None:
            return
        msg = DiagnosticStatus()
        msg.level = DiagnosticStatus.OK
        msg.name = self.get_name()
        msg.message = state_name
        msg.values = [KeyValue(key=k, value=str(v)) for k, v in data.items()]
        self._pub.publish(msg)

    # ---------------- Services ----------------
    def _on_health(self, req: Trigger.Request, res: Trigger.Response) -> Trigger.Response:
        lc = 'ACTIVE' if self._is_active else 'INACTIVE/OTHER'
        if self._sm is None:
            res.success = False
            res.message = f'lifecycle={lc}, state machine not configured'
            return res
        res.success = True
        res.message = f'lifecycle={lc}, state={self._sm.current_state.name}, ticks={self._sm.tick_count}'
        return res


def main() -> None:
    rclpy.init()
    node = TaskComposerNode()
    exe = SingleThreadedExecutor()
    exe.add_node(node)
    try:
        exe.spin()
    finally:
        exe.shutdown()
        node.destroy_node()
        rclpy.shutdown()
