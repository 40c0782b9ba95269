#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from launch import LaunchDescription
from launch_ros.actions import Node, LifecycleNode

def generate_launch_description():
    joy = Node(
        package='joy',
        executable='joy_node',
        name='joy',
        namespace='',
        output='screen'
    )

    composer = LifecycleNode(
        package='robot_task_composer',
        executable='node',
        name='task_composer',
        namespace='',
        output='screen',
        parameters=[{
            'tick_period_ms': 20,
            'telemetry_topic': 'telemetry',
            'joy1_topic': 'joy',
            'joy2_topic': 'joy2',
        }]
    )

    return LaunchDescription([joy, composer])
