#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# robot_task_composer/__init__.py
"""
Cooperative task/state composition for robot control loops.

The ROS-agnostic engine lives in robot_task_composer.core; robot_task_composer.node
hosts it inside an rclpy LifecycleNode.
"""
