"""Shared fixtures for the arm_ik_sim test suite."""

from __future__ import annotations

import pytest

from arm_ik_sim.configs import MotionSourceConfig
from arm_ik_sim.control.arbiter import ControlArbiter
from arm_ik_sim.motion.motion_source import MotionSource
from arm_ik_sim.robots.joint_chain import JointChainModel
from arm_ik_sim.robots.sim_robot_arm import SimRobotArm


@pytest.fixture
def ur10_arm() -> SimRobotArm:
    return SimRobotArm.ur10()


@pytest.fixture
def ur10_chain(ur10_arm: SimRobotArm) -> JointChainModel:
    return JointChainModel(ur10_arm.specs, accessor=ur10_arm)


@pytest.fixture
def planar_arm() -> SimRobotArm:
    return SimRobotArm.planar()


@pytest.fixture
def planar_chain(planar_arm: SimRobotArm) -> JointChainModel:
    return JointChainModel(planar_arm.specs, accessor=planar_arm)


@pytest.fixture
def ramp_motion() -> MotionSource:
    """Two-waypoint feed from all-zero to all-one radians, already started."""
    source = MotionSource(MotionSourceConfig(waypoints=((0.0,) * 6, (1.0,) * 6)))
    source.start()
    return source


@pytest.fixture
def arbiter(ur10_chain: JointChainModel, ramp_motion: MotionSource) -> ControlArbiter:
    return ControlArbiter(ur10_chain, ramp_motion)
