"""Tests for the simulated arm's forward kinematics and availability."""

from __future__ import annotations

import math

import numpy as np
import pytest

from arm_ik_sim.robots.joint_chain import JointSpec
from arm_ik_sim.robots.sim_robot_arm import JointOrigin, SimRobotArm


def test_ur10_zero_pose_end_effector(ur10_arm):
    ee = ur10_arm.get_end_effector_position()
    np.testing.assert_allclose(ee, [1.1843, 0.256141, 0.0116], atol=1e-6)


def test_ur10_zero_pose_joint_positions(ur10_arm):
    positions = ur10_arm.joint_world_positions()
    assert positions.shape == (6, 3)
    np.testing.assert_allclose(positions[0], [0.0, 0.0, 0.1273], atol=1e-9)
    np.testing.assert_allclose(positions[2], [0.612, 0.049041, 0.1273], atol=1e-6)


def test_ur10_pan_rotates_end_effector_about_z(ur10_arm):
    before = ur10_arm.get_end_effector_position()
    ur10_arm.set_angle(0, math.pi / 2)
    after = ur10_arm.get_end_effector_position()
    assert after[2] == pytest.approx(before[2])
    assert np.linalg.norm(after[:2]) == pytest.approx(np.linalg.norm(before[:2]))
    np.testing.assert_allclose(after[:2], [-before[1], before[0]], atol=1e-9)


def test_planar_forward_kinematics(planar_arm):
    np.testing.assert_allclose(planar_arm.get_end_effector_position(), [0.9, 0.0, 0.0], atol=1e-12)
    planar_arm.set_angle(0, math.pi / 2)
    np.testing.assert_allclose(planar_arm.get_end_effector_position(), [0.0, 0.9, 0.0], atol=1e-12)


def test_orientation_is_unit_quaternion(ur10_arm):
    ur10_arm.set_angle(3, 0.7)
    q = ur10_arm.get_world_orientation(4)
    assert np.linalg.norm(q) == pytest.approx(1.0)


def test_set_angle_clamps_to_limits():
    arm = SimRobotArm.planar(limit=0.5)
    arm.set_angle(1, 2.0)
    assert arm.joint_positions[1] == 0.5


def test_end_effector_resolution():
    assert SimRobotArm.ur10().end_effector_name == "ee_link"
    spec = JointSpec(name="only_joint", order=0)
    arm = SimRobotArm(specs=(spec,), origins=(JointOrigin(xyz=(0.0, 0.0, 1.0)),))
    assert arm.end_effector_name == "only_joint"
    np.testing.assert_allclose(arm.get_end_effector_position(), [0.0, 0.0, 1.0])


def test_origins_must_match_joints():
    with pytest.raises(ValueError):
        SimRobotArm(specs=(JointSpec(name="a", order=0),), origins=())


def test_unloaded_model_reports_nothing(ur10_arm):
    ur10_arm.unload()
    assert ur10_arm.get_world_position(0) is None
    assert ur10_arm.get_world_orientation(0) is None
    assert ur10_arm.get_axis_local(0) is None
    assert ur10_arm.get_end_effector_position() is None
    assert ur10_arm.joint_world_positions() is None
    assert not ur10_arm.set_angle(0, 1.0)
    assert np.isnan(ur10_arm.get_state()[-1])
    ur10_arm.load()
    assert ur10_arm.get_end_effector_position() is not None


def test_out_of_range_order_is_unavailable(ur10_arm):
    assert ur10_arm.get_world_position(6) is None
    assert not ur10_arm.set_angle(-1, 0.0)


def test_reset_and_state(ur10_arm):
    ur10_arm.set_angle(1, 0.3)
    assert ur10_arm.reset().tolist() == [0.0] * 6
    assert ur10_arm.get_state().shape == (9,)
