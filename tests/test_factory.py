"""Tests for robot session construction."""

from __future__ import annotations

import numpy as np
import pytest

from arm_ik_sim.configs import MotionSourceConfig, PlanarSessionConfig, UR10SessionConfig
from arm_ik_sim.control.arbiter import ControlMode
from arm_ik_sim.factory import make_robot_session
from arm_ik_sim.utils.constants import UR10_JOINT_NAMES


def test_ur10_session_is_wired():
    session = make_robot_session("ur10")
    assert len(session.chain) == 6
    assert session.chain.accessor is session.arm
    assert session.motion.running
    assert session.arbiter.mode is ControlMode.SIMULATED
    assert session.motion.subscriber_count() == 1


def test_planar_session():
    session = make_robot_session("planar3")
    assert len(session.chain) == 3
    np.testing.assert_allclose(session.chain.end_effector_position(), [0.9, 0.0, 0.0], atol=1e-12)


def test_unknown_robot_rejected():
    with pytest.raises(ValueError):
        make_robot_session("scara")


def test_mismatched_waypoints_rejected():
    cfg = UR10SessionConfig(motion=MotionSourceConfig(waypoints=((0.0,), (1.0,))))
    with pytest.raises(ValueError):
        make_robot_session(cfg)


def test_step_advances_motion():
    session = make_robot_session("ur10")
    for _ in range(50):
        session.step()
    assert session.arbiter.applied_motion_samples == 50
    assert session.motion.progress == pytest.approx(0.25)


def test_motion_not_started_when_disabled():
    session = make_robot_session(PlanarSessionConfig(start_motion=False))
    session.step()
    assert session.chain.angles.tolist() == [0.0] * 3


def test_reload_model_pushes_chain_angles():
    session = make_robot_session("ur10")
    session.arbiter.set_joint_angle(1, -0.5)
    old_arm = session.arm
    session.reload_model()
    assert session.arm is not old_arm
    assert session.chain.accessor is session.arm
    assert session.arm.joint_positions[1] == pytest.approx(-0.5)
    assert old_arm.get_end_effector_position() is None


def test_session_configs_report_joint_counts():
    assert UR10SessionConfig().num_joints == len(UR10_JOINT_NAMES)
    assert PlanarSessionConfig(link_lengths=(0.5, 0.5)).num_joints == 2
