"""Tests for the CCD inverse-kinematics solver."""

from __future__ import annotations

import math

import numpy as np
import pytest

from arm_ik_sim.configs import CCDSolverConfig
from arm_ik_sim.kinematics.ccd_solver import solve_ccd_ik
from arm_ik_sim.robots.joint_chain import JointChainModel, JointSpec
from arm_ik_sim.robots.sim_robot_arm import JointOrigin, SimRobotArm


def _chain_for(arm: SimRobotArm, angles=None) -> JointChainModel:
    return JointChainModel(arm.specs, accessor=arm, angles=angles)


def test_target_at_end_effector_converges_immediately(ur10_chain):
    target = ur10_chain.end_effector_position()
    result = solve_ccd_ik(ur10_chain, target)
    assert result.converged
    assert result.iterations <= 1
    assert result.angles == [0.0] * 6
    assert result.distance < 0.002


def test_reachable_offset_converges(ur10_chain):
    target = ur10_chain.end_effector_position() + np.array([0.0, 0.0, 0.01])
    config = CCDSolverConfig(max_iterations=20, tolerance=0.002, max_step_angle=0.25, damping=0.7)
    result = solve_ccd_ik(ur10_chain, target, config)
    assert result.converged
    assert result.iterations < config.max_iterations
    assert np.linalg.norm(ur10_chain.end_effector_position() - target) < 0.002


def test_unreachable_target_exhausts_budget(ur10_chain):
    target = ur10_chain.end_effector_position() + np.array([100.0, 0.0, 0.0])
    result = solve_ccd_ik(ur10_chain, target)
    assert not result.converged
    assert result.iterations == 20
    assert result.distance > 90.0
    for angle, (lo, hi) in zip(result.angles, ur10_chain.limits):
        assert lo <= angle <= hi


def test_unreachable_target_drives_joints_to_limits():
    arm = SimRobotArm.planar(link_lengths=(0.5, 0.5), limit=0.3)
    chain = _chain_for(arm)
    result = solve_ccd_ik(chain, [0.0, 100.0, 0.0])
    assert not result.converged
    assert result.iterations == 20
    assert result.angles == pytest.approx([0.3, 0.3])


def test_result_angles_match_chain_and_accessor(planar_chain, planar_arm):
    result = solve_ccd_ik(planar_chain, [0.3, 0.5, 0.0])
    np.testing.assert_allclose(result.angles, planar_chain.angles)
    np.testing.assert_allclose(planar_arm.joint_positions, planar_chain.angles)


def test_damping_applied_before_step_clamp():
    arm = SimRobotArm.planar(link_lengths=(1.0,), limit=3.0)
    chain = _chain_for(arm)
    config = CCDSolverConfig(max_iterations=1, tolerance=1e-9, max_step_angle=1.0, damping=0.5)
    result = solve_ccd_ik(chain, [0.0, 1.0, 0.0], config)
    # Clamping first would have produced 0.5.
    assert result.angles[0] == pytest.approx(math.pi / 4)


def test_step_clamp_limits_single_correction():
    arm = SimRobotArm.planar(link_lengths=(1.0,), limit=3.0)
    chain = _chain_for(arm)
    config = CCDSolverConfig(max_iterations=1, tolerance=1e-9, max_step_angle=0.1, damping=1.0)
    result = solve_ccd_ik(chain, [0.0, -1.0, 0.0], config)
    assert result.angles[0] == pytest.approx(-0.1)


def test_degenerate_axis_leaves_joint_untouched():
    spec = JointSpec(name="spin", order=0, axis_local=(0.0, 0.0, 1.0))
    arm = SimRobotArm(specs=(spec,), origins=(JointOrigin(),), ee_offset=(0.0, 0.0, 0.5))
    chain = _chain_for(arm, angles=[0.1])
    result = solve_ccd_ik(chain, [0.0, 0.0, 2.0])
    assert not result.converged
    assert result.angles == [0.1]
    assert not math.isnan(result.angles[0])
    assert result.skipped_joints == 20


def test_unavailable_model_returns_without_writes(ur10_arm, ur10_chain):
    ur10_chain.set_angle(1, 0.2)
    ur10_arm.unload()
    result = solve_ccd_ik(ur10_chain, [0.5, 0.5, 0.5])
    assert not result.converged
    assert result.iterations == 0
    assert result.distance == math.inf
    assert result.angles[1] == pytest.approx(0.2)


def test_explicit_accessor_without_bound_chain():
    arm = SimRobotArm.planar()
    chain = JointChainModel(arm.specs)
    result = solve_ccd_ik(chain, [0.7, 0.3, 0.0], accessor=arm)
    assert result.converged
    np.testing.assert_allclose(arm.joint_positions, chain.angles)


class _ReversedAxisArm(SimRobotArm):
    """Arm whose nodes report each joint axis flipped."""

    def get_axis_local(self, order):
        axis = super().get_axis_local(order)
        return None if axis is None else -axis


def test_explicit_accessor_supplies_joint_axes():
    arm = _ReversedAxisArm.planar(link_lengths=(1.0,), limit=3.0)
    chain = JointChainModel(arm.specs)
    config = CCDSolverConfig(max_iterations=1, tolerance=1e-9, max_step_angle=1.0, damping=1.0)
    result = solve_ccd_ik(chain, [0.0, 1.0, 0.0], config, accessor=arm)
    # Measured about -z, the quarter turn toward +y is negative.
    assert result.angles[0] == pytest.approx(-1.0)


def test_limits_hold_for_random_targets():
    rng = np.random.default_rng(7)
    arm = SimRobotArm.planar(limit=0.8)
    chain = _chain_for(arm)
    for _ in range(25):
        target = rng.uniform(-1.5, 1.5, size=3)
        result = solve_ccd_ik(chain, target)
        for angle, (lo, hi) in zip(result.angles, chain.limits):
            assert lo <= angle <= hi
        assert all(np.isfinite(result.angles))


def test_solver_config_validation():
    with pytest.raises(ValueError):
        CCDSolverConfig(max_iterations=0)
    with pytest.raises(ValueError):
        CCDSolverConfig(damping=1.5)
    with pytest.raises(ValueError):
        CCDSolverConfig(tolerance=-0.1)
    with pytest.raises(ValueError):
        CCDSolverConfig(max_step_angle=-0.1)
