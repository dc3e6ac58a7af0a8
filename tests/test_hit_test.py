"""Tests for marker picking."""

from __future__ import annotations

import numpy as np

from arm_ik_sim.control.hit_test import EndEffectorHit, JointHit, NoHit, hit_test_markers
from arm_ik_sim.kinematics.drag_projector import Ray

RAY = Ray(origin=np.array([0.0, 0.0, 5.0]), direction=np.array([0.0, 0.0, -1.0]))
JOINTS = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 1.0], [2.0, 0.0, 1.0]])


def _pick(joints=JOINTS, ee=None, ik_enabled=False):
    return hit_test_markers(RAY, joints, ee, joint_radius=0.1, ee_radius=0.1, ik_enabled=ik_enabled)


def test_nearest_joint_along_ray_wins():
    assert _pick() == JointHit(1)


def test_end_effector_only_pickable_with_ik():
    ee = np.array([0.0, 0.0, 0.5])
    assert _pick(ee=ee) == JointHit(1)
    assert _pick(ee=ee, ik_enabled=True) == EndEffectorHit()


def test_end_effector_wins_even_when_behind_joint():
    ee = np.array([0.0, 0.0, -1.0])
    assert _pick(ee=ee, ik_enabled=True) == EndEffectorHit()


def test_miss_returns_no_hit():
    joints = np.array([[1.0, 1.0, 0.0]])
    assert _pick(joints=joints, ee=np.array([3.0, 3.0, 0.0]), ik_enabled=True) == NoHit()


def test_unavailable_positions_return_no_hit():
    assert _pick(joints=None) == NoHit()
    assert isinstance(_pick(joints=None, ee=np.array([0.0, 0.0, 0.0]), ik_enabled=True), EndEffectorHit)
