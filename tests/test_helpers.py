"""Tests for the numeric helpers and quaternion utilities."""

from __future__ import annotations

import math

import numpy as np
import pytest

from arm_ik_sim.utils.constants import (
    COLOR_JOINT_NEAR_LIMIT,
    COLOR_JOINT_OK,
    COLOR_JOINT_OUT_OF_RANGE,
)
from arm_ik_sim.utils.helpers import (
    clamp,
    ease_in_out_quad,
    joint_status_color,
    normalize_to_range,
    rad_to_deg,
)
from arm_ik_sim.utils.transforms import (
    quat_conjugate,
    quat_from_axis_angle,
    quat_from_rpy,
    quat_rotate,
    signed_angle_between,
)


@pytest.mark.parametrize("t, expected", [(0.0, 0.0), (0.25, 0.125), (0.5, 0.5), (0.75, 0.875), (1.0, 1.0)])
def test_ease_in_out_quad(t, expected):
    assert ease_in_out_quad(t) == pytest.approx(expected)


def test_clamp_and_normalize():
    assert clamp(5.0, -1.0, 1.0) == 1.0
    assert normalize_to_range(0.0, -1.0, 1.0) == 0.5
    assert normalize_to_range(3.0, -1.0, 1.0) == 1.0
    assert normalize_to_range(0.2, 0.2, 0.2) == 0.5


def test_rad_to_deg_rounds():
    assert rad_to_deg(math.pi) == 180
    assert rad_to_deg(0.5) == 29


def test_status_colors():
    assert joint_status_color(0.0, -1.0, 1.0) == COLOR_JOINT_OK
    assert joint_status_color(0.95, -1.0, 1.0) == COLOR_JOINT_NEAR_LIMIT
    assert joint_status_color(1.5, -1.0, 1.0) == COLOR_JOINT_OUT_OF_RANGE


def test_axis_angle_rotation_and_inverse():
    q = quat_from_axis_angle(np.array([0.0, 0.0, 1.0]), math.pi / 2)
    v = quat_rotate(q, np.array([1.0, 0.0, 0.0]))
    np.testing.assert_allclose(v, [0.0, 1.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(quat_rotate(quat_conjugate(q), v), [1.0, 0.0, 0.0], atol=1e-12)


def test_rpy_pitch_matches_axis_angle():
    np.testing.assert_allclose(
        quat_from_rpy(0.0, math.pi / 2, 0.0),
        quat_from_axis_angle(np.array([0.0, 1.0, 0.0]), math.pi / 2),
        atol=1e-12,
    )


def test_signed_angle_sign_follows_axis():
    axis = np.array([0.0, 0.0, 1.0])
    x = np.array([1.0, 0.0, 0.0])
    assert signed_angle_between(x, np.array([0.0, 1.0, 0.0]), axis) == pytest.approx(math.pi / 2)
    assert signed_angle_between(x, np.array([0.0, -1.0, 0.0]), axis) == pytest.approx(-math.pi / 2)
