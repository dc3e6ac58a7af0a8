"""
NumPy rigid-body helpers.

Quaternions are stored as ``[x, y, z, w]`` arrays, matching the layout
used by the renderer's scene graph.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

IDENTITY_QUAT = np.array([0.0, 0.0, 0.0, 1.0])


def as_vec3(values: Sequence[float]) -> np.ndarray:
    """Return *values* as a float64 array of shape ``(3,)``."""
    return np.asarray(values, dtype=np.float64).reshape(3)


def normalize(v: np.ndarray) -> np.ndarray:
    """Return the unit vector of *v*, or *v* unchanged when it has zero length."""
    n = float(np.linalg.norm(v))
    if n == 0.0:
        return v
    return v / n


def quat_from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    """Quaternion for a rotation of *angle* radians about unit *axis*."""
    half = 0.5 * angle
    s = np.sin(half)
    return np.array([axis[0] * s, axis[1] * s, axis[2] * s, np.cos(half)])


def quat_multiply(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Hamilton product ``q1 * q2`` (apply *q2* first, then *q1*)."""
    x1, y1, z1, w1 = q1
    x2, y2, z2, w2 = q2
    return np.array(
        [
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        ]
    )


def quat_conjugate(q: np.ndarray) -> np.ndarray:
    """Conjugate of *q*; the inverse for unit quaternions."""
    return np.array([-q[0], -q[1], -q[2], q[3]])


def quat_rotate(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector *v* by unit quaternion *q*."""
    u = q[:3]
    w = q[3]
    t = 2.0 * np.cross(u, v)
    return v + w * t + np.cross(u, t)


def quat_from_rpy(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """Quaternion for URDF fixed-axis roll/pitch/yaw (``Rz * Ry * Rx``)."""
    qx = quat_from_axis_angle(np.array([1.0, 0.0, 0.0]), roll)
    qy = quat_from_axis_angle(np.array([0.0, 1.0, 0.0]), pitch)
    qz = quat_from_axis_angle(np.array([0.0, 0.0, 1.0]), yaw)
    return quat_multiply(qz, quat_multiply(qy, qx))


def signed_angle_between(a: np.ndarray, b: np.ndarray, axis: np.ndarray) -> float:
    """Signed angle from *a* to *b* about *axis*.

    The magnitude comes from ``acos`` of the normalized dot product and
    the sign from whether ``a × b`` points along or against *axis*.

    Args:
        a: Non-zero source vector.
        b: Non-zero destination vector.
        axis: Rotation axis.

    Returns:
        Angle in radians within [-pi, pi].
    """
    an = a / np.linalg.norm(a)
    bn = b / np.linalg.norm(b)
    angle = float(np.arccos(np.clip(np.dot(an, bn), -1.0, 1.0)))
    if float(np.dot(np.cross(an, bn), axis)) < 0.0:
        angle = -angle
    return angle


def project_onto_plane(v: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """Remove the component of *v* along unit *normal*."""
    return v - normal * float(np.dot(v, normal))
