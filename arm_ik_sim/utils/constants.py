"""
Shared constants and type aliases for the arm_ik_sim package.

Mirrors the URDF naming of the UR10 arm so that joint tables, motion
topics, and end-effector frames line up with the model the external
renderer loads.
"""

from __future__ import annotations

import math
from typing import Tuple

# ---------------------------------------------------------------------------
# Motion topic names (match the ROS-style topics the UI subscribes to)
# ---------------------------------------------------------------------------
JOINT_STATES_TOPIC: str = "/joint_states"
BASE_FRAME_ID: str = "base_link"

# ---------------------------------------------------------------------------
# UR10 joint table (radians)
# ---------------------------------------------------------------------------
UR10_NUM_JOINTS: int = 6
UR10_JOINT_NAMES: Tuple[str, ...] = (
    "shoulder_pan_joint",
    "shoulder_lift_joint",
    "elbow_joint",
    "wrist_1_joint",
    "wrist_2_joint",
    "wrist_3_joint",
)
UR10_JOINT_SHORT_NAMES: Tuple[str, ...] = ("S.Pan", "S.Lift", "Elbow", "W.1", "W.2", "W.3")
UR10_JOINT_LOWER: Tuple[float, ...] = (-6.2832, -6.2832, -3.1416, -6.2832, -6.2832, -6.2832)
UR10_JOINT_UPPER: Tuple[float, ...] = (6.2832, 6.2832, 3.1416, 6.2832, 6.2832, 6.2832)

# Joint origins relative to the parent joint frame: (xyz, rpy)
UR10_JOINT_ORIGINS: Tuple[Tuple[Tuple[float, float, float], Tuple[float, float, float]], ...] = (
    ((0.0, 0.0, 0.1273), (0.0, 0.0, 0.0)),
    ((0.0, 0.220941, 0.0), (0.0, math.pi / 2.0, 0.0)),
    ((0.0, -0.1719, 0.612), (0.0, 0.0, 0.0)),
    ((0.0, 0.0, 0.5723), (0.0, math.pi / 2.0, 0.0)),
    ((0.0, 0.1149, 0.0), (0.0, 0.0, 0.0)),
    ((0.0, 0.0, 0.1157), (0.0, 0.0, 0.0)),
)
UR10_JOINT_AXES: Tuple[Tuple[float, float, float], ...] = (
    (0.0, 0.0, 1.0),
    (0.0, 1.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, 0.0, 1.0),
    (0.0, 1.0, 0.0),
)
UR10_EE_LINK: str = "ee_link"
UR10_EE_OFFSET: Tuple[float, float, float] = (0.0, 0.0922, 0.0)

# Demo cycle streamed by the simulated motion feed
UR10_DEMO_WAYPOINTS: Tuple[Tuple[float, ...], ...] = (
    (0.0, -1.57, 0.0, -1.57, 0.0, 0.0),  # home
    (0.5, -1.0, 1.2, -1.0, 1.57, 0.0),  # picking
    (0.5, -1.2, 0.8, -0.8, 1.57, 0.0),  # lifting
    (-0.5, -1.0, 1.2, -1.0, 1.57, 0.0),  # placing
    (-0.5, -1.2, 0.8, -0.8, 1.57, 0.0),  # lifting (return)
    (0.0, -1.3, 0.5, -0.5, 0.8, 0.5),  # scanning
)

# ---------------------------------------------------------------------------
# Planar 3-link demo arm (all joints rotate about world z)
# ---------------------------------------------------------------------------
PLANAR_LINK_LENGTHS: Tuple[float, ...] = (0.4, 0.3, 0.2)
PLANAR_JOINT_LIMIT: float = 2.6

# ---------------------------------------------------------------------------
# Solver and interaction defaults
# ---------------------------------------------------------------------------
DEFAULT_AXIS: Tuple[float, float, float] = (0.0, 0.0, 1.0)
IK_MAX_ITERATIONS: int = 20
IK_TOLERANCE: float = 0.002
IK_MAX_STEP_ANGLE: float = 0.25
IK_DAMPING: float = 0.7
PROJECTION_EPSILON: float = 1e-6

MOTION_INCREMENT: float = 0.005
JOINT_DRAG_SENSITIVITY: float = 0.008
NEAR_LIMIT_THRESHOLD: float = 0.9

TARGET_OPACITY_CONVERGED: float = 0.8
TARGET_OPACITY_DIVERGED: float = 0.4
TARGET_OPACITY_HIDDEN: float = 0.0

# ---------------------------------------------------------------------------
# Joint status palette (RGB 0-255) used by UI readouts
# ---------------------------------------------------------------------------
COLOR_JOINT_OK: Tuple[int, int, int] = (0, 229, 255)
COLOR_JOINT_NEAR_LIMIT: Tuple[int, int, int] = (255, 152, 0)
COLOR_JOINT_OUT_OF_RANGE: Tuple[int, int, int] = (244, 67, 54)
