"""
Dataclass configurations for the solver, motion feed, arbiter and robots.

Classes:
    CCDSolverConfig: Iteration budget and step shaping for the CCD solver.
    MotionSourceConfig: Waypoint cycle and cadence of the simulated feed.
    ArbiterConfig: Pointer interaction tuning for the control arbiter.
    RobotSessionConfig: Abstract base for a complete robot session.
    UR10SessionConfig: The UR10 arm with its demo motion cycle.
    PlanarSessionConfig: A 3-link planar arm for headless experiments.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Tuple

from arm_ik_sim.utils.constants import (
    BASE_FRAME_ID,
    IK_DAMPING,
    IK_MAX_ITERATIONS,
    IK_MAX_STEP_ANGLE,
    IK_TOLERANCE,
    JOINT_DRAG_SENSITIVITY,
    JOINT_STATES_TOPIC,
    MOTION_INCREMENT,
    PLANAR_JOINT_LIMIT,
    PLANAR_LINK_LENGTHS,
    UR10_DEMO_WAYPOINTS,
    UR10_NUM_JOINTS,
)


@dataclass(frozen=True)
class CCDSolverConfig:
    """Options for :func:`arm_ik_sim.kinematics.ccd_solver.solve_ccd_ik`.

    Attributes:
        max_iterations: Outer tip-to-base passes allowed per solve.
        tolerance: Converged once the end effector is closer than this (metres).
        max_step_angle: Largest rotation applied to one joint per pass (radians).
        damping: Scale in [0, 1] applied to each raw correction.
    """

    max_iterations: int = IK_MAX_ITERATIONS
    tolerance: float = IK_TOLERANCE
    max_step_angle: float = IK_MAX_STEP_ANGLE
    damping: float = IK_DAMPING

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError("`max_iterations` must be at least 1")
        if self.tolerance < 0.0:
            raise ValueError("`tolerance` must be non-negative")
        if self.max_step_angle < 0.0:
            raise ValueError("`max_step_angle` must be non-negative")
        if not 0.0 <= self.damping <= 1.0:
            raise ValueError(f"`damping` must lie in [0, 1], got {self.damping}")


# Softer tuning used while the operator drags the end effector.
DRAG_SOLVER_CONFIG = CCDSolverConfig(max_iterations=25, tolerance=0.002, max_step_angle=0.2, damping=0.65)


@dataclass
class MotionSourceConfig:
    """Configuration for the simulated joint-trajectory feed.

    Attributes:
        waypoints: Cyclic list of full joint-angle vectors (radians).
        increment: Progress added per tick; 0.005 spans a segment in 200 ticks.
        topic: Topic name the joint vectors are published on.
        frame_id: Frame id stamped on every message.
    """

    waypoints: Tuple[Tuple[float, ...], ...] = UR10_DEMO_WAYPOINTS
    increment: float = MOTION_INCREMENT
    topic: str = JOINT_STATES_TOPIC
    frame_id: str = BASE_FRAME_ID

    def __post_init__(self) -> None:
        """Validate the waypoint table and the tick increment."""
        if len(self.waypoints) < 2:
            raise ValueError("At least two waypoints are required")
        widths = {len(w) for w in self.waypoints}
        if len(widths) != 1:
            raise ValueError(f"Waypoints must share one length, got {sorted(widths)}")
        if not 0.0 < self.increment <= 1.0:
            raise ValueError(f"`increment` must lie in (0, 1], got {self.increment}")

    @property
    def num_joints(self) -> int:
        return len(self.waypoints[0])


@dataclass
class ArbiterConfig:
    """Pointer-interaction tuning for :class:`ControlArbiter`.

    Attributes:
        solver: Solver options used for drag-to-target.
        joint_drag_sensitivity: Radians per horizontal pixel of joint drag.
        joint_marker_radius: Pick radius of each joint marker (metres).
        ee_marker_radius: Pick radius of the end-effector marker (metres).
        ik_marker_scale: End-effector marker scale while IK assist is on.
    """

    solver: CCDSolverConfig = DRAG_SOLVER_CONFIG
    joint_drag_sensitivity: float = JOINT_DRAG_SENSITIVITY
    joint_marker_radius: float = 0.06
    ee_marker_radius: float = 0.04
    ik_marker_scale: float = 1.5


@dataclass
class RobotSessionConfig(abc.ABC):
    """Base configuration for a complete robot session.

    Attributes:
        robot: Short robot identifier.
        motion: Motion feed configuration.
        arbiter: Arbiter configuration.
        start_motion: Start the motion feed when the session is built.
    """

    robot: str = "base"
    motion: MotionSourceConfig = field(default_factory=MotionSourceConfig)
    arbiter: ArbiterConfig = field(default_factory=ArbiterConfig)
    start_motion: bool = True

    @property
    @abc.abstractmethod
    def num_joints(self) -> int:
        """Joint count the session's arm must expose."""
        raise NotImplementedError


@dataclass
class UR10SessionConfig(RobotSessionConfig):
    """Session configuration for the UR10 arm."""

    robot: str = "ur10"

    @property
    def num_joints(self) -> int:
        return UR10_NUM_JOINTS


def _planar_waypoints() -> MotionSourceConfig:
    return MotionSourceConfig(
        waypoints=(
            (0.0, 0.0, 0.0),
            (0.8, -0.6, 0.4),
            (-0.5, 1.0, -0.8),
        )
    )


@dataclass
class PlanarSessionConfig(RobotSessionConfig):
    """Session configuration for the planar 3-link arm.

    Attributes:
        link_lengths: Length of each link (metres).
        joint_limit: Symmetric joint limit (radians).
    """

    robot: str = "planar3"
    motion: MotionSourceConfig = field(default_factory=_planar_waypoints)
    link_lengths: Tuple[float, ...] = PLANAR_LINK_LENGTHS
    joint_limit: float = PLANAR_JOINT_LIMIT

    @property
    def num_joints(self) -> int:
        return len(self.link_lengths)
