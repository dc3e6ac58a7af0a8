"""
Cyclic Coordinate Descent (CCD) inverse kinematics.

Walks the chain from the tip joint to the base joint, rotating each joint
about its own axis so that the joint→end-effector vector swings toward the
joint→target vector.  Every correction is damped and then clamped to a
maximum step, then clamped to the joint limits.  The whole solve runs
synchronously in at most ``max_iterations × len(chain)`` joint updates.

Functions:
    solve_ccd_ik: Run one bounded solve against a chain.

Classes:
    IKResult: Outcome of a solve.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from arm_ik_sim.configs import CCDSolverConfig
from arm_ik_sim.robots.joint_chain import JointChainModel, KinematicNodeAccessor
from arm_ik_sim.utils.constants import PROJECTION_EPSILON
from arm_ik_sim.utils.helpers import clamp
from arm_ik_sim.utils.transforms import (
    as_vec3,
    project_onto_plane,
    quat_conjugate,
    quat_rotate,
    signed_angle_between,
)

logger = logging.getLogger(__name__)


@dataclass
class IKResult:
    """Outcome of a CCD solve.

    Attributes:
        converged: Whether the end effector ended within tolerance.
        iterations: Outer iterations started.
        distance: Final end-effector to target distance (metres); ``inf``
            when the end effector could not be read at all.
        angles: Joint angles after the solve, base to tip.
        skipped_joints: Joint updates skipped for degenerate projections or
            unavailable nodes.
    """

    converged: bool
    iterations: int
    distance: float
    angles: List[float] = field(default_factory=list)
    skipped_joints: int = 0


def _distance_to(ee_pos: np.ndarray, target: np.ndarray) -> float:
    return float(np.linalg.norm(ee_pos - target))


def _joint_correction(
    chain: JointChainModel,
    accessor: KinematicNodeAccessor,
    index: int,
    ee_pos: np.ndarray,
    target: np.ndarray,
) -> Optional[float]:
    """Raw signed rotation that swings joint *index* toward *target*.

    Returns:
        The angle in radians, or None when the joint cannot be used this
        iteration (node unavailable or projection degenerate).
    """
    joint_pos = accessor.get_world_position(index)
    joint_quat = accessor.get_world_orientation(index)
    if joint_pos is None or joint_quat is None:
        return None

    inv_quat = quat_conjugate(joint_quat)
    to_ee = quat_rotate(inv_quat, ee_pos - joint_pos)
    to_target = quat_rotate(inv_quat, target - joint_pos)

    axis = accessor.get_axis_local(index)
    if axis is None:
        axis = np.asarray(chain.specs[index].axis_local, dtype=np.float64)
    proj_ee = project_onto_plane(to_ee, axis)
    proj_target = project_onto_plane(to_target, axis)
    if np.linalg.norm(proj_ee) < PROJECTION_EPSILON or np.linalg.norm(proj_target) < PROJECTION_EPSILON:
        return None
    return signed_angle_between(proj_ee, proj_target, axis)


def _damped_step(angle: float, config: CCDSolverConfig) -> float:
    # Damping is applied before the step clamp.
    angle *= config.damping
    return clamp(angle, -config.max_step_angle, config.max_step_angle)


def solve_ccd_ik(
    chain: JointChainModel,
    target_world_pos: Sequence[float],
    config: Optional[CCDSolverConfig] = None,
    accessor: Optional[KinematicNodeAccessor] = None,
) -> IKResult:
    """Move the end effector of *chain* toward *target_world_pos*.

    Joints are updated in place through ``chain.set_angle`` (which clamps
    and forwards to the accessor).  Nothing is rolled back on failure: a
    non-converged result still leaves the chain at the best angles found.

    Args:
        chain: Joint chain to solve; its angles are modified.
        target_world_pos: Target point in world coordinates.
        config: Solver options; defaults to :class:`CCDSolverConfig`.
        accessor: Node accessor to read poses from; defaults to the one
            bound to *chain*.

    Returns:
        An :class:`IKResult`.
    """
    cfg = config if config is not None else CCDSolverConfig()
    nodes = accessor if accessor is not None else chain.accessor
    target = as_vec3(target_world_pos)

    if nodes is None or nodes.get_end_effector_position() is None:
        logger.debug("End effector unavailable; skipping solve")
        return IKResult(False, 0, math.inf, chain.angles.tolist())

    converged = False
    iterations = 0
    distance = math.inf
    skipped = 0

    for iteration in range(cfg.max_iterations):
        iterations = iteration + 1

        for index in reversed(range(len(chain))):
            ee_pos = nodes.get_end_effector_position()
            if ee_pos is None:
                skipped += 1
                continue
            distance = _distance_to(ee_pos, target)
            if distance < cfg.tolerance:
                converged = True
                break

            raw = _joint_correction(chain, nodes, index, ee_pos, target)
            if raw is None:
                skipped += 1
                continue
            chain.set_angle(index, chain.angle(index) + _damped_step(raw, cfg))
            if nodes is not chain.accessor:
                nodes.set_angle(index, chain.angle(index))

        if converged:
            break

        ee_pos = nodes.get_end_effector_position()
        if ee_pos is not None:
            distance = _distance_to(ee_pos, target)
        if distance < cfg.tolerance:
            converged = True
            break

    logger.debug(
        "CCD solve: converged=%s iterations=%d distance=%.5f skipped=%d",
        converged,
        iterations,
        distance,
        skipped,
    )
    return IKResult(converged, iterations, distance, chain.angles.tolist(), skipped)
