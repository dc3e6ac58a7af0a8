"""
Inverse kinematics and pointer-to-target projection.
"""

from arm_ik_sim.kinematics.ccd_solver import IKResult, solve_ccd_ik
from arm_ik_sim.kinematics.drag_projector import (
    DragTargetProjector,
    PerspectiveCamera,
    Plane,
    Ray,
    pointer_to_ndc,
)

__all__ = [
    "IKResult",
    "solve_ccd_ik",
    "DragTargetProjector",
    "PerspectiveCamera",
    "Plane",
    "Ray",
    "pointer_to_ndc",
]
