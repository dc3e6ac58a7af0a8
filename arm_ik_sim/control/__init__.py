"""
Control-mode arbitration and marker hit-testing.
"""

from arm_ik_sim.control.arbiter import (
    ControlArbiter,
    ControlMode,
    DragSession,
    JointDragSession,
    PointerEvent,
    Producer,
)
from arm_ik_sim.control.hit_test import EndEffectorHit, JointHit, MarkerHit, NoHit, hit_test_markers

__all__ = [
    "ControlArbiter",
    "ControlMode",
    "DragSession",
    "JointDragSession",
    "PointerEvent",
    "Producer",
    "EndEffectorHit",
    "JointHit",
    "MarkerHit",
    "NoHit",
    "hit_test_markers",
]
