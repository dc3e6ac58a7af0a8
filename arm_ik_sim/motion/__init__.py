"""
Simulated joint-trajectory feed.
"""

from arm_ik_sim.motion.motion_source import JointState, MotionSource

__all__ = ["JointState", "MotionSource"]
