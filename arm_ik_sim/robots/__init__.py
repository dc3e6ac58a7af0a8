"""
Joint-chain model and simulated robot arms.

Provides the immutable joint specifications, the live angle model, the
node accessor interface the solver reads poses through, and a simulated
arm with URDF-style forward kinematics implementing that interface.
"""

from arm_ik_sim.robots.joint_chain import JointChainModel, JointSpec, KinematicNodeAccessor
from arm_ik_sim.robots.sim_robot_arm import JointOrigin, SimRobotArm

__all__ = [
    "JointChainModel",
    "JointSpec",
    "KinematicNodeAccessor",
    "JointOrigin",
    "SimRobotArm",
]
