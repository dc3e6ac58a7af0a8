"""
Factory for complete robot sessions.

Builds the simulated arm, its joint chain, the motion feed and the
arbiter from a configuration or a registered robot name, wiring them
together the way a frame loop expects to drive them.

Functions:
    make_robot_session: Create a :class:`RobotSession` by config or name.

Classes:
    RobotSession: The wired-up components of one robot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from arm_ik_sim.configs import PlanarSessionConfig, RobotSessionConfig, UR10SessionConfig
from arm_ik_sim.control.arbiter import ControlArbiter
from arm_ik_sim.motion.motion_source import MotionSource
from arm_ik_sim.robots.joint_chain import JointChainModel
from arm_ik_sim.robots.sim_robot_arm import SimRobotArm

# ---------------------------------------------------------------------------
# Config look-up table (name -> default config constructor)
# ---------------------------------------------------------------------------
_ROBOT_REGISTRY: Dict[str, type] = {
    "ur10": UR10SessionConfig,
    "planar3": PlanarSessionConfig,
}


@dataclass
class RobotSession:
    """Everything one robot instance needs per frame.

    Attributes:
        config: The configuration the session was built from.
        arm: Simulated arm acting as the node accessor.
        chain: Joint chain bound to ``arm``.
        motion: Motion feed injected into ``arbiter``.
        arbiter: Control-mode arbiter owning the write path.
    """

    config: RobotSessionConfig
    arm: SimRobotArm
    chain: JointChainModel
    motion: MotionSource
    arbiter: ControlArbiter

    def step(self) -> None:
        """Run one frame: advance the motion feed through the arbiter."""
        self.arbiter.tick()

    def reload_model(self) -> None:
        """Rebuild the arm and rebind the chain, as after an asset reload.

        The chain keeps its angles; the fresh arm receives them on bind.
        """
        self.arm.unload()
        self.chain.release_accessor()
        self.arm = _build_arm(self.config)
        self.chain.bind_accessor(self.arm)


def _resolve_config(cfg: RobotSessionConfig | str) -> RobotSessionConfig:
    """Convert a robot name to its default config, or pass through a config.

    Raises:
        ValueError: If the name is not registered.
    """
    if isinstance(cfg, RobotSessionConfig):
        return cfg
    if cfg not in _ROBOT_REGISTRY:
        raise ValueError(f"Unknown robot '{cfg}'. Choose from {list(_ROBOT_REGISTRY)}")
    return _ROBOT_REGISTRY[cfg]()


def _build_arm(cfg: RobotSessionConfig) -> SimRobotArm:
    if isinstance(cfg, PlanarSessionConfig):
        return SimRobotArm.planar(cfg.link_lengths, cfg.joint_limit)
    if isinstance(cfg, UR10SessionConfig):
        return SimRobotArm.ur10()
    raise ValueError(f"No arm registered for config type {type(cfg).__name__}")


def _validate_joint_count(cfg: RobotSessionConfig, arm: SimRobotArm) -> None:
    if cfg.motion.num_joints != arm.num_joints or cfg.num_joints != arm.num_joints:
        raise ValueError(
            f"Motion waypoints have {cfg.motion.num_joints} joints, arm has {arm.num_joints}"
        )


def make_robot_session(cfg: RobotSessionConfig | str = "ur10") -> RobotSession:
    """Create a wired robot session.

    Args:
        cfg: Either a ``RobotSessionConfig`` or a registered name
            (``'ur10'``, ``'planar3'``).

    Returns:
        A :class:`RobotSession` in simulated mode, with its motion feed
        started when ``cfg.start_motion`` is set.
    """
    resolved = _resolve_config(cfg)
    arm = _build_arm(resolved)
    _validate_joint_count(resolved, arm)
    chain = JointChainModel(arm.specs, accessor=arm)
    motion = MotionSource(resolved.motion, joint_names=chain.names)
    arbiter = ControlArbiter(chain, motion, resolved.arbiter)
    if resolved.start_motion:
        motion.start()
    return RobotSession(config=resolved, arm=arm, chain=chain, motion=motion, arbiter=arbiter)
