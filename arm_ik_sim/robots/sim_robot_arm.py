"""
Simulated serial robot arm with URDF-style forward kinematics.

Each joint frame is placed by a fixed origin (translation plus roll/pitch/
yaw) relative to its parent and then rotated about its local axis by the
joint angle.  The arm implements :class:`KinematicNodeAccessor`, so the
solver and arbiter can drive it exactly like a loaded scene model.  It can
also be marked unloaded to mimic a model reload, during which every query
returns ``None`` and every write is skipped.

Classes:
    JointOrigin: Fixed placement of a joint relative to its parent.
    SimRobotArm: The simulated arm.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from arm_ik_sim.robots.joint_chain import JointSpec, KinematicNodeAccessor
from arm_ik_sim.utils.constants import (
    PLANAR_JOINT_LIMIT,
    PLANAR_LINK_LENGTHS,
    UR10_EE_LINK,
    UR10_EE_OFFSET,
    UR10_JOINT_AXES,
    UR10_JOINT_LOWER,
    UR10_JOINT_NAMES,
    UR10_JOINT_ORIGINS,
    UR10_JOINT_SHORT_NAMES,
    UR10_JOINT_UPPER,
)
from arm_ik_sim.utils.transforms import (
    IDENTITY_QUAT,
    as_vec3,
    quat_from_axis_angle,
    quat_from_rpy,
    quat_multiply,
    quat_rotate,
)


@dataclass(frozen=True)
class JointOrigin:
    """Placement of a joint frame in its parent's frame.

    Attributes:
        xyz: Translation (metres).
        rpy: Fixed roll/pitch/yaw rotation (radians).
    """

    xyz: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rpy: Tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass
class SimRobotArm(KinematicNodeAccessor):
    """A simulated serial arm of revolute joints.

    Attributes:
        specs: Joint specifications, base to tip.
        origins: One :class:`JointOrigin` per joint.
        ee_offset: Tip-frame offset from the last joint, or None to use the
            last joint itself as the end effector.
        ee_link: Name of the tip frame when ``ee_offset`` is given.
        joint_positions: Current joint angles in radians.
        loaded: False while the model is unavailable.
    """

    specs: Tuple[JointSpec, ...]
    origins: Tuple[JointOrigin, ...]
    ee_offset: Optional[Tuple[float, float, float]] = None
    ee_link: str = UR10_EE_LINK
    joint_positions: np.ndarray = field(default_factory=lambda: np.zeros(0))
    loaded: bool = True
    _positions: Optional[np.ndarray] = field(default=None, repr=False)
    _orientations: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate the joint table and size the angle vector."""
        if len(self.specs) != len(self.origins):
            raise ValueError(
                f"Got {len(self.specs)} joints but {len(self.origins)} origins"
            )
        if self.joint_positions.shape != (len(self.specs),):
            self.joint_positions = np.zeros(len(self.specs))

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def ur10(cls) -> "SimRobotArm":
        """Build a UR10 with the URDF joint origins and limits."""
        specs = tuple(
            JointSpec(
                name=name,
                order=i,
                axis_local=UR10_JOINT_AXES[i],
                limit_lower=UR10_JOINT_LOWER[i],
                limit_upper=UR10_JOINT_UPPER[i],
                short_name=UR10_JOINT_SHORT_NAMES[i],
            )
            for i, name in enumerate(UR10_JOINT_NAMES)
        )
        origins = tuple(JointOrigin(xyz=xyz, rpy=rpy) for xyz, rpy in UR10_JOINT_ORIGINS)
        return cls(specs=specs, origins=origins, ee_offset=UR10_EE_OFFSET)

    @classmethod
    def planar(
        cls,
        link_lengths: Sequence[float] = PLANAR_LINK_LENGTHS,
        limit: float = PLANAR_JOINT_LIMIT,
    ) -> "SimRobotArm":
        """Build a planar arm whose joints all rotate about world z.

        Links lie along +x at zero angles; the tip sits at the end of the
        last link.

        Args:
            link_lengths: Length of each link (metres).
            limit: Symmetric joint limit (radians).
        """
        specs = tuple(
            JointSpec(name=f"joint_{i}", order=i, limit_lower=-limit, limit_upper=limit)
            for i in range(len(link_lengths))
        )
        offsets = [0.0] + list(link_lengths[:-1])
        origins = tuple(JointOrigin(xyz=(float(x), 0.0, 0.0)) for x in offsets)
        return cls(specs=specs, origins=origins, ee_offset=(float(link_lengths[-1]), 0.0, 0.0), ee_link="tip")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def num_joints(self) -> int:
        return len(self.specs)

    @property
    def end_effector_name(self) -> str:
        """Name of the node read as the end effector.

        The tip frame is preferred; without one the last joint stands in.
        """
        if self.ee_offset is not None:
            return self.ee_link
        return self.specs[-1].name

    def reset(self) -> np.ndarray:
        """Zero all joints and return a copy of the new positions."""
        self.joint_positions = np.zeros(self.num_joints)
        self._invalidate()
        return self.joint_positions.copy()

    def unload(self) -> None:
        """Mark the model unavailable, as during an asset reload."""
        self.loaded = False
        self._invalidate()

    def load(self) -> None:
        self.loaded = True
        self._invalidate()

    def get_state(self) -> np.ndarray:
        """Return joint positions (N) followed by end-effector xyz (3).

        Returns:
            1-D NumPy array of shape ``(N + 3,)``; the xyz part is NaN while
            the model is unloaded.
        """
        ee = self.get_end_effector_position()
        ee = ee if ee is not None else np.full(3, np.nan)
        return np.concatenate([self.joint_positions, ee])

    def joint_world_positions(self) -> Optional[np.ndarray]:
        """All joint origins in world space, shape ``(N, 3)``."""
        if not self.loaded:
            return None
        self._ensure_fk()
        return self._positions.copy()

    # ------------------------------------------------------------------
    # KinematicNodeAccessor
    # ------------------------------------------------------------------

    def get_world_position(self, order: int) -> Optional[np.ndarray]:
        if not self._available(order):
            return None
        self._ensure_fk()
        return self._positions[order].copy()

    def get_world_orientation(self, order: int) -> Optional[np.ndarray]:
        if not self._available(order):
            return None
        self._ensure_fk()
        return self._orientations[order].copy()

    def get_axis_local(self, order: int) -> Optional[np.ndarray]:
        if not self._available(order):
            return None
        return np.asarray(self.specs[order].axis_local, dtype=np.float64)

    def set_angle(self, order: int, angle: float) -> bool:
        if not self._available(order):
            return False
        self.joint_positions[order] = self.specs[order].clamp(float(angle))
        self._invalidate()
        return True

    def get_end_effector_position(self) -> Optional[np.ndarray]:
        if not self.loaded:
            return None
        self._ensure_fk()
        last = self.num_joints - 1
        if self.ee_offset is None:
            return self._positions[last].copy()
        offset = quat_rotate(self._orientations[last], as_vec3(self.ee_offset))
        return self._positions[last] + offset

    # ------------------------------------------------------------------
    # Forward kinematics helpers
    # ------------------------------------------------------------------

    def _available(self, order: int) -> bool:
        return self.loaded and 0 <= order < self.num_joints

    def _invalidate(self) -> None:
        self._positions = None
        self._orientations = None

    def _ensure_fk(self) -> None:
        if self._positions is None:
            self._positions, self._orientations = self._forward_kinematics()

    def _joint_rotation(self, order: int) -> np.ndarray:
        """Origin rotation followed by the joint's own axis rotation."""
        origin = self.origins[order]
        axis = np.asarray(self.specs[order].axis_local, dtype=np.float64)
        spin = quat_from_axis_angle(axis, float(self.joint_positions[order]))
        return quat_multiply(quat_from_rpy(*origin.rpy), spin)

    def _forward_kinematics(self) -> Tuple[np.ndarray, np.ndarray]:
        """Compute world position and orientation of every joint frame.

        Returns:
            ``(positions, orientations)`` with shapes ``(N, 3)`` and ``(N, 4)``.
        """
        positions: List[np.ndarray] = []
        orientations: List[np.ndarray] = []
        pos = np.zeros(3)
        quat = IDENTITY_QUAT.copy()
        for order, origin in enumerate(self.origins):
            pos = pos + quat_rotate(quat, as_vec3(origin.xyz))
            quat = quat_multiply(quat, self._joint_rotation(order))
            positions.append(pos)
            orientations.append(quat)
        return np.array(positions), np.array(orientations)
