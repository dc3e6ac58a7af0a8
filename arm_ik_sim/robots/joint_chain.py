"""
Joint-chain data model shared by every angle producer.

The chain describes joint order, rotation axes and limits, and owns the
live angle vector.  Live world transforms are never stored here: they are
looked up on demand through a :class:`KinematicNodeAccessor`, which the
chain references but does not own.

Classes:
    JointSpec: Immutable description of one revolute joint.
    KinematicNodeAccessor: Capability interface onto the scene/model layer.
    JointChainModel: Ordered joints plus clamped live angles.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from arm_ik_sim.utils.constants import DEFAULT_AXIS
from arm_ik_sim.utils.helpers import clamp, joint_status_color, normalize_to_range, rad_to_deg

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JointSpec:
    """Describes a single revolute joint of the chain.

    Attributes:
        name: URDF joint name.
        order: Position in the chain, 0 at the base.
        axis_local: Unit rotation axis in the joint's local frame.
        limit_lower: Lower angle limit (radians).
        limit_upper: Upper angle limit (radians).
        short_name: Compact label for readouts.
    """

    name: str
    order: int
    axis_local: Tuple[float, float, float] = DEFAULT_AXIS
    limit_lower: float = -np.pi
    limit_upper: float = np.pi
    short_name: str = ""

    def __post_init__(self) -> None:
        """Validate limits and normalise the rotation axis."""
        if self.limit_lower > self.limit_upper:
            raise ValueError(
                f"Joint '{self.name}': limit_lower {self.limit_lower} > limit_upper {self.limit_upper}"
            )
        axis = np.asarray(self.axis_local, dtype=np.float64)
        norm = float(np.linalg.norm(axis))
        if axis.shape != (3,) or norm == 0.0:
            raise ValueError(f"Joint '{self.name}': axis must be a non-zero 3-vector")
        object.__setattr__(self, "axis_local", tuple(float(c) for c in axis / norm))

    def clamp(self, angle: float) -> float:
        """Clamp *angle* to this joint's limits."""
        return clamp(angle, self.limit_lower, self.limit_upper)

    @property
    def limits(self) -> Tuple[float, float]:
        return (self.limit_lower, self.limit_upper)


class KinematicNodeAccessor(abc.ABC):
    """Read/write view onto the kinematic nodes of a loaded model.

    Implementations return ``None`` from queries while a node is
    unavailable (for example during a model reload) and ignore writes
    they cannot apply.
    """

    @abc.abstractmethod
    def get_world_position(self, order: int) -> Optional[np.ndarray]:
        """World position of joint *order*, or None if unavailable."""
        raise NotImplementedError

    @abc.abstractmethod
    def get_world_orientation(self, order: int) -> Optional[np.ndarray]:
        """World orientation quaternion ``[x, y, z, w]`` of joint *order*."""
        raise NotImplementedError

    @abc.abstractmethod
    def get_axis_local(self, order: int) -> Optional[np.ndarray]:
        """Local rotation axis of joint *order*, or None if the model has none."""
        raise NotImplementedError

    @abc.abstractmethod
    def set_angle(self, order: int, angle: float) -> bool:
        """Command joint *order* to *angle*; return False when skipped."""
        raise NotImplementedError

    @abc.abstractmethod
    def get_end_effector_position(self) -> Optional[np.ndarray]:
        """World position of the resolved end-effector node."""
        raise NotImplementedError


class JointChainModel:
    """Ordered revolute joints with their live, limit-clamped angles.

    Args:
        specs: Joint specifications in any order; their ``order`` fields
            must be unique and contiguous from zero.
        accessor: Optional node accessor.  Held by reference only and
            replaceable through :meth:`bind_accessor` on model reload.
        angles: Optional initial angles (clamped on entry).

    Raises:
        ValueError: On empty, duplicated or non-contiguous joint orders, or
            when *angles* has the wrong length.
    """

    def __init__(
        self,
        specs: Sequence[JointSpec],
        accessor: Optional[KinematicNodeAccessor] = None,
        angles: Optional[Sequence[float]] = None,
    ) -> None:
        ordered = sorted(specs, key=lambda s: s.order)
        if not ordered:
            raise ValueError("A joint chain needs at least one joint")
        if [s.order for s in ordered] != list(range(len(ordered))):
            raise ValueError(
                f"Joint orders must be unique and contiguous from 0, got {[s.order for s in specs]}"
            )
        self._specs: Tuple[JointSpec, ...] = tuple(ordered)
        self._angles = np.zeros(len(ordered))
        self._accessor: Optional[KinematicNodeAccessor] = None
        if angles is not None:
            if len(angles) != len(ordered):
                raise ValueError(f"Expected {len(ordered)} angles, got {len(angles)}")
            for spec, angle in zip(self._specs, angles):
                self._angles[spec.order] = spec.clamp(float(angle))
        if accessor is not None:
            self.bind_accessor(accessor)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._specs)

    @property
    def specs(self) -> Tuple[JointSpec, ...]:
        return self._specs

    @property
    def names(self) -> List[str]:
        return [s.name for s in self._specs]

    @property
    def limits(self) -> List[Tuple[float, float]]:
        """Per-joint ``(lower, upper)`` pairs, e.g. for slider ranges."""
        return [s.limits for s in self._specs]

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < len(self._specs)

    def index_of(self, name: str) -> Optional[int]:
        """Return the order of the joint called *name*, or None."""
        for spec in self._specs:
            if spec.name == name:
                return spec.order
        return None

    # ------------------------------------------------------------------
    # Accessor binding
    # ------------------------------------------------------------------

    @property
    def accessor(self) -> Optional[KinematicNodeAccessor]:
        return self._accessor

    def bind_accessor(self, accessor: KinematicNodeAccessor) -> None:
        """Attach a (new) accessor and push the current angles to it."""
        self._accessor = accessor
        self.sync_to_accessor()

    def release_accessor(self) -> None:
        """Drop the accessor reference, e.g. while the model reloads."""
        self._accessor = None

    def sync_to_accessor(self) -> int:
        """Push every angle to the accessor.

        Returns:
            Number of joints the accessor accepted.
        """
        if self._accessor is None:
            return 0
        return sum(bool(self._accessor.set_angle(i, float(a))) for i, a in enumerate(self._angles))

    # ------------------------------------------------------------------
    # Angle state
    # ------------------------------------------------------------------

    @property
    def angles(self) -> np.ndarray:
        """Copy of the current angle vector (radians)."""
        return self._angles.copy()

    @property
    def angles_deg(self) -> List[int]:
        return [rad_to_deg(a) for a in self._angles]

    def angle(self, index: int) -> float:
        return float(self._angles[index])

    def set_angle(self, index: int, angle: float) -> bool:
        """Clamp and store one joint angle, forwarding it to the accessor.

        Out-of-range indices are ignored.  A missing or unavailable
        accessor does not prevent the in-memory update.

        Returns:
            True if the angle was stored.
        """
        if not self.is_valid_index(index):
            logger.debug("Ignoring write to joint index %d", index)
            return False
        value = self._specs[index].clamp(float(angle))
        self._angles[index] = value
        if self._accessor is not None and not self._accessor.set_angle(index, value):
            logger.debug("Accessor skipped joint %d write", index)
        return True

    def set_angles(self, angles: Sequence[float]) -> None:
        """Set every joint from *angles*; extra entries are ignored."""
        for index, angle in enumerate(list(angles)[: len(self._specs)]):
            self.set_angle(index, angle)

    def normalized(self, index: int) -> float:
        """Angle of joint *index* scaled into [0, 1] of its range."""
        if not self.is_valid_index(index):
            return 0.5
        spec = self._specs[index]
        return normalize_to_range(float(self._angles[index]), spec.limit_lower, spec.limit_upper)

    def status_color(self, index: int) -> Tuple[int, int, int]:
        spec = self._specs[index]
        return joint_status_color(float(self._angles[index]), spec.limit_lower, spec.limit_upper)

    # ------------------------------------------------------------------
    # Live transform lookups
    # ------------------------------------------------------------------

    def axis_local(self, index: int) -> np.ndarray:
        """Rotation axis reported by the accessor, else the JointSpec axis."""
        axis = self._accessor.get_axis_local(index) if self._accessor is not None else None
        if axis is None:
            axis = self._specs[index].axis_local
        return np.asarray(axis, dtype=np.float64)

    def end_effector_position(self) -> Optional[np.ndarray]:
        if self._accessor is None:
            return None
        return self._accessor.get_end_effector_position()
