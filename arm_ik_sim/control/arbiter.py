"""
Control arbitration for the joint chain.

Three producers compete for the chain's angles: the simulated motion feed,
direct manual joint input, and drag-to-target IK.  The arbiter is a small
state machine whose mode decides which producer may write; every other
producer's writes are dropped.  Pointer and keyboard events are handled
synchronously, one event at a time, each running its arbitration, optional
solve and write to completion before returning.

Classes:
    ControlMode: Which producer currently owns the angles.
    Producer: Tag identifying the source of a write.
    PointerEvent: Pointer position within the viewport.
    DragSession: State of one drag-to-target interaction.
    JointDragSession: State of one single-joint pointer drag.
    ControlArbiter: The state machine and gated write path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Tuple

import numpy as np

from arm_ik_sim.configs import ArbiterConfig, CCDSolverConfig
from arm_ik_sim.control.hit_test import EndEffectorHit, JointHit, MarkerHit, NoHit, hit_test_markers
from arm_ik_sim.kinematics.ccd_solver import IKResult, solve_ccd_ik
from arm_ik_sim.kinematics.drag_projector import DragTargetProjector, PerspectiveCamera, pointer_to_ndc
from arm_ik_sim.motion.motion_source import JointState, MotionSource
from arm_ik_sim.robots.joint_chain import JointChainModel
from arm_ik_sim.utils.constants import (
    TARGET_OPACITY_CONVERGED,
    TARGET_OPACITY_DIVERGED,
    TARGET_OPACITY_HIDDEN,
)
from arm_ik_sim.utils.helpers import deg_to_rad

logger = logging.getLogger(__name__)


class ControlMode(Enum):
    """Which producer is authoritative for the joint angles."""

    SIMULATED = "simulated"
    MANUAL = "manual"
    MANUAL_IK = "manual_ik"


class Producer(Enum):
    """Source of an angle write."""

    MOTION = "motion"
    MANUAL = "manual"
    SOLVER = "solver"


@dataclass(frozen=True)
class PointerEvent:
    """Pointer position in viewport pixels.

    Attributes:
        x: Column from the viewport's left edge.
        y: Row from the viewport's top edge.
        width: Viewport width.
        height: Viewport height.
        modifier: Whether the drag-anywhere modifier (shift) is held.
    """

    x: float
    y: float
    width: float
    height: float
    modifier: bool = False

    @property
    def ndc(self) -> Optional[Tuple[float, float]]:
        return pointer_to_ndc(self.x, self.y, self.width, self.height)


@dataclass
class DragSession:
    """One drag-to-target interaction.

    Attributes:
        anchor_world_pos: End-effector position when the drag started.
        active: False once the drag has ended or been cancelled.
        target: Last resolved target, held when a move yields no target.
        result: Outcome of the most recent solve in this session.
    """

    anchor_world_pos: np.ndarray
    active: bool = True
    target: Optional[np.ndarray] = None
    result: Optional[IKResult] = None
    projector: DragTargetProjector = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.projector = DragTargetProjector(anchor=self.anchor_world_pos)


@dataclass
class JointDragSession:
    """Horizontal pointer drag of a single joint."""

    index: int
    start_x: float
    start_angle: float


class ControlArbiter:
    """Single-writer gate between the angle producers and the chain.

    The arbiter subscribes to *motion_source* on construction.  Samples
    arriving in :attr:`ControlMode.SIMULATED` are applied; samples arriving
    in either manual mode are counted and discarded.  Manual and solver
    writes are only performed in the manual modes, entering
    :attr:`ControlMode.MANUAL` first where an operator action implies it.

    Args:
        chain: The joint chain whose angles are arbitrated.
        motion_source: Injected motion feed; its lifecycle stays with the caller.
        config: Interaction tuning; defaults to :class:`ArbiterConfig`.
    """

    def __init__(
        self,
        chain: JointChainModel,
        motion_source: MotionSource,
        config: Optional[ArbiterConfig] = None,
    ) -> None:
        self.chain = chain
        self.motion_source = motion_source
        self.config = config if config is not None else ArbiterConfig()
        self._mode = ControlMode.SIMULATED
        self.selected_joint: Optional[int] = None
        self.drag_session: Optional[DragSession] = None
        self.joint_drag: Optional[JointDragSession] = None
        self.highlighted_joints: Set[int] = set()
        self.last_result: Optional[IKResult] = None
        self.applied_motion_samples = 0
        self.discarded_motion_samples = 0
        self.mode_listeners: List[Callable[[ControlMode], None]] = []
        self._unsubscribe: Optional[Callable[[], None]] = motion_source.subscribe(
            motion_source.config.topic, self.on_joint_state
        )

    # ------------------------------------------------------------------
    # Mode state machine
    # ------------------------------------------------------------------

    @property
    def mode(self) -> ControlMode:
        return self._mode

    @property
    def is_manual(self) -> bool:
        return self._mode is not ControlMode.SIMULATED

    @property
    def ik_enabled(self) -> bool:
        return self._mode is ControlMode.MANUAL_IK

    def _transition(self, mode: ControlMode) -> None:
        if mode is self._mode:
            return
        logger.info("Control mode %s -> %s", self._mode.value, mode.value)
        self._mode = mode
        for listener in list(self.mode_listeners):
            listener(mode)

    def _ensure_manual(self) -> None:
        if self._mode is ControlMode.SIMULATED:
            self._transition(ControlMode.MANUAL)

    def set_manual_mode(self, enabled: bool) -> None:
        """Enter or leave manual control.

        Leaving manual control ends any drag, clears the joint selection
        and hands the angles back to the motion feed.
        """
        if enabled:
            self._ensure_manual()
            return
        self.cancel()
        self.selected_joint = None
        self._transition(ControlMode.SIMULATED)

    def toggle_ik_mode(self) -> ControlMode:
        """Toggle IK assist, passing through manual mode when needed."""
        if self._mode is ControlMode.MANUAL_IK:
            self._transition(ControlMode.MANUAL)
        else:
            self._ensure_manual()
            self._transition(ControlMode.MANUAL_IK)
        return self._mode

    def reset(self) -> None:
        """Return to simulated mode with zeroed angles and no sessions.

        The zero pose is written as a manual edit before control is handed
        back to the motion feed.
        """
        self._ensure_manual()
        for index in range(len(self.chain)):
            self._write(Producer.MANUAL, index, 0.0)
        self.set_manual_mode(False)
        self.last_result = None

    def detach(self) -> None:
        """Stop listening to the motion feed."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # ------------------------------------------------------------------
    # Gated write path
    # ------------------------------------------------------------------

    def _may_write(self, producer: Producer) -> bool:
        if producer is Producer.MOTION:
            return self._mode is ControlMode.SIMULATED
        return self._mode is not ControlMode.SIMULATED

    def _write(self, producer: Producer, index: int, angle: float) -> bool:
        if not self._may_write(producer):
            logger.debug("Dropped %s write to joint %d in %s mode", producer.value, index, self._mode.value)
            return False
        return self.chain.set_angle(index, angle)

    def on_joint_state(self, state: JointState) -> bool:
        """Motion-feed callback; applies *state* only in simulated mode."""
        if not self._may_write(Producer.MOTION):
            self.discarded_motion_samples += 1
            return False
        for index, angle in enumerate(state.position[: len(self.chain)]):
            self._write(Producer.MOTION, index, float(angle))
        self.applied_motion_samples += 1
        return True

    def tick(self) -> Optional[JointState]:
        """Frame callback: advance the motion feed by one step."""
        return self.motion_source.tick()

    # ------------------------------------------------------------------
    # Direct joint input
    # ------------------------------------------------------------------

    def select_joint(self, index: int) -> bool:
        """Select joint *index* for editing, entering manual mode."""
        if not self.chain.is_valid_index(index):
            return False
        self._ensure_manual()
        self.selected_joint = index
        return True

    def clear_selection(self) -> None:
        self.selected_joint = None

    def set_joint_angle(self, index: int, angle: float) -> bool:
        """Manually set joint *index*; the value is clamped to its limits.

        Returns:
            False for an invalid index, True once the angle is written.
        """
        if not self.chain.is_valid_index(index):
            return False
        self._ensure_manual()
        return self._write(Producer.MANUAL, index, angle)

    def set_joint_angle_deg(self, index: int, degrees: float) -> bool:
        return self.set_joint_angle(index, deg_to_rad(degrees))

    def jog_joint(self, index: int, delta: float) -> bool:
        """Offset joint *index* by *delta* radians."""
        if not self.chain.is_valid_index(index):
            return False
        return self.set_joint_angle(index, self.chain.angle(index) + delta)

    # ------------------------------------------------------------------
    # Pointer interaction
    # ------------------------------------------------------------------

    @property
    def dragging(self) -> bool:
        return self.drag_session is not None and self.drag_session.active

    def hit_test(self, event: PointerEvent, camera: PerspectiveCamera) -> MarkerHit:
        """Pick the marker under *event* using the live joint positions."""
        ndc = event.ndc
        if ndc is None:
            return NoHit()
        ray = camera.ray_from_ndc(*ndc)
        ee_radius = self.config.ee_marker_radius
        if self.ik_enabled:
            ee_radius *= self.config.ik_marker_scale
        return hit_test_markers(
            ray,
            self._marker_positions(),
            self.chain.end_effector_position(),
            self.config.joint_marker_radius,
            ee_radius,
            self.ik_enabled,
        )

    def pointer_down(
        self,
        event: PointerEvent,
        camera: PerspectiveCamera,
        hit: Optional[MarkerHit] = None,
    ) -> MarkerHit:
        """Start an interaction from a pointer press.

        The modifier gesture starts a drag-to-target anywhere.  Otherwise
        the hit variant (computed here unless supplied) is dispatched.

        Returns:
            The hit that was dispatched.
        """
        if event.modifier:
            self._begin_target_drag()
            return EndEffectorHit()
        picked = hit if hit is not None else self.hit_test(event, camera)
        if isinstance(picked, EndEffectorHit):
            self._begin_target_drag()
        elif isinstance(picked, JointHit):
            self._begin_joint_drag(picked.index, event.x)
        return picked

    def pointer_move(self, event: PointerEvent, camera: PerspectiveCamera) -> Optional[IKResult]:
        """Route a pointer move to the active drag, if any.

        Returns:
            The solve result for a drag-to-target move that produced a
            target, otherwise None.
        """
        if self.dragging:
            return self._drag_to_target(event, camera)
        if self.joint_drag is not None:
            drag = self.joint_drag
            delta = (event.x - drag.start_x) * self.config.joint_drag_sensitivity
            self._ensure_manual()
            self._write(Producer.MANUAL, drag.index, drag.start_angle + delta)
        return None

    def pointer_up(self) -> None:
        """End whichever drag is active; the mode is left unchanged."""
        self.cancel()

    def cancel(self) -> None:
        """Immediately stop any drag and release its highlighting."""
        if self.drag_session is not None:
            self.drag_session.active = False
            logger.debug("Target drag ended")
        self.drag_session = None
        self.joint_drag = None
        self.highlighted_joints.clear()

    def _begin_target_drag(self) -> bool:
        self._ensure_manual()
        anchor = self.chain.end_effector_position()
        if anchor is None:
            logger.debug("End effector unavailable; target drag not started")
            return False
        self.joint_drag = None
        self.drag_session = DragSession(anchor_world_pos=anchor)
        self.highlighted_joints = set(range(len(self.chain)))
        logger.debug("Target drag started at %s", np.round(anchor, 4))
        return True

    def _begin_joint_drag(self, index: int, x: float) -> None:
        self.select_joint(index)
        self.drag_session = None
        self.joint_drag = JointDragSession(index=index, start_x=x, start_angle=self.chain.angle(index))
        self.highlighted_joints = {index}

    def _drag_to_target(self, event: PointerEvent, camera: PerspectiveCamera) -> Optional[IKResult]:
        session = self.drag_session
        ndc = event.ndc
        if ndc is None:
            return None
        target = session.projector.project(camera, *ndc)
        if target is None:
            return None
        session.target = target
        return self.solve_to(target)

    def solve_to(self, target: np.ndarray, config: Optional[CCDSolverConfig] = None) -> Optional[IKResult]:
        """Run the solver toward *target* if manual control allows it.

        Args:
            target: World-space target.
            config: Solver options; defaults to the drag tuning.
        """
        if not self._may_write(Producer.SOLVER):
            return None
        result = solve_ccd_ik(self.chain, target, config or self.config.solver)
        self.last_result = result
        if self.drag_session is not None:
            self.drag_session.result = result
        return result

    def _marker_positions(self) -> Optional[np.ndarray]:
        accessor = self.chain.accessor
        if accessor is None:
            return None
        positions = [accessor.get_world_position(i) for i in range(len(self.chain))]
        if any(p is None for p in positions):
            return None
        return np.array(positions)

    # ------------------------------------------------------------------
    # UI readouts
    # ------------------------------------------------------------------

    @property
    def target_position(self) -> Optional[np.ndarray]:
        if not self.dragging:
            return None
        return self.drag_session.target

    @property
    def target_marker_opacity(self) -> float:
        """Opacity of the IK target marker: bright when converged."""
        if not self.dragging or self.drag_session.result is None:
            return TARGET_OPACITY_HIDDEN
        if self.drag_session.result.converged:
            return TARGET_OPACITY_CONVERGED
        return TARGET_OPACITY_DIVERGED

    def diagnostics(self) -> Dict[str, object]:
        """Snapshot of the values the UI displays."""
        result = self.last_result
        return {
            "mode": self._mode.value,
            "angles": self.chain.angles.tolist(),
            "angles_deg": self.chain.angles_deg,
            "limits": self.chain.limits,
            "selected_joint": self.selected_joint,
            "dragging": self.dragging,
            "converged": None if result is None else result.converged,
            "distance": None if result is None else result.distance,
        }
