"""
Simulated joint-trajectory feed.

Cycles forever through a list of waypoint poses, easing between
consecutive poses, and pushes a :class:`JointState` to every subscriber
of its topic on each tick.  The feed is an ordinary object: callers
construct it, start and stop it, and drive its ticks from their frame
loop.

Classes:
    JointState: One published joint-angle sample.
    MotionSource: The waypoint-cycling publisher.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from arm_ik_sim.configs import MotionSourceConfig
from arm_ik_sim.utils.helpers import ease_in_out_quad, lerp

logger = logging.getLogger(__name__)

Subscriber = Callable[["JointState"], None]


@dataclass
class JointState:
    """A joint-angle sample as published on the joint-state topic.

    Attributes:
        seq: Tick counter, increasing by one per publication.
        frame_id: Reference frame of the sample.
        position: Joint angles in radians.
        names: Joint names matching ``position``, when known.
    """

    seq: int
    frame_id: str
    position: np.ndarray
    names: List[str] = field(default_factory=list)


class MotionSource:
    """Eased waypoint interpolator with a topic-keyed push interface.

    Args:
        config: Waypoints, increment and topic; defaults to the UR10 cycle.
        joint_names: Names stamped on published states.
    """

    def __init__(
        self,
        config: Optional[MotionSourceConfig] = None,
        joint_names: Optional[Sequence[str]] = None,
    ) -> None:
        self.config = config if config is not None else MotionSourceConfig()
        self.joint_names: List[str] = list(joint_names) if joint_names is not None else []
        self._waypoints = np.asarray(self.config.waypoints, dtype=np.float64)
        self._subscribers: Dict[str, List[Subscriber]] = {}
        self._running = False
        self._seq = 0
        self.current_index = 0
        self.next_index = 1
        self._segment_ticks = 0
        self.current = self._waypoints[0].copy()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True
        logger.debug("Motion source started on %s", self.config.topic)

    def stop(self) -> None:
        self._running = False
        logger.debug("Motion source stopped")

    def rewind(self) -> None:
        """Return to the first waypoint without touching subscriptions."""
        self.current_index = 0
        self.next_index = 1
        self._segment_ticks = 0
        self.current = self._waypoints[0].copy()

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, topic: str, callback: Subscriber) -> Callable[[], None]:
        """Register *callback* for *topic*.

        Returns:
            A function that removes this subscription when called.
        """
        self._subscribers.setdefault(topic, []).append(callback)
        return lambda: self.unsubscribe(topic, callback)

    def unsubscribe(self, topic: str, callback: Subscriber) -> None:
        """Remove *callback* from *topic*; unknown callbacks are ignored."""
        subs = self._subscribers.get(topic)
        if subs and callback in subs:
            subs.remove(callback)

    def subscriber_count(self, topic: Optional[str] = None) -> int:
        return len(self._subscribers.get(topic or self.config.topic, []))

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    @property
    def progress(self) -> float:
        """Linear progress through the current segment, in [0, 1)."""
        return self._segment_ticks * self.config.increment

    def _advance(self) -> None:
        self._segment_ticks += 1
        if self.progress >= 1.0:
            self._segment_ticks = 0
            self.current_index = self.next_index
            self.next_index = (self.next_index + 1) % len(self._waypoints)

    def sample(self) -> np.ndarray:
        """Interpolated joint vector at the current progress."""
        t = ease_in_out_quad(self.progress)
        start = self._waypoints[self.current_index]
        end = self._waypoints[self.next_index]
        return np.array([lerp(float(a), float(b), t) for a, b in zip(start, end)])

    def tick(self) -> Optional[JointState]:
        """Advance one step and publish the new joint vector.

        Returns:
            The published state, or None while the source is stopped.
        """
        if not self._running:
            return None
        self._advance()
        self.current = self.sample()
        self._seq += 1
        state = JointState(
            seq=self._seq,
            frame_id=self.config.frame_id,
            position=self.current.copy(),
            names=list(self.joint_names),
        )
        self._publish(self.config.topic, state)
        return state

    def _publish(self, topic: str, state: JointState) -> None:
        # Copy so a callback may unsubscribe while being notified.
        for callback in list(self._subscribers.get(topic, [])):
            callback(state)
