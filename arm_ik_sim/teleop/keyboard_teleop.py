"""
Keyboard teleoperation for direct joint control.

Translates key presses into joint selection, joint jogging and mode
toggles, and applies them through a :class:`ControlArbiter` so that
keyboard input follows the same single-writer rules as pointer input.
A terminal-based fallback is provided when Pygame is not available.

Classes:
    KeyboardTeleop: Maps keyboard input to arbiter commands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np

from arm_ik_sim.control.arbiter import ControlArbiter


@dataclass
class KeyboardTeleop:
    """Maps keyboard input to manual joint commands.

    Digit keys select a joint (``1`` is the base), the left/right arrows
    (or ``a``/``d`` on the terminal) jog it down/up, ``m`` toggles manual
    mode, ``i`` toggles IK assist and ``q`` quits.

    When Pygame is available the teleop captures key-down / key-up events
    in real time, jogging continuously while a key is held.  Otherwise it
    reads single-character commands from stdin, each jogging one step.

    Attributes:
        num_joints: Number of joints that can be selected.
        step: Jog size per application (radians).
        selected_joint: Index of the joint being jogged.
        key_state: Tracks which jog keys are currently held.
    """

    num_joints: int = 6
    step: float = 0.05
    selected_joint: int = 0
    key_state: Dict[str, bool] = field(
        default_factory=lambda: {"increase": False, "decrease": False}
    )
    _pending: List[str] = field(default_factory=list, repr=False)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_joint_delta(self) -> np.ndarray:
        """Return the per-joint jog vector derived from held keys.

        Returns:
            1-D float array of shape ``(num_joints,)``.
        """
        delta = np.zeros(self.num_joints)
        delta[self.selected_joint] = self._keys_to_delta()
        return delta

    def apply(self, arbiter: ControlArbiter) -> bool:
        """Apply pending toggles and the current jog to *arbiter*.

        Returns:
            True if a joint angle was written.
        """
        for command in self._pending:
            if command == "toggle_manual":
                arbiter.set_manual_mode(not arbiter.is_manual)
            elif command == "toggle_ik":
                arbiter.toggle_ik_mode()
        self._pending.clear()
        delta = self._keys_to_delta()
        if delta == 0.0:
            return False
        arbiter.select_joint(self.selected_joint)
        return arbiter.jog_joint(self.selected_joint, delta)

    def process_pygame_events(self) -> bool:
        """Pump Pygame events and update ``key_state`` accordingly.

        Returns:
            *False* if a QUIT event was received; *True* otherwise.

        Raises:
            ImportError: If Pygame is not installed.
        """
        try:
            import pygame
        except ImportError as exc:
            raise ImportError(
                "Pygame required for real-time teleop: pip install pygame"
            ) from exc
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            self._handle_pygame_key_event(event, pygame)
        return True

    def process_terminal_input(self, char: str) -> bool:
        """Update state from a single-character terminal command.

        Supported characters: digits ``1``..``num_joints`` (select),
        ``a`` (jog down), ``d`` (jog up), ``m`` (toggle manual), ``i``
        (toggle IK assist), ``q`` (quit).

        Args:
            char: Single character read from stdin.

        Returns:
            *False* if the quit character was received; *True* otherwise.
        """
        self._reset_key_state()
        if char == "q":
            return False
        if char.isdigit():
            self._select(int(char) - 1)
        elif char == "a":
            self.key_state["decrease"] = True
        elif char == "d":
            self.key_state["increase"] = True
        elif char == "m":
            self._pending.append("toggle_manual")
        elif char == "i":
            self._pending.append("toggle_ik")
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _select(self, index: int) -> None:
        if 0 <= index < self.num_joints:
            self.selected_joint = index

    def _keys_to_delta(self) -> float:
        delta = 0.0
        if self.key_state["increase"]:
            delta += self.step
        if self.key_state["decrease"]:
            delta -= self.step
        return delta

    def _handle_pygame_key_event(self, event: object, pygame_module: object) -> None:
        """Update state from a single Pygame KEYDOWN / KEYUP event.

        Args:
            event: Pygame event object.
            pygame_module: The ``pygame`` module (passed to avoid re-import).
        """
        pg = pygame_module
        if not hasattr(event, "key"):
            return
        key_map = {pg.K_RIGHT: "increase", pg.K_LEFT: "decrease"}
        if event.key in key_map:
            self.key_state[key_map[event.key]] = event.type == pg.KEYDOWN
            return
        if event.type != pg.KEYDOWN:
            return
        if pg.K_1 <= event.key <= pg.K_9:
            self._select(event.key - pg.K_1)
        elif event.key == pg.K_m:
            self._pending.append("toggle_manual")
        elif event.key == pg.K_i:
            self._pending.append("toggle_ik")

    def _reset_key_state(self) -> None:
        """Set all jog keys to *False*.

        Used before applying terminal input so that only the current
        command is active.
        """
        for key in self.key_state:
            self.key_state[key] = False
