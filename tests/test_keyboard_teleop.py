"""Tests for keyboard teleoperation."""

from __future__ import annotations

import types

import numpy as np
import pytest

from arm_ik_sim.control.arbiter import ControlMode
from arm_ik_sim.teleop.keyboard_teleop import KeyboardTeleop


def test_terminal_digit_selects_joint():
    teleop = KeyboardTeleop()
    teleop.process_terminal_input("3")
    assert teleop.selected_joint == 2
    teleop.process_terminal_input("9")
    assert teleop.selected_joint == 2


def test_terminal_jog_produces_delta():
    teleop = KeyboardTeleop(step=0.1, selected_joint=1)
    teleop.process_terminal_input("d")
    np.testing.assert_allclose(teleop.get_joint_delta(), [0.0, 0.1, 0.0, 0.0, 0.0, 0.0])
    teleop.process_terminal_input("a")
    assert teleop.get_joint_delta()[1] == pytest.approx(-0.1)


def test_quit_character():
    assert not KeyboardTeleop().process_terminal_input("q")
    assert KeyboardTeleop().process_terminal_input("x")


def test_apply_jogs_through_arbiter(arbiter):
    teleop = KeyboardTeleop(step=0.1)
    teleop.process_terminal_input("2")
    teleop.process_terminal_input("d")
    assert teleop.apply(arbiter)
    assert arbiter.mode is ControlMode.MANUAL
    assert arbiter.selected_joint == 1
    assert arbiter.chain.angle(1) == pytest.approx(0.1)


def test_apply_without_jog_writes_nothing(arbiter):
    teleop = KeyboardTeleop()
    teleop.process_terminal_input("4")
    assert not teleop.apply(arbiter)
    assert arbiter.chain.angles.tolist() == [0.0] * 6


def test_mode_toggles_are_queued(arbiter):
    teleop = KeyboardTeleop()
    teleop.process_terminal_input("i")
    teleop.apply(arbiter)
    assert arbiter.mode is ControlMode.MANUAL_IK
    teleop.process_terminal_input("m")
    teleop.apply(arbiter)
    assert arbiter.mode is ControlMode.SIMULATED


def test_pygame_key_events():
    pg = types.SimpleNamespace(
        K_RIGHT=1, K_LEFT=2, K_1=10, K_9=18, K_m=20, K_i=21, KEYDOWN=100, KEYUP=101
    )
    teleop = KeyboardTeleop(step=0.2)
    teleop._handle_pygame_key_event(types.SimpleNamespace(type=pg.KEYDOWN, key=pg.K_1 + 4), pg)
    assert teleop.selected_joint == 4
    teleop._handle_pygame_key_event(types.SimpleNamespace(type=pg.KEYDOWN, key=pg.K_RIGHT), pg)
    assert teleop.get_joint_delta()[4] == pytest.approx(0.2)
    teleop._handle_pygame_key_event(types.SimpleNamespace(type=pg.KEYUP, key=pg.K_RIGHT), pg)
    assert not teleop.get_joint_delta().any()
    teleop._handle_pygame_key_event(types.SimpleNamespace(type=pg.KEYDOWN, key=pg.K_i), pg)
    assert teleop._pending == ["toggle_ik"]
    teleop._handle_pygame_key_event(types.SimpleNamespace(type=pg.KEYDOWN), pg)
