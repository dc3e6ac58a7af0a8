#!/usr/bin/env python3
"""
Main entry point for the arm IK simulation.

Drives a robot session headlessly: streams the simulated motion feed
through the arbiter, solves single IK targets, replays a synthetic
pointer drag, or jogs joints from the terminal.  Run directly with
``python run_sim.py`` or import individual components for custom loops.

Usage examples::

    # Stream the demo trajectory for 400 frames
    python run_sim.py --robot ur10 --mode simulate --ticks 400

    # Solve for a target 5 cm above the current end effector
    python run_sim.py --mode ik --offset 0 0 0.05

    # Replay a pointer drag through the projector and solver
    python run_sim.py --mode drag --verbose

    # Jog joints from the terminal
    python run_sim.py --robot planar3 --mode teleop
"""

from __future__ import annotations

import argparse
import logging

import numpy as np

from arm_ik_sim.configs import CCDSolverConfig
from arm_ik_sim.control.arbiter import PointerEvent
from arm_ik_sim.factory import RobotSession, make_robot_session
from arm_ik_sim.kinematics.drag_projector import PerspectiveCamera
from arm_ik_sim.teleop.keyboard_teleop import KeyboardTeleop

_VIEWPORT = (800, 600)

# ======================================================================
# Formatting
# ======================================================================


def _format_angles(session: RobotSession) -> str:
    """Render the chain's angles as ``name=deg`` pairs.

    Args:
        session: Robot session to read.

    Returns:
        A single display line.
    """
    chain = session.chain
    return " ".join(
        f"{spec.short_name or spec.name}={deg:>4d}" for spec, deg in zip(chain.specs, chain.angles_deg)
    )


# ======================================================================
# Mode runners
# ======================================================================


def _run_simulate(session: RobotSession, args: argparse.Namespace) -> None:
    """Tick the motion feed and print the arbitrated angles periodically.

    Args:
        session: Robot session with a started motion feed.
        args: Parsed CLI arguments.
    """
    for tick in range(1, args.ticks + 1):
        session.step()
        if tick % args.print_every == 0:
            print(f"[tick {tick:>5d}] {_format_angles(session)}")
    arbiter = session.arbiter
    print(
        f"Applied {arbiter.applied_motion_samples} samples, "
        f"discarded {arbiter.discarded_motion_samples}."
    )


def _run_ik(session: RobotSession, args: argparse.Namespace) -> None:
    """Solve once for the current end effector plus ``--offset``.

    Args:
        session: Robot session to solve on.
        args: Parsed CLI arguments.
    """
    session.arbiter.set_manual_mode(True)
    start = session.chain.end_effector_position()
    target = start + np.asarray(args.offset, dtype=np.float64)
    config = CCDSolverConfig(max_iterations=args.max_iterations)
    result = session.arbiter.solve_to(target, config)
    print(f"Start:  {np.round(start, 4)}")
    print(f"Target: {np.round(target, 4)}")
    print(
        f"converged={result.converged} iterations={result.iterations} "
        f"distance={result.distance:.5f}"
    )
    print(f"Angles: {_format_angles(session)}")


def _run_drag(session: RobotSession, args: argparse.Namespace) -> None:
    """Replay a straight pointer drag from the end-effector marker.

    Args:
        session: Robot session to drive.
        args: Parsed CLI arguments.
    """
    arbiter = session.arbiter
    ee = session.chain.end_effector_position()
    camera = PerspectiveCamera.look_at(ee + np.array([1.5, -1.5, 1.0]), ee, aspect=_VIEWPORT[0] / _VIEWPORT[1])
    width, height = _VIEWPORT
    cx, cy = width / 2.0, height / 2.0
    arbiter.toggle_ik_mode()
    hit = arbiter.pointer_down(PointerEvent(cx, cy, width, height), camera)
    print(f"Pointer down at centre: {type(hit).__name__}")
    for step in range(1, args.ticks + 1):
        event = PointerEvent(cx + step * args.drag_px, cy - step * args.drag_px, width, height)
        result = arbiter.pointer_move(event, camera)
        if result is not None and step % args.print_every == 0:
            print(
                f"[move {step:>4d}] converged={result.converged} "
                f"distance={result.distance:.4f} opacity={arbiter.target_marker_opacity}"
            )
    arbiter.pointer_up()
    print(f"Final angles: {_format_angles(session)}")


def _run_teleop(session: RobotSession, args: argparse.Namespace) -> None:
    """Jog joints from single-character terminal commands.

    Args:
        session: Robot session to drive.
        args: Parsed CLI arguments.
    """
    teleop = KeyboardTeleop(num_joints=len(session.chain), step=args.jog_step)
    print("Teleop mode: 1-9 select, A/D jog, M manual, I IK assist, Q quit.")
    alive = True
    while alive:
        line = input("> ").strip().lower()
        for char in line or " ":
            alive = teleop.process_terminal_input(char)
            if not alive:
                break
            teleop.apply(session.arbiter)
            session.step()
        print(f"[{session.arbiter.mode.value}] joint {teleop.selected_joint + 1} | {_format_angles(session)}")


# ======================================================================
# CLI
# ======================================================================


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed ``argparse.Namespace``.
    """
    parser = argparse.ArgumentParser(description="Arm IK Simulation")
    parser.add_argument("--robot", choices=["ur10", "planar3"], default="ur10")
    parser.add_argument(
        "--mode", choices=["simulate", "ik", "drag", "teleop"], default="simulate"
    )
    parser.add_argument("--ticks", type=int, default=400)
    parser.add_argument("--print-every", type=int, default=50)
    parser.add_argument("--offset", type=float, nargs=3, default=[0.0, 0.0, 0.05])
    parser.add_argument("--max-iterations", type=int, default=20)
    parser.add_argument("--drag-px", type=float, default=2.0)
    parser.add_argument("--jog-step", type=float, default=0.05)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args()


# ======================================================================
# Dispatch
# ======================================================================


# Mapping from mode name to runner function
_MODE_DISPATCH = {
    "simulate": _run_simulate,
    "ik": _run_ik,
    "drag": _run_drag,
    "teleop": _run_teleop,
}


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------
if __name__ == "__main__":
    # Parse CLI arguments
    args = _parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    # Build the robot session
    session = make_robot_session(args.robot)
    print(f"Robot: {args.robot} | Mode: {args.mode} | Joints: {len(session.chain)}")
    print(f"End effector: {session.arm.end_effector_name}")
    print("-" * 60)

    # Dispatch to the selected mode runner
    runner = _MODE_DISPATCH[args.mode]
    runner(session, args)
