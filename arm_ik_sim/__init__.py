"""
Kinematic control core for a simulated 6-axis robot arm.

Drives the joint angles of a UR10-style arm from three competing sources:
a simulated motion feed, direct per-joint manual input, and interactive
drag-to-target inverse kinematics, with a state machine enforcing that
exactly one of them writes the angles at any instant.

Modules:
    robots: Joint-chain model, node accessor interface, simulated arm.
    kinematics: CCD inverse-kinematics solver and pointer drag projection.
    motion: Simulated waypoint trajectory feed.
    control: Marker hit-testing and the control-mode arbiter.
    teleop: Keyboard joint jogging.
    configs: Dataclass configurations.
    factory: One-call construction of a complete robot session.
    utils: Shared constants, math transforms, and helper utilities.
"""

__version__ = "0.1.0"
