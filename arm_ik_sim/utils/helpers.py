"""
Small stateless helpers used across the arm_ik_sim package.

Provides numerical clamping, easing and interpolation for the motion
feed, angle conversion for UI readouts, and joint-status classification.
"""

from __future__ import annotations

import math
from typing import Tuple

from arm_ik_sim.utils.constants import (
    COLOR_JOINT_NEAR_LIMIT,
    COLOR_JOINT_OK,
    COLOR_JOINT_OUT_OF_RANGE,
    NEAR_LIMIT_THRESHOLD,
)


def clamp(value: float, lo: float, hi: float) -> float:
    """Return *value* clamped to the closed interval [*lo*, *hi*].

    Args:
        value: The scalar to clamp.
        lo: Lower bound (inclusive).
        hi: Upper bound (inclusive).

    Returns:
        The clamped scalar.
    """
    return max(lo, min(hi, value))


def ease_in_out_quad(t: float) -> float:
    """Quadratic ease-in-out remapping of *t* in [0, 1].

    Args:
        t: Linear progress.

    Returns:
        Eased progress, ``2t²`` below one half and ``1 - 2(1 - t)²`` above.
    """
    if t < 0.5:
        return 2.0 * t * t
    return 1.0 - 2.0 * (1.0 - t) * (1.0 - t)


def lerp(a: float, b: float, t: float) -> float:
    """Linearly interpolate from *a* to *b* by factor *t*."""
    return a + (b - a) * t


def rad_to_deg(rad: float) -> int:
    """Convert radians to whole degrees for display."""
    return int(round(math.degrees(rad)))


def deg_to_rad(deg: float) -> float:
    """Convert degrees to radians."""
    return math.radians(deg)


def normalize_to_range(value: float, lo: float, hi: float) -> float:
    """Scale *value* from [*lo*, *hi*] into [0, 1], clipping at the ends.

    A zero-width range maps every value to the midpoint 0.5.

    Args:
        value: Value in the original range.
        lo: Minimum of the original range.
        hi: Maximum of the original range.

    Returns:
        Normalized value in [0, 1].
    """
    span = hi - lo
    if span == 0.0:
        return 0.5
    return clamp((value - lo) / span, 0.0, 1.0)


def is_out_of_range(value: float, lo: float, hi: float) -> bool:
    """Return True when *value* lies outside [*lo*, *hi*]."""
    return value < lo or value > hi


def is_near_limit(value: float, lo: float, hi: float, threshold: float = NEAR_LIMIT_THRESHOLD) -> bool:
    """Return True when *value* uses more than *threshold* of the half-range.

    Args:
        value: Joint angle.
        lo: Lower limit.
        hi: Upper limit.
        threshold: Fraction of the half-range counted as "near".

    Returns:
        Whether the distance from the range centre exceeds the threshold.
    """
    half = (hi - lo) / 2.0
    dist_from_center = abs(value - (lo + half))
    return dist_from_center > half * threshold


def joint_status_color(value: float, lo: float, hi: float) -> Tuple[int, int, int]:
    """Pick the readout colour for a joint angle.

    Returns:
        Red when out of range, amber when near a limit, cyan otherwise.
    """
    if is_out_of_range(value, lo, hi):
        return COLOR_JOINT_OUT_OF_RANGE
    if is_near_limit(value, lo, hi):
        return COLOR_JOINT_NEAR_LIMIT
    return COLOR_JOINT_OK
