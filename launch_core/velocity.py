#!/usr/bin/env python3
"""
Launch velocity from a timed press.

Power grows linearly with how long the pointer has been held, up to
max_charge_time, and the direction points from the body towards the aim
point. The function is pure so the controller can call it every fixed tick
for the preview and once more at release to commit.
"""
import math
from typing import Optional

from .constants import MAX_SPEED, TIME_FOR_MAX_POWER
from .vector_utils import Vec3, ZERO, clamp_magnitude, vec_norm, vec_scale, vec_sub


def charge_fraction(charge_elapsed: float, max_charge_time: float = TIME_FOR_MAX_POWER) -> float:
    """Fraction of full power in [0, 1] for a hold of charge_elapsed seconds."""
    if not max_charge_time > 0:
        raise ValueError(f"max_charge_time must be positive, got {max_charge_time!r}")
    if not charge_elapsed > 0:
        # Covers negative clock skew and NaN
        return 0.0
    return min(charge_elapsed, max_charge_time) / max_charge_time


def compute_launch_velocity(current_position: Vec3,
                            aim_point: Vec3,
                            charge_elapsed: float,
                            max_speed: float = MAX_SPEED,
                            max_charge_time: float = TIME_FOR_MAX_POWER,
                            fallback_direction: Optional[Vec3] = None) -> Vec3:
    """
    Compute the launch velocity for a press held charge_elapsed seconds.

    Args:
        current_position: Body position the launch starts from.
        aim_point: World-space point the player is aiming at.
        charge_elapsed: Seconds since the press began; capped at max_charge_time.
        max_speed: Speed reached at full charge.
        max_charge_time: Hold duration that yields full power.
        fallback_direction: Direction used when the aim point coincides with the
            body. Without one, a degenerate aim yields the zero vector.

    Returns:
        The (vx, vy, vz) launch velocity. Its length never exceeds max_speed;
        a full charge lands within a few ulps below it and an empty one is zero.
    """
    if not max_speed >= 0 or math.isinf(max_speed):
        raise ValueError(f"max_speed must be a finite non-negative number, got {max_speed!r}")
    fraction = charge_fraction(charge_elapsed, max_charge_time)

    direction = vec_norm(vec_sub(aim_point, current_position))
    if direction == ZERO:
        if fallback_direction is None:
            return ZERO
        direction = vec_norm(fallback_direction)

    speed = max_speed * fraction
    return clamp_magnitude(vec_scale(direction, speed), speed)
