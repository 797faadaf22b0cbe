#!/usr/bin/env python3
"""
Trajectory prediction for the aiming preview.

The predictor replays, step by step, exactly what PhysicsWorld will do to the
player after release: it calls the same integrate_step with the same fixed dt,
the same speed limit and the same gravity field.

Obstacles are not considered; the path is the free flight under gravity.
"""
import math
from typing import List, NamedTuple

from .physics import GravityField, integrate_step
from .vector_utils import Vec3, is_finite, vec3


class PredictionError(ValueError):
    """Raised when prediction inputs cannot describe a physical flight."""


class Trajectory(NamedTuple):
    positions: List[Vec3]
    velocities: List[Vec3]


def _check_inputs(start_position, start_velocity, mass, step_count, fixed_dt, max_speed) -> None:
    if isinstance(step_count, bool) or not isinstance(step_count, int):
        raise PredictionError(f"step_count must be an int, got {step_count!r}")
    if step_count < 0:
        raise PredictionError(f"step_count must not be negative, got {step_count}")
    if not (math.isfinite(mass) and mass > 0):
        raise PredictionError(f"mass must be positive and finite, got {mass!r}")
    if not (math.isfinite(fixed_dt) and fixed_dt > 0):
        raise PredictionError(f"fixed_dt must be positive and finite, got {fixed_dt!r}")
    if max_speed is not None and not max_speed >= 0:
        raise PredictionError(f"max_speed must not be negative, got {max_speed!r}")
    if not (is_finite(start_position) and is_finite(start_velocity)):
        raise PredictionError("start position and velocity must be finite")


def predict_trajectory(start_position: Vec3, start_velocity: Vec3, mass: float,
                       step_count: int, fixed_dt: float, max_speed: float,
                       gravity_field: GravityField) -> Trajectory:
    """
    Forward-simulate step_count samples of free flight.

    Sample 0 is the start state itself. Sample i (i >= 1) is the state after i
    fixed steps: force at position[i-1], velocity update, speed clamp, then the
    position update with the clamped velocity. Inputs are never mutated.

    Raises:
        PredictionError: on a negative step count, non-positive mass or dt,
            negative max speed, or non-finite start state.
    """
    _check_inputs(start_position, start_velocity, mass, step_count, fixed_dt, max_speed)
    if step_count == 0:
        return Trajectory([], [])

    position = vec3(start_position)
    velocity = vec3(start_velocity)
    positions = [position]
    velocities = [velocity]
    for _ in range(1, step_count):
        force = gravity_field(position, mass)
        position, velocity = integrate_step(position, velocity, force, mass, fixed_dt, max_speed)
        positions.append(position)
        velocities.append(velocity)
    return Trajectory(positions, velocities)


def predict_path(start_position: Vec3, start_velocity: Vec3, mass: float,
                 step_count: int, fixed_dt: float, max_speed: float,
                 gravity_field: GravityField) -> List[Vec3]:
    """Positions only; see predict_trajectory."""
    return predict_trajectory(start_position, start_velocity, mass, step_count,
                              fixed_dt, max_speed, gravity_field).positions
