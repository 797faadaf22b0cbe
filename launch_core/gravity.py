#!/usr/bin/env python3
"""
Gravity fields for Gravity Launch.

A gravity field is any callable f(position, mass) -> force. Fields are pure:
the same inputs always give the same force, which is what lets the predictor
replay the flight ahead of time.

The planet field uses Newton's law with Plummer-like softening:

    F = g * M * m * r / (|r|^2 + eps^2)^(3/2)

where r points from the body to the planet centre. Softening keeps the force
finite near a planet centre; it is not physically exact but the game only
needs a smooth, stable pull.
"""
import math
from typing import Iterable, List

from .constants import DEFAULT_SOFTENING, GRAVITY_CONSTANT
from .data_models import Planet
from .vector_utils import Vec3, vec3


class PlanetGravityField:
    """Sum of softened point-mass attractions from static planets."""

    def __init__(self, planets: Iterable[Planet], g: float = GRAVITY_CONSTANT,
                 softening: float = DEFAULT_SOFTENING):
        self.planets: List[Planet] = list(planets)
        self.g = float(g)
        self.softening = max(0.0, float(softening))

    def __call__(self, position: Vec3, mass: float) -> Vec3:
        eps_squared = self.softening * self.softening
        fx = fy = fz = 0.0
        x, y, z = position
        for planet in self.planets:
            px, py, pz = planet.position
            dx = px - x
            dy = py - y
            dz = pz - z
            r_squared_soft = dx * dx + dy * dy + dz * dz + eps_squared
            if r_squared_soft == 0:
                continue  # body sits exactly on an unsoftened centre
            inv_r_cubed = 1.0 / (r_squared_soft * math.sqrt(r_squared_soft))
            magnitude = self.g * planet.mass * mass * inv_r_cubed
            fx += dx * magnitude
            fy += dy * magnitude
            fz += dz * magnitude
        return (fx, fy, fz)


class ConstantGravityField:
    """Uniform field returning the same force regardless of position or mass."""

    def __init__(self, force: Vec3):
        self.force = vec3(force)

    def __call__(self, position: Vec3, mass: float) -> Vec3:
        return self.force
