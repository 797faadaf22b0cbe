#!/usr/bin/env python3
"""
Data models for Gravity Launch.

This module defines the dataclasses shared between physics, prediction,
the launch controller and the pygame front end.

Units and usage
- position is in metres [m], velocity in metres per second [m/s], radius in metres, mass in kg.
- Body instances are owned by PhysicsWorld; the controller only reads snapshots of them
  and writes velocity once, through the world, at launch.
- trail stores past positions to render the flown path; it is appended by the world step.
"""
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Optional, Tuple

from .vector_utils import Vec3, ZERO


class BodyCategory(Enum):
    """What a collision partner is, as far as the launch rules care."""
    PLANET = "Planet"
    GOAL = "Goal"
    OTHER = "Other"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "BodyCategory":
        """Map an engine/level tag to a category; unknown tags are OTHER."""
        for category in cls:
            if category.value == tag:
                return category
        return cls.OTHER


class LaunchPhase(Enum):
    IDLE = "idle"
    CHARGING = "charging"
    LAUNCHED = "launched"


@dataclass
class Body:
    """
    A dynamic rigid body stepped by PhysicsWorld.

    Fields:
    - name: Identifier for the body
    - mass: Mass in kilograms (must be positive)
    - radius: Collision radius in metres
    - position: 3D position (x, y, z)
    - velocity: 3D velocity (vx, vy, vz)
    - max_speed: Speed limit applied every step, or None for unlimited
    - gravity_enabled: Whether the gravity field acts on this body
    - alive: False once the body has been destroyed
    - trail: Deque of past positions for drawing the flown path
    """
    name: str
    mass: float
    radius: float
    position: Vec3 = ZERO
    velocity: Vec3 = ZERO
    color: Tuple[int, int, int] = (240, 240, 240)
    max_speed: Optional[float] = None
    gravity_enabled: bool = False
    alive: bool = True
    trail: Deque[Vec3] = field(default_factory=lambda: deque(maxlen=400))

    def add_trail_point(self) -> None:
        """Append the current position to the trail."""
        self.trail.append(self.position)


@dataclass
class Planet:
    """A static attractor. Planets never move; only their category and size matter for contacts."""
    name: str
    mass: float
    radius: float
    position: Vec3
    category: BodyCategory = BodyCategory.PLANET
    color: Tuple[int, int, int] = (100, 149, 237)


@dataclass
class LaunchState:
    """
    Per-player launch bookkeeping, created with the body and kept for its lifetime.

    charge_started_at is set exactly while phase is CHARGING. LAUNCHED is
    one-way: nothing moves the phase back to IDLE or CHARGING.
    """
    phase: LaunchPhase = LaunchPhase.IDLE
    charge_started_at: Optional[float] = None
    gravity_enabled: bool = False
    stopped: bool = False
    destroyed: bool = False

    @property
    def charging(self) -> bool:
        return self.phase is LaunchPhase.CHARGING

    def start_charge(self, now: float) -> None:
        self.phase = LaunchPhase.CHARGING
        self.charge_started_at = now

    def mark_launched(self) -> None:
        self.phase = LaunchPhase.LAUNCHED
        self.charge_started_at = None
