#!/usr/bin/env python3
"""
Fixed-step physics for Gravity Launch.

Responsibilities
- Provide the single integration step shared by the authoritative world and the
  trajectory predictor, so a preview reproduces real flight frame for frame.
- Own the dynamic bodies and static planets, step them at a fixed dt, and emit
  collision-enter events.

Integration order (semi-implicit Euler), per body and per step:
1) a = F(x_prev, m) / m
2) v = v_prev + a * dt
3) v = clamp |v| to the body's speed limit
4) x = x_prev + v * dt   (uses the already-updated, clamped velocity)

Threading
- Single-threaded. The scheduler calls step() from the fixed tick only.
"""
import logging
from typing import Callable, Dict, List, Optional, Tuple

from .collisions import ContactTracker
from .constants import FIXED_DT
from .data_models import Body, BodyCategory, Planet
from .vector_utils import Vec3, ZERO, clamp_magnitude, vec_add, vec_scale

logger = logging.getLogger(__name__)

GravityField = Callable[[Vec3, float], Vec3]
CollisionListener = Callable[[BodyCategory], None]


def integrate_step(position: Vec3, velocity: Vec3, force: Vec3, mass: float,
                   dt: float, max_speed: Optional[float] = None) -> Tuple[Vec3, Vec3]:
    """
    Advance one body by one fixed step.

    Args:
        position: Position at the start of the step.
        velocity: Velocity at the start of the step.
        force: Force evaluated at position.
        mass: Body mass (> 0; callers validate).
        dt: Step length in seconds.
        max_speed: Speed limit applied after the velocity update, or None.

    Returns:
        (new_position, new_velocity)
    """
    acceleration = vec_scale(force, 1.0 / mass)
    new_velocity = vec_add(velocity, vec_scale(acceleration, dt))
    if max_speed is not None:
        new_velocity = clamp_magnitude(new_velocity, max_speed)
    new_position = vec_add(position, vec_scale(new_velocity, dt))
    return new_position, new_velocity


class PhysicsWorld:
    """
    Authoritative rigid-body stepper.

    Bodies move under gravity_field when their gravity flag is set; planets are
    static. After every step, new body/planet contacts are reported to the
    listeners registered for that body.
    """

    def __init__(self, gravity_field: Optional[GravityField] = None, fixed_dt: float = FIXED_DT):
        if not fixed_dt > 0:
            raise ValueError(f"fixed_dt must be positive, got {fixed_dt!r}")
        self.gravity_field = gravity_field
        self.fixed_dt = float(fixed_dt)
        self.bodies: List[Body] = []
        self.planets: List[Planet] = []
        self.steps = 0
        self.record_trails = True
        self._listeners: Dict[int, List[CollisionListener]] = {}
        self._contacts = ContactTracker()

    def add_body(self, body: Body) -> Body:
        if not body.mass > 0:
            raise ValueError(f"body {body.name!r} must have positive mass, got {body.mass!r}")
        body.alive = True
        self.bodies.append(body)
        return body

    def add_planet(self, planet: Planet) -> Planet:
        self.planets.append(planet)
        return planet

    def add_collision_listener(self, body: Body, listener: CollisionListener) -> None:
        self._listeners.setdefault(id(body), []).append(listener)

    # Operations consumed by the launch controller

    def apply_velocity_change(self, body: Body, delta_v: Vec3) -> None:
        """Instantaneous velocity change, independent of mass."""
        if not body.alive:
            return
        body.velocity = vec_add(body.velocity, delta_v)

    def limit_speed(self, body: Body, max_speed: Optional[float]) -> None:
        """Clamp the body's speed now and on every following step."""
        body.max_speed = max_speed
        if max_speed is not None:
            body.velocity = clamp_magnitude(body.velocity, max_speed)

    def set_gravity_enabled(self, body: Body, enabled: bool) -> None:
        body.gravity_enabled = bool(enabled)

    def destroy(self, body: Body) -> None:
        if not body.alive:
            return
        body.alive = False
        if body in self.bodies:
            self.bodies.remove(body)
        self._listeners.pop(id(body), None)
        self._contacts.forget(body)
        logger.info("Destroyed body %s", body.name)

    def force_on(self, body: Body) -> Vec3:
        if not body.gravity_enabled or self.gravity_field is None:
            return ZERO
        return self.gravity_field(body.position, body.mass)

    def step(self) -> None:
        """Advance every live body by one fixed step, then dispatch new contacts."""
        dt = self.fixed_dt
        for body in list(self.bodies):
            force = self.force_on(body)
            body.position, body.velocity = integrate_step(
                body.position, body.velocity, force, body.mass, dt, body.max_speed)
            if self.record_trails and body.velocity != ZERO:
                body.add_trail_point()
        self.steps += 1

        for body, planet in self._contacts.update(self.bodies, self.planets):
            # A listener may have destroyed the body on an earlier contact this step
            if not body.alive:
                continue
            logger.debug("Contact %s -> %s (%s)", body.name, planet.name, planet.category.value)
            for listener in list(self._listeners.get(id(body), ())):
                listener(planet.category)
