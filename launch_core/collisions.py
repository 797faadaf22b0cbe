#!/usr/bin/env python3
"""
Collision handling for Gravity Launch.

Two halves live here:
- Contact detection and resolution used by PhysicsWorld: sphere overlap between
  dynamic bodies and static planets, reported once per new contact (collision
  enter), with an inelastic push-out so bodies do not sink into planets.
- CollisionResponder, the launch rule that reacts to those contacts: planets and
  goals stop the flight, planets also destroy the player.
"""
import logging
from typing import Iterable, List, Set, Tuple

from .data_models import Body, BodyCategory, LaunchState, Planet
from .vector_utils import clamp, vec_add, vec_dot, vec_len, vec_scale, vec_sub

logger = logging.getLogger(__name__)


def bodies_touch(body: Body, planet: Planet) -> bool:
    return vec_len(vec_sub(body.position, planet.position)) <= body.radius + planet.radius


def resolve_planet_contact(body: Body, planet: Planet, restitution: float = 0.0) -> None:
    """
    Push body out of a static planet and remove its approaching normal velocity.

    The planet has infinite mass, so the whole correction goes to the body.
    """
    offset = vec_sub(body.position, planet.position)
    dist = vec_len(offset)
    r_sum = body.radius + planet.radius
    if dist == 0 or dist > r_sum:
        return
    normal = vec_scale(offset, 1.0 / dist)
    body.position = vec_add(body.position, vec_scale(normal, r_sum - dist))

    vn = vec_dot(body.velocity, normal)
    if vn < 0:
        e = clamp(restitution, 0.0, 1.0)
        body.velocity = vec_sub(body.velocity, vec_scale(normal, (1.0 + e) * vn))


class ContactTracker:
    """Remembers which body/planet pairs are touching so only new contacts are reported."""

    def __init__(self):
        self._touching: Set[Tuple[int, int]] = set()

    def update(self, bodies: Iterable[Body], planets: List[Planet]) -> List[Tuple[Body, Planet]]:
        """Return pairs that started touching since the previous update."""
        entered: List[Tuple[Body, Planet]] = []
        touching: Set[Tuple[int, int]] = set()
        for body in bodies:
            for planet in planets:
                if not bodies_touch(body, planet):
                    continue
                key = (id(body), id(planet))
                touching.add(key)
                if key not in self._touching:
                    entered.append((body, planet))
                resolve_planet_contact(body, planet)
        self._touching = touching
        return entered

    def forget(self, body: Body) -> None:
        self._touching = {key for key in self._touching if key[0] != id(body)}


class CollisionResponder:
    """
    Reacts to collision-enter events for the player body.

    Planet or Goal: notify the level that the player stopped and switch gravity
    off. Planet additionally destroys the body. Anything else is ignored.
    Repeated notifications after the first stop are no-ops.
    """

    def __init__(self, body: Body, state: LaunchState, engine, level):
        self.body = body
        self.state = state
        self.engine = engine
        self.level = level

    def on_collision(self, category: BodyCategory) -> None:
        if self.state.stopped or self.state.destroyed:
            logger.debug("Ignoring %s collision for stopped body %s", category.value, self.body.name)
            return
        if category not in (BodyCategory.PLANET, BodyCategory.GOAL):
            return

        self.state.stopped = True
        logger.info("Player %s stopped by %s", self.body.name, category.value)
        self.level.on_player_stopped()
        self.state.gravity_enabled = False
        self.engine.set_gravity_enabled(self.body, False)

        if category is BodyCategory.PLANET:
            self.state.destroyed = True
            self.engine.destroy(self.body)
