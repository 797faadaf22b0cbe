#!/usr/bin/env python3
"""
Player launch controller.

The controller turns a timed pointer hold into a launch:

    IDLE --press--> CHARGING --release--> LAUNCHED

While charging, every fixed tick recomputes the launch velocity for the
current hold time and publishes the predicted path. On release the path is
cleared, the velocity is applied once as an instantaneous change, gravity is
switched on and the level is told the player is moving. Collisions are routed
to a CollisionResponder that shares the same LaunchState.

Collaborators are injected by whoever builds the controller. Two entry points
are called by the host scheduler:
- on_fixed_tick(): once per fixed physics step
- update(pressed, released): once per rendered frame with that frame's pointer edges
"""
import logging
import time
from typing import Callable, List, Optional, Protocol, Sequence

from .collisions import CollisionResponder
from .constants import FIXED_DT, MAX_POSITION_DRAWS, MAX_SPEED, TIME_FOR_MAX_POWER
from .data_models import Body, BodyCategory, LaunchPhase, LaunchState
from .physics import GravityField
from .prediction import predict_path
from .velocity import compute_launch_velocity
from .vector_utils import Vec3, ZERO, vec_norm, vec_sub

logger = logging.getLogger(__name__)


class PhysicsEngine(Protocol):
    def apply_velocity_change(self, body: Body, delta_v: Vec3) -> None: ...
    def limit_speed(self, body: Body, max_speed: Optional[float]) -> None: ...
    def set_gravity_enabled(self, body: Body, enabled: bool) -> None: ...
    def destroy(self, body: Body) -> None: ...
    def add_collision_listener(self, body: Body, listener: Callable[[BodyCategory], None]) -> None: ...


class PathDisplay(Protocol):
    def set_expected_path(self, positions: Sequence[Vec3]) -> None: ...
    def show_player_indicator(self, position: Vec3) -> None: ...


class LevelEvents(Protocol):
    def on_player_activated(self) -> None: ...
    def on_player_stopped(self) -> None: ...


class Gameplay(Protocol):
    def can_shoot(self) -> bool: ...
    def ui_blocked(self) -> bool: ...


class LaunchSound(Protocol):
    def play(self) -> None: ...


class LaunchSettings:
    """Container for launch tuning; defaults come from constants."""

    def __init__(self, max_speed: float = MAX_SPEED, max_charge_time: float = TIME_FOR_MAX_POWER,
                 fixed_dt: float = FIXED_DT, path_samples: int = MAX_POSITION_DRAWS):
        if not max_speed > 0:
            raise ValueError(f"max_speed must be positive, got {max_speed!r}")
        if not max_charge_time > 0:
            raise ValueError(f"max_charge_time must be positive, got {max_charge_time!r}")
        if not fixed_dt > 0:
            raise ValueError(f"fixed_dt must be positive, got {fixed_dt!r}")
        if isinstance(path_samples, bool) or not isinstance(path_samples, int):
            raise ValueError(f"path_samples must be an int, got {path_samples!r}")
        if path_samples < 0:
            raise ValueError(f"path_samples must not be negative, got {path_samples!r}")
        self.max_speed = float(max_speed)
        self.max_charge_time = float(max_charge_time)
        self.fixed_dt = float(fixed_dt)
        self.path_samples = int(path_samples)


class LaunchStateMachine:
    """Charge/launch state for one controllable body."""

    def __init__(self, body: Body, engine: PhysicsEngine, gravity_field: GravityField,
                 display: PathDisplay, level: LevelEvents, gameplay: Gameplay,
                 aim_source: Callable[[], Vec3], sound: Optional[LaunchSound] = None,
                 settings: Optional[LaunchSettings] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.body = body
        self.engine = engine
        self.gravity_field = gravity_field
        self.display = display
        self.level = level
        self.gameplay = gameplay
        self.aim_source = aim_source
        self.sound = sound
        self.settings = settings or LaunchSettings()
        self.clock = clock

        self.state = LaunchState()
        self.predicted_path: List[Vec3] = []
        self.collisions = CollisionResponder(body, self.state, engine, level)
        self._last_direction: Optional[Vec3] = None

        engine.limit_speed(body, self.settings.max_speed)
        engine.set_gravity_enabled(body, False)
        engine.add_collision_listener(body, self.on_collision)
        self._clear_expected_path()

    @property
    def phase(self) -> LaunchPhase:
        return self.state.phase

    @property
    def gravity_enabled(self) -> bool:
        return self.state.gravity_enabled

    def charge_elapsed(self) -> float:
        if self.state.charge_started_at is None:
            return 0.0
        return max(0.0, self.clock() - self.state.charge_started_at)

    def candidate_velocity(self) -> Vec3:
        """Launch velocity if the pointer were released right now."""
        position = self.body.position
        aim = self.aim_source()
        direction = vec_norm(vec_sub(aim, position))
        if direction != ZERO:
            self._last_direction = direction
        return compute_launch_velocity(position, aim, self.charge_elapsed(),
                                       self.settings.max_speed, self.settings.max_charge_time,
                                       fallback_direction=self._last_direction)

    # Input transitions

    def on_press_start(self) -> None:
        if self.state.stopped or self.state.destroyed:
            logger.debug("Press ignored: %s is no longer in play", self.body.name)
            return
        if self.state.phase is not LaunchPhase.IDLE:
            logger.debug("Press ignored in phase %s", self.state.phase.value)
            return
        if not self.gameplay.can_shoot() or self.gameplay.ui_blocked():
            logger.debug("Press ignored: input is gated")
            return
        self.state.start_charge(self.clock())
        logger.debug("Charging %s", self.body.name)

    def on_press_end(self) -> None:
        if not self.state.charging:
            logger.debug("Release ignored in phase %s", self.state.phase.value)
            return
        velocity = self.candidate_velocity()
        self._clear_expected_path()
        self.state.mark_launched()

        if self.sound is not None:
            self.sound.play()
        self.engine.apply_velocity_change(self.body, velocity)
        self.state.gravity_enabled = True
        self.engine.set_gravity_enabled(self.body, True)
        logger.info("Launched %s with velocity (%.3f, %.3f, %.3f)", self.body.name, *velocity)
        self.level.on_player_activated()

    def on_collision(self, category: BodyCategory) -> None:
        self.collisions.on_collision(category)

    # Scheduler callbacks

    def on_fixed_tick(self) -> None:
        """Recompute and publish the preview while charging."""
        if self.state.destroyed or not self.state.charging:
            return
        self.predicted_path = predict_path(self.body.position, self.candidate_velocity(),
                                           self.body.mass, self.settings.path_samples,
                                           self.settings.fixed_dt, self.settings.max_speed,
                                           self.gravity_field)
        self.display.set_expected_path(self.predicted_path)

    def update(self, pressed: bool = False, released: bool = False) -> None:
        """Presentation tick: publish the indicator and process this frame's pointer edges."""
        if self.state.destroyed:
            return
        self.display.show_player_indicator(self.body.position)

        if not self.gameplay.can_shoot():
            return
        if pressed:
            self.on_press_start()
        if released and self.state.charging:
            self.on_press_end()

    def _clear_expected_path(self) -> None:
        self.predicted_path = []
        self.display.set_expected_path([])
