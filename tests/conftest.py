from __future__ import annotations

import pytest

from launch_core.controller import LaunchSettings, LaunchStateMachine
from launch_core.data_models import Body
from launch_core.gravity import ConstantGravityField
from launch_core.vector_utils import vec_add


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class RecordingEngine:
    """Stands in for PhysicsWorld and records every call the controller makes."""

    def __init__(self):
        self.velocity_changes = []
        self.speed_limits = []
        self.gravity_calls = []
        self.destroyed = []
        self.listeners = []

    def apply_velocity_change(self, body, delta_v):
        self.velocity_changes.append(delta_v)
        body.velocity = vec_add(body.velocity, delta_v)

    def limit_speed(self, body, max_speed):
        self.speed_limits.append(max_speed)
        body.max_speed = max_speed

    def set_gravity_enabled(self, body, enabled):
        self.gravity_calls.append(enabled)
        body.gravity_enabled = enabled

    def destroy(self, body):
        self.destroyed.append(body)
        body.alive = False

    def add_collision_listener(self, body, listener):
        self.listeners.append(listener)


class RecordingDisplay:
    def __init__(self):
        self.paths = []
        self.indicators = []

    def set_expected_path(self, positions):
        self.paths.append(list(positions))

    def show_player_indicator(self, position):
        self.indicators.append(position)


class RecordingLevel:
    def __init__(self):
        self.activated = 0
        self.stopped = 0

    def on_player_activated(self):
        self.activated += 1

    def on_player_stopped(self):
        self.stopped += 1


class FakeGameplay:
    def __init__(self, can_shoot=True, blocked=False):
        self.shoot = can_shoot
        self.blocked = blocked

    def can_shoot(self):
        return self.shoot

    def ui_blocked(self):
        return self.blocked


class CountingSound:
    def __init__(self):
        self.plays = 0

    def play(self):
        self.plays += 1


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rig(clock):
    """A controller wired to recording collaborators, aiming along +x."""

    class Rig:
        pass

    r = Rig()
    r.clock = clock
    r.body = Body(name="player", mass=2.0, radius=0.5, position=(0.0, 0.0, 0.0))
    r.engine = RecordingEngine()
    r.display = RecordingDisplay()
    r.level = RecordingLevel()
    r.gameplay = FakeGameplay()
    r.sound = CountingSound()
    r.aim = (10.0, 0.0, 0.0)
    r.field = ConstantGravityField((0.0, -4.0, 0.0))
    r.settings = LaunchSettings(max_speed=50.0, max_charge_time=2.0, fixed_dt=0.02, path_samples=30)
    r.controller = LaunchStateMachine(
        body=r.body,
        engine=r.engine,
        gravity_field=r.field,
        display=r.display,
        level=r.level,
        gameplay=r.gameplay,
        aim_source=lambda: r.aim,
        sound=r.sound,
        settings=r.settings,
        clock=clock,
    )
    return r
