from __future__ import annotations

from launch_core.collisions import CollisionResponder, ContactTracker, resolve_planet_contact
from launch_core.controller import LaunchSettings, LaunchStateMachine
from launch_core.data_models import Body, BodyCategory, LaunchState, Planet
from launch_core.gravity import PlanetGravityField
from launch_core.physics import PhysicsWorld

from conftest import FakeClock, FakeGameplay, RecordingDisplay, RecordingEngine, RecordingLevel


def make_responder():
    body = Body("player", mass=1.0, radius=0.5)
    state = LaunchState(gravity_enabled=True)
    engine = RecordingEngine()
    level = RecordingLevel()
    return CollisionResponder(body, state, engine, level), body, state, engine, level


def test_goal_stops_without_destroying():
    responder, body, state, engine, level = make_responder()
    responder.on_collision(BodyCategory.GOAL)

    assert level.stopped == 1
    assert engine.gravity_calls == [False]
    assert state.gravity_enabled is False
    assert engine.destroyed == []
    assert state.stopped and not state.destroyed


def test_planet_stops_and_destroys_once():
    responder, body, state, engine, level = make_responder()
    responder.on_collision(BodyCategory.PLANET)
    responder.on_collision(BodyCategory.PLANET)
    responder.on_collision(BodyCategory.GOAL)

    assert level.stopped == 1
    assert engine.gravity_calls == [False]
    assert engine.destroyed == [body]
    assert state.destroyed


def test_other_collisions_are_ignored():
    responder, body, state, engine, level = make_responder()
    responder.on_collision(BodyCategory.OTHER)

    assert level.stopped == 0
    assert engine.gravity_calls == []
    assert state.gravity_enabled is True
    assert not state.stopped


def test_goal_then_planet_does_not_destroy():
    responder, body, state, engine, level = make_responder()
    responder.on_collision(BodyCategory.GOAL)
    responder.on_collision(BodyCategory.PLANET)
    assert engine.destroyed == []
    assert level.stopped == 1


def test_category_from_tag():
    assert BodyCategory.from_tag("Planet") is BodyCategory.PLANET
    assert BodyCategory.from_tag("Goal") is BodyCategory.GOAL
    assert BodyCategory.from_tag("planet") is BodyCategory.OTHER
    assert BodyCategory.from_tag(None) is BodyCategory.OTHER


def test_contact_is_reported_once_while_touching():
    planet = Planet("rock", 0.0, 1.0, (0.0, 0.0, 0.0))
    body = Body("player", mass=1.0, radius=0.5, position=(1.2, 0.0, 0.0))
    tracker = ContactTracker()

    assert tracker.update([body], [planet]) == [(body, planet)]
    body.position = (1.3, 0.0, 0.0)
    assert tracker.update([body], [planet]) == []
    body.position = (5.0, 0.0, 0.0)
    assert tracker.update([body], [planet]) == []
    body.position = (1.0, 0.0, 0.0)
    assert tracker.update([body], [planet]) == [(body, planet)]


def test_resolve_pushes_out_and_removes_approach_speed():
    planet = Planet("rock", 0.0, 1.0, (0.0, 0.0, 0.0))
    body = Body("player", mass=1.0, radius=0.5, position=(1.0, 0.0, 0.0), velocity=(-3.0, 2.0, 0.0))
    resolve_planet_contact(body, planet)
    assert body.position[0] >= 1.5 - 1e-12
    assert body.velocity == (0.0, 2.0, 0.0)


def test_world_reports_planet_contact_and_responder_destroys():
    planet = Planet("rock", 0.0, 1.0, (0.0, 0.0, 0.0))
    world = PhysicsWorld(fixed_dt=0.02)
    world.add_planet(planet)
    body = world.add_body(Body("player", mass=1.0, radius=0.5, position=(3.0, 0.0, 0.0),
                               velocity=(-10.0, 0.0, 0.0)))
    state = LaunchState()
    level = RecordingLevel()
    seen = []
    responder = CollisionResponder(body, state, world, level)
    world.add_collision_listener(body, seen.append)
    world.add_collision_listener(body, responder.on_collision)

    for _ in range(20):
        world.step()

    assert world.steps == 20
    assert seen == [BodyCategory.PLANET]
    assert level.stopped == 1
    assert not body.alive
    assert body not in world.bodies


def test_goal_landing_through_controller_keeps_body():
    goal = Planet("goal", 0.0, 1.0, (5.0, 0.0, 0.0), category=BodyCategory.GOAL)
    field = PlanetGravityField([goal])
    world = PhysicsWorld(field, fixed_dt=0.02)
    world.add_planet(goal)
    body = world.add_body(Body("player", mass=1.0, radius=0.5))
    clock = FakeClock()
    level = RecordingLevel()
    controller = LaunchStateMachine(body, world, field, RecordingDisplay(), level, FakeGameplay(),
                                    aim_source=lambda: (5.0, 0.0, 0.0),
                                    settings=LaunchSettings(max_speed=20.0), clock=clock)

    controller.update(pressed=True)
    clock.now = 2.0
    controller.update(released=True)
    for _ in range(50):
        controller.on_fixed_tick()
        world.step()

    assert level.activated == 1
    assert level.stopped == 1
    assert body.alive
    assert body.gravity_enabled is False
    assert controller.gravity_enabled is False
