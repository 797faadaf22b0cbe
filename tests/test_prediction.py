from __future__ import annotations

import random

import pytest

from launch_core.data_models import Body, Planet
from launch_core.gravity import ConstantGravityField, PlanetGravityField
from launch_core.physics import PhysicsWorld
from launch_core.prediction import PredictionError, predict_path, predict_trajectory
from launch_core.vector_utils import vec_len


def test_first_steps_under_constant_force():
    field = ConstantGravityField((0.0, -10.0, 0.0))
    traj = predict_trajectory((0.0, 0.0, 0.0), (10.0, 0.0, 0.0), 1.0, 3, 0.02, 50.0, field)

    assert len(traj.positions) == 3
    assert traj.positions[0] == (0.0, 0.0, 0.0)
    assert traj.positions[1] == pytest.approx((0.2, -0.004, 0.0))
    assert traj.velocities[1] == pytest.approx((10.0, -0.2, 0.0))
    assert vec_len(traj.velocities[1]) == pytest.approx(10.002, abs=1e-3)
    # second step uses the updated velocity for the position update
    assert traj.velocities[2] == pytest.approx((10.0, -0.4, 0.0))
    assert traj.positions[2] == pytest.approx((0.4, -0.012, 0.0))


@pytest.mark.parametrize("n", [1, 2, 17, 100])
def test_path_length_and_start(n):
    field = PlanetGravityField([Planet("p", 50.0, 2.0, (10.0, 5.0, 0.0))])
    path = predict_path((1.0, 2.0, 3.0), (4.0, 0.0, -1.0), 0.5, n, 0.02, 50.0, field)
    assert len(path) == n
    assert path[0] == (1.0, 2.0, 3.0)


def test_zero_steps_is_empty():
    field = ConstantGravityField((0.0, -10.0, 0.0))
    assert predict_path((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), 1.0, 0, 0.02, 50.0, field) == []


def test_prediction_is_deterministic_and_does_not_touch_inputs():
    planets = [Planet("a", 80.0, 3.0, (20.0, 0.0, 0.0)), Planet("b", 30.0, 1.0, (-5.0, 12.0, 0.0))]
    field = PlanetGravityField(planets)
    start = [0.0, 0.0, 0.0]
    velocity = [3.0, 9.0, 0.0]

    first = predict_path(start, velocity, 1.5, 80, 0.02, 50.0, field)
    second = predict_path(start, velocity, 1.5, 80, 0.02, 50.0, field)

    assert first == second
    assert start == [0.0, 0.0, 0.0]
    assert velocity == [3.0, 9.0, 0.0]
    assert [p.position for p in planets] == [(20.0, 0.0, 0.0), (-5.0, 12.0, 0.0)]


def test_speed_never_exceeds_limit():
    field = ConstantGravityField((3.0, -1000.0, 7.0))
    traj = predict_trajectory((0.0, 0.0, 0.0), (45.0, 0.0, 0.0), 1.0, 60, 0.02, 50.0, field)
    speeds = [vec_len(v) for v in traj.velocities[1:]]
    assert max(speeds) == pytest.approx(50.0)
    assert all(s <= 50.0 for s in speeds)


def test_speed_limit_holds_for_any_pull_direction():
    rng = random.Random(5)
    for _ in range(300):
        force = tuple(rng.uniform(-2000.0, 2000.0) for _ in range(3))
        launch = tuple(rng.uniform(-30.0, 30.0) for _ in range(3))
        traj = predict_trajectory((0.0, 0.0, 0.0), launch, 1.0, 20, 0.02, 50.0, ConstantGravityField(force))
        assert all(vec_len(v) <= 50.0 for v in traj.velocities[1:])


@pytest.mark.parametrize("mass", [0.0, -1.0, float("nan"), float("inf")])
def test_bad_mass_fails_fast(mass):
    field = ConstantGravityField((0.0, -10.0, 0.0))
    with pytest.raises(PredictionError):
        predict_path((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), mass, 10, 0.02, 50.0, field)


@pytest.mark.parametrize("kwargs", [
    {"step_count": -1},
    {"step_count": 2.5},
    {"fixed_dt": 0.0},
    {"max_speed": -1.0},
    {"start_position": (float("nan"), 0.0, 0.0)},
])
def test_other_preconditions(kwargs):
    args = dict(start_position=(0.0, 0.0, 0.0), start_velocity=(1.0, 0.0, 0.0), mass=1.0,
                step_count=10, fixed_dt=0.02, max_speed=50.0,
                gravity_field=ConstantGravityField((0.0, -10.0, 0.0)))
    args.update(kwargs)
    with pytest.raises(PredictionError):
        predict_trajectory(**args)


def test_prediction_error_is_a_value_error():
    assert issubclass(PredictionError, ValueError)


def test_preview_matches_world_frame_for_frame():
    planets = [Planet("big", 120.0, 6.0, (0.0, 0.0, 0.0)), Planet("moon", 10.0, 2.0, (15.0, -12.0, 0.0))]
    field = PlanetGravityField(planets)
    start = (-35.0, -15.0, 0.0)
    launch = (30.0, 25.0, 0.0)

    path = predict_path(start, launch, 1.0, 120, 0.02, 50.0, field)

    # planets only attract here; they are not added as contact obstacles
    world = PhysicsWorld(field, fixed_dt=0.02)
    body = world.add_body(Body("player", mass=1.0, radius=0.5, position=start))
    world.limit_speed(body, 50.0)
    world.apply_velocity_change(body, launch)
    world.set_gravity_enabled(body, True)

    flown = [body.position]
    for _ in range(len(path) - 1):
        world.step()
        flown.append(body.position)

    assert flown == path
