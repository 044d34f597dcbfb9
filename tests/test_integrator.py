"""Semi-implicit Euler integration of a single trajectory."""

from __future__ import annotations

import pytest

import constants
from configuration import InitialCondition, PhysicsParameters
from particle import TrajectoryState, create_trajectory_state
from simulation import Integrator, calculate_acceleration

FEMTO = constants.FEMTO
DT = 2.0e-24
SPEED = 1.5e7


def _state(x_fm=-500.0, y_fm=10.0):
    return create_trajectory_state(InitialCondition(0, x_fm, y_fm), SPEED, FEMTO)


def test_first_sample_is_initial_condition():
    samples = list(Integrator(_state(), DT, 10, PhysicsParameters(), FEMTO))
    assert samples[0] == pytest.approx((-500.0, 10.0))


def test_sample_count_equals_iterations():
    integrator = Integrator(_state(), DT, 137, PhysicsParameters(), FEMTO)
    samples = list(integrator)
    assert len(samples) == 137
    assert integrator.steps_taken == 137


def test_zero_iterations_yield_nothing():
    state = _state()
    assert list(Integrator(state, DT, 0, PhysicsParameters(), FEMTO)) == []
    assert state.position == pytest.approx((-500.0 * FEMTO, 10.0 * FEMTO))


def test_velocity_uses_acceleration_at_updated_position():
    physics = PhysicsParameters()
    state = _state()
    x0, y0 = state.position
    samples = list(Integrator(state, DT, 3, physics, FEMTO))

    x1, y1 = x0 + SPEED * DT, y0
    ax, ay = calculate_acceleration(x1, y1, physics.projectile_charge, physics.target_charge, physics.mass_number)
    vx1, vy1 = SPEED + ax * DT, ay * DT
    x2, y2 = x1 + vx1 * DT, y1 + vy1 * DT

    assert samples[1] == pytest.approx((x1 / FEMTO, y1 / FEMTO))
    assert samples[2] == pytest.approx((x2 / FEMTO, y2 / FEMTO))


def test_uncharged_projectile_moves_in_straight_line():
    physics = PhysicsParameters(target_charge=0.0)
    samples = list(Integrator(_state(), DT, 5, physics, FEMTO))
    step_fm = SPEED * DT / FEMTO
    for i, (x, y) in enumerate(samples):
        assert x == pytest.approx(-500.0 + i * step_fm)
        assert y == pytest.approx(10.0)


def test_repulsion_deflects_away_from_axis():
    state = _state(y_fm=50.0)
    list(Integrator(state, DT, 5000, PhysicsParameters(), FEMTO))
    assert state.vy > 0.0
    assert state.vx < SPEED


def test_integrator_is_single_use():
    integrator = Integrator(_state(), DT, 4, PhysicsParameters(), FEMTO)
    list(integrator)
    with pytest.raises(RuntimeError):
        iter(integrator)


def test_integrator_is_lazy():
    state = TrajectoryState(x=-500.0 * FEMTO, y=10.0 * FEMTO, vx=SPEED, vy=0.0)
    samples = iter(Integrator(state, DT, 1000, PhysicsParameters(), FEMTO))
    next(samples)
    assert state.x == -500.0 * FEMTO
    next(samples)
    assert state.x > -500.0 * FEMTO
