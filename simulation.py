# simulation.py
"""
Handles the core physics: the Coulomb acceleration law and the fixed-step
trajectory integrator.

The nucleus sits at the origin and is treated as infinitely heavy, so only
the projectile moves. The acceleration kernel is compiled with Numba and
runs once per step inside the Python integration loop.
"""
import logging
import numpy as np
from typing import Iterator, Tuple
from numba import jit

from configuration import PhysicsParameters
from particle import TrajectoryState

# --- Data Contracts ---
#
# calculate_acceleration(x, y, z_a, z_k, a, coupling, mass_unit) -> (ax, ay):
#   - Inputs:
#     - x, y: position relative to the nucleus in meters. r > 0.
#     - z_a, z_k: charge numbers of projectile and target.
#     - a: mass number of the projectile.
#   - Outputs: acceleration in m/s^2, parallel to (x, y) (repulsive).
#   - Invariants: |a| ~ z_a * z_k / (a * r^2).
#   - Failure mode: r == 0 is a singularity and is NOT guarded. With the
#     default impact parameters the projectile never reaches the origin.
#
# class Integrator:
#   - __init__(self, state, time_step, iterations, physics, femto)
#   - __iter__(self) -> Iterator[Tuple[float, float]]:
#     - Outputs: `iterations` positions in femtometers. Each is the state
#       before that step's position update; the first is the initial
#       condition.
#     - Side Effects: Mutates `state` irreversibly. Single use.


@jit(nopython=True)
def _acceleration_numba(x, y, strength):
    """
    Numba-jitted inverse-square law.

    The extra 1/r in r^3 normalizes the radius vector.
    """
    r = np.sqrt(x * x + y * y)
    mult = strength / (r * r * r)
    return mult * x, mult * y


def coupling_strength(z_a: float, z_k: float, a: float,
                      coupling: float, mass_unit: float) -> float:
    """Collects every constant factor of the acceleration, in m^3/s^2."""
    return coupling * z_a * z_k / (mass_unit * a)


def calculate_acceleration(x: float, y: float, z_a: float, z_k: float, a: float,
                           coupling: float = PhysicsParameters.coupling,
                           mass_unit: float = PhysicsParameters.mass_unit) -> Tuple[float, float]:
    """
    Coulomb acceleration of the projectile at (x, y).

    Args:
        x (float): Position along the beam axis in meters.
        y (float): Lateral position in meters.
        z_a (float): Proton number of the projectile.
        z_k (float): Proton number of the target nucleus.
        a (float): Mass number of the projectile.

    Returns:
        Tuple[float, float]: Acceleration (ax, ay) in m/s^2.
    """
    strength = coupling_strength(z_a, z_k, a, coupling, mass_unit)
    return _acceleration_numba(x, y, strength)


class Integrator:
    """
    Semi-implicit Euler integration of a single trajectory.

    Each step moves the particle with its current velocity and then updates
    the velocity with the acceleration at the new position. No error or
    stability control is applied; a too large time step diverges.
    """
    def __init__(self, state: TrajectoryState, time_step: float, iterations: int,
                 physics: PhysicsParameters, femto: float):
        self.state = state
        self.time_step = time_step
        self.iterations = iterations
        self.femto = femto
        self.strength = coupling_strength(
            physics.projectile_charge, physics.target_charge, physics.mass_number,
            physics.coupling, physics.mass_unit
        )
        self.steps_taken = 0
        self._started = False

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        if self._started:
            raise RuntimeError("Integrator is single-use; its trajectory state has already advanced.")
        self._started = True
        return self._run()

    def _run(self) -> Iterator[Tuple[float, float]]:
        state = self.state
        dt = self.time_step
        femto = self.femto
        strength = self.strength

        for _ in range(self.iterations):
            yield (state.x / femto, state.y / femto)

            state.x += state.vx * dt
            state.y += state.vy * dt

            ax, ay = _acceleration_numba(state.x, state.y, strength)
            state.vx += ax * dt
            state.vy += ay * dt
            self.steps_taken += 1

        logging.debug(f"Integrator finished after {self.steps_taken} steps.")
