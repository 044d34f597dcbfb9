# particle.py
"""
Per-particle state and its initial conditions.

This module defines the TrajectoryState, the mutable position/velocity
pair that a single worker owns for its whole life, along with the
relativistic conversion from kinetic energy to initial speed.
"""
import logging
import numpy as np
from dataclasses import dataclass
from typing import NamedTuple, TYPE_CHECKING

from constants import SPEED_OF_LIGHT

# Forward reference for type hinting to avoid circular import
if TYPE_CHECKING:
    from configuration import InitialCondition

# --- Data Contracts ---
#
# relativistic_speed(energy: float, mass: float) -> float:
#   - Inputs:
#     - energy: kinetic energy in joules, >= 0.
#     - mass: rest mass in kilograms, > 0.
#   - Outputs: speed in m/s.
#   - Invariants: 0 <= result < SPEED_OF_LIGHT.
#
# class TrajectoryState:
#   - position: (x, y) in meters.
#   - velocity: (vx, vy) in meters per second.
#   - Invariants: Exclusively owned and mutated by one Integrator.
#
# class Sample:
#   - worker_id: int, the configuration the position belongs to.
#   - x, y: position in femtometers.
#   - Invariants: Immutable.


class Sample(NamedTuple):
    """One emitted position of one worker, in femtometers."""
    worker_id: int
    x: float
    y: float


def relativistic_speed(energy: float, mass: float) -> float:
    """
    Speed of a particle with the given kinetic energy according to SRT.

    From E_kin = (gamma - 1) m c^2 it follows that
    v = c * sqrt(E (2 m c^2 + E)) / (m c^2 + E).
    """
    rest_energy = mass * SPEED_OF_LIGHT ** 2
    return SPEED_OF_LIGHT * np.sqrt(energy * (2.0 * rest_energy + energy)) / (rest_energy + energy)


@dataclass
class TrajectoryState:
    """
    Position and velocity of one projectile, both in SI units.
    """
    x: float
    y: float
    vx: float
    vy: float

    @property
    def position(self):
        return (self.x, self.y)

    @property
    def velocity(self):
        return (self.vx, self.vy)


def create_trajectory_state(initial: "InitialCondition", speed: float, femto: float) -> TrajectoryState:
    """
    Places a projectile at its initial condition moving along +x.

    Args:
        initial (InitialCondition): Starting point in femtometers.
        speed (float): Initial speed in m/s.
        femto (float): Meters per femtometer.
    """
    state = TrajectoryState(x=initial.x_fm * femto, y=initial.y_fm * femto, vx=speed, vy=0.0)
    logging.debug(
        f"Trajectory state for worker {initial.worker_id} created at "
        f"({initial.x_fm} fm, {initial.y_fm} fm) with v = {speed:.4e} m/s."
    )
    return state
