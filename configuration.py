# configuration.py
"""
Immutable run configuration.

Every component receives the pieces of `ScatteringConfig` it needs at
construction time. The configuration is frozen, so the time step, the
iteration count and the raster geometry cannot change once a run starts.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Any, Tuple

import constants
from particle import relativistic_speed

# --- Data Contracts ---
#
# build_configuration(config: Dict[str, Any]) -> ScatteringConfig:
#   - Inputs:
#     - config: Dictionary loaded from config.json. Only the optional
#       "run_control" section is read:
#       - "performance": int >= 1
#       - "total_time": float, seconds of simulated time per worker
#       - "base_time_step": float, step used at performance 1
#       - "log_throttle_steps": int
#       - "output_dir": str
#   - Outputs: A frozen ScatteringConfig.
#   - Invariants: iterations * time_step approximates total_time for
#     every performance factor.


@dataclass(frozen=True)
class PhysicsParameters:
    """Projectile and target parameters shared by all workers."""
    projectile_charge: float = constants.PROJECTILE_CHARGE
    target_charge: float = constants.TARGET_CHARGE
    mass_number: float = constants.PROJECTILE_MASS_NUMBER
    coupling: float = constants.COULOMB_COUPLING
    mass_unit: float = constants.ATOMIC_MASS_UNIT


@dataclass(frozen=True)
class InitialCondition:
    """Starting point of one worker, in femtometers."""
    worker_id: int
    x_fm: float
    y_fm: float

    @property
    def name(self) -> str:
        # y10, y15, ... matches the output file names
        return f"y{self.y_fm:g}"


@dataclass(frozen=True)
class RasterConfig:
    """Bounds and affine mapping from femtometers to pixels."""
    width: int = constants.RASTER_WIDTH
    height: int = constants.RASTER_HEIGHT
    x_offset: float = constants.RASTER_X_OFFSET
    y_offset: float = constants.RASTER_Y_OFFSET
    scale: float = constants.RASTER_SCALE
    color: Tuple[int, int, int] = constants.TRAJECTORY_COLOR
    background: Tuple[int, int, int] = constants.BACKGROUND_COLOR

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0 or self.scale <= 0:
            msg = (
                f"Configuration error: raster {self.width}x{self.height} "
                f"with scale {self.scale} must have positive size and scale."
            )
            logging.critical(msg)
            raise ValueError(msg)


@dataclass(frozen=True)
class RunConfig:
    """Fixed step and iteration count for every worker."""
    time_step: float
    iterations: int
    log_throttle_steps: int = constants.LOG_THROTTLE_STEPS
    output_dir: str = constants.OUTPUT_DIR

    def __post_init__(self):
        if self.time_step <= 0 or self.iterations < 0 or self.log_throttle_steps < 1:
            msg = (
                f"Configuration error: time step {self.time_step} and log throttle "
                f"{self.log_throttle_steps} must be positive, iterations "
                f"{self.iterations} non-negative."
            )
            logging.critical(msg)
            raise ValueError(msg)

    @classmethod
    def from_total_time(cls, total_time: float, base_time_step: float,
                        performance: int = 1, **kwargs) -> "RunConfig":
        """
        Derives the step and iteration count from a total simulated time.

        The performance factor multiplies the step and divides the number
        of iterations, so the simulated duration stays the same.
        """
        if performance < 1 or total_time <= 0 or base_time_step <= 0:
            msg = (
                f"Configuration error: performance ({performance}), total_time "
                f"({total_time}) and base_time_step ({base_time_step}) must be positive."
            )
            logging.critical(msg)
            raise ValueError(msg)
        time_step = base_time_step * performance
        iterations = int(round(total_time / time_step))
        return cls(time_step=time_step, iterations=iterations, **kwargs)

    @property
    def simulated_time(self) -> float:
        return self.time_step * self.iterations


@dataclass(frozen=True)
class ScatteringConfig:
    physics: PhysicsParameters
    run: RunConfig
    raster: RasterConfig
    initial_conditions: Tuple[InitialCondition, ...]
    energy: float = constants.PROJECTILE_ENERGY_MEV * constants.MEV_TO_JOULE
    projectile_mass: float = constants.ALPHA_PARTICLE_MASS
    femto: float = constants.FEMTO

    @property
    def initial_speed(self) -> float:
        return relativistic_speed(self.energy, self.projectile_mass)


def default_initial_conditions() -> Tuple[InitialCondition, ...]:
    return tuple(
        InitialCondition(worker_id=i, x_fm=constants.INITIAL_X_FM, y_fm=y)
        for i, y in enumerate(constants.IMPACT_PARAMETERS_FM)
    )


def build_configuration(config: Dict[str, Any]) -> ScatteringConfig:
    """
    Freezes the run parameters from a loaded config dictionary.

    Args:
        config (Dict[str, Any]): The loaded config.json contents.

    Returns:
        ScatteringConfig: The immutable configuration for one run.
    """
    run_params = config.get('run_control', {})
    run = RunConfig.from_total_time(
        total_time=float(run_params.get('total_time', constants.TOTAL_SIMULATED_TIME)),
        base_time_step=float(run_params.get('base_time_step', constants.BASE_TIME_STEP)),
        performance=int(run_params.get('performance', constants.DEFAULT_PERFORMANCE)),
        log_throttle_steps=int(run_params.get('log_throttle_steps', constants.LOG_THROTTLE_STEPS)),
        output_dir=run_params.get('output_dir', constants.OUTPUT_DIR),
    )
    scattering_config = ScatteringConfig(
        physics=PhysicsParameters(),
        run=run,
        raster=RasterConfig(),
        initial_conditions=default_initial_conditions(),
    )
    logging.info(
        f"Run configuration built: {len(scattering_config.initial_conditions)} workers, "
        f"{run.iterations} iterations of {run.time_step:.3e} s "
        f"({run.simulated_time:.3e} s simulated)."
    )
    return scattering_config
