from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from configuration import (  # noqa: E402
    PhysicsParameters,
    RasterConfig,
    RunConfig,
    ScatteringConfig,
    default_initial_conditions,
)


@pytest.fixture()
def short_config() -> ScatteringConfig:
    """Six workers, a few thousand steps each: every trajectory stays near x = -500 fm."""
    return ScatteringConfig(
        physics=PhysicsParameters(),
        run=RunConfig(time_step=2.0e-24, iterations=2000, log_throttle_steps=500),
        raster=RasterConfig(),
        initial_conditions=default_initial_conditions(),
    )
