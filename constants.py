# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
Physical constants are taken from `scipy.constants` (CODATA), so every
unit prefix below is explicit rather than written out by hand. The
experiment itself (a 5 MeV alpha particle scattered by a gold nucleus)
and the raster geometry live here as defaults for the run configuration.
"""
from scipy import constants as sc

# --- Physical constants (SI) ---
FINE_STRUCTURE = sc.fine_structure
PLANCK = sc.h
SPEED_OF_LIGHT = sc.c
ATOMIC_MASS_UNIT = sc.m_u                                   # kg
ALPHA_PARTICLE_MASS = sc.physical_constants['alpha particle mass'][0]  # kg

# Unit prefixes and conversions
FEMTO = sc.femto                                            # 1e-15
MEGA = sc.mega                                              # 1e6
MEV_TO_JOULE = MEGA * sc.electron_volt

# Coupling of the acceleration law: alpha * h * c, in J*m
COULOMB_COUPLING = FINE_STRUCTURE * PLANCK * SPEED_OF_LIGHT

# --- Experiment defaults ---
PROJECTILE_ENERGY_MEV = 5.0
PROJECTILE_CHARGE = 2.0     # z_a, alpha particle
TARGET_CHARGE = 79.0        # z_k, gold
PROJECTILE_MASS_NUMBER = 4.0

# Initial positions in femtometers. Every particle starts at the same
# longitudinal offset and differs only in its impact parameter.
INITIAL_X_FM = -500.0
IMPACT_PARAMETERS_FM = (10.0, 15.0, 30.0, 50.0, 100.0, 200.0)

# --- Run control defaults ---
# Total simulated time and the step used at performance factor 1.
# 1e-19 s is long enough for the 5 MeV alpha to leave the frame on every
# impact parameter.
TOTAL_SIMULATED_TIME = 1.0e-19   # s
BASE_TIME_STEP = 2.0e-24         # s
DEFAULT_PERFORMANCE = 1
LOG_THROTTLE_STEPS = 10000

# --- Raster settings ---
RASTER_WIDTH = 1001
RASTER_HEIGHT = 301
# Shifts the nucleus 500 px right of the left edge.
RASTER_X_OFFSET = 500.0
RASTER_Y_OFFSET = 0.0
RASTER_SCALE = 1.0          # pixels per femtometer
TRAJECTORY_COLOR = (255, 0, 0)  # Pure red
BACKGROUND_COLOR = (0, 0, 0)
OUTPUT_DIR = 'output'
