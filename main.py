# main.py
"""
Main entry point for the Rutherford scattering simulation.

This script orchestrates the entire run:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Freezes the run configuration and checks the initial speed.
4. Runs one worker per impact parameter and rasterizes their trajectories.
5. Saves one image per impact parameter.
"""
import logging
import sys
import cProfile
import pstats
import io

from utils import setup_logging, load_config


def main() -> int:
    """
    The main function to run the simulation.

    Returns:
        int: Process exit code, non-zero if no image was produced.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return 1

    setup_logging(config)

    logging.info("--- Rutherford Scattering Simulation Starting ---")

    from configuration import build_configuration
    from constants import SPEED_OF_LIGHT
    from pipeline import run_pipeline
    from visualization import save_raster_images

    scattering_config = build_configuration(config)

    # A little check: the 5 MeV alpha particle is far from relativistic.
    speed = scattering_config.initial_speed
    logging.info(f"v = {speed / SPEED_OF_LIGHT}c")

    profiler = cProfile.Profile()
    profiler.enable()
    result = run_pipeline(scattering_config)
    profiler.disable()

    names = {initial.worker_id: initial.name for initial in scattering_config.initial_conditions}
    paths = save_raster_images(result.buffers, names, scattering_config.run.output_dir)

    # --- Performance Profile Output ---
    # Only the aggregator thread is profiled; workers run in the pool.
    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Rutherford Scattering Simulation Shutting Down ---")

    if not paths:
        logging.error("No images were produced.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
