# utils.py
"""
Run-level helpers: log setup and config.json loading.

Worker threads log through the root logger, so the default format carries
the thread name to tell the six trajectories apart.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, List

DEFAULT_LOG_FORMAT = '%(asctime)s - %(threadName)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/scattering.log'

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: dict with an optional "logging" section:
#       "level", "format", "log_file", "max_bytes", "backup_count",
#       "library_level".
#   - Side Effects: Replaces the root logger's handlers with a console
#     handler and a size-rotated file handler. Sets the numba logger to
#     "library_level".
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: The parsed config.json document.
#   - Failure mode: FileNotFoundError / json.JSONDecodeError are logged
#     and re-raised; main() turns them into a FATAL message.


def _build_handlers(log_config: Dict[str, Any]) -> List[logging.Handler]:
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    rotating = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=int(log_config.get('max_bytes', 1024 * 1024)),
        backupCount=int(log_config.get('backup_count', 5)),
    )
    return [logging.StreamHandler(), rotating]


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Routes all simulation logging to the console and a rotating log file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    library_level = log_config.get('library_level', 'WARNING').upper()
    formatter = logging.Formatter(log_config.get('format', DEFAULT_LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    handlers = _build_handlers(log_config)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # Numba logs every compilation pass at DEBUG.
    logging.getLogger('numba').setLevel(library_level)

    logging.info(f"Logging to console and {handlers[-1].baseFilename} at {log_level}.")
    logging.debug(f"numba logger set to {library_level}.")


def load_config(path: str) -> Dict[str, Any]:
    """Reads config.json; see the module contract for failures."""
    logging.info(f"Reading run configuration from {path}.")
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except FileNotFoundError:
        logging.error(f"No configuration file at {path}.")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"{path} is not valid JSON: {e}")
        raise
