# utils.py
"""
Utility functions for the rainfall application.

This module provides helper functions, such as logging setup and
configuration loading, that are used across the application but do not
belong to the simulation or the rendering layer.
"""
import copy
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, Optional
from constants import FPS, PARTICLE_COUNT, REPEL_RADIUS, REPEL_GAIN

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys. "log_file" may be null to log
#       to the console only.
#   - Side Effects: Configures the root Python logger. Creates the log
#     directory if needed.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: The file's contents merged over DEFAULT_CONFIG, section by
#     section. Every section in DEFAULT_CONFIG is present in the result.
#   - Raises: FileNotFoundError, json.JSONDecodeError, ValueError (a
#     section that is not a JSON object).

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "simulation_parameters": {
        "seed": None,
        "particle_count": PARTICLE_COUNT,
        "hue": 0.0,
        "min_velocity": 20.0,
        "max_velocity": 200.0,
        "horizontal_velocity_range": [20.0, 40.0],
        "spawn_height_range": [300.0, 600.0],
        "repel_radius": REPEL_RADIUS,
        "repel_gain": REPEL_GAIN,
    },
    "run_control": {
        "max_steps": None,
        "log_throttle_steps": 600,
        "max_frame_time": 0.1,
        "profile": False,
    },
    "visualization": {
        "fps": FPS,
        "caption": "Rainfall",
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(levelname)s - %(message)s",
        "log_file": "logs/rainfall.log",
    },
}


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Logs to the console and, unless disabled, to a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path: Optional[str] = log_config.get('log_file')

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Rotates when the log reaches 1MB, keeps 5 backup logs.
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path or '(console only)'}")


def merge_config(overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Merges user settings over DEFAULT_CONFIG, one section at a time."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    for section, values in overrides.items():
        if section not in config:
            logging.warning(f"Ignoring unknown configuration section '{section}'.")
            continue
        if not isinstance(values, dict):
            msg = (
                f"Configuration error: section '{section}' must be an object, "
                f"got {type(values).__name__}."
            )
            logging.critical(msg)
            raise ValueError(msg)
        config[section].update(values)
    return config


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file and fills in defaults."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            raw = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise
    if not isinstance(raw, dict):
        msg = f"Configuration error: {path} must contain a JSON object."
        logging.critical(msg)
        raise ValueError(msg)
    config = merge_config(raw)
    logging.info("Configuration loaded successfully.")
    return config
