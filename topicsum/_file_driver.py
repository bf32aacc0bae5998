"""
Configuration and logging utilities for topicsum.

This module contains the YAML configuration loader, the package logger setup,
and small logging helpers shared by the other modules.
"""

import copy
import logging
import yaml
from pathlib import Path
from typing import Optional, Union


LOGGER_NAME = "topicsum"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

_module_logger = logging.getLogger(__name__)


# ============================================================================
# Logging
# ============================================================================

def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """Setup default logger for topicsum operations."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(level)
    return logger


def log_print(message: str, level: str = "info", logger: logging.Logger = None, also_print: bool = False):
    """
    Logs and optionally prints a message.

    Parameters:
        message (str): The message to log/print.
        level (str): Logging level: 'debug', 'info', 'warning', 'error', or 'critical'.
        logger (logging.Logger): Logger instance. If None, uses the package logger.
        also_print (bool): Whether to also print to stdout.
    """
    if logger is None:
        logger = logging.getLogger(LOGGER_NAME)

    log_func = getattr(logger, level.lower(), logger.info)
    log_func(message)

    if also_print:
        print(message)


# ============================================================================
# Configuration
# ============================================================================

def _read_yaml(config_path: Path) -> dict:
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        _module_logger.error(f"Config file not found at {config_path}")
        raise
    except yaml.YAMLError as e:
        _module_logger.error(f"Error parsing config file: {e}")
        raise
    return config or {}


def merge_config(base: dict, override: dict) -> dict:
    """Recursively merge override into a copy of base; override wins on conflicts."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(path: Optional[Union[str, Path]] = None) -> dict:
    """
    Load the default configuration, optionally merged with a user YAML file.

    Args:
        path: Optional path to a YAML file whose sections override the defaults

    Returns:
        Nested configuration dictionary
    """
    config = _read_yaml(DEFAULT_CONFIG_PATH)
    if path is not None:
        config = merge_config(config, _read_yaml(Path(path)))
    return config
