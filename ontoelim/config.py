#!/usr/bin/env python3
"""
Configuration handling for the ontoelim package.
"""

import os
import json
import yaml
import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_CONFIG = {
    "min_genes": 1,
    "elim_threshold": 0.05,
    "gene_universe_size": None,
    "pvalue_threshold": 1.0,
    "n_jobs": 1,
    "debug": False,
}

INT_KEYS = ["min_genes", "gene_universe_size", "n_jobs"]
FLOAT_KEYS = ["elim_threshold", "pvalue_threshold"]
BOOL_KEYS = ["debug"]

def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from a file.

    Args:
        config_path: Path to the configuration file (YAML or JSON)

    Returns:
        Dictionary containing the configuration

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file format is not supported or invalid
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    file_ext = os.path.splitext(config_path)[1].lower()
    if file_ext not in ['.json', '.yaml', '.yml']:
        raise ValueError(f"Unsupported configuration file format: {file_ext}")

    try:
        with open(config_path, 'r') as f:
            if file_ext == '.json':
                config = json.load(f)
            else:
                config = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Error loading configuration: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Error loading configuration: expected a mapping, got {type(config).__name__}")
    return config

def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("1", "true", "yes", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("0", "false", "no", "off"):
        return False
    if isinstance(value, int):
        return bool(value)
    raise ValueError(f"Cannot interpret {value!r} as a boolean")

def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate configuration values and set defaults for missing values.

    Args:
        config: Configuration dictionary to validate

    Returns:
        Validated configuration dictionary
    """
    validated = DEFAULT_CONFIG.copy()

    for key, value in config.items():
        if key not in validated:
            logger.warning(f"Unknown configuration parameter: {key}")
            continue

        # Type checking
        try:
            if key == "gene_universe_size" and value is None:
                pass
            elif key in INT_KEYS:
                if isinstance(value, bool) or int(value) != float(value):
                    raise ValueError(value)
                value = int(value)
            elif key in FLOAT_KEYS:
                value = float(value)
            elif key in BOOL_KEYS:
                value = _parse_bool(value)
        except (ValueError, TypeError):
            logger.warning(f"Invalid type for {key}: {value!r}. Using default: {validated[key]}")
            continue

        # Range checking
        if key == "min_genes" and value < 0:
            logger.warning(f"Invalid value for {key}: {value}, must be >= 0. Using default: {validated[key]}")
            continue
        if key == "gene_universe_size" and value is not None and value <= 0:
            logger.warning(f"Invalid value for {key}: {value}, must be > 0. Using default: {validated[key]}")
            continue
        if key in FLOAT_KEYS and not 0.0 <= value <= 1.0:
            logger.warning(f"Invalid value for {key}: {value}, must be between 0 and 1. Using default: {validated[key]}")
            continue
        if key == "n_jobs" and value == 0:
            logger.warning(f"Invalid value for {key}: 0. Using default: {validated[key]}")
            continue

        validated[key] = value

    return validated

def load_from_env(prefix: str = "ONTOELIM_") -> Dict[str, Any]:
    """
    Load configuration from environment variables.

    Args:
        prefix: Prefix for environment variables

    Returns:
        Dictionary with configuration from environment variables
    """
    config = {}

    for config_key in DEFAULT_CONFIG:
        env_var = f"{prefix}{config_key.upper()}"
        if env_var not in os.environ:
            continue
        value = os.environ[env_var]

        # Try to convert numeric values
        try:
            if config_key in INT_KEYS:
                value = int(value)
            elif config_key in FLOAT_KEYS:
                value = float(value)
            elif config_key in BOOL_KEYS:
                value = _parse_bool(value)
        except ValueError:
            logger.warning(f"Invalid value for {env_var}: {value}")
            continue

        config[config_key] = value

    return config

def save_config(config: Dict[str, Any], config_path: str) -> None:
    """
    Save configuration to a file.

    Args:
        config: Configuration dictionary to save
        config_path: Path to save the configuration file

    Raises:
        ValueError: If the file format is not supported
    """
    file_ext = os.path.splitext(config_path)[1].lower()
    if file_ext not in ['.json', '.yaml', '.yml']:
        raise ValueError(f"Unsupported configuration file format: {file_ext}")

    os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)

    with open(config_path, 'w') as f:
        if file_ext == '.json':
            json.dump(config, f, indent=2)
        else:
            yaml.dump(config, f, default_flow_style=False)

    logger.info(f"Configuration saved to {config_path}")

def get_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Get configuration from various sources, with precedence:
    1. Configuration file (if provided)
    2. Environment variables
    3. Default configuration

    Args:
        config_path: Path to configuration file (optional)

    Returns:
        Complete configuration dictionary
    """
    config = DEFAULT_CONFIG.copy()

    config.update(load_from_env())

    if config_path:
        try:
            file_config = load_config(config_path)
            config.update(file_config)
        except (FileNotFoundError, ValueError) as e:
            logger.warning(f"Error loading configuration file: {e}")

    return validate_config(config)
