"""
Configuration loading for the n-gram chains.

Settings live in YAML files under ``ngram_chain/configs``. The
environment-specific ``chain_<environment>.yaml`` is read first, then the
default ``chain.yaml``; whichever is found is merged over the built-in
defaults below.
"""

import copy
import os

import yaml

from ngram_chain.utils.loggers.json_logger import get_logger

DEFAULT_CONFIG = {
    "string_corpus": {
        "n_grams": 3,
        "start": "%startf%",
        "end": "%endf%",
        "separation": " ",
    },
    "indexed": {
        "from": "",
        "grams": 2,
        "backward": False,
        "separation": None,
    },
    "generation": {
        "max_steps": 10000,
    },
    "logging": {
        "log_file": None,
        "console_json": True,
    },
}

DEFAULT_MAX_STEPS = DEFAULT_CONFIG["generation"]["max_steps"]


def get_config_dir():
    """Return the directory holding the packaged YAML configs."""
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "configs"))


def merge_config(base, override):
    """
    Recursively merge ``override`` into a copy of ``base``.

    Args:
        base (dict): The defaults.
        override (dict): Values read from a config file.

    Returns:
        dict: A new merged dictionary; neither argument is modified.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _read_yaml(config_path, logger):
    """Read one YAML file, returning None when it is missing or unusable."""
    if not os.path.exists(config_path):
        return None

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Error loading chain config from {config_path}: {e}")
        return None

    if config is None:
        config = {}
    if not isinstance(config, dict):
        logger.warning(f"Ignoring chain config {config_path}: top level is not a mapping")
        return None

    logger.info(f"Loaded chain config from {config_path}")
    return config


def load_config(environment="development", config_dir=None, logger=None):
    """
    Load the chain configuration for an environment.

    Args:
        environment (str): Environment name, used to look up ``chain_<environment>.yaml``.
        config_dir (str, optional): Directory to search instead of the packaged configs.
        logger (logging.Logger, optional): Logger for load diagnostics.

    Returns:
        dict: Configuration with ``string_corpus``, ``indexed``, ``generation``
        and ``logging`` sections.
    """
    if logger is None:
        logger = get_logger("ngram_chain.config")

    if config_dir is None:
        config_dir = get_config_dir()

    # Environment-specific file wins over the default one
    config_paths = [
        os.path.join(config_dir, f"chain_{environment}.yaml"),
        os.path.join(config_dir, "chain.yaml"),
    ]

    for config_path in config_paths:
        config = _read_yaml(config_path, logger)
        if config is not None:
            return merge_config(DEFAULT_CONFIG, config)

    logger.warning("No chain configuration found, using built-in defaults", extra={
        "metrics": {"environment": environment, "config_dir": config_dir}
    })
    return copy.deepcopy(DEFAULT_CONFIG)


def logger_from_config(config, logger_name="ngram_chain"):
    """
    Build the logger described by the ``logging`` section of a config.

    Args:
        config (dict): A configuration as returned by :func:`load_config`.
        logger_name (str): Name of the logger.

    Returns:
        logging.Logger: The configured logger.
    """
    settings = config.get("logging", {})
    return get_logger(
        logger_name,
        log_file=settings.get("log_file"),
        console_json=settings.get("console_json", True),
    )
