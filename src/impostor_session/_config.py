# Area: Shared
"""
impostor_session._config — Configuration
========================================

Defaults, file and environment loading, and validation of the config
dict shared by the orchestrator, the store, the watcher and the CLI.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger("impostor_session.config")

DEFAULT_CONFIG: Dict[str, Any] = {
    "db_path": "impostor.db",
    "log_file": "impostor_session.log",
    "log_level": "INFO",
    "min_players": 3,
    "max_players": 10,
    "room_code_length": 6,
    "poll_interval_seconds": 1.0,
    "busy_timeout_seconds": 5.0,
    "random_seed": None,
}

# Environment variable -> (config key, converter)
ENV_MAPPINGS = {
    "IMPOSTOR_DB_PATH": ("db_path", str),
    "IMPOSTOR_LOG_FILE": ("log_file", str),
    "IMPOSTOR_LOG_LEVEL": ("log_level", str),
    "IMPOSTOR_MIN_PLAYERS": ("min_players", int),
    "IMPOSTOR_MAX_PLAYERS": ("max_players", int),
    "IMPOSTOR_POLL_INTERVAL": ("poll_interval_seconds", float),
    "IMPOSTOR_RANDOM_SEED": ("random_seed", int),
}

# Hard limits of the game itself
PLAYER_FLOOR = 3
PLAYER_CEILING = 10


def load_config(config_path: Optional[str] = None, use_dotenv: bool = True) -> Dict[str, Any]:
    """
    Build the config dict: defaults, then the JSON file, then environment.

    Args:
        config_path: Optional JSON config file
        use_dotenv: Load a ``.env`` file into the environment first

    Returns:
        Merged config dict (not yet validated)
    """
    if use_dotenv:
        load_dotenv()

    config: Dict[str, Any] = dict(DEFAULT_CONFIG)

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config.update(json.load(f))
        else:
            logger.warning("Config file not found: %s", config_path)

    for env_key, (config_key, convert) in ENV_MAPPINGS.items():
        if env_key in os.environ:
            try:
                config[config_key] = convert(os.environ[env_key])
            except ValueError as e:
                raise ValueError(f"Invalid value for {env_key}: {os.environ[env_key]!r}") from e

    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration dict

    Raises:
        ValueError: If a value is out of range
    """
    problems = []
    min_players = config.get("min_players", DEFAULT_CONFIG["min_players"])
    max_players = config.get("max_players", DEFAULT_CONFIG["max_players"])
    if not PLAYER_FLOOR <= min_players <= max_players <= PLAYER_CEILING:
        problems.append(
            f"need {PLAYER_FLOOR} <= min_players <= max_players <= {PLAYER_CEILING}, "
            f"got min_players={min_players}, max_players={max_players}"
        )
    for key in ("poll_interval_seconds", "busy_timeout_seconds"):
        value = config.get(key, DEFAULT_CONFIG[key])
        if not isinstance(value, (int, float)) or value <= 0:
            problems.append(f"{key} must be positive, got {value!r}")
    if config.get("room_code_length", DEFAULT_CONFIG["room_code_length"]) < 4:
        problems.append("room_code_length must be at least 4")
    if problems:
        raise ValueError(f"Invalid config: {'; '.join(problems)}")
