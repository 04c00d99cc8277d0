"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a YAML
configuration file (``~/.memoproxy/config.yaml``). Keys are dotted paths
(``cache.dir``, ``logging.level``); the matching environment variable is the
upper-cased path with a ``MEMOPROXY_`` prefix (``MEMOPROXY_CACHE_DIR``).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".memoproxy"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
DEFAULT_CACHE_DIR = DEFAULT_CONFIG_DIR / "cache"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "MEMOPROXY_"

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False

def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Test overrides (set_config_for_testing)
    2. Environment Variables
    3. .env file
    4. YAML configuration file
    5. Defaults passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. YAML file (lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(yaml_config)
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False keeps real environment variables on top
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no .env file found).")

    _loaded = True
    logger.debug("Configuration loading process completed.")

def reset_configuration() -> None:
    """Forgets loaded configuration so the next load_configuration re-reads it."""
    global _config, _loaded
    _config = {}
    _loaded = False

def _env_name(key: str) -> str:
    return ENV_PREFIX + key.upper().replace('.', '_')

def _coerce(value: str) -> Any:
    """Converts common scalar spellings from environment strings."""
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except (ValueError, TypeError):
        return value

def _lookup(config: Dict[str, Any], key: str) -> Any:
    """Finds a dotted key either as a flat entry or by walking nested mappings."""
    if key in config:
        return config[key]
    node: Any = config
    for part in key.split('.'):
        if not isinstance(node, dict) or part not in node:
            raise KeyError(key)
        node = node[part]
    return node

def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Args:
        key: The configuration key (dotted path)
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = _env_name(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    try:
        return _lookup(_config, key)
    except KeyError:
        pass

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default

def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None

# --- Convenience Functions ---

def get_cache_dir() -> Path:
    """Directory of the default persistent store."""
    value = get_config('cache.dir')
    return Path(str(value)).expanduser() if value else DEFAULT_CACHE_DIR

def get_log_level() -> int:
    """Configured log level as a logging module constant (INFO if unknown)."""
    level_name = str(get_config('logging.level', 'INFO')).upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO

def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values override environment variables and loaded configuration.
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")

def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
