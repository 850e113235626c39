"""
Service configuration - YAML file, environment overrides and .env support
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger

from .errors import ConfigurationError

INSTALL_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = INSTALL_ROOT / 'config' / 'service_config.yaml'

DEFAULT_CONFIG: Dict[str, Any] = {
    'api_key': None,
    'server': {
        'host': '0.0.0.0',
        'port': 3000,
    },
    'storage': {
        'stats_file': str(INSTALL_ROOT / 'data' / 'scrape_stats.json'),
    },
    'browser': {
        'executable_path': None,
        'executable_candidates': ['chromium', 'chromium-browser', 'google-chrome'],
        'args': [
            '--no-sandbox',
            '--disable-setuid-sandbox',
            '--disable-dev-shm-usage',
            '--disable-gpu',
            '--no-first-run',
            '--no-zygote',
            '--single-process',
            '--headless',
        ],
        'viewport': {'width': 1280, 'height': 800},
        'navigation_timeout': 60,  # seconds
        'wait_until': 'networkidle',
    },
    'parser': {
        # Readability.js needs Node and readabilipy's npm packages installed
        'use_readability_js': False,
    },
    'logging': {
        'level': 'INFO',
        'file': None,
        'rotation': '10 MB',
    },
}

# Environment variable -> (section, key); section None means top level
ENV_OVERRIDES = {
    'API_KEY': (None, 'api_key'),
    'HOST': ('server', 'host'),
    'PORT': ('server', 'port'),
    'STATS_FILE': ('storage', 'stats_file'),
    'CHROMIUM_PATH': ('browser', 'executable_path'),
    'LOG_LEVEL': ('logging', 'level'),
    'LOG_FILE': ('logging', 'file'),
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base (in place)."""
    for key, value in override.items():
        if value is None and isinstance(base.get(key), dict):
            # Empty section in the YAML file keeps the defaults
            continue
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(config_path: Optional[str] = None, require_api_key: bool = True) -> Dict[str, Any]:
    """
    Load service configuration.

    Order of precedence (lowest first): built-in defaults, the YAML file,
    environment variables (a .env file in the working directory is loaded
    first).

    Args:
        config_path: Path to YAML config (default: PAGEGRAB_CONFIG or
            config/service_config.yaml under the install root)
        require_api_key: Raise if no API key ends up configured

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If the config file is invalid or the API key is missing
    """
    load_dotenv()

    config = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(config_path or os.getenv('PAGEGRAB_CONFIG') or DEFAULT_CONFIG_PATH)
    if path.exists():
        try:
            with open(path, 'r') as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid config file {path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        _merge(config, file_config)
        logger.debug(f"Loaded config file: {path}")
    else:
        logger.debug(f"Config file not found, using defaults: {path}")

    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if not value:
            continue
        target = config if section is None else config.setdefault(section, {})
        target[key] = value

    try:
        config['server']['port'] = int(config['server']['port'])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid server port: {config['server']['port']}") from e

    if require_api_key and not config.get('api_key'):
        raise ConfigurationError("API_KEY environment variable is not set")

    return config
