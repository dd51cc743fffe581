"""Mirror host - Configuration

Screen regions, built-in module names, vendor aliases and the default
app settings. User settings live in mirror.yaml and are laid over
DEFAULTS by load_config().

Region layout (fullscreen regions sit behind/above everything):

    top_bar
    top_left      top_center      top_right
    upper_third
    middle_center
    lower_third
    bottom_left   bottom_center   bottom_right
    bottom_bar
"""

import logging
import os
from typing import Any, Dict

import yaml

from core.errors import ConfigError

logger = logging.getLogger(__name__)

ROOT_DIR = os.path.dirname(os.path.abspath(__file__))

# ---------------------------------------------------------------------------
# Screen regions a module may be placed in
# ---------------------------------------------------------------------------
POSITIONS = [
    "top_bar",
    "top_left",
    "top_center",
    "top_right",
    "upper_third",
    "middle_center",
    "lower_third",
    "bottom_left",
    "bottom_center",
    "bottom_right",
    "bottom_bar",
    "fullscreen_above",
    "fullscreen_below",
]

# ---------------------------------------------------------------------------
# Modules shipped under modules/default/
# ---------------------------------------------------------------------------
DEFAULT_MODULES = [
    "notification",
    "alert",
    "calendar",
    "clock",
    "compliments",
    "newsfeed",
    "weather",
]

# Always loaded, between the notification module and the user's modules
SYSTEM_MODULES = [
    {"module": "alert", "config": {}},
]

# ---------------------------------------------------------------------------
# Shared front-end libraries under vendor/, by alias
# ---------------------------------------------------------------------------
VENDOR = {
    "moment.js": "node_modules/moment/min/moment-with-locales.js",
    "moment-timezone.js": "node_modules/moment-timezone/builds/moment-timezone-with-data.js",
    "weather-icons.css": "node_modules/weathericons/css/weather-icons.css",
    "weather-icons-wind.css": "node_modules/weathericons/css/weather-icons-wind.css",
    "font-awesome.css": "css/font-awesome.css",
    "nunjucks.js": "node_modules/nunjucks/browser/nunjucks.min.js",
    "suncalc.js": "node_modules/suncalc/suncalc.js",
    "croner.js": "node_modules/croner/dist/croner.umd.min.js",
}

# ---------------------------------------------------------------------------
# App defaults
# ---------------------------------------------------------------------------
DEFAULTS: Dict[str, Any] = {
    "address": "localhost",
    "port": 8080,
    "base_path": "/",
    "language": "en",
    "log_level": "INFO",
    "time_format": 24,
    "units": "metric",
    "modules_dir": "modules",
    "custom_css": "css/custom.css",
    "load_timeout": 30.0,   # seconds per resource
    "modules": [],
}

# Environment variables that override config keys
ENV_OVERRIDES = {
    "MIRROR_MODULES_DIR": "modules_dir",
    "MIRROR_CUSTOM_CSS": "custom_css",
}


def load_config(path: str) -> Dict[str, Any]:
    """Load mirror config from a YAML file, laid over DEFAULTS."""
    data: Dict[str, Any] = {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file not found: %s, using defaults", path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")

    config = dict(DEFAULTS)
    config.update(data)

    if not isinstance(config.get("modules") or [], list):
        raise ConfigError("'modules' must be a list")
    config["modules"] = config.get("modules") or []

    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            logger.info("Config %s overridden by %s", key, env_name)
            config[key] = value

    return config
