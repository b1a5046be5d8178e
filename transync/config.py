import copy
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from transync.logger import get_logger

logger = get_logger(__name__)

# Request defaults
DEFAULT_TIMEOUT_MS = 10000
DEFAULT_SOURCE_LANGUAGE = "auto"
SUPPORTED_FORMATS = ("html", "text")

# UI timing defaults
DEFAULT_ERROR_DISPLAY_MS = 3000
DEFAULT_REMOUNT_DEBOUNCE_MS = 100

PLACEHOLDER_API_KEY = "YOUR_API_KEY_HERE"

# Get base directory (project root)
BASE_DIR = Path(__file__).parent.parent
CONFIG_DIR = BASE_DIR / "config"
CONFIG_FILE = CONFIG_DIR / "config.json"
CONFIG_ENV_VAR = "TRANSYNC_CONFIG"

# Default configuration template
DEFAULT_CONFIG = {
    "translation_service": {
        "api_url": "http://127.0.0.1:8000/translate",
        "api_key": PLACEHOLDER_API_KEY,
        "timeout_ms": DEFAULT_TIMEOUT_MS,
    },
    "target_language": "en",
    "ui_language": "en",
    "error_display_ms": DEFAULT_ERROR_DISPLAY_MS,
    "remount_debounce_ms": DEFAULT_REMOUNT_DEBOUNCE_MS,
    "log_mode": "off",
}


@dataclass(frozen=True)
class ClientSettings:
    """Connection parameters for the translation service."""
    api_url: str
    api_key: Optional[str] = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ClientSettings":
        service = config.get("translation_service", {})
        api_key = service.get("api_key") or None
        if api_key == PLACEHOLDER_API_KEY:
            api_key = None
        return cls(
            api_url=service.get("api_url", DEFAULT_CONFIG["translation_service"]["api_url"]),
            api_key=api_key,
            timeout_ms=int(service.get("timeout_ms", DEFAULT_TIMEOUT_MS)),
        )


def get_config_path() -> Path:
    """Resolve the config file, honouring the TRANSYNC_CONFIG override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return CONFIG_FILE


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def create_default_config(path: Optional[Path] = None) -> Path:
    """Create the default config.json file."""
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(DEFAULT_CONFIG, f, indent=4, ensure_ascii=False)
    logger.info(f"Created default config file: {path}")
    return path


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the configuration file merged over the defaults."""
    path = path or get_config_path()
    if not path.exists():
        logger.debug(f"No config file at {path}, using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            overrides = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse config file {path}: {e}")
        logger.warning("Using default configuration")
        return copy.deepcopy(DEFAULT_CONFIG)
    except OSError as e:
        logger.error(f"Failed to read config file {path}: {e}")
        logger.warning("Using default configuration")
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(overrides, dict):
        logger.warning(f"Config file {path} does not contain an object, using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)

    logger.debug(f"Configuration loaded from {path}")
    return _merge(DEFAULT_CONFIG, overrides)


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> None:
    """Save the configuration file and refresh logger levels."""
    path = path or get_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config, f, indent=4, ensure_ascii=False)
        logger.info(f"Configuration saved to {path}")
    except OSError as e:
        logger.error(f"Failed to save config to {path}: {e}")
        raise

    from transync.logger import _clear_log_mode_cache
    _clear_log_mode_cache()
