"""
User configuration loaded from ~/.autolock/config.yaml.
"""

from typing import Any, Dict

import yaml

from .logging_config import get_logger
from .plugin import CONFIG_DEFAULT_SHELL, CONFIG_HIDE, CONFIG_LOCKED_PROGRAMS, CONFIG_LOCKED_PROGRAMS_ALIAS
from .settings import DEFAULT_LOCKED_PROGRAMS, TMUX, get_autolock_dir

logger = get_logger("config")

CONFIG_PATH = get_autolock_dir() / "config.yaml"


def load_config() -> Dict[str, Any]:
    """Load the config file.

    Returns:
        Config dict, or {} if the file is missing, unreadable, invalid YAML,
        or not a mapping
    """
    if not CONFIG_PATH.exists():
        return {}
    try:
        with open(CONFIG_PATH) as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        logger.warning(f"Ignoring unreadable config {CONFIG_PATH}: {e}")
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def save_config(config: Dict[str, Any]) -> None:
    """Write the config dict as YAML, creating parent directories."""
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    with open(CONFIG_PATH, "w") as f:
        yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)


def _as_config_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def get_plugin_configuration() -> Dict[str, str]:
    """Flatten the config file into the key/value map AutolockPlugin.load() takes.

    Lists become comma-separated strings and booleans "true"/"false".
    Without a locked program list, DEFAULT_LOCKED_PROGRAMS applies.
    """
    config = load_config()
    result: Dict[str, str] = {}

    locked = config.get(CONFIG_LOCKED_PROGRAMS, config.get(CONFIG_LOCKED_PROGRAMS_ALIAS))
    if locked is None:
        locked = DEFAULT_LOCKED_PROGRAMS
    result[CONFIG_LOCKED_PROGRAMS] = _as_config_string(locked)

    if CONFIG_HIDE in config:
        result[CONFIG_HIDE] = _as_config_string(config[CONFIG_HIDE])
    if config.get(CONFIG_DEFAULT_SHELL):
        result[CONFIG_DEFAULT_SHELL] = _as_config_string(config[CONFIG_DEFAULT_SHELL])

    return result


def get_tmux_config() -> Dict[str, Any]:
    """Get tmux host settings, filling in defaults.

    Returns:
        Dict with 'locked_key_table', 'normal_key_table', 'poll_interval'
    """
    tmux = load_config().get("tmux")
    if not isinstance(tmux, dict):
        tmux = {}

    try:
        poll_interval = float(tmux.get("poll_interval", TMUX.poll_interval))
    except (TypeError, ValueError):
        poll_interval = TMUX.poll_interval
    if poll_interval <= 0:
        poll_interval = TMUX.poll_interval

    return {
        "locked_key_table": str(tmux.get("locked_key_table") or TMUX.locked_key_table),
        "normal_key_table": str(tmux.get("normal_key_table") or TMUX.normal_key_table),
        "poll_interval": poll_interval,
    }
