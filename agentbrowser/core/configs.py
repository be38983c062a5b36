"""Configuration management for agent-browser.

Settings come from, lowest precedence first:
- built-in defaults
- ~/.config/agent-browser/config.cfg ([DEFAULT] section)
- ~/.config/agent-browser/.env
- AGENT_BROWSER_* environment variables
"""

import configparser
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values

from agentbrowser.daemon.paths import resolve_session

CONFIG_DIR = Path.home() / ".config" / "agent-browser"
CONFIG_PATH = CONFIG_DIR / "config.cfg"
ENV_PATH = CONFIG_DIR / ".env"

ENV_PREFIX = "AGENT_BROWSER_"

# Config keys accepted from files / environment (lowercase, prefix stripped)
SETTING_KEYS = ("timeout", "runtime", "daemon_path", "debug", "poll_interval", "poll_attempts")


@dataclass
class ClientSettings:
    session: str = "default"
    request_timeout: float = 15.0
    poll_interval: float = 0.1
    poll_attempts: int = 50
    runtime: str = "node"
    daemon_path: Optional[str] = None
    debug: bool = False


def load_raw_config(path: Path = CONFIG_PATH) -> Dict[str, str]:
    """
    Load configuration values from the config file.
    Values are returned with lowercase keys for convenience.
    """
    cfg = configparser.ConfigParser()
    data: Dict[str, str] = {}

    if path.exists():
        try:
            cfg.read(path)
        except configparser.Error as e:
            raise ValueError(f"Cannot parse {path}: {e}") from None
        data.update({k.lower(): v for k, v in cfg["DEFAULT"].items()})

    return data


def load_env_overrides(
    env_path: Path = ENV_PATH,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Collect AGENT_BROWSER_* settings from the .env file and the environment.

    The process environment wins over the .env file. Keys are returned
    lowercased with the prefix stripped.
    """
    environ = os.environ if environ is None else environ
    merged: Dict[str, str] = {}
    if env_path.exists():
        merged.update({k: v for k, v in dotenv_values(env_path).items() if v is not None})
    merged.update(environ)

    data: Dict[str, str] = {}
    for key, value in merged.items():
        if not key.upper().startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX):].lower()
        if name in SETTING_KEYS:
            data[name] = value
    return data


def _get_bool(raw: Mapping[str, str], key: str, default: bool = False) -> bool:
    value = raw.get(key)
    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_number(raw: Mapping[str, str], key: str, default, cast):
    """Parse a positive, finite number; anything else is a ValueError."""
    value = raw.get(key)
    if value is None or str(value).strip() == "":
        return default
    try:
        number = float(value)
        if not math.isfinite(number) or number <= 0:
            raise ValueError(value)
        result = cast(number)
    except (ValueError, OverflowError):
        raise ValueError(f"Invalid value for '{key}': {value!r}") from None
    if result <= 0:
        raise ValueError(f"Invalid value for '{key}': {value!r}")
    return result


def get_client_settings(
    raw: Optional[Dict[str, str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    env_path: Path = ENV_PATH,
) -> ClientSettings:
    """
    Build ClientSettings from the config file and environment.
    Raises ValueError if a numeric setting cannot be parsed.
    """
    environ = os.environ if environ is None else environ
    values = dict(load_raw_config() if raw is None else raw)
    values.update(load_env_overrides(env_path, environ))

    defaults = ClientSettings()
    return ClientSettings(
        session=resolve_session(environ),
        request_timeout=_get_number(values, "timeout", defaults.request_timeout, float),
        poll_interval=_get_number(values, "poll_interval", defaults.poll_interval, float),
        poll_attempts=_get_number(values, "poll_attempts", defaults.poll_attempts, int),
        runtime=(values.get("runtime") or defaults.runtime).strip(),
        daemon_path=values.get("daemon_path") or None,
        debug=_get_bool(values, "debug", defaults.debug),
    )
