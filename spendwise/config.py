"""Configuration and local key-value storage for spendwise.

A single TOML file holds the backend settings, the theme preference, the
locally-held AI API key and the persisted login session. The file is
created with 0600 permissions because it contains credentials.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

THEMES = ("light", "dark")
DEFAULT_THEME = "light"

ENV_SUPABASE_URL = "SPENDWISE_SUPABASE_URL"
ENV_SUPABASE_ANON_KEY = "SPENDWISE_SUPABASE_ANON_KEY"
ENV_AI_API_KEY = "SPENDWISE_AI_API_KEY"


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "spendwise" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    default_config: dict[str, Any] = {
        "supabase": {"url": "", "anon_key": ""},
        "ai": {"api_key": ""},
        "ui": {"theme": DEFAULT_THEME},
    }

    save_config(default_config, config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def load_config_or_empty(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration, treating a missing file as empty."""
    try:
        return load_config(config_path)
    except FileNotFoundError:
        return {}


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def get_setting(section: str, key: str, config_path: Path | None = None) -> Any:
    """Read a single value from a config section, or None if unset."""
    config = load_config_or_empty(config_path)
    section_data = config.get(section, {})
    if not isinstance(section_data, dict):
        return None
    return section_data.get(key)


def set_setting(section: str, key: str, value: Any, config_path: Path | None = None) -> None:
    """Write a single value into a config section, creating the file if needed."""
    config = load_config_or_empty(config_path)
    section_data = config.setdefault(section, {})
    section_data[key] = value
    save_config(config, config_path)


def get_supabase_settings(config_path: Path | None = None) -> tuple[str, str]:
    """Get the backend URL and anon key.

    Environment variables take precedence over the config file.

    Returns:
        Tuple of (url, anon_key). Either may be an empty string when unset.
    """
    url = os.environ.get(ENV_SUPABASE_URL) or get_setting("supabase", "url", config_path) or ""
    anon_key = os.environ.get(ENV_SUPABASE_ANON_KEY) or get_setting("supabase", "anon_key", config_path) or ""
    return url.rstrip("/"), anon_key


def get_ai_api_key(config_path: Path | None = None) -> str | None:
    """Get the locally-held AI API key, or None if not set."""
    return os.environ.get(ENV_AI_API_KEY) or get_setting("ai", "api_key", config_path) or None


def set_ai_api_key(api_key: str, config_path: Path | None = None) -> None:
    set_setting("ai", "api_key", api_key, config_path)


def get_theme(config_path: Path | None = None) -> str:
    """Get the saved theme, falling back to the default for unknown values."""
    theme = get_setting("ui", "theme", config_path)
    return theme if theme in THEMES else DEFAULT_THEME


def set_theme(theme: str, config_path: Path | None = None) -> None:
    """Persist the theme preference.

    Raises:
        ValueError: If theme is not 'light' or 'dark'.
    """
    if theme not in THEMES:
        raise ValueError(f"Unknown theme '{theme}'. Choose 'light' or 'dark'")
    set_setting("ui", "theme", theme, config_path)


def load_session_data(config_path: Path | None = None) -> dict[str, Any] | None:
    """Get the persisted login session, or None if logged out."""
    session = load_config_or_empty(config_path).get("session")
    if isinstance(session, dict) and session.get("access_token"):
        return session
    return None


def save_session_data(session: dict[str, Any], config_path: Path | None = None) -> None:
    config = load_config_or_empty(config_path)
    config["session"] = session
    save_config(config, config_path)


def clear_session_data(config_path: Path | None = None) -> None:
    config = load_config_or_empty(config_path)
    if config.pop("session", None) is not None:
        save_config(config, config_path)
