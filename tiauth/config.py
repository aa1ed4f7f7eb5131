"""Configuration file loading for tiauth."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_HOME_DIR = Path("~") / ".titanium"
DEFAULT_LOGIN_URL = "https://api.appcelerator.net/p/v1/sso-login"
DEFAULT_LOGOUT_URL = "https://api.appcelerator.net/p/v1/sso-logout"
ACCOUNT_URL = "https://my.appcelerator.com/"

CONFIG_LOCATIONS = [
    Path.home() / ".titanium" / "tiauth.yaml",
    Path.cwd() / ".tiauth.yaml",
]

_VALID_SECTIONS = {"auth", "logging"}

_VALID_SECTION_KEYS: dict[str, set[str]] = {
    "auth": {"home_dir", "login_url", "logout_url", "proxy", "timeout"},
    "logging": {"level", "file"},
}

_config_logger = logging.getLogger("tiauth.config")


def _interpolate_env(value: str | None) -> str | None:
    """Expand ${VAR} references in a proxy URL from the environment.

    Unset variables are left in place so a bad proxy setting stays visible
    in the error the transport reports.
    """
    if value is None:
        return None
    return re.sub(
        r"\$\{(\w+)\}",
        lambda m: os.environ.get(m.group(1), m.group(0)),
        value,
    )


def _warn_unknown_keys(config: dict, source: str) -> None:
    """Warn about sections and keys tiauth.yaml does not understand."""
    for section, keys in config.items():
        if section not in _VALID_SECTIONS:
            _config_logger.warning(
                "Config file '%s': unknown section '%s' (ignored)", source, section
            )
            continue
        if not isinstance(keys, dict):
            continue
        valid_keys = _VALID_SECTION_KEYS.get(section, set())
        for key in keys:
            if key not in valid_keys:
                _config_logger.warning(
                    "Config file '%s': unknown key '%s.%s' (ignored)",
                    source, section, key,
                )


def load_config(path: Path | None = None) -> dict:
    """Load tiauth.yaml, from ``path`` or the first default location found.

    The per-user file under ~/.titanium is checked before a project-local
    .tiauth.yaml.

    Returns:
        The raw ``auth`` and ``logging`` sections, or an empty dict.
    """
    for loc in [path] if path else CONFIG_LOCATIONS:
        if not loc.exists():
            continue
        data = yaml.safe_load(loc.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(data, str(loc))
        return data
    return {}


class AuthConfig(BaseModel):
    """Settings shared by login, logout and status."""

    home_dir: Path = Field(default=DEFAULT_HOME_DIR, validate_default=True)
    login_url: str = DEFAULT_LOGIN_URL
    logout_url: str = DEFAULT_LOGOUT_URL
    proxy: str | None = None
    timeout: float = Field(default=30.0, gt=0)

    log_level: str = "WARNING"
    log_file: str | None = None

    @field_validator("home_dir", mode="after")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    @model_validator(mode="after")
    def _interpolate_proxy(self) -> AuthConfig:
        self.proxy = _interpolate_env(self.proxy) or None
        return self

    @classmethod
    def from_sources(cls, file_config: dict[str, Any], **overrides: Any) -> AuthConfig:
        """Build an AuthConfig from a loaded config file plus CLI values.

        File values are applied first; overrides that are not None win.
        """
        values: dict[str, Any] = {}
        auth_section = file_config.get("auth") or {}
        logging_section = file_config.get("logging") or {}
        for key in _VALID_SECTION_KEYS["auth"]:
            if auth_section.get(key) is not None:
                values[key] = auth_section[key]
        if logging_section.get("level") is not None:
            values["log_level"] = str(logging_section["level"])
        if logging_section.get("file") is not None:
            values["log_file"] = str(logging_section["file"])

        for key, value in overrides.items():
            if value is not None:
                values[key] = value
        return cls(**values)
