"""Typed configuration loading and access.

The panel reads an optional ``relpanel.toml``; every key has a default so a
missing file yields a working configuration.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, cast

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_float, get_int, get_str, get_str_list, get_table

__all__ = [
    "PanelConfig",
    "SessionConfig",
    "Config",
    "ConfigError",
    "Profile",
    "load_config",
    "load_config_or_default",
    "DEFAULT_CONFIG_NAME",
    "POLL_INTERVAL_SECONDS",
    "REQUEST_TIMEOUT_SECONDS",
    "MAX_CATALOG_VERSIONS",
    "PROTECTED_BRANCHES",
]

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULT_CONFIG_NAME = "relpanel.toml"

POLL_INTERVAL_SECONDS = 2.0
REQUEST_TIMEOUT_SECONDS = 10.0
MAX_CATALOG_VERSIONS = 5
PROTECTED_BRANCHES: tuple[str, ...] = ("main", "master")
DEFAULT_SESSION_PATH = ".relpanel/session.json"

Profile = Literal["form", "terminal"]


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PanelConfig:
    """Timing and policy knobs of the release panel."""

    poll_interval_seconds: float = POLL_INTERVAL_SECONDS
    request_timeout_seconds: float = REQUEST_TIMEOUT_SECONDS
    max_catalog_versions: int = MAX_CATALOG_VERSIONS
    protected_branches: tuple[str, ...] = PROTECTED_BRANCHES
    require_confirmation: bool = False
    profile: Profile = "form"

    def is_protected(self, branch: str) -> bool:
        return branch.strip().lower() in {b.lower() for b in self.protected_branches}


@dataclass(frozen=True, slots=True)
class SessionConfig:
    path: str = DEFAULT_SESSION_PATH


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    panel: PanelConfig = field(default_factory=PanelConfig)
    session: SessionConfig = field(default_factory=SessionConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: If a value is present but out of range.
        """
        panel: StrDict = get_table(data, "panel") or {}
        session: StrDict = get_table(data, "session") or {}

        poll = get_float(panel, "poll_interval_seconds") or POLL_INTERVAL_SECONDS
        timeout = get_float(panel, "request_timeout_seconds") or REQUEST_TIMEOUT_SECONDS
        max_versions = get_int(panel, "max_catalog_versions") or MAX_CATALOG_VERSIONS
        if poll <= 0 or timeout <= 0:
            raise ValueError("intervals must be positive")
        if max_versions < 1:
            raise ValueError("max_catalog_versions must be >= 1")

        profile = get_str(panel, "profile") or "form"
        if profile not in {"form", "terminal"}:
            raise ValueError(f"unknown profile: {profile}")

        protected = get_str_list(panel, "protected_branches")

        return cls(
            panel=PanelConfig(
                poll_interval_seconds=poll,
                request_timeout_seconds=timeout,
                max_catalog_versions=max_versions,
                protected_branches=tuple(protected) if protected else PROTECTED_BRANCHES,
                require_confirmation=bool(get_bool(panel, "require_confirmation")),
                profile=cast(Profile, profile),
            ),
            session=SessionConfig(
                path=get_str(session, "path") or DEFAULT_SESSION_PATH,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to relpanel.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Config:
    """Load config from file, or return the defaults if it cannot be read."""
    result = load_config(path)
    if isinstance(result, Ok):
        return result.value
    return Config()
