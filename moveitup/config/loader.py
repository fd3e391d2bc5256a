"""
Settings loading and merging for moveitup.

Settings come from up to four layers, merged with "last wins" semantics:

1. **Built-in defaults** (DEFAULTS below)
   - base_url points at the public MOVEit cloud endpoint
2. **Settings file** (YAML, optional)
   - Passed explicitly (CLI: -c/--config)
   - Top-level mapping; unknown keys are rejected
3. **Environment** (MOVEIT_* variables)
   - A .env file in the working directory is loaded first via python-dotenv;
     variables already present in the environment win over the file
4. **Explicit overrides** (keyword arguments, e.g. CLI --base-url)
   - None values are ignored so unset CLI flags don't mask lower layers

Recognised keys and variables
-----------------------------
==============  ==================  =======================================
YAML key        Environment         Meaning
==============  ==================  =======================================
base_url        MOVEIT_BASE_URL     API root; normalised to end with "/"
timeout         MOVEIT_TIMEOUT      Per-request timeout in seconds (0/none
                                    disables)
user_agent      MOVEIT_USER_AGENT   User-Agent header on every request
username        MOVEIT_USERNAME     Fallback username for the CLI
password        MOVEIT_PASSWORD     Fallback password for the CLI
==============  ==================  =======================================

Error Handling
--------------
- ConfigError: missing settings file, YAML parse errors, non-mapping
  documents, unknown keys, unparsable timeout values
- All errors are chained with "from err" for better debugging

Examples
--------
Defaults only:

    >>> from moveitup.config import load_settings
    >>> settings = load_settings(use_dotenv=False)
    >>> settings.base_url
    'https://mobile-1.moveitcloud.com/'

With a settings file and an override:

    >>> settings = load_settings(
    ...     Path("moveitup.yaml"),
    ...     base_url="https://files.example.com",
    ... )
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv
import yaml

from moveitup import __version__
from moveitup.exceptions import ConfigError

DEFAULT_BASE_URL = "https://mobile-1.moveitcloud.com/"
DEFAULT_TIMEOUT = 60.0

DEFAULTS: dict[str, Any] = {
    "base_url": DEFAULT_BASE_URL,
    "timeout": DEFAULT_TIMEOUT,
    "user_agent": f"moveitup/{__version__}",
    "username": None,
    "password": None,
}

ENV_VARS: dict[str, str] = {
    "base_url": "MOVEIT_BASE_URL",
    "timeout": "MOVEIT_TIMEOUT",
    "user_agent": "MOVEIT_USER_AGENT",
    "username": "MOVEIT_USERNAME",
    "password": "MOVEIT_PASSWORD",
}

# -------------------------------
# Data types
# -------------------------------


@dataclass(frozen=True)
class Settings:
    """Effective settings for one upload run.

    Attributes:
        base_url: API root, always ending with "/".
        timeout: Per-request timeout in seconds, or None for no timeout.
        user_agent: User-Agent sent with every request.
        username: Fallback username (CLI flags win).
        password: Fallback password (CLI flags win).
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = DEFAULT_TIMEOUT
    user_agent: str = DEFAULTS["user_agent"]
    username: str | None = None
    password: str | None = None

    def __post_init__(self) -> None:
        # urljoin drops the last path segment of a base without "/".
        if isinstance(self.base_url, str) and not self.base_url.endswith("/"):
            object.__setattr__(self, "base_url", self.base_url + "/")

    def __repr__(self) -> str:
        # Keep the password out of debug dumps.
        masked = "***" if self.password else None
        return (
            f"Settings(base_url={self.base_url!r}, timeout={self.timeout!r}, "
            f"user_agent={self.user_agent!r}, username={self.username!r}, "
            f"password={masked!r})"
        )


# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> dict[str, Any]:
    """
    Load a settings YAML file and return the top-level mapping.

    An empty file yields an empty mapping.
    """
    if not p.exists():
        raise ConfigError(f"settings file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"top-level YAML must be a mapping (dict): {p}")

    unknown = sorted(set(data) - set(DEFAULTS))
    if unknown:
        raise ConfigError(f"unknown settings key(s) in {p}: {', '.join(unknown)}")
    return data


# -------------------------------
# Environment
# -------------------------------


def _env_layer() -> dict[str, Any]:
    """Collect MOVEIT_* variables that are set and non-empty."""
    layer: dict[str, Any] = {}
    for key, var in ENV_VARS.items():
        value = os.environ.get(var)
        if value:
            layer[key] = value
    return layer


# -------------------------------
# Normalisation
# -------------------------------


def _normalise_base_url(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"base_url must be a non-empty string, got {value!r}")
    value = value.strip()
    return value if value.endswith("/") else value + "/"


def _normalise_timeout(value: Any) -> float | None:
    """Accept numbers or numeric strings; 0, "none" and None disable the timeout."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError(f"timeout must be a number of seconds, got {value!r}")
    if isinstance(value, str):
        if value.strip().lower() in ("", "none", "off"):
            return None
        try:
            value = float(value)
        except ValueError as err:
            raise ConfigError(
                f"timeout must be a number of seconds, got {value!r}"
            ) from err
    if not isinstance(value, (int, float)) or value < 0:
        raise ConfigError(f"timeout must be a number of seconds, got {value!r}")
    return float(value) or None


def _optional_str(key: str, value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string, got {type(value).__name__}")
    return value


# -------------------------------
# Public API
# -------------------------------


def load_settings(
    config_path: Path | None = None,
    *,
    use_dotenv: bool = True,
    **overrides: Any,
) -> Settings:
    """
    Load the effective settings for a run.

    Steps
      1) Start from DEFAULTS.
      2) Merge the YAML settings file, if given.
      3) Load .env (unless use_dotenv=False) and merge MOVEIT_* variables.
      4) Merge non-None keyword overrides.
      5) Normalise base_url and timeout, type-check the rest.

    Returns
      A frozen Settings instance.

    Raises
      ConfigError for unreadable/invalid settings files, unknown keys
      (file or overrides) and invalid values.
    """
    unknown = sorted(set(overrides) - set(DEFAULTS))
    if unknown:
        raise ConfigError(f"unknown settings key(s): {', '.join(unknown)}")

    merged: dict[str, Any] = dict(DEFAULTS)

    if config_path is not None:
        merged.update(_load_yaml_file(Path(config_path)))

    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    merged.update(_env_layer())

    merged.update({k: v for k, v in overrides.items() if v is not None})

    user_agent = _optional_str("user_agent", merged["user_agent"])
    return Settings(
        base_url=_normalise_base_url(merged["base_url"]),
        timeout=_normalise_timeout(merged["timeout"]),
        user_agent=user_agent or DEFAULTS["user_agent"],
        username=_optional_str("username", merged["username"]),
        password=_optional_str("password", merged["password"]),
    )
