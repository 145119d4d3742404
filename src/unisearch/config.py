"""Environment variable configuration for the dictionary backend.

Values are loaded in priority order:
  1. Shell environment variables (highest priority)
  2. .env file in current directory
  3. ~/.unisearch/.env (persistent config, set via `unisearch env set`)

Run `unisearch env` to see which values are configured.
Run `unisearch env set KEY value` to save a value persistently.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv, set_key

# Persistent config location
CONFIG_DIR = Path.home() / ".unisearch"
PERSISTENT_ENV = CONFIG_DIR / ".env"

# Load in reverse priority order (later loads don't overwrite existing)
if PERSISTENT_ENV.exists():
    load_dotenv(PERSISTENT_ENV)

load_dotenv()

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_MAX_RESULTS = 50
DEFAULT_TIMEOUT = 15


# --- Validation ---

def _check_url(url: str) -> str:
    if not url.startswith(("http://", "https://")):
        raise ValueError(
            f"UNISEARCH_API_URL must be an http(s) URL, got {url!r}. "
            "Run `unisearch env set UNISEARCH_API_URL <url>` to configure it."
        )
    return url.rstrip("/")


def _parse_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


_VALIDATORS = {
    "UNISEARCH_API_URL": _check_url,
    "UNISEARCH_MAX_RESULTS": lambda raw: _parse_int("UNISEARCH_MAX_RESULTS", raw),
    "API_TIMEOUT": lambda raw: _parse_int("API_TIMEOUT", raw),
}


# --- Persistent config ---

def save_key(name: str, value: str) -> Path:
    """Validate ``value`` and store it in ~/.unisearch/.env.

    Raises ValueError without touching the file when the value would be
    rejected on the next run. The value also takes effect in this process.
    """
    validate = _VALIDATORS.get(name)
    if validate is not None:
        validate(value)

    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    PERSISTENT_ENV.touch(exist_ok=True)
    set_key(str(PERSISTENT_ENV), name, value, quote_mode="never")
    os.environ[name] = value
    return PERSISTENT_ENV


# --- Accessors ---

def get_api_url() -> str:
    return _check_url(os.getenv("UNISEARCH_API_URL", "") or DEFAULT_API_URL)


def get_api_token() -> str | None:
    """The token is optional; favorites need it, search does not."""
    return os.getenv("UNISEARCH_API_TOKEN") or None


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    if not raw:
        return default
    return _parse_int(name, raw)


def get_max_results() -> int:
    return _get_int("UNISEARCH_MAX_RESULTS", DEFAULT_MAX_RESULTS)


def get_timeout() -> int:
    return _get_int("API_TIMEOUT", DEFAULT_TIMEOUT)


# --- Status check ---

ENV_VARS = {
    "UNISEARCH_API_URL": {
        "default": DEFAULT_API_URL,
        "description": "Dictionary backend base URL",
    },
    "UNISEARCH_API_TOKEN": {
        "default": None,
        "secret": True,
        "description": "Bearer token of a signed-in user; enables favorite status",
    },
    "UNISEARCH_MAX_RESULTS": {
        "default": str(DEFAULT_MAX_RESULTS),
        "description": "Default result limit of `unisearch search`",
    },
    "API_TIMEOUT": {
        "default": str(DEFAULT_TIMEOUT),
        "description": "HTTP timeout in seconds",
    },
}

VALID_KEYS = set(ENV_VARS)


def _mask(value: str) -> str:
    return "*" * 8 if len(value) <= 8 else f"{value[:4]}...{value[-4:]}"


def check_env() -> list[tuple[str, str | None, bool, dict]]:
    """Return (var_name, effective_value, is_default, info) for each known var.

    Secret values are masked. ``effective_value`` is None when the var is
    unset and has no default.
    """
    result = []
    for var, info in ENV_VARS.items():
        raw = os.getenv(var)
        if raw:
            value = _mask(raw) if info.get("secret") else raw
            result.append((var, value, False, info))
        else:
            result.append((var, info["default"], True, info))
    return result
