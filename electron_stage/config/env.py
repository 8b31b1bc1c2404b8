"""Bootstrap configuration read from environment variables.

These values are resolved once at import time. Tests patch the module
attributes directly (e.g. ``patch("electron_stage.config.env.TMP_DIR", ...)``).
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def string_to_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in ("true", "yes", "1", "y", "on")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


DEBUG = string_to_bool(os.getenv("DEBUG", "false"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()
ENABLE_LOGGING = string_to_bool(os.getenv("ENABLE_LOGGING", "false"))
LOG_DIR = Path(os.getenv("LOG_DIR", Path.home() / ".cache" / "electron-stage" / "logs"))
TMP_DIR = Path(os.getenv("TMP_DIR", Path(tempfile.gettempdir()) / "electron-stage"))

# External unpack worker; resolved on PATH when unset
APP_BUILDER_BIN = os.getenv("APP_BUILDER_BIN", "")

# Ceiling for parallel filesystem fan-out (locale pruning, cleanup)
FS_CONCURRENCY = max(1, _int_env("FS_CONCURRENCY", 8))

REMOTE_BUILD = string_to_bool(os.getenv("_REMOTE_BUILD", "false"))

ELECTRON_MIRROR = os.getenv("ELECTRON_MIRROR", "")
HTTP_TIMEOUT = _int_env("HTTP_TIMEOUT", 60)

# Must contain icons/electron-linux; the package ships no icon set
_TEMPLATES_DIR = os.getenv("TEMPLATES_DIR", "")
TEMPLATES_DIR = Path(_TEMPLATES_DIR) if _TEMPLATES_DIR else None
