"""Resolved build configuration.

The packager hands us configuration that has already been merged and
validated; this module only gives it a small typed surface. Keys keep the
camelCase names used in ``electron-builder.json`` / the ``build`` section of
``package.json``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from electron_stage.core.logger import setup_logger

logger = setup_logger(__name__)

# electronDist may be a path or a callable receiving the prepare context
ElectronDist = Union[str, Path, Callable[[Any], Optional[Union[str, Path]]]]

PLATFORM_SECTIONS = ("mac", "mas", "linux", "win")


class InvalidConfigurationError(Exception):
    """Raised when the build configuration cannot be resolved."""

    pass


class Configuration:
    """Read-only view over the resolved build configuration."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = dict(values or {})

    def get(self, key: str, default: Any = None) -> Any:
        value = self._values.get(key)
        return default if value is None else value

    def __contains__(self, key: str) -> bool:
        return self._values.get(key) is not None

    def __repr__(self) -> str:
        return f"Configuration({self._values!r})"

    @property
    def electron_version(self) -> Optional[str]:
        version = self.get("electronVersion")
        return str(version) if version else None

    @property
    def electron_branding(self) -> Dict[str, Any]:
        return dict(self.get("electronBranding", {}))

    @property
    def electron_dist(self) -> Optional[ElectronDist]:
        return self.get("electronDist")

    @property
    def electron_download(self) -> Dict[str, Any]:
        return dict(self.get("electronDownload", {}))

    @property
    def download_alternate_ffmpeg(self) -> bool:
        return bool(self.get("downloadAlternateFFmpeg", False))

    @property
    def remote_build(self) -> bool:
        return self.get("remoteBuild", True) is not False

    @property
    def framework(self) -> Optional[str]:
        return self.get("framework")

    def platform_options(self, section: str) -> Dict[str, Any]:
        """Options for one platform section (``mac``, ``mas``, ``linux``, ``win``)."""
        if section not in PLATFORM_SECTIONS:
            raise ValueError(f"Unknown platform section: {section}")
        return dict(self.get(section, {}))


def as_list(value: Any) -> List[Any]:
    """Normalize a scalar-or-list option to a list (None becomes empty)."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def load_configuration(path: Path) -> Configuration:
    """Load configuration from a JSON file.

    ``package.json`` files contribute their ``build`` section; any other file
    is read as the configuration itself.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidConfigurationError(f"Cannot read configuration from '{path}': {e}") from e

    if not isinstance(data, dict):
        raise InvalidConfigurationError(f"Configuration in '{path}' must be a JSON object")

    if path.name == "package.json":
        data = data.get("build") or {}
        if not isinstance(data, dict):
            raise InvalidConfigurationError(f"'build' in '{path}' must be a JSON object")

    logger.debug("Loaded configuration from %s (%d keys)", path, len(data))
    return Configuration(data)
