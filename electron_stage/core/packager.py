"""Packager state consumed by the Electron stage pipeline.

A ``PlatformPackager`` describes one build target: project location, the
resolved configuration and the per-platform layout rules (where resources
live, which directory of an unpacked distribution gets copied).
"""

from __future__ import annotations

import json
import re
import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from electron_stage.config import env
from electron_stage.core.config import Configuration
from electron_stage.core.logger import setup_logger
from electron_stage.core.models import AppInfo, Platform

logger = setup_logger(__name__)

_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

# (packager, app_out_dir, asar_integrity, is_mas) -> None
MacBundleConstructor = Callable[["PlatformPackager", Path, Optional[Dict[str, Any]], bool], None]


def sanitize_file_name(name: str) -> str:
    sanitized = _INVALID_FILENAME_CHARS.sub("", name).strip().rstrip(".")
    return sanitized or "app"


def create_app_info(configuration: Configuration, metadata: Dict[str, Any]) -> AppInfo:
    product_name = configuration.get("productName") or metadata.get("productName") or metadata.get("name") or "Electron"
    app_id = configuration.get("appId") or f"com.electron.{sanitize_file_name(str(metadata.get('name', 'app'))).lower()}"
    return AppInfo(
        product_name=product_name,
        product_filename=sanitize_file_name(product_name),
        app_id=app_id,
        version=str(metadata.get("version", "0.0.0")),
        build_version=configuration.get("buildVersion"),
    )


@dataclass
class PlatformPackager:
    project_dir: Path
    config: Configuration
    platform: Platform
    app_info: AppInfo
    is_prepacked_app_asar: bool = False
    mac_bundle_constructor: Optional[MacBundleConstructor] = None
    # Set when the platform is MAC so src/destination dirs point at the bundle
    dist_mac_os_app_name: str = "Electron.app"
    _metadata: Optional[Dict[str, Any]] = field(default=None, repr=False)
    _metadata_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def metadata(self) -> Dict[str, Any]:
        """Project ``package.json``, read at most once."""
        with self._metadata_lock:
            if self._metadata is None:
                self._metadata = read_package_json(self.project_dir / "package.json")
            return self._metadata

    @property
    def platform_specific_build_options(self) -> Dict[str, Any]:
        return self.config.platform_options(self.platform.value)

    def platform_options_for(self, platform_name: str) -> Dict[str, Any]:
        """Options for ``platform_name``; ``mas`` falls back to ``mac`` keys."""
        if platform_name == "mas":
            merged = self.config.platform_options("mac")
            merged.update(self.config.platform_options("mas"))
            return merged
        return self.platform_specific_build_options

    @property
    def executable_name(self) -> str:
        if self.platform is Platform.LINUX:
            name = self.platform_specific_build_options.get("executableName")
            if name:
                return name
            return sanitize_file_name(str(self.metadata.get("name") or self.app_info.product_filename)).lower()
        return self.app_info.product_filename

    def get_resources_dir(self, app_out_dir: Path) -> Path:
        if self.platform is Platform.MAC:
            return app_out_dir / f"{self.app_info.product_filename}.app" / "Contents" / "Resources"
        return app_out_dir / "resources"

    def get_electron_src_dir(self, dist: str | Path) -> Path:
        base = (self.project_dir / dist).resolve()
        if self.platform is Platform.MAC:
            return base / self.dist_mac_os_app_name
        return base

    def get_electron_destination_dir(self, app_out_dir: Path) -> Path:
        if self.platform is Platform.MAC:
            return app_out_dir / self.dist_mac_os_app_name
        return app_out_dir

    def is_safe_to_unpack_electron_on_remote_build_server(self) -> bool:
        """True when a Linux build is forwarded to a remote build server.

        The remote server unpacks Electron itself, so local acquisition is
        deferred.
        """
        if self.platform is not Platform.LINUX or not self.config.remote_build:
            return False
        if sys.platform == "win32" or env.REMOTE_BUILD:
            framework = self.config.framework
            return framework is None or framework == "electron"
        return False


def read_package_json(path: Path) -> Dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug("No package.json at %s", path)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring non-object package.json at %s", path)
        return {}
    return data
