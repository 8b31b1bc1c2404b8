"""Electron version discovery.

Resolution order:

1. ``electronVersion`` from configuration, used as is;
2. for pre-packed app archives, the version of the installed electron module
   (the archive carries no dev dependencies, so nothing else is readable);
3. otherwise the installed module, then the dependency declared in the project
   ``package.json``.
"""

from __future__ import annotations

import json
import re
import threading
import weakref
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from electron_stage.core.config import Configuration, InvalidConfigurationError
from electron_stage.core.logger import setup_logger
from electron_stage.core.packager import PlatformPackager
from electron_stage.electron import github

logger = setup_logger(__name__)

ELECTRON_PACKAGES = ("electron", "electron-prebuilt", "electron-prebuilt-compile", "electron-nightly")

_COERCE_PATTERN = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def get_electron_version_from_installed(project_dir: Path) -> Optional[str]:
    """Version of the first electron package installed under ``node_modules``."""
    for name in ELECTRON_PACKAGES:
        package_file = project_dir / "node_modules" / name / "package.json"
        try:
            with open(package_file, encoding="utf-8") as f:
                version = json.load(f).get("version")
        except FileNotFoundError:
            continue
        except (OSError, ValueError, AttributeError) as e:
            logger.warning("Cannot read electron version from %s: %s", package_file, e)
            continue
        if version:
            return str(version)
    return None


def find_electron_dependency(metadata: Dict[str, Any]) -> Optional[Tuple[str, str]]:
    """(package name, version spec) of the declared electron dependency.

    devDependencies win over dependencies for the same package.
    """
    for name in ELECTRON_PACKAGES:
        for section in ("devDependencies", "dependencies"):
            version = (metadata.get(section) or {}).get(name)
            if version is not None:
                return name, str(version)
    return None


def coerce_version(version: str) -> Optional[str]:
    """Normalize a loose version spec (``13.1``) to ``MAJOR.MINOR.PATCH``."""
    match = _COERCE_PATTERN.search(version)
    if not match:
        return None
    major, minor, patch = match.groups()
    return f"{int(major)}.{int(minor or 0)}.{int(patch or 0)}"


def compute_electron_version(project_dir: Path, metadata: Callable[[], Dict[str, Any]]) -> str:
    """Compute the Electron version for a project.

    ``metadata`` is only called when no electron package is installed.
    """
    installed = get_electron_version_from_installed(project_dir)
    if installed is not None:
        return installed

    dependency = find_electron_dependency(metadata())
    package_json = project_dir / "package.json"

    if dependency is not None and dependency[0] == "electron-nightly":
        logger.info("You are using a nightly version of electron, be warned that those builds are highly unstable.")
        try:
            return github.fetch_latest_nightly_version()
        except Exception as e:
            raise InvalidConfigurationError(f"Cannot resolve electron-nightly version: {e}") from e

    if dependency is not None and dependency[1] == "latest":
        logger.warning(
            'Electron version is set to "latest", but it is recommended to set it to some more restricted version range.'
        )
        try:
            version = github.fetch_latest_release_version()
        except Exception as e:
            logger.warning("Cannot resolve latest electron release: %s", e)
            raise InvalidConfigurationError(
                f"Cannot find electron dependency to get electron version in the '{package_json}'"
            ) from e
        logger.info("Resolved %s@latest to %s", dependency[0], version)
        return version

    version = dependency[1] if dependency is not None else None
    if version is None or not version[:1].isdigit():
        version_message = "" if version is None else f' and version ("{version}") is not fixed in project'
        raise InvalidConfigurationError(
            "Cannot compute electron version from installed node modules - "
            f"none of the possible electron modules are installed{version_message}."
        )

    coerced = coerce_version(version)
    if coerced is None:
        raise InvalidConfigurationError(f"Cannot parse electron version '{version}' in '{package_json}'")
    return coerced


class ElectronVersionResolver:
    """Resolve the Electron version at most once per build.

    A build is identified by its ``Configuration`` object: preparations for
    several targets share one configuration and may run concurrently, so the
    lock keeps discovery (and its network lookups) single. Entries are held
    weakly and disappear with the configuration, so a later build of the same
    project discovers its version afresh.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._resolved: "weakref.WeakKeyDictionary[Configuration, Dict[Tuple[Path, bool], str]]" = (
            weakref.WeakKeyDictionary()
        )

    def resolve(self, configuration: Configuration, packager: PlatformPackager) -> str:
        configured = configuration.electron_version
        if configured is not None:
            return configured

        key = (packager.project_dir.resolve(), bool(packager.is_prepacked_app_asar))
        with self._lock:
            per_build = self._resolved.setdefault(configuration, {})
            cached = per_build.get(key)
            if cached is not None:
                return cached

            if packager.is_prepacked_app_asar:
                version = get_electron_version_from_installed(packager.project_dir)
                if version is None:
                    raise InvalidConfigurationError("Cannot compute electron version for prepacked asar")
            else:
                version = compute_electron_version(packager.project_dir, lambda: packager.metadata)

            logger.info("Resolved electron version %s for %s", version, key[0])
            per_build[key] = version
            return version

    def clear(self) -> None:
        with self._lock:
            self._resolved.clear()


version_resolver = ElectronVersionResolver()


def resolve_electron_version(configuration: Configuration, packager: PlatformPackager) -> str:
    return version_resolver.resolve(configuration, packager)
