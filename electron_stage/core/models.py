"""Data structures shared across the staging pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Literal, Optional, Tuple

if TYPE_CHECKING:
    from electron_stage.core.packager import PlatformPackager

ElectronPlatformName = Literal["darwin", "linux", "win32", "mas"]


class Platform(Enum):
    """Build platform of a packager (``mas`` builds run on the MAC packager)."""

    MAC = "mac"
    LINUX = "linux"
    WINDOWS = "win"

    @classmethod
    def from_platform_name(cls, platform_name: str) -> "Platform":
        if platform_name in ("darwin", "mas"):
            return cls.MAC
        if platform_name == "win32":
            return cls.WINDOWS
        if platform_name == "linux":
            return cls.LINUX
        raise ValueError(f"Unknown electron platform name: {platform_name}")


@dataclass(frozen=True)
class BrandingOptions:
    project_name: str = "electron"
    product_name: str = "Electron"


@dataclass
class DownloadOptions:
    """Options handed to the unpack worker for one (platform, arch)."""

    platform: ElectronPlatformName
    arch: str
    version: Optional[str]
    cache: Optional[str] = None
    mirror: Optional[str] = None
    custom_dir: Optional[str] = None
    custom_filename: Optional[str] = None
    strict_ssl: Optional[bool] = None
    is_verify_checksum: Optional[bool] = None

    # Worker-side key names
    _WIRE_KEYS = {
        "platform": "platform",
        "arch": "arch",
        "version": "version",
        "cache": "cache",
        "mirror": "mirror",
        "custom_dir": "customDir",
        "custom_filename": "customFilename",
        "strict_ssl": "strictSSL",
        "is_verify_checksum": "isVerifyChecksum",
    }

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for attr, key in self._WIRE_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                result[key] = value
        return result

    @classmethod
    def wire_key_to_attr(cls, key: str) -> Optional[str]:
        for attr, wire_key in cls._WIRE_KEYS.items():
            if wire_key == key:
                return attr
        return None

    def with_cache(self, cache: str) -> "DownloadOptions":
        return replace(self, cache=cache)


@dataclass(frozen=True)
class AppInfo:
    product_name: str
    product_filename: str
    app_id: str
    version: str = "0.0.0"
    build_version: Optional[str] = None


@dataclass(frozen=True)
class StagePrepareContext:
    packager: "PlatformPackager"
    app_out_dir: Path
    platform_name: ElectronPlatformName
    arch: str
    version: str
    asar_integrity: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class BeforeCopyExtraFilesContext:
    packager: "PlatformPackager"
    app_out_dir: Path
    platform_name: ElectronPlatformName
    arch: str
    asar_integrity: Optional[Dict[str, Any]] = None


class AcquisitionResult(Enum):
    """How the stage directory was populated."""

    DELEGATED = "delegated"
    COPIED = "copied"
    # Remote build server: a later stage populates the directory
    DEFERRED = "deferred"

    @property
    def is_full_cleanup(self) -> bool:
        return self is AcquisitionResult.COPIED


class CleanupOutcome(Enum):
    SUCCEEDED = "succeeded"
    NOT_APPLICABLE = "not_applicable"
    FAILED = "failed"


@dataclass(frozen=True)
class LocalePruneResult:
    removed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ResolvedBuild:
    version: str
    branding: BrandingOptions

    @property
    def dist_mac_os_app_name(self) -> str:
        return f"{self.branding.product_name}.app"


@dataclass
class StagePlan:
    """Ordered record of what preparing one target's stage directory did."""

    target: str
    actions: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)

    def record(self, action: str, **details: Any) -> None:
        self.actions.append((action, details))

    @property
    def names(self) -> List[str]:
        return [action for action, _ in self.actions]

    def __str__(self) -> str:
        return f"{self.target}: {', '.join(self.names) or 'nothing'}"
