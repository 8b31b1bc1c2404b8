"""
Per-platform stage finalizers.

A finalizer owns everything platform specific that happens to the stage
directory after acquisition:

- cleanup_after_unpack: marker removal and LICENSE rename after a local copy
- before_copy_extra_files: executable rename (Linux/Windows) or bundle
  construction and locale pruning (macOS)

Finalizers register themselves via the @register_finalizer decorator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, Type

from electron_stage.config import env
from electron_stage.core.logger import setup_logger
from electron_stage.core.models import (
    AcquisitionResult,
    BeforeCopyExtraFilesContext,
    BrandingOptions,
    CleanupOutcome,
    Platform,
    StagePrepareContext,
)
from electron_stage.stage.fs import rename_if_exists, unlink_if_exists

logger = setup_logger(__name__)

DEFAULT_APP_ARCHIVE = "default_app.asar"
VERSION_MARKER = "version"
LICENSE_FILE = "LICENSE"
RENAMED_LICENSE_FILE = "LICENSE.electron.txt"


class StageFinalizer(ABC):
    """
    Base class for platform finalizers.

    Subclasses must define:
    - platform: The build platform handled
    """

    platform: Platform

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if ABC in cls.__bases__:
            return
        if not isinstance(getattr(cls, "platform", None), Platform):
            raise TypeError(f"{cls.__name__} must define 'platform' class attribute")

    def unpacked_resources_dir(self, app_out_dir: Path, dist_mac_os_app_name: str) -> Path:
        """Resources dir of a freshly unpacked distribution."""
        return app_out_dir / "resources"

    def renames_license(self) -> bool:
        return True

    def cleanup_after_unpack(
        self,
        context: StagePrepareContext,
        dist_mac_os_app_name: str,
        result: AcquisitionResult,
    ) -> Dict[str, CleanupOutcome]:
        """Remove distribution markers after a local copy.

        Actions are independent and run concurrently; each is best-effort.
        Delegated or deferred acquisition leaves the stage untouched.
        """
        if not result.is_full_cleanup:
            return {}

        out = context.app_out_dir
        resources_dir = self.unpacked_resources_dir(out, dist_mac_os_app_name)
        actions: Dict[str, Callable[[], CleanupOutcome]] = {
            DEFAULT_APP_ARCHIVE: lambda: unlink_if_exists(resources_dir / DEFAULT_APP_ARCHIVE),
            VERSION_MARKER: lambda: unlink_if_exists(out / VERSION_MARKER),
        }
        if self.renames_license():
            actions[LICENSE_FILE] = lambda: rename_if_exists(out / LICENSE_FILE, out / RENAMED_LICENSE_FILE)

        with ThreadPoolExecutor(max_workers=min(len(actions), env.FS_CONCURRENCY), thread_name_prefix="Cleanup") as executor:
            futures = {name: executor.submit(action) for name, action in actions.items()}
            outcomes = {name: future.result() for name, future in futures.items()}

        logger.debug("Cleanup after unpack in %s: %s", out, {k: v.value for k, v in outcomes.items()})
        return outcomes

    @abstractmethod
    def before_copy_extra_files(self, context: BeforeCopyExtraFilesContext, branding: BrandingOptions) -> Any:
        """Platform finalization run before extra files are copied in."""
        pass


_FINALIZERS: Dict[Platform, Type[StageFinalizer]] = {}


def register_finalizer(cls: Type[StageFinalizer]) -> Type[StageFinalizer]:
    _FINALIZERS[cls.platform] = cls
    return cls


def get_stage_finalizer(platform: Platform) -> StageFinalizer:
    try:
        return _FINALIZERS[platform]()
    except KeyError:
        raise ValueError(f"No stage finalizer registered for {platform}") from None


# Import implementations to trigger registration
from electron_stage.electron.finalizers import linux  # noqa: F401, E402
from electron_stage.electron.finalizers import mac  # noqa: F401, E402
from electron_stage.electron.finalizers import windows  # noqa: F401, E402
