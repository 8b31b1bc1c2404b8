"""Electron framework support exposed to the packager.

``create_electron_framework_support`` resolves the version and branding once
and returns an ``ElectronFramework``; the packager then calls
``prepare_application_stage_directory`` per target and, later,
``before_copy_extra_files``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from electron_stage.config import env
from electron_stage.core.config import Configuration
from electron_stage.core.logger import setup_logger
from electron_stage.core.models import (
    AcquisitionResult,
    BeforeCopyExtraFilesContext,
    BrandingOptions,
    Platform,
    ResolvedBuild,
    StagePlan,
    StagePrepareContext,
)
from electron_stage.core.packager import PlatformPackager
from electron_stage.electron.acquire import acquire_distribution
from electron_stage.electron.branding import create_branding_opts
from electron_stage.electron.download import create_download_opts
from electron_stage.electron.ffmpeg import replace_ffmpeg
from electron_stage.electron.finalizers import get_stage_finalizer
from electron_stage.electron.unpackers import DistributionUnpacker
from electron_stage.electron.version import ElectronVersionResolver, version_resolver

logger = setup_logger(__name__)


class ElectronFramework:
    mac_os_default_targets = ("zip", "dmg")
    default_app_id_prefix = "com.electron."
    is_copy_elevate_helper = True
    is_npm_rebuild_required = True

    def __init__(
        self,
        name: str,
        version: str,
        dist_mac_os_app_name: str,
        branding: Optional[BrandingOptions] = None,
        unpacker: Optional[DistributionUnpacker] = None,
    ):
        self.name = name
        self.version = version
        self.dist_mac_os_app_name = dist_mac_os_app_name
        self.branding = branding or BrandingOptions(project_name=name, product_name=Path(dist_mac_os_app_name).stem)
        self._unpacker = unpacker

    def __repr__(self) -> str:
        return f"ElectronFramework(name={self.name!r}, version={self.version!r})"

    def get_default_icon(self, platform: Platform) -> Optional[Path]:
        if platform is Platform.LINUX:
            if env.TEMPLATES_DIR is None:
                logger.warning("TEMPLATES_DIR is not set, no default Linux icon available")
                return None
            return env.TEMPLATES_DIR / "icons" / "electron-linux"
        # Embedded into the app skeleton elsewhere
        return None

    def prepare_application_stage_directory(self, context: StagePrepareContext) -> AcquisitionResult:
        """Acquire the runtime into ``context.app_out_dir`` and clean it up."""
        packager = context.packager
        plan = StagePlan(f"{context.platform_name}-{context.arch}")
        options = create_download_opts(packager.config, context.platform_name, context.arch, self.version)

        try:
            result = acquire_distribution(context, options, self.dist_mac_os_app_name, self._unpacker, plan)
        except Exception as e:
            logger.error_trace("Electron acquisition failed for %s %s: %s", context.platform_name, context.arch, e)
            raise

        finalizer = get_stage_finalizer(packager.platform)
        outcomes = finalizer.cleanup_after_unpack(context, self.dist_mac_os_app_name, result)
        if outcomes:
            plan.record("cleanup", **{k: v.value for k, v in outcomes.items()})

        if packager.config.download_alternate_ffmpeg and result is not AcquisitionResult.DEFERRED:
            logger.info("Downloading non-proprietary FFMPEG")
            replace_ffmpeg(
                context.app_out_dir,
                context.version or self.version,
                context.platform_name,
                context.arch,
                dist_mac_os_app_name=self.dist_mac_os_app_name,
                mirror=options.mirror,
            )
            plan.record("replace_ffmpeg")

        logger.debug("Stage plan %s", plan)
        return result

    def before_copy_extra_files(self, context: BeforeCopyExtraFilesContext) -> Any:
        finalizer = get_stage_finalizer(context.packager.platform)
        return finalizer.before_copy_extra_files(context, self.branding)


def resolve_build(
    configuration: Configuration,
    packager: PlatformPackager,
    resolver: Optional[ElectronVersionResolver] = None,
) -> ResolvedBuild:
    version = (resolver or version_resolver).resolve(configuration, packager)
    return ResolvedBuild(version=version, branding=create_branding_opts(configuration))


def create_electron_framework_support(
    configuration: Configuration,
    packager: PlatformPackager,
    resolver: Optional[ElectronVersionResolver] = None,
    unpacker: Optional[DistributionUnpacker] = None,
) -> ElectronFramework:
    build = resolve_build(configuration, packager, resolver)
    packager.dist_mac_os_app_name = build.dist_mac_os_app_name
    return ElectronFramework(
        build.branding.project_name,
        build.version,
        build.dist_mac_os_app_name,
        branding=build.branding,
        unpacker=unpacker,
    )
