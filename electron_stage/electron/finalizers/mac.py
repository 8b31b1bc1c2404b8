from __future__ import annotations

from pathlib import Path

from electron_stage.core.config import as_list
from electron_stage.core.logger import setup_logger
from electron_stage.core.models import BeforeCopyExtraFilesContext, BrandingOptions, LocalePruneResult, Platform
from electron_stage.electron.finalizers import StageFinalizer, register_finalizer
from electron_stage.electron.mac_app import create_mac_app
from electron_stage.stage.locales import prune_locales

logger = setup_logger(__name__)


@register_finalizer
class MacStageFinalizer(StageFinalizer):
    """Handles both ``darwin`` and ``mas`` targets."""

    platform = Platform.MAC

    def unpacked_resources_dir(self, app_out_dir: Path, dist_mac_os_app_name: str) -> Path:
        return app_out_dir / dist_mac_os_app_name / "Contents" / "Resources"

    def renames_license(self) -> bool:
        return False

    def before_copy_extra_files(self, context: BeforeCopyExtraFilesContext, branding: BrandingOptions) -> LocalePruneResult:
        packager = context.packager
        is_mas = context.platform_name == "mas"
        construct = packager.mac_bundle_constructor or create_mac_app
        construct(packager, context.app_out_dir, context.asar_integrity, is_mas)

        wanted_languages = as_list(packager.platform_options_for(context.platform_name).get("electronLanguages"))
        if not wanted_languages:
            return LocalePruneResult()

        result = prune_locales(packager.get_resources_dir(context.app_out_dir), wanted_languages)
        if result.removed:
            logger.info("Removed %d unwanted locale(s): %s", len(result.removed), ", ".join(result.removed))
        return result
