from __future__ import annotations

from electron_stage.core.logger import setup_logger
from electron_stage.core.models import BeforeCopyExtraFilesContext, BrandingOptions, CleanupOutcome, Platform
from electron_stage.electron.finalizers import StageFinalizer, register_finalizer
from electron_stage.stage.fs import rename_if_exists

logger = setup_logger(__name__)


@register_finalizer
class LinuxStageFinalizer(StageFinalizer):
    platform = Platform.LINUX

    def before_copy_extra_files(self, context: BeforeCopyExtraFilesContext, branding: BrandingOptions) -> CleanupOutcome:
        """Rename the branded binary to the configured executable name."""
        packager = context.packager
        if packager.is_safe_to_unpack_electron_on_remote_build_server():
            # Nothing was unpacked locally
            return CleanupOutcome.NOT_APPLICABLE

        source = context.app_out_dir / branding.project_name
        executable = context.app_out_dir / packager.executable_name
        if source == executable:
            return CleanupOutcome.NOT_APPLICABLE
        return rename_if_exists(source, executable)
