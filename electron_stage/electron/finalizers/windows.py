from __future__ import annotations

from electron_stage.core.models import BeforeCopyExtraFilesContext, BrandingOptions, CleanupOutcome, Platform
from electron_stage.electron.finalizers import StageFinalizer, register_finalizer
from electron_stage.stage.fs import rename_if_exists


@register_finalizer
class WindowsStageFinalizer(StageFinalizer):
    platform = Platform.WINDOWS

    def before_copy_extra_files(self, context: BeforeCopyExtraFilesContext, branding: BrandingOptions) -> CleanupOutcome:
        out = context.app_out_dir
        source = out / f"{branding.project_name}.exe"
        executable = out / f"{context.packager.app_info.product_filename}.exe"
        if source == executable:
            return CleanupOutcome.NOT_APPLICABLE
        return rename_if_exists(source, executable)
