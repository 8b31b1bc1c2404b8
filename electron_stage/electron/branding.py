from __future__ import annotations

from electron_stage.core.config import Configuration
from electron_stage.core.models import BrandingOptions

DEFAULT_BRANDING = BrandingOptions()


def create_branding_opts(configuration: Configuration) -> BrandingOptions:
    """Branding of the Electron distributable (see Electron's BRANDING.json).

    Each field falls back to its default on its own when absent or empty.
    """
    branding = configuration.electron_branding
    return BrandingOptions(
        project_name=branding.get("projectName") or DEFAULT_BRANDING.project_name,
        product_name=branding.get("productName") or DEFAULT_BRANDING.product_name,
    )
