"""Tests for branding defaults."""

from electron_stage.core.config import Configuration
from electron_stage.core.models import BrandingOptions
from electron_stage.electron.branding import create_branding_opts


class TestCreateBrandingOpts:
    def test_empty_branding_uses_defaults(self):
        assert create_branding_opts(Configuration({"electronBranding": {}})) == BrandingOptions("electron", "Electron")

    def test_missing_branding_uses_defaults(self):
        assert create_branding_opts(Configuration()) == BrandingOptions("electron", "Electron")

    def test_fields_default_independently(self):
        branding = create_branding_opts(Configuration({"electronBranding": {"projectName": "acme", "productName": ""}}))

        assert branding.project_name == "acme"
        assert branding.product_name == "Electron"

    def test_full_branding(self):
        branding = create_branding_opts(Configuration({"electronBranding": {"projectName": "acme", "productName": "Acme"}}))

        assert branding == BrandingOptions("acme", "Acme")
