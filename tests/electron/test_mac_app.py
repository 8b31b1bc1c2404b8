"""Tests for macOS bundle construction."""

import plistlib

import pytest

from electron_stage.core.models import Platform
from electron_stage.electron.mac_app import create_mac_app


def _unpacked_bundle(out, name="Electron.app", executable="Electron"):
    contents = out / name / "Contents"
    (contents / "MacOS").mkdir(parents=True)
    (contents / "MacOS" / executable).write_bytes(b"macho")
    with open(contents / "Info.plist", "wb") as f:
        plistlib.dump({"CFBundleName": "Electron", "CFBundleExecutable": executable}, f)
    return out / name


class TestCreateMacApp:
    def test_renames_bundle_and_executable(self, make_packager, tmp_path):
        out = tmp_path / "mac"
        _unpacked_bundle(out)
        packager = make_packager(Platform.MAC, dist_mac_os_app_name="Electron.app")

        bundle = create_mac_app(packager, out, None, False)

        assert bundle == out / "My App.app"
        assert not (out / "Electron.app").exists()
        assert (bundle / "Contents" / "MacOS" / "My App").read_bytes() == b"macho"

    def test_updates_info_plist(self, make_packager, tmp_path):
        out = tmp_path / "mac"
        _unpacked_bundle(out)
        packager = make_packager(
            Platform.MAC,
            config={"mac": {"category": "public.app-category.developer-tools"}},
            dist_mac_os_app_name="Electron.app",
        )
        integrity = {"Resources/app.asar": {"algorithm": "SHA256", "hash": "abc"}}

        bundle = create_mac_app(packager, out, integrity, False)

        with open(bundle / "Contents" / "Info.plist", "rb") as f:
            info = plistlib.load(f)
        assert info["CFBundleName"] == "My App"
        assert info["CFBundleExecutable"] == "My App"
        assert info["CFBundleIdentifier"] == "com.example.myapp"
        assert info["CFBundleShortVersionString"] == "1.2.3"
        assert info["LSApplicationCategoryType"] == "public.app-category.developer-tools"
        assert info["ElectronAsarIntegrity"] == integrity

    def test_mas_category_from_mas_section(self, make_packager, tmp_path):
        out = tmp_path / "mas"
        _unpacked_bundle(out)
        packager = make_packager(
            Platform.MAC,
            config={"mac": {"category": "public.app-category.utilities"}, "mas": {"category": "public.app-category.games"}},
            dist_mac_os_app_name="Electron.app",
        )

        bundle = create_mac_app(packager, out, None, True)

        with open(bundle / "Contents" / "Info.plist", "rb") as f:
            assert plistlib.load(f)["LSApplicationCategoryType"] == "public.app-category.games"

    def test_missing_bundle_raises(self, make_packager, tmp_path):
        packager = make_packager(Platform.MAC, dist_mac_os_app_name="Electron.app")

        with pytest.raises(FileNotFoundError):
            create_mac_app(packager, tmp_path, None, False)
