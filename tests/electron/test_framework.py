"""Tests for the Electron framework facade."""

import json
from unittest.mock import patch

import pytest

from electron_stage.core.config import InvalidConfigurationError
from electron_stage.core.models import AcquisitionResult, BeforeCopyExtraFilesContext, CleanupOutcome, Platform
from electron_stage.electron.framework import ElectronFramework, create_electron_framework_support
from electron_stage.electron.version import ElectronVersionResolver


class TestCreateFrameworkSupport:
    def test_uses_configured_version_and_branding(self, make_packager):
        packager = make_packager(config={"electronVersion": "28.1.0", "electronBranding": {"projectName": "acme", "productName": "Acme"}})

        framework = create_electron_framework_support(packager.config, packager, ElectronVersionResolver())

        assert framework.name == "acme"
        assert framework.version == "28.1.0"
        assert framework.dist_mac_os_app_name == "Acme.app"
        assert packager.dist_mac_os_app_name == "Acme.app"

    def test_default_branding(self, make_packager):
        packager = make_packager(config={"electronVersion": "28.1.0"})

        framework = create_electron_framework_support(packager.config, packager, ElectronVersionResolver())

        assert framework.name == "electron"
        assert framework.dist_mac_os_app_name == "Electron.app"

    def test_computes_version_from_manifest(self, make_packager, project_dir):
        (project_dir / "package.json").write_text(json.dumps({"devDependencies": {"electron": "27.0.2"}}))
        packager = make_packager()

        framework = create_electron_framework_support(packager.config, packager, ElectronVersionResolver())

        assert framework.version == "27.0.2"

    def test_unresolvable_prepacked_version(self, make_packager):
        packager = make_packager(is_prepacked_app_asar=True)

        with pytest.raises(InvalidConfigurationError):
            create_electron_framework_support(packager.config, packager, ElectronVersionResolver())

    def test_later_build_sees_updated_manifest(self, make_packager, project_dir):
        manifest = project_dir / "package.json"
        manifest.write_text(json.dumps({"devDependencies": {"electron": "27.0.0"}}))
        first = make_packager()
        assert create_electron_framework_support(first.config, first).version == "27.0.0"

        manifest.write_text(json.dumps({"devDependencies": {"electron": "29.0.0"}}))
        second = make_packager()
        assert create_electron_framework_support(second.config, second).version == "29.0.0"

    def test_prepacked_build_fails_after_regular_build(self, make_packager, project_dir):
        (project_dir / "package.json").write_text(json.dumps({"devDependencies": {"electron": "27.0.0"}}))
        regular = make_packager()
        create_electron_framework_support(regular.config, regular)

        prepacked = make_packager(is_prepacked_app_asar=True)
        with pytest.raises(InvalidConfigurationError, match="prepacked asar"):
            create_electron_framework_support(prepacked.config, prepacked)


class TestFrameworkConstants:
    def test_defaults(self):
        framework = ElectronFramework("electron", "28.1.0", "Electron.app")

        assert framework.mac_os_default_targets == ("zip", "dmg")
        assert framework.default_app_id_prefix == "com.electron."
        assert framework.is_copy_elevate_helper is True
        assert framework.is_npm_rebuild_required is True

    def test_default_icon(self, tmp_path):
        framework = ElectronFramework("electron", "28.1.0", "Electron.app")

        with patch("electron_stage.config.env.TEMPLATES_DIR", tmp_path):
            assert framework.get_default_icon(Platform.LINUX) == tmp_path / "icons" / "electron-linux"
        assert framework.get_default_icon(Platform.WINDOWS) is None
        assert framework.get_default_icon(Platform.MAC) is None

    def test_linux_icon_requires_templates_dir(self):
        framework = ElectronFramework("electron", "28.1.0", "Electron.app")

        with patch("electron_stage.config.env.TEMPLATES_DIR", None):
            assert framework.get_default_icon(Platform.LINUX) is None


class TestPrepareApplicationStageDirectory:
    def test_delegated_keeps_markers(self, make_packager, make_context, fake_unpacker):
        framework = ElectronFramework("electron", "28.1.0", "Electron.app", unpacker=fake_unpacker)
        context = make_context(make_packager())

        result = framework.prepare_application_stage_directory(context)

        assert result is AcquisitionResult.DELEGATED
        assert (context.app_out_dir / "LICENSE").exists()
        assert not (context.app_out_dir / "LICENSE.electron.txt").exists()

    def test_copy_runs_full_cleanup(self, make_packager, make_context, make_dist, fake_unpacker, tmp_path):
        dist = make_dist(tmp_path / "dist", {
            "electron": b"bin",
            "version": b"v28.1.0",
            "LICENSE": b"MIT",
            "resources/default_app.asar": b"asar",
        })
        framework = ElectronFramework("electron", "28.1.0", "Electron.app", unpacker=fake_unpacker)
        context = make_context(make_packager(config={"electronDist": str(dist)}))

        result = framework.prepare_application_stage_directory(context)

        out = context.app_out_dir
        assert result is AcquisitionResult.COPIED
        assert not (out / "version").exists()
        assert not (out / "resources" / "default_app.asar").exists()
        assert (out / "LICENSE.electron.txt").exists()
        assert (dist / "LICENSE").exists()

    def test_download_options_come_from_configuration(self, make_packager, make_context, fake_unpacker):
        framework = ElectronFramework("electron", "28.1.0", "Electron.app", unpacker=fake_unpacker)
        packager = make_packager(config={"electronDownload": {"mirror": "https://mirror.example/"}})

        framework.prepare_application_stage_directory(make_context(packager, arch="arm64"))

        options = fake_unpacker.calls[0][0][0]
        assert options["mirror"] == "https://mirror.example/"
        assert options["arch"] == "arm64"
        assert options["version"] == "28.1.0"

    def test_alternate_ffmpeg(self, make_packager, make_context, fake_unpacker):
        framework = ElectronFramework("electron", "28.1.0", "Electron.app", unpacker=fake_unpacker)
        context = make_context(make_packager(config={"downloadAlternateFFmpeg": True}))

        with patch("electron_stage.electron.framework.replace_ffmpeg") as replace:
            framework.prepare_application_stage_directory(context)

        replace.assert_called_once()
        assert replace.call_args[0][:4] == (context.app_out_dir, "28.1.0", "linux", "x64")

    def test_deferred_skips_ffmpeg(self, make_packager, make_context, fake_unpacker):
        framework = ElectronFramework("electron", "28.1.0", "Electron.app", unpacker=fake_unpacker)
        context = make_context(make_packager(config={"downloadAlternateFFmpeg": True}))

        with patch("electron_stage.config.env.REMOTE_BUILD", True), \
             patch("electron_stage.electron.framework.replace_ffmpeg") as replace:
            result = framework.prepare_application_stage_directory(context)

        assert result is AcquisitionResult.DEFERRED
        replace.assert_not_called()

    def test_acquisition_failure_propagates(self, make_packager, make_context, failing_unpacker):
        framework = ElectronFramework("electron", "28.1.0", "Electron.app", unpacker=failing_unpacker)

        with pytest.raises(Exception, match="worker exited"):
            framework.prepare_application_stage_directory(make_context(make_packager()))


class TestBeforeCopyExtraFiles:
    def test_dispatches_to_platform_finalizer(self, make_packager, tmp_path):
        out = tmp_path / "win-unpacked"
        out.mkdir()
        (out / "acme.exe").write_bytes(b"exe")
        framework = ElectronFramework("acme", "28.1.0", "Acme.app")
        context = BeforeCopyExtraFilesContext(
            packager=make_packager(Platform.WINDOWS),
            app_out_dir=out,
            platform_name="win32",
            arch="x64",
        )

        assert framework.before_copy_extra_files(context) is CleanupOutcome.SUCCEEDED
        assert (out / "My App.exe").exists()
