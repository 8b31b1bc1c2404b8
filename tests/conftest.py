"""Shared fixtures for stage preparation tests."""

from pathlib import Path
from typing import List, Optional, Sequence, Tuple
from unittest.mock import patch

import pytest

from electron_stage.core.config import Configuration
from electron_stage.core.models import AppInfo, DownloadOptions, Platform, StagePrepareContext
from electron_stage.core.packager import PlatformPackager
from electron_stage.electron.unpackers import DistributionUnpacker, UnpackError


class FakeUnpacker(DistributionUnpacker):
    """In-memory unpacker recording calls and writing a minimal distribution."""

    name = "fake"

    def __init__(self, files: Optional[dict] = None, fail: bool = False):
        self.calls: List[Tuple[List[dict], Path, str]] = []
        self.files = files if files is not None else {"electron": b"binary", "LICENSE": b"MIT"}
        self.fail = fail

    def unpack(self, options: Sequence[DownloadOptions], output: Path, dist_mac_os_app_name: str) -> None:
        self.calls.append(([o.to_dict() for o in options], output, dist_mac_os_app_name))
        if self.fail:
            raise UnpackError("worker exited with code 1")
        output.mkdir(parents=True, exist_ok=True)
        for rel, content in self.files.items():
            target = output / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)


@pytest.fixture(autouse=True)
def local_build_environment():
    """Run every test as a local (non remote-build) build."""
    with patch("electron_stage.config.env.REMOTE_BUILD", False):
        yield


@pytest.fixture
def fake_unpacker():
    return FakeUnpacker()


@pytest.fixture
def failing_unpacker():
    return FakeUnpacker(fail=True)


@pytest.fixture
def project_dir(tmp_path):
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def make_packager(project_dir):
    def _make(
        platform: Platform = Platform.LINUX,
        config: Optional[dict] = None,
        product_name: str = "My App",
        **kwargs,
    ) -> PlatformPackager:
        app_info = AppInfo(
            product_name=product_name,
            product_filename=product_name,
            app_id="com.example.myapp",
            version="1.2.3",
        )
        return PlatformPackager(
            project_dir=project_dir,
            config=Configuration(config or {}),
            platform=platform,
            app_info=app_info,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_context(tmp_path):
    def _make(packager: PlatformPackager, platform_name: str = "linux", arch: str = "x64", version: str = "28.1.0"):
        return StagePrepareContext(
            packager=packager,
            app_out_dir=tmp_path / "out" / f"{platform_name}-{arch}-unpacked",
            platform_name=platform_name,
            arch=arch,
            version=version,
        )

    return _make


def build_dist(root: Path, files: dict) -> Path:
    """Create a local unpacked distribution at ``root``."""
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    return root


@pytest.fixture
def make_dist():
    return build_dist
