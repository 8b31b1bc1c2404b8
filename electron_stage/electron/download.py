from __future__ import annotations

from electron_stage.core.config import Configuration
from electron_stage.core.logger import setup_logger
from electron_stage.core.models import DownloadOptions

logger = setup_logger(__name__)


def electron_zip_name(version: str, platform_name: str, arch: str) -> str:
    return f"electron-v{version}-{platform_name}-{arch}.zip"


def create_download_opts(configuration: Configuration, platform_name: str, arch: str, electron_version: str) -> DownloadOptions:
    """Download options for one target; ``electronDownload`` overrides computed fields."""
    options = DownloadOptions(platform=platform_name, arch=arch, version=electron_version)
    for key, value in configuration.electron_download.items():
        attr = DownloadOptions.wire_key_to_attr(key)
        if attr is None:
            logger.warning("Ignoring unknown electronDownload option: %s", key)
            continue
        setattr(options, attr, value)
    return options
