"""Replace the bundled ffmpeg with Electron's non-proprietary codecs build."""

from __future__ import annotations

import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Optional

import requests

from electron_stage.config import env
from electron_stage.core.logger import setup_logger

logger = setup_logger(__name__)

DEFAULT_MIRROR = "https://github.com/electron/electron/releases/download/"

_LIBRARY_NAMES = {
    "darwin": "libffmpeg.dylib",
    "mas": "libffmpeg.dylib",
    "linux": "libffmpeg.so",
    "win32": "ffmpeg.dll",
}

_MAC_FRAMEWORK_LIBRARIES = Path("Contents/Frameworks/Electron Framework.framework/Versions/A/Libraries")


class FFmpegReplacementError(Exception):
    """Raised when the alternate ffmpeg cannot be installed."""

    pass


def ffmpeg_zip_name(version: str, platform_name: str, arch: str) -> str:
    return f"ffmpeg-v{version}-{platform_name}-{arch}.zip"


def ffmpeg_download_url(version: str, platform_name: str, arch: str, mirror: Optional[str] = None) -> str:
    base = mirror or env.ELECTRON_MIRROR or DEFAULT_MIRROR
    if not base.endswith("/"):
        base += "/"
    return f"{base}v{version}/{ffmpeg_zip_name(version, platform_name, arch)}"


def ffmpeg_target_path(app_out_dir: Path, platform_name: str, dist_mac_os_app_name: str) -> Path:
    library = _LIBRARY_NAMES[platform_name]
    if platform_name in ("darwin", "mas"):
        return app_out_dir / dist_mac_os_app_name / _MAC_FRAMEWORK_LIBRARIES / library
    return app_out_dir / library


def _download(url: str, dest: Path) -> None:
    with requests.get(url, stream=True, timeout=env.HTTP_TIMEOUT) as response:
        response.raise_for_status()
        with open(dest, "wb") as f:
            for chunk in response.iter_content(chunk_size=1024 * 1024):
                if chunk:
                    f.write(chunk)


def replace_ffmpeg(
    app_out_dir: Path,
    version: str,
    platform_name: str,
    arch: str,
    dist_mac_os_app_name: str = "Electron.app",
    mirror: Optional[str] = None,
) -> Path:
    """Download the alternate ffmpeg archive and install its library into the stage."""
    if platform_name not in _LIBRARY_NAMES:
        raise FFmpegReplacementError(f"Unsupported platform for ffmpeg replacement: {platform_name}")

    url = ffmpeg_download_url(version, platform_name, arch, mirror)
    target = ffmpeg_target_path(app_out_dir, platform_name, dist_mac_os_app_name)
    library = _LIBRARY_NAMES[platform_name]
    logger.info("Downloading non-proprietary ffmpeg: %s", url)

    env.TMP_DIR.mkdir(parents=True, exist_ok=True)
    with tempfile.TemporaryDirectory(dir=env.TMP_DIR, prefix="ffmpeg_") as tmp:
        archive = Path(tmp) / ffmpeg_zip_name(version, platform_name, arch)
        try:
            _download(url, archive)
        except requests.exceptions.RequestException as e:
            raise FFmpegReplacementError(f"Cannot download {url}: {e}") from e

        try:
            with zipfile.ZipFile(archive) as zf:
                member = next((n for n in zf.namelist() if Path(n).name == library), None)
                if member is None:
                    raise FFmpegReplacementError(f"{library} not found in {url}")
                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(member) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
        except zipfile.BadZipFile as e:
            raise FFmpegReplacementError(f"Corrupted ffmpeg archive from {url}: {e}") from e

    logger.debug("Replaced ffmpeg library: %s", target)
    return target
