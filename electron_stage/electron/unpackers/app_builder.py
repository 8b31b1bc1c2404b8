"""Unpacker delegating to the ``app-builder`` worker binary."""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path
from typing import List, Sequence

from electron_stage.config import env
from electron_stage.core.logger import setup_logger
from electron_stage.core.models import DownloadOptions
from electron_stage.electron.unpackers import DistributionUnpacker, UnpackError, register_unpacker

logger = setup_logger(__name__)


def find_app_builder() -> str:
    if env.APP_BUILDER_BIN:
        return env.APP_BUILDER_BIN
    found = shutil.which("app-builder")
    if not found:
        raise UnpackError("app-builder executable not found (set APP_BUILDER_BIN or add it to PATH)")
    return found


def build_unpack_command(executable: str, options: Sequence[DownloadOptions], output: Path, dist_mac_os_app_name: str) -> List[str]:
    return [
        executable,
        "unpack-electron",
        "--configuration",
        json.dumps([o.to_dict() for o in options]),
        "--output",
        str(output),
        "--distMacOsAppName",
        dist_mac_os_app_name,
    ]


@register_unpacker
class AppBuilderUnpacker(DistributionUnpacker):
    """Runs ``app-builder unpack-electron``; a non-zero exit is fatal."""

    name = "app-builder"

    @staticmethod
    def is_available() -> bool:
        return bool(env.APP_BUILDER_BIN or shutil.which("app-builder"))

    def unpack(self, options: Sequence[DownloadOptions], output: Path, dist_mac_os_app_name: str) -> None:
        command = build_unpack_command(find_app_builder(), options, output, dist_mac_os_app_name)
        logger.debug("Running unpack worker: %s", command)
        try:
            subprocess.run(command, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as e:
            logger.error("Unpack worker failed with exit code %s: %s", e.returncode, (e.stderr or "").strip())
            raise UnpackError(
                f"app-builder unpack-electron failed for {output} (exit code {e.returncode}): {(e.stderr or '').strip()}"
            ) from e
        except OSError as e:
            raise UnpackError(f"Cannot run app-builder ({command[0]}): {e}") from e
