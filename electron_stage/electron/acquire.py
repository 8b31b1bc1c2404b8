"""Populate the stage directory with the Electron runtime.

Two strategies:

- delegated: the unpack worker downloads (or reuses a cached archive) and
  extracts into the stage directory;
- copy: ``electronDist`` names an already unpacked distribution which is
  copied in.

An ``electronDist`` directory that holds the expected
``electron-v<version>-<platform>-<arch>.zip`` is a download cache, not a copy
source.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from electron_stage.core.logger import setup_logger
from electron_stage.core.models import AcquisitionResult, DownloadOptions, StagePlan, StagePrepareContext
from electron_stage.electron.download import electron_zip_name
from electron_stage.electron.unpackers import AcquisitionError, DistributionUnpacker, get_unpacker
from electron_stage.stage.fs import DO_NOT_USE_HARD_LINKS, copy_dir, empty_dir

logger = setup_logger(__name__)


def resolve_electron_dist(context: StagePrepareContext) -> Optional[Path]:
    """``electronDist`` for this target, resolved against the project dir."""
    electron_dist = context.packager.config.electron_dist
    dist: Optional[Union[str, Path]] = electron_dist(context) if callable(electron_dist) else electron_dist
    if dist is None or dist == "":
        return None
    dist_path = Path(dist)
    if not dist_path.is_absolute():
        dist_path = (context.packager.project_dir / dist_path).resolve()
    return dist_path


def acquire_distribution(
    context: StagePrepareContext,
    options: DownloadOptions,
    dist_mac_os_app_name: str,
    unpacker: Optional[DistributionUnpacker] = None,
    plan: Optional[StagePlan] = None,
) -> AcquisitionResult:
    if not options.version:
        raise ValueError("Electron version must be resolved before acquisition")

    packager = context.packager
    app_out_dir = context.app_out_dir
    plan = plan if plan is not None else StagePlan(f"{context.platform_name}-{context.arch}")

    dist = resolve_electron_dist(context)
    if dist is not None:
        zip_file = electron_zip_name(options.version, context.platform_name, options.arch)
        if (dist / zip_file).exists():
            logger.info("Resolved electronDist %s (cached %s)", dist, zip_file)
            options = options.with_cache(str(dist))
            dist = None

    if dist is None:
        if packager.is_safe_to_unpack_electron_on_remote_build_server():
            logger.info("Electron unpack deferred to remote build server for %s", app_out_dir)
            plan.record("acquire_deferred", app_out_dir=str(app_out_dir))
            return AcquisitionResult.DEFERRED

        unpacker = unpacker or get_unpacker()
        logger.info("Unpacking Electron %s (%s %s) via %s", options.version, context.platform_name, options.arch, unpacker.name)
        unpacker.unpack([options], app_out_dir, dist_mac_os_app_name)
        plan.record("acquire_delegated", unpacker=unpacker.name, cache=options.cache)
        return AcquisitionResult.DELEGATED

    source = packager.get_electron_src_dir(dist)
    destination = packager.get_electron_destination_dir(app_out_dir)
    logger.info("Copying Electron: %s -> %s", source, destination)
    try:
        empty_dir(app_out_dir)
        copy_dir(source, destination, use_hard_links=DO_NOT_USE_HARD_LINKS)
    except OSError as e:
        logger.error_trace("Copying Electron failed (%s -> %s): %s", source, destination, e)
        raise AcquisitionError(f"Cannot copy Electron from '{source}' to '{destination}': {e}") from e
    plan.record("acquire_copied", source=str(source), destination=str(destination))
    return AcquisitionResult.COPIED
