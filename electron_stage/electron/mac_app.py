"""Minimal macOS ``.app`` bundle construction.

Renames the unpacked distribution bundle and its main executable to the
product file name and rewrites the bundle identity in ``Info.plist``. Helper
apps, icons and entitlements are handled by later packaging phases.
"""

from __future__ import annotations

import plistlib
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

from electron_stage.core.logger import setup_logger
from electron_stage.stage.fs import rename_if_exists

if TYPE_CHECKING:
    from electron_stage.core.packager import PlatformPackager

logger = setup_logger(__name__)


def _update_info_plist(plist_file: Path, packager: "PlatformPackager", asar_integrity: Optional[Dict[str, Any]], is_mas: bool) -> None:
    with open(plist_file, "rb") as f:
        info: Dict[str, Any] = plistlib.load(f)

    app_info = packager.app_info
    info["CFBundleName"] = app_info.product_name
    info["CFBundleDisplayName"] = app_info.product_name
    info["CFBundleExecutable"] = app_info.product_filename
    info["CFBundleIdentifier"] = app_info.app_id
    info["CFBundleShortVersionString"] = app_info.version
    info["CFBundleVersion"] = app_info.build_version or app_info.version

    category = packager.platform_options_for("mas" if is_mas else "darwin").get("category")
    if category:
        info["LSApplicationCategoryType"] = category
    elif is_mas:
        logger.warning("Mac App Store builds should set a category (LSApplicationCategoryType)")

    if asar_integrity:
        info["ElectronAsarIntegrity"] = asar_integrity

    with open(plist_file, "wb") as f:
        plistlib.dump(info, f)


def create_mac_app(
    packager: "PlatformPackager",
    app_out_dir: Path,
    asar_integrity: Optional[Dict[str, Any]],
    is_mas: bool,
) -> Path:
    """Turn ``<distMacOsAppName>`` into ``<productFilename>.app``; return the bundle path."""
    product_filename = packager.app_info.product_filename
    dist_bundle = app_out_dir / packager.dist_mac_os_app_name
    app_bundle = app_out_dir / f"{product_filename}.app"

    if dist_bundle != app_bundle:
        if not dist_bundle.is_dir():
            raise FileNotFoundError(f"Electron app bundle not found: {dist_bundle}")
        dist_bundle.rename(app_bundle)

    contents = app_bundle / "Contents"
    dist_executable = contents / "MacOS" / Path(packager.dist_mac_os_app_name).stem
    if dist_executable.name != product_filename:
        rename_if_exists(dist_executable, contents / "MacOS" / product_filename)

    plist_file = contents / "Info.plist"
    if plist_file.exists():
        _update_info_plist(plist_file, packager, asar_integrity, is_mas)
    else:
        logger.warning("No Info.plist in %s", app_bundle)

    logger.info("Created %s bundle %s", "Mac App Store" if is_mas else "macOS", app_bundle)
    return app_bundle
