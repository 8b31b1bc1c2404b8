"""Electron framework support.

This module is the public API surface for Electron stage preparation.

Implementation lives in submodules in this package:

- `branding`: project/product names of the distributable
- `version`: version discovery (configuration, node_modules, package.json)
- `download`: download options for the unpack worker
- `unpackers`: unpack worker capability and the app-builder implementation
- `acquire`: delegated unpack vs. local copy
- `finalizers`: per-platform cleanup and pre-extra-files hook
- `framework`: the facade used by the packager
"""

from __future__ import annotations

from .acquire import acquire_distribution, resolve_electron_dist
from .branding import create_branding_opts
from .download import create_download_opts, electron_zip_name
from .finalizers import StageFinalizer, get_stage_finalizer
from .framework import ElectronFramework, create_electron_framework_support, resolve_build
from .unpackers import AcquisitionError, DistributionUnpacker, UnpackError, get_unpacker
from .version import (
    ElectronVersionResolver,
    compute_electron_version,
    get_electron_version_from_installed,
    resolve_electron_version,
)

__all__ = [
    "AcquisitionError",
    "DistributionUnpacker",
    "ElectronFramework",
    "ElectronVersionResolver",
    "StageFinalizer",
    "UnpackError",
    "acquire_distribution",
    "compute_electron_version",
    "create_branding_opts",
    "create_download_opts",
    "create_electron_framework_support",
    "electron_zip_name",
    "get_electron_version_from_installed",
    "get_stage_finalizer",
    "get_unpacker",
    "resolve_build",
    "resolve_electron_dist",
    "resolve_electron_version",
]
