"""Filesystem operations for populating and cleaning the stage directory.

Copies into the stage directory are real, independent files unless hard links
are explicitly requested: the stage is mutated later (renames, pruning,
signing) and a hard link would let that corrupt the cached distribution.
"""

from __future__ import annotations

import errno
import os
import shutil
import time
from pathlib import Path

from electron_stage.core.logger import setup_logger
from electron_stage.core.models import CleanupOutcome
from electron_stage.stage.permissions_debug import log_permission_context

logger = setup_logger(__name__)

DO_NOT_USE_HARD_LINKS = False

_VERIFY_IO_WAIT_SECONDS = 3.0


def _is_permission_error(e: Exception) -> bool:
    """Check if exception is a permission error (including NFS/SMB issues)."""
    return isinstance(e, PermissionError) or (isinstance(e, OSError) and e.errno == errno.EPERM)


def _verify_copy_size(source: str, dest: str) -> None:
    """Verify a file copy completed.

    Network filesystems can report a stale size right after a large write,
    so re-check once after a short delay before failing.
    """
    expected_size = os.lstat(source).st_size
    if os.lstat(dest).st_size == expected_size:
        return

    time.sleep(_VERIFY_IO_WAIT_SECONDS)
    actual_size = os.lstat(dest).st_size
    if actual_size != expected_size:
        raise IOError(
            f"Copy incomplete: '{dest}' was {actual_size} bytes instead of expected {expected_size}."
        )


def _copy_file(source: str, dest: str) -> str:
    try:
        shutil.copy2(source, dest)
    except PermissionError as e:
        # Some mounts refuse metadata copies; fall back to content only
        log_permission_context("copy_file", e, Path(source), Path(dest))
        logger.debug("Permission error during copy, falling back to copyfile (%s -> %s): %s", source, dest, e)
        shutil.copyfile(source, dest)
    if not os.path.islink(source):
        _verify_copy_size(source, dest)
    return dest


def _link_or_copy(source: str, dest: str) -> str:
    try:
        os.link(source, dest)
        return dest
    except OSError as e:
        if _is_permission_error(e) or e.errno in (errno.EXDEV, errno.EMLINK):
            logger.debug("Hardlink failed (%s), falling back to copy: %s -> %s", e, source, dest)
            return _copy_file(source, dest)
        raise


def copy_dir(source: Path, destination: Path, use_hard_links: bool = DO_NOT_USE_HARD_LINKS) -> Path:
    """Recursively copy ``source`` into ``destination``.

    Symlinks are preserved as links (macOS frameworks depend on them).
    ``destination`` may already exist.
    """
    if not source.is_dir():
        raise FileNotFoundError(errno.ENOENT, "Source directory does not exist", str(source))

    copy_function = _link_or_copy if use_hard_links else _copy_file
    shutil.copytree(
        str(source),
        str(destination),
        symlinks=True,
        copy_function=copy_function,
        dirs_exist_ok=True,
    )
    logger.debug("Copied directory (hard links: %s): %s -> %s", use_hard_links, source, destination)
    return destination


def empty_dir(path: Path) -> None:
    """Ensure ``path`` exists and contains nothing."""
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)
        return

    for entry in path.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()


def remove_tree(path: Path) -> None:
    """Remove a file or directory tree; a missing path is not an error."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except FileNotFoundError:
        pass


def unlink_if_exists(path: Path) -> CleanupOutcome:
    """Best-effort unlink reporting whether anything was removed."""
    try:
        path.unlink()
    except FileNotFoundError:
        return CleanupOutcome.NOT_APPLICABLE
    except OSError as e:
        if _is_permission_error(e):
            log_permission_context("unlink", e, path)
        logger.warning("Cleanup failed for %s: %s", path, e)
        return CleanupOutcome.FAILED
    logger.debug("Removed %s", path)
    return CleanupOutcome.SUCCEEDED


def rename_if_exists(source: Path, dest: Path) -> CleanupOutcome:
    """Best-effort rename; a missing source is reported, never raised."""
    try:
        os.rename(str(source), str(dest))
    except FileNotFoundError:
        logger.debug("Skip rename, source missing: %s", source)
        return CleanupOutcome.NOT_APPLICABLE
    except OSError as e:
        if _is_permission_error(e):
            log_permission_context("rename", e, source, dest)
        logger.warning("Rename failed (%s -> %s): %s", source, dest, e)
        return CleanupOutcome.FAILED
    logger.debug("Renamed %s -> %s", source, dest)
    return CleanupOutcome.SUCCEEDED
