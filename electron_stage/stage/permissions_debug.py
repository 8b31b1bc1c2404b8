"""Debug diagnostics for failed filesystem operations on the stage directory.

Collecting context must never mask the original error, so every check here
is wrapped and reported at debug level only.
"""

from __future__ import annotations

import os
from pathlib import Path

from electron_stage.core.logger import setup_logger

logger = setup_logger(__name__)


def _owner_name(uid: int) -> str:
    try:
        import pwd

        return pwd.getpwuid(uid).pw_name
    except Exception:
        return str(uid)


def log_permission_context(label: str, error: Exception, *paths: Path) -> None:
    """Log process identity and mode/owner of ``paths`` after ``error``.

    Only call this from failure paths.
    """
    try:
        if hasattr(os, "geteuid"):
            euid = os.geteuid()
            logger.debug("Permission context (%s): euid=%s(%d) error=%s", label, _owner_name(euid), euid, error)

        for target in paths:
            try:
                st = target.stat()
            except Exception as stat_error:
                logger.debug("Path permissions (%s): stat failed for %s: %s", label, target, stat_error)
                continue
            logger.debug(
                "Path permissions (%s): path=%s mode=%s owner=%s(%d) dir=%s symlink=%s",
                label,
                target,
                oct(st.st_mode & 0o777),
                _owner_name(st.st_uid),
                st.st_uid,
                target.is_dir(),
                target.is_symlink(),
            )
    except Exception as context_error:
        logger.debug("Permission context (%s): failed to collect: %s", label, context_error)
