"""Locale pruning for macOS resource directories.

Electron ships one ``<locale>.lproj`` directory per supported language. When
the build declares an allow-list (``electronLanguages``) every other locale
directory is removed.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Optional

from electron_stage.config import env
from electron_stage.core.logger import setup_logger
from electron_stage.core.models import LocalePruneResult
from electron_stage.stage.fs import remove_tree

logger = setup_logger(__name__)

LANG_FILE_EXT = ".lproj"


def locale_of(entry_name: str) -> Optional[str]:
    """Locale identifier for a ``*.lproj`` entry name, otherwise None."""
    if not entry_name.endswith(LANG_FILE_EXT):
        return None
    return entry_name[: -len(LANG_FILE_EXT)]


def select_unwanted_locales(entry_names: Iterable[str], wanted_languages: Iterable[str]) -> list[str]:
    wanted = set(wanted_languages)
    unwanted = []
    for name in entry_names:
        language = locale_of(name)
        if language is not None and language not in wanted:
            unwanted.append(name)
    return sorted(unwanted)


def prune_locales(
    resources_dir: Path,
    wanted_languages: Iterable[str],
    concurrency: Optional[int] = None,
) -> LocalePruneResult:
    """Remove every ``*.lproj`` entry of ``resources_dir`` not in ``wanted_languages``.

    An empty allow-list keeps everything. Removal failures for single entries
    are logged and reported in ``failed``; a directory that cannot be listed
    raises.
    """
    wanted = list(wanted_languages)
    if not wanted:
        return LocalePruneResult()

    # Listing failure is fatal for the pass
    entry_names = os.listdir(resources_dir)
    unwanted = select_unwanted_locales(entry_names, wanted)
    if not unwanted:
        return LocalePruneResult()

    def _remove(name: str) -> Optional[Exception]:
        try:
            remove_tree(resources_dir / name)
        except OSError as e:
            return e
        return None

    max_workers = concurrency or env.FS_CONCURRENCY
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="LocalePrune") as executor:
        errors = list(executor.map(_remove, unwanted))

    removed: list[str] = []
    failed: list[str] = []
    for name, error in zip(unwanted, errors):
        if error is None:
            removed.append(name)
        else:
            logger.warning("Failed to remove locale %s from %s: %s", name, resources_dir, error)
            failed.append(name)

    logger.debug("Pruned %d locale(s) from %s, kept %s", len(removed), resources_dir, sorted(wanted))
    return LocalePruneResult(removed=removed, failed=failed)
