"""Path helpers for gitinfo."""

import logging
import os
import stat
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def is_dir_or_dir_link(path: PathLike) -> bool:
    """Return True if ``path`` is a directory or a symlink resolving to one.

    Raises:
        OSError: If the path (or the symlink target) does not exist
    """
    return stat.S_ISDIR(os.stat(path).st_mode)


def list_subdirs(path: PathLike) -> list[Path]:
    """
    List immediate subdirectories of ``path`` in lexicographic order.

    Symlinks to directories are included. Regular files and dangling
    symlinks are skipped.

    Args:
        path: Directory to list

    Returns:
        Sorted list of subdirectory paths
    """
    subdirs = []
    for entry in sorted(Path(path).iterdir()):
        try:
            if is_dir_or_dir_link(entry):
                subdirs.append(entry)
        except OSError as e:
            logger.warning("Skipping %s: %s", entry, e)
    return subdirs
