from __future__ import annotations

import os
from pathlib import Path

from refiner.errors import SizeEstimationError


def directory_size(path: Path) -> int:
    """Sum the byte sizes of every regular file below ``path``.

    Entries that vanish or cannot be stat'ed while walking are skipped.
    Symlinks are counted by their own size and never followed.
    """
    if not path.is_dir():
        raise SizeEstimationError(f"Not a directory: {path}")
    total = 0
    for dirpath, _dirnames, filenames in os.walk(path):
        for name in filenames:
            try:
                total += os.lstat(os.path.join(dirpath, name)).st_size
            except OSError:
                continue
    return total
