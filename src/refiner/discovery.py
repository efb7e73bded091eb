from __future__ import annotations

import fnmatch
import os
from collections.abc import Iterable, Sequence
from pathlib import Path

SOURCE_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs")
DEFAULT_EXCLUDES = [
    "node_modules/**",
    "**/node_modules/**",
    "dist/**",
    "**/dist/**",
    "build/**",
    "**/build/**",
    ".git/**",
    "**/.git/**",
]


def collect_source_files(
    root: Path,
    include: Sequence[str] = (),
    exclude: Sequence[str] = (),
) -> list[Path]:
    """Return every candidate source file under ``root`` as an absolute path."""
    exclude_patterns = DEFAULT_EXCLUDES + list(exclude)
    results: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        if rel_dir != "." and _matches(rel_dir + "/", exclude_patterns):
            dirnames[:] = []
            continue
        for name in filenames:
            if not name.endswith(SOURCE_EXTENSIONS):
                continue
            full_path = Path(dirpath) / name
            rel_path = full_path.relative_to(root).as_posix()
            if _matches(rel_path, exclude_patterns):
                continue
            if include and not _matches(rel_path, include):
                continue
            results.append(full_path)
    results.sort(key=lambda p: p.as_posix())
    return results


def _matches(path: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(path, pattern) for pattern in patterns)
