"""Best-effort removal of what an analysis found unused.

Every step is attempted independently: a failure is logged as a warning
and the remaining items are still processed.
"""

from __future__ import annotations

import json
import os
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Optional, Protocol

from refiner.errors import CleanupError, ManifestError
from refiner.logging import get_logger
from refiner.manifest import (
    DEPENDENCY_DIR,
    DEPENDENCY_SECTIONS,
    load_manifest_document,
    manifest_path,
)
from refiner.models import AnalysisResult, CleanupResult

INSTALL_COMMAND = ("npm", "install")
INSTALL_TIMEOUT = 600.0
PROTECTED_DIRS = {".git", DEPENDENCY_DIR}

logger = get_logger("cleanup")


class CommandRunner(Protocol):
    def run(self, command: Sequence[str], cwd: Path, timeout: Optional[float]) -> None:
        """Run ``command`` in ``cwd``; raise CleanupError if it does not succeed."""


class SubprocessRunner:
    def run(self, command: Sequence[str], cwd: Path, timeout: Optional[float]) -> None:
        try:
            subprocess.run(
                list(command),
                cwd=cwd,
                timeout=timeout,
                check=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except subprocess.TimeoutExpired as exc:
            raise CleanupError(f"{' '.join(command)} timed out after {timeout}s") from exc
        except subprocess.CalledProcessError as exc:
            raise CleanupError(f"{' '.join(command)} exited with {exc.returncode}") from exc
        except OSError as exc:
            raise CleanupError(f"Could not run {' '.join(command)}: {exc}") from exc


def clean_project(
    root: Path,
    analysis: AnalysisResult,
    runner: Optional[CommandRunner] = None,
    timeout: Optional[float] = INSTALL_TIMEOUT,
) -> CleanupResult:
    root = root.resolve()
    runner = runner or SubprocessRunner()
    removed_dependencies = _remove_dependencies(root, [d.name for d in analysis.unused_dependencies])

    removed_files: list[str] = []
    freed_space = 0
    for unused in analysis.unused_files:
        try:
            freed_space += _delete_file(root / unused.path)
        except CleanupError as exc:
            logger.warning("%s", exc)
            continue
        removed_files.append(unused.path)

    remove_empty_directories(root)

    removed_dirs: list[str] = []
    dependency_dir = root / DEPENDENCY_DIR
    if dependency_dir.is_dir():
        try:
            shutil.rmtree(dependency_dir)
        except OSError as exc:
            logger.warning("Could not remove %s directory: %s", DEPENDENCY_DIR, exc)
        else:
            removed_dirs.append(DEPENDENCY_DIR)
            logger.info("%s directory removed", DEPENDENCY_DIR)

    try:
        runner.run(INSTALL_COMMAND, root, timeout)
    except CleanupError as exc:
        logger.warning("Could not reinstall dependencies: %s", exc)

    return CleanupResult(
        removed_dependencies=removed_dependencies,
        removed_files=removed_files,
        removed_dirs=removed_dirs,
        freed_space=freed_space,
    )


def _remove_dependencies(root: Path, names: Sequence[str]) -> list[str]:
    if not names:
        return []
    try:
        document = load_manifest_document(root)
    except ManifestError as exc:
        logger.warning("Could not update manifest: %s", exc)
        return []

    removed: list[str] = []
    for name in names:
        found = False
        for section in DEPENDENCY_SECTIONS:
            entries = document.get(section)
            if isinstance(entries, dict) and name in entries:
                del entries[name]
                found = True
        if found:
            removed.append(name)

    try:
        manifest_path(root).write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not write manifest: %s", exc)
        return []
    return removed


def _delete_file(path: Path) -> int:
    try:
        size = path.stat().st_size
        path.unlink()
    except FileNotFoundError as exc:
        raise CleanupError(f"Could not remove file {path}: already gone") from exc
    except OSError as exc:
        raise CleanupError(f"Could not remove file {path}: {exc}") from exc
    return size


def remove_empty_directories(root: Path) -> list[Path]:
    """Delete directories below ``root`` that are empty or contain only empty directories."""
    removed: list[Path] = []
    for dirpath, _dirnames, _filenames in os.walk(root, topdown=False):
        current = Path(dirpath)
        if current == root or PROTECTED_DIRS.intersection(current.relative_to(root).parts):
            continue
        try:
            if any(current.iterdir()):
                continue
            current.rmdir()
        except OSError as exc:
            logger.warning("Could not remove directory %s: %s", current, exc)
            continue
        removed.append(current)
    return removed
