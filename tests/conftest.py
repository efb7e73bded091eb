from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest


def write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


@pytest.fixture
def project(tmp_path: Path):
    """Return a helper that writes package.json plus source files under tmp_path."""

    def _make(
        files: dict[str, str],
        dependencies: dict[str, str] | None = None,
        dev_dependencies: dict[str, str] | None = None,
    ) -> Path:
        manifest = {"name": "sample", "version": "1.0.0"}
        if dependencies is not None:
            manifest["dependencies"] = dependencies
        if dev_dependencies is not None:
            manifest["devDependencies"] = dev_dependencies
        write(tmp_path / "package.json", json.dumps(manifest, indent=2))
        for rel_path, content in files.items():
            write(tmp_path / rel_path, content)
        return tmp_path

    return _make


@pytest.fixture(autouse=True)
def _propagate_refiner_logs():
    # The CLI detaches the refiner logger from the root; caplog listens on the root.
    logger = logging.getLogger("refiner")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
