from __future__ import annotations

from pathlib import Path


class RefinerError(Exception):
    """Base class for refiner failures."""


class ManifestError(RefinerError):
    """The package manifest is missing or cannot be decoded."""


class FileReadError(RefinerError):
    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"Could not read {path}: {message}")
        self.path = path


class ParseError(RefinerError):
    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"Could not parse {path}: {message}")
        self.path = path


class SizeEstimationError(RefinerError):
    pass


class CleanupError(RefinerError):
    pass
