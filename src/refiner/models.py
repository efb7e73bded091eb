from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

EXTERNAL = "external"
INTERNAL = "internal"


@dataclass(frozen=True)
class ProjectManifest:
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)

    @property
    def declared(self) -> dict[str, str]:
        merged = dict(self.dependencies)
        merged.update(self.dev_dependencies)
        return merged


@dataclass(frozen=True)
class SourceFile:
    identity: Path
    rel_path: str
    size: int
    mtime: float
    error: Optional[str] = None

    @property
    def parsed(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ModuleReference:
    origin: Path
    specifier: str
    kind: str  # "external" or "internal"
    package: Optional[str] = None
    target: Optional[Path] = None


@dataclass(frozen=True)
class UnusedDependency:
    name: str
    version: str
    size: int


@dataclass(frozen=True)
class UnusedFile:
    path: str
    last_modified: str
    size: int


@dataclass(frozen=True)
class UnanalyzableFile:
    path: str
    reason: str


@dataclass(frozen=True)
class AnalysisResult:
    unused_dependencies: list[UnusedDependency]
    unused_files: list[UnusedFile]
    unanalyzable_files: list[UnanalyzableFile] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.unused_dependencies and not self.unused_files


@dataclass(frozen=True)
class CleanupResult:
    removed_dependencies: list[str]
    removed_files: list[str]
    removed_dirs: list[str]
    freed_space: int
