from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict
from datetime import datetime, timezone
from functools import partial
from pathlib import Path
from typing import Any, Optional

from refiner.discovery import collect_source_files
from refiner.errors import FileReadError, ParseError, SizeEstimationError
from refiner.extractor import extract_references
from refiner.graph import ReferenceGraph, build_graph
from refiner.logging import get_logger
from refiner.manifest import DEPENDENCY_DIR, read_manifest
from refiner.models import (
    AnalysisResult,
    ProjectManifest,
    SourceFile,
    UnanalyzableFile,
    UnusedDependency,
    UnusedFile,
)
from refiner.parser import language_for_path, parse_source
from refiner.sizes import directory_size

logger = get_logger("analyzer")


def analyze(
    root: Path,
    files: Optional[Sequence[Path]] = None,
    include: Sequence[str] = (),
    exclude: Sequence[str] = (),
    workers: Optional[int] = None,
) -> AnalysisResult:
    """Find declared dependencies and source files nothing refers to.

    ``files`` is the candidate list; when omitted it is discovered under
    ``root`` using the default ignore rules plus ``include``/``exclude``.
    Raises ManifestError when the package manifest cannot be loaded.
    """
    root = root.resolve()
    manifest = read_manifest(root)
    if files is None:
        files = collect_source_files(root, include, exclude)
    logger.debug("Analyzing %d candidate files under %s", len(files), root)

    # Every file is scanned before anything is classified.
    with ThreadPoolExecutor(max_workers=workers) as executor:
        scanned = list(executor.map(partial(scan_file, root), files))
    sources = [source for source, _ in scanned]
    graph = build_graph(contribution for _, contribution in scanned)
    return classify(root, manifest, sources, graph)


def scan_file(root: Path, path: Path) -> tuple[SourceFile, ReferenceGraph]:
    """Read, parse and extract one file; failures yield an empty contribution."""
    identity = (root / path).resolve()
    rel_path = _relative(root, identity)
    try:
        stat = identity.stat()
        data = identity.read_bytes()
        data.decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        error = FileReadError(identity, str(exc))
        logger.warning("%s; skipping", error)
        return SourceFile(identity, rel_path, size=0, mtime=0.0, error=str(error)), ReferenceGraph()

    try:
        tree = parse_source(data, language_for_path(identity), identity)
    except ParseError as exc:
        logger.warning("%s; skipping", exc)
        source = SourceFile(identity, rel_path, stat.st_size, stat.st_mtime, error=str(exc))
        return source, ReferenceGraph()

    references = extract_references(tree, data, identity)
    source = SourceFile(identity, rel_path, stat.st_size, stat.st_mtime)
    return source, ReferenceGraph.from_references(identity, references)


def classify(
    root: Path,
    manifest: ProjectManifest,
    sources: Sequence[SourceFile],
    graph: ReferenceGraph,
) -> AnalysisResult:
    unused_dependencies = [
        UnusedDependency(name=name, version=version, size=_dependency_size(root, name))
        for name, version in manifest.declared.items()
        if name not in graph.external_used
    ]

    unused_files: list[UnusedFile] = []
    unanalyzable: list[UnanalyzableFile] = []
    for source in sorted(sources, key=lambda s: s.rel_path):
        if not source.parsed:
            unanalyzable.append(UnanalyzableFile(path=source.rel_path, reason=source.error or ""))
            continue
        if source.identity in graph.internal_targets:
            continue
        if graph.local_references(source.identity):
            continue
        unused_files.append(
            UnusedFile(
                path=source.rel_path,
                last_modified=_isoformat(source.mtime),
                size=source.size,
            )
        )

    return AnalysisResult(
        unused_dependencies=unused_dependencies,
        unused_files=unused_files,
        unanalyzable_files=unanalyzable,
    )


def result_to_dict(result: AnalysisResult) -> dict[str, Any]:
    return asdict(result)


def _dependency_size(root: Path, name: str) -> int:
    try:
        return directory_size(root / DEPENDENCY_DIR / name)
    except SizeEstimationError as exc:
        logger.debug("No size for %s: %s", name, exc)
        return 0


def _relative(root: Path, path: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _isoformat(timestamp: float) -> str:
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
