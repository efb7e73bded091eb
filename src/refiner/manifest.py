from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from refiner.errors import ManifestError
from refiner.models import ProjectManifest

MANIFEST_NAME = "package.json"
DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")
DEPENDENCY_DIR = "node_modules"


def manifest_path(root: Path) -> Path:
    return root / MANIFEST_NAME


def load_manifest_document(root: Path) -> dict[str, Any]:
    path = manifest_path(root)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ManifestError(f"No {MANIFEST_NAME} found in {root}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Could not read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(document, dict):
        raise ManifestError(f"{path} must contain a JSON object")
    return document


def read_manifest(root: Path) -> ProjectManifest:
    document = load_manifest_document(root)
    sections = [_section(document, name) for name in DEPENDENCY_SECTIONS]
    return ProjectManifest(dependencies=sections[0], dev_dependencies=sections[1])


def _section(document: dict[str, Any], name: str) -> dict[str, str]:
    value = document.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ManifestError(f"'{name}' must be an object of name to version")
    return {str(dep): str(version) for dep, version in value.items()}
