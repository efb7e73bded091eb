from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional

from tree_sitter import Node, Tree

from refiner.discovery import SOURCE_EXTENSIONS
from refiner.models import EXTERNAL, INTERNAL, ModuleReference

DYNAMIC_LOADERS = {"require"}
LOCAL_PREFIXES = (".", "/")


def extract_references(tree: Tree, source: bytes, origin: Path) -> list[ModuleReference]:
    references: list[ModuleReference] = []
    directory = origin.parent
    for specifier in _literal_specifiers(tree.root_node, source):
        if not specifier:
            continue
        if specifier.startswith(LOCAL_PREFIXES):
            references.append(
                ModuleReference(
                    origin=origin,
                    specifier=specifier,
                    kind=INTERNAL,
                    target=resolve_internal(directory, specifier),
                )
            )
        else:
            references.append(
                ModuleReference(
                    origin=origin,
                    specifier=specifier,
                    kind=EXTERNAL,
                    package=package_name(specifier),
                )
            )
    return references


def package_name(specifier: str) -> str:
    """Return the installable package a bare specifier points into.

    ``lodash/fp`` belongs to ``lodash``; scoped names keep both segments,
    so ``@babel/core/lib/index`` belongs to ``@babel/core``.
    """
    parts = specifier.split("/")
    if specifier.startswith("@") and len(parts) > 1:
        return "/".join(parts[:2])
    return parts[0]


def resolve_internal(directory: Path, specifier: str) -> Optional[Path]:
    """Map a local specifier to an existing file, or None when nothing matches."""
    try:
        return _probe(directory / specifier)
    except (OSError, ValueError, RuntimeError):
        # Over-long names, NUL bytes and symlink loops cannot name a project file.
        return None


def _probe(path: Path) -> Optional[Path]:
    base = path.resolve()
    if base.is_file():
        return base
    # The filesystem root has no name to append an extension to.
    for extension in SOURCE_EXTENSIONS if base.name else ():
        candidate = base.with_name(base.name + extension)
        if candidate.is_file():
            return candidate.resolve()
    if base.is_dir():
        for extension in SOURCE_EXTENSIONS:
            candidate = base / f"index{extension}"
            if candidate.is_file():
                return candidate.resolve()
    return None


def _literal_specifiers(root: Node, source: bytes) -> Iterator[str]:
    stack = [root]
    while stack:
        node = stack.pop()
        kind = node.type
        if kind in ("import_statement", "export_statement", "import_require_clause"):
            specifier = _string_value(_source_node(node), source)
            if specifier is not None:
                yield specifier
        elif kind == "call_expression":
            specifier = _loader_argument(node, source)
            if specifier is not None:
                yield specifier
        stack.extend(reversed(node.children))


def _source_node(node: Node) -> Optional[Node]:
    field_node = node.child_by_field_name("source")
    if field_node is not None or node.type != "import_require_clause":
        return field_node
    # Older TypeScript grammars leave the require() string unlabelled.
    return next((child for child in node.named_children if child.type == "string"), None)


def _loader_argument(node: Node, source: bytes) -> Optional[str]:
    callee = node.child_by_field_name("function")
    if callee is None:
        return None
    if callee.type == "identifier":
        if _text(callee, source) not in DYNAMIC_LOADERS:
            return None
    elif callee.type != "import":
        return None
    arguments = node.child_by_field_name("arguments")
    if arguments is None:
        return None
    values = [child for child in arguments.named_children if child.type != "comment"]
    if not values:
        return None
    return _string_value(values[0], source)


def _string_value(node: Optional[Node], source: bytes) -> Optional[str]:
    if node is None or node.type != "string":
        return None
    return _text(node, source)[1:-1]


def _text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")
