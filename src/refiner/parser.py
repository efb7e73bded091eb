"""Tree-sitter front end for JavaScript and TypeScript sources."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from refiner.errors import ParseError

JAVASCRIPT = "javascript"
TYPESCRIPT = "typescript"
TSX = "tsx"


def language_for_path(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix == ".ts":
        return TYPESCRIPT
    if suffix == ".tsx":
        return TSX
    # The JavaScript grammar also accepts JSX.
    return JAVASCRIPT


@lru_cache(maxsize=None)
def _language(language_key: str) -> Language:
    if language_key == TYPESCRIPT:
        return Language(tree_sitter_typescript.language_typescript())
    if language_key == TSX:
        return Language(tree_sitter_typescript.language_tsx())
    return Language(tree_sitter_javascript.language())


def parse_source(source: bytes, language_key: str, identity: Path) -> Tree:
    """Parse ``source`` and fail with ParseError if the tree has syntax errors.

    Tree-sitter always produces a tree, recovering around bad input with
    ERROR and MISSING nodes. Any such node makes the file unanalyzable.
    """
    # Parser instances are not shared so callers may parse from several threads.
    parser = Parser(_language(language_key))
    tree = parser.parse(source)
    if tree.root_node.has_error:
        raise ParseError(identity, _describe_error(tree.root_node))
    return tree


def _describe_error(root: Node) -> str:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            line, column = node.start_point
            what = f"missing {node.type}" if node.is_missing else "unexpected syntax"
            return f"{what} at line {line + 1}, column {column + 1}"
        if node.has_error:
            stack.extend(reversed(node.children))
    return "syntax error"
