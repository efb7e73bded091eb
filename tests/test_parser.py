from __future__ import annotations

from pathlib import Path

import pytest

from refiner.errors import ParseError
from refiner.parser import JAVASCRIPT, TSX, TYPESCRIPT, language_for_path, parse_source


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("a.js", JAVASCRIPT),
        ("a.jsx", JAVASCRIPT),
        ("a.mjs", JAVASCRIPT),
        ("a.cjs", JAVASCRIPT),
        ("a.ts", TYPESCRIPT),
        ("a.tsx", TSX),
    ],
)
def test_language_for_path(name: str, expected: str) -> None:
    assert language_for_path(Path(name)) == expected


def test_modern_syntax_parses() -> None:
    source = (
        b"class A { #secret = 1; get secret() { return this.#secret; } }\n"
        b"const v = a?.b ?? c;\n"
        b"export default async function* gen() { for await (const x of y) yield x; }\n"
        b"const el = <App {...props} />;\n"
    )
    tree = parse_source(source, JAVASCRIPT, Path("modern.js"))
    assert tree.root_node.type == "program"


def test_typescript_syntax_parses() -> None:
    source = b"enum Color { Red }\nexport function f<T>(x: T): T { return x as T; }\n"
    tree = parse_source(source, TYPESCRIPT, Path("f.ts"))
    assert not tree.root_node.has_error


def test_malformed_source_raises_parse_error() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_source(b"const = ;\n", JAVASCRIPT, Path("bad.js"))
    assert excinfo.value.path == Path("bad.js")
    assert "bad.js" in str(excinfo.value)
    assert "line 1" in str(excinfo.value)
