from __future__ import annotations

from pathlib import Path

import pytest

from refiner.extractor import extract_references, package_name, resolve_internal
from refiner.models import EXTERNAL, INTERNAL
from refiner.parser import JAVASCRIPT, TYPESCRIPT, parse_source


def _references(origin: Path, code: str, language: str = JAVASCRIPT):
    source = code.encode("utf-8")
    tree = parse_source(source, language, origin)
    return extract_references(tree, source, origin)


@pytest.mark.parametrize(
    ("specifier", "expected"),
    [
        ("lodash", "lodash"),
        ("lodash/fp", "lodash"),
        ("@scope/pkg", "@scope/pkg"),
        ("@babel/core/lib/index.js", "@babel/core"),
        ("@scope", "@scope"),
    ],
)
def test_package_name(specifier: str, expected: str) -> None:
    assert package_name(specifier) == expected


def test_static_imports_and_reexports(tmp_path: Path) -> None:
    origin = tmp_path / "index.js"
    refs = _references(
        origin,
        "import a from 'alpha';\n"
        "import 'side-effect';\n"
        "import * as b from '@scope/beta/deep';\n"
        "export { c } from 'gamma';\n"
        "export * from './local.js';\n"
        "export const d = 1;\n",
    )

    external = [ref.package for ref in refs if ref.kind == EXTERNAL]
    internal = [ref.specifier for ref in refs if ref.kind == INTERNAL]
    assert external == ["alpha", "side-effect", "@scope/beta", "gamma"]
    assert internal == ["./local.js"]
    assert all(ref.origin == origin for ref in refs)


def test_only_literal_loader_calls_are_references(tmp_path: Path) -> None:
    refs = _references(
        tmp_path / "index.js",
        "require('one');\n"
        "require(dynamicName);\n"
        "require(`two`);\n"
        "load('three');\n"
        "obj.require('four');\n"
        "foo(require('five'));\n"
        "import('six').then(m => m);\n",
    )

    assert [ref.package for ref in refs] == ["one", "five", "six"]


def test_internal_reference_resolves_to_existing_file(tmp_path: Path) -> None:
    (tmp_path / "lib").mkdir()
    target = tmp_path / "lib" / "util.js"
    target.write_text("")
    origin = tmp_path / "src" / "main.js"

    refs = _references(origin, "const u = require('../lib/util');\nimport x from '../lib/missing';\n")

    assert [ref.kind for ref in refs] == [INTERNAL, INTERNAL]
    assert refs[0].target == target.resolve()
    assert refs[1].target is None


def test_absolute_specifier_is_internal(tmp_path: Path) -> None:
    target = tmp_path / "abs.js"
    target.write_text("")

    refs = _references(tmp_path / "main.js", f"import x from '{target.as_posix()}';\n")

    assert refs[0].kind == INTERNAL
    assert refs[0].target == target.resolve()


def test_resolve_internal_prefers_exact_then_extension_then_index(tmp_path: Path) -> None:
    (tmp_path / "thing.js").write_text("")
    (tmp_path / "thing").mkdir()
    (tmp_path / "thing" / "index.js").write_text("")
    (tmp_path / "other").mkdir()
    (tmp_path / "other" / "index.ts").write_text("")

    assert resolve_internal(tmp_path, "./thing.js") == (tmp_path / "thing.js").resolve()
    assert resolve_internal(tmp_path, "./thing") == (tmp_path / "thing.js").resolve()
    assert resolve_internal(tmp_path, "./other") == (tmp_path / "other" / "index.ts").resolve()
    assert resolve_internal(tmp_path, "./nope") is None


def test_identity_does_not_depend_on_referrer(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "b").mkdir()
    shared = tmp_path / "shared.js"
    shared.write_text("")

    from_a = _references(tmp_path / "a" / "x.js", "import '../shared.js';\n")
    from_b = _references(tmp_path / "b" / "y.js", "import '../b/../shared';\n")

    assert from_a[0].target == from_b[0].target == shared.resolve()


def test_comments_before_loader_argument_are_ignored(tmp_path: Path) -> None:
    refs = _references(
        tmp_path / "index.js",
        "require(/* webpack */ 'chalk');\n"
        "import(/* webpackChunkName: 'x' */ 'dayjs');\n"
        "require(// trailing\n  'ora');\n",
    )

    assert [ref.package for ref in refs] == ["chalk", "dayjs", "ora"]


def test_typescript_import_equals_require(tmp_path: Path) -> None:
    (tmp_path / "helpers.ts").write_text("")

    refs = _references(
        tmp_path / "main.ts",
        "import fs = require('fs-extra');\nimport helpers = require('./helpers');\n",
        language=TYPESCRIPT,
    )

    assert {ref.package for ref in refs if ref.kind == EXTERNAL} == {"fs-extra"}
    internal = [ref.target for ref in refs if ref.kind == INTERNAL]
    assert internal and set(internal) == {(tmp_path / "helpers.ts").resolve()}


def test_specifier_naming_filesystem_root_is_unresolved(tmp_path: Path) -> None:
    assert resolve_internal(tmp_path, "/") is None
    climb = "/".join([".."] * (len(tmp_path.resolve().parts) + 3))
    assert resolve_internal(tmp_path, climb) is None


def test_over_long_specifier_is_unresolved(tmp_path: Path) -> None:
    assert resolve_internal(tmp_path, "./" + "a" * 5000) is None
    assert resolve_internal(tmp_path, "./" + "/".join(["b" * 300] * 3)) is None
