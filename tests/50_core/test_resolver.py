# tests/50_core/test_resolver.py
"""Tests for Node.js-style resolution in modconcat.resolver."""

from pathlib import Path

import pytest

import modconcat.errors as mod_errors
import modconcat.policy as mod_policy
import modconcat.resolver as mod_resolver
from tests.utils import make_project


def test_core_modules_resolve_to_themselves(tmp_path: Path) -> None:
    # --- setup ---
    policy = mod_policy.ResolutionPolicy()

    # --- execute and verify ---
    assert mod_resolver.resolve("fs", tmp_path, policy) == "fs"
    assert mod_resolver.resolve("node:path", tmp_path, policy) == "node:path"
    assert mod_resolver.is_core_module("fs/promises")
    assert not mod_resolver.is_core_module("cool")


def test_relative_file_with_extension_probing(tmp_path: Path) -> None:
    # --- setup ---
    make_project(tmp_path, {"a.js": "", "data.json": {}, "lib/b.js": ""})
    policy = mod_policy.ResolutionPolicy()

    # --- execute and verify ---
    assert mod_resolver.resolve("./a", tmp_path, policy) == str(tmp_path / "a.js")
    assert mod_resolver.resolve("./a.js", tmp_path, policy) == str(tmp_path / "a.js")
    assert mod_resolver.resolve("./data", tmp_path, policy) == str(
        tmp_path / "data.json"
    )
    assert mod_resolver.resolve("../a", tmp_path / "lib", policy) == str(
        tmp_path / "a.js"
    )


def test_exact_file_wins_over_extension(tmp_path: Path) -> None:
    # --- setup ---
    make_project(tmp_path, {"thing": "exact", "thing.js": "probe"})

    # --- execute ---
    result = mod_resolver.resolve("./thing", tmp_path, mod_policy.ResolutionPolicy())

    # --- verify ---
    assert result == str(tmp_path / "thing")


def test_directory_index_and_main(tmp_path: Path) -> None:
    # --- setup ---
    make_project(
        tmp_path,
        {
            "plain/index.js": "",
            "pkg/package.json": {"main": "lib/entry"},
            "pkg/lib/entry.js": "",
            "pkgdir/package.json": {"main": "./lib"},
            "pkgdir/lib/index.json": {},
            "broken/package.json": "{not json",
            "broken/index.js": "",
        },
    )
    policy = mod_policy.ResolutionPolicy()

    # --- execute and verify ---
    assert mod_resolver.resolve("./plain", tmp_path, policy) == str(
        tmp_path / "plain" / "index.js"
    )
    assert mod_resolver.resolve("./pkg", tmp_path, policy) == str(
        tmp_path / "pkg" / "lib" / "entry.js"
    )
    assert mod_resolver.resolve("./pkgdir/", tmp_path, policy) == str(
        tmp_path / "pkgdir" / "lib" / "index.json"
    )
    assert mod_resolver.resolve("./broken", tmp_path, policy) == str(
        tmp_path / "broken" / "index.js"
    )


def test_vendor_packages_walk_up_node_modules(tmp_path: Path) -> None:
    # --- setup ---
    make_project(
        tmp_path,
        {
            "node_modules/cool/package.json": {"main": "cool.js"},
            "node_modules/cool/cool.js": "",
            "node_modules/cool/extra.js": "",
            "src/deep/x.js": "",
        },
    )
    policy = mod_policy.ResolutionPolicy()
    basedir = tmp_path / "src" / "deep"

    # --- execute and verify ---
    assert mod_resolver.resolve("cool", basedir, policy) == str(
        tmp_path / "node_modules" / "cool" / "cool.js"
    )
    assert mod_resolver.resolve("cool/extra", basedir, policy) == str(
        tmp_path / "node_modules" / "cool" / "extra.js"
    )


def test_browser_field_remaps_main(tmp_path: Path) -> None:
    # --- setup ---
    make_project(
        tmp_path,
        {
            "node_modules/dual/package.json": {"main": "node.js", "browser": "web.js"},
            "node_modules/dual/node.js": "",
            "node_modules/dual/web.js": "",
        },
    )

    # --- execute ---
    server = mod_resolver.resolve("dual", tmp_path, mod_policy.ResolutionPolicy())
    browser = mod_resolver.resolve(
        "dual", tmp_path, mod_policy.ResolutionPolicy(browser=True)
    )

    # --- verify ---
    assert server.endswith("node.js")
    assert browser.endswith("web.js")


def test_native_addons_are_found_last(tmp_path: Path) -> None:
    # --- setup ---
    make_project(tmp_path, {"build/addon.node": ""})

    # --- execute ---
    result = mod_resolver.resolve(
        "./build/addon", tmp_path, mod_policy.ResolutionPolicy()
    )

    # --- verify ---
    assert result == str(tmp_path / "build" / "addon.node")


def test_missing_module_raises_with_code(tmp_path: Path) -> None:
    # --- execute ---
    with pytest.raises(mod_errors.ResolutionError) as excinfo:
        mod_resolver.resolve("notfound", tmp_path, mod_policy.ResolutionPolicy())

    # --- verify ---
    err = excinfo.value
    assert err.code == "MODULE_NOT_FOUND"
    assert err.specifier == "notfound"
    assert "Cannot find module 'notfound'" in str(err)
    assert isinstance(err, RuntimeError)
