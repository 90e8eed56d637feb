# tests/50_core/test_write_bundle.py

import asyncio
from pathlib import Path

import pytest

import modconcat.build as mod_build
import modconcat.errors as mod_errors
import modconcat.policy as mod_policy
from tests.utils import SAMPLE_PROJECT, make_project, read_bundle


def test_write_bundle_writes_every_module(tmp_path: Path) -> None:
    # --- setup ---
    make_project(tmp_path, SAMPLE_PROJECT)
    out = tmp_path / "dist" / "bundle.js"

    # --- execute ---
    stats = mod_build.write_bundle(tmp_path / "index.js", out)

    # --- verify ---
    assert out.exists()
    assert stats.files == [
        tmp_path / "index.js",
        tmp_path / "a.js",
        tmp_path / "lib" / "b.js",
        tmp_path / "data.json",
    ]
    text = read_bundle(out)
    assert text.count("module.exports") >= 3
    assert list(out.parent.iterdir()) == [out]


def test_failed_build_keeps_previous_output(tmp_path: Path) -> None:
    # --- setup ---
    make_project(tmp_path, {"index.js": 'require("./missing");\n'})
    out = tmp_path / "bundle.js"
    out.write_text("previous", encoding="utf-8")

    # --- execute ---
    with pytest.raises(mod_errors.ResolutionError, match="missing"):
        mod_build.write_bundle(tmp_path / "index.js", out)

    # --- verify ---
    assert read_bundle(out) == "previous"
    assert not list(tmp_path.glob(".bundle.js.*.tmp"))


def test_failed_first_build_leaves_nothing(tmp_path: Path) -> None:
    # --- setup ---
    make_project(tmp_path, {"index.js": 'require("./missing");\n'})
    out = tmp_path / "bundle.js"

    # --- execute ---
    with pytest.raises(mod_errors.BundleError):
        mod_build.write_bundle(tmp_path / "index.js", out)

    # --- verify ---
    assert sorted(p.name for p in tmp_path.iterdir()) == ["index.js"]


def test_policy_output_path_follows_out(tmp_path: Path) -> None:
    # --- setup ---
    make_project(tmp_path, {"src/index.js": "module.exports = __dirname;\n"})
    policy = mod_policy.ResolutionPolicy(output_path=tmp_path / "elsewhere.js")
    out = tmp_path / "dist" / "bundle.js"

    # --- execute ---
    mod_build.write_bundle(tmp_path / "src" / "index.js", out, policy)

    # --- verify ---
    text = read_bundle(out)
    assert '__getDirname("../src/index.js")' in text
    # the caller's policy is not modified
    assert policy.output_path == tmp_path / "elsewhere.js"


def test_write_bundle_async_matches_sync(tmp_path: Path) -> None:
    # --- setup ---
    make_project(tmp_path, SAMPLE_PROJECT)
    sync_out = tmp_path / "sync.js"
    async_out = tmp_path / "async.js"

    # --- execute ---
    sync_stats = mod_build.write_bundle(tmp_path / "index.js", sync_out)
    async_stats = asyncio.run(
        mod_build.write_bundle_async(tmp_path / "index.js", async_out)
    )

    # --- verify ---
    assert read_bundle(sync_out) == read_bundle(async_out)
    assert sync_stats == async_stats


def test_write_bundle_async_failure_cleans_up(tmp_path: Path) -> None:
    # --- setup ---
    make_project(tmp_path, {"index.js": 'require("nope");\n'})
    out = tmp_path / "bundle.js"

    # --- execute ---
    with pytest.raises(mod_errors.ResolutionError):
        asyncio.run(mod_build.write_bundle_async(tmp_path / "index.js", out))

    # --- verify ---
    assert sorted(p.name for p in tmp_path.iterdir()) == ["index.js"]
