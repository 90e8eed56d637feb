# tests/90_integration/test_bundle_execution.py
"""Run finished bundles with Node.js, when it is installed."""

import json
import shutil
import subprocess
from pathlib import Path

import pytest

import modconcat.build as mod_build
from tests.utils import SAMPLE_PROJECT, make_project


NODE = shutil.which("node")

pytestmark = [
    pytest.mark.slow,
    pytest.mark.skipif(NODE is None, reason="node is not installed"),
]


def _require_bundle(bundle: Path) -> object:
    assert NODE is not None
    result = subprocess.run(  # noqa: S603
        [
            NODE,
            "-e",
            "process.stdout.write(JSON.stringify(require(process.argv[1])))",
            str(bundle),
        ],
        capture_output=True,
        text=True,
        check=True,
        timeout=30,
    )
    return json.loads(result.stdout)


def test_sample_project_runs(tmp_path: Path) -> None:
    # --- setup ---
    make_project(tmp_path / "src", SAMPLE_PROJECT)
    out = tmp_path / "dist" / "bundle.js"
    mod_build.write_bundle(tmp_path / "src" / "index.js", out)
    # the sources must not be needed at runtime
    shutil.rmtree(tmp_path / "src")

    # --- execute ---
    exported = _require_bundle(out)

    # --- verify ---
    assert exported == {"a": "a", "b": "ab", "answer": 42}


def test_circular_requires_see_partial_exports(tmp_path: Path) -> None:
    # --- setup ---
    make_project(
        tmp_path,
        {
            "index.js": (
                "exports.early = true;\n"
                'var other = require("./other");\n'
                "module.exports = {sawEarly: other.sawEarly};\n"
            ),
            "other.js": 'exports.sawEarly = require("./index").early === true;\n',
        },
    )
    out = tmp_path / "bundle.js"
    mod_build.write_bundle(tmp_path / "index.js", out)

    # --- execute ---
    exported = _require_bundle(out)

    # --- verify ---
    assert exported == {"sawEarly": True}


def test_path_tokens_resolve_to_sources(tmp_path: Path) -> None:
    # --- setup ---
    make_project(
        tmp_path,
        {"src/index.js": "module.exports = [__dirname, __filename];\n"},
    )
    out = tmp_path / "dist" / "bundle.js"
    mod_build.write_bundle(tmp_path / "src" / "index.js", out)

    # --- execute ---
    exported = _require_bundle(out)

    # --- verify ---
    assert exported == [str(tmp_path / "src"), str(tmp_path / "src" / "index.js")]
