# tests/90_integration/test_path_tokens.py
"""__dirname / __filename inside bundled modules."""

from pathlib import Path

import pytest

import modconcat.cli as mod_cli
from tests.utils import make_project, read_bundle


PROJECT = {
    "src/index.js": 'module.exports = require("./lib/where");\n',
    "src/lib/where.js": "module.exports = [__dirname, __filename];\n",
}


def test_tokens_point_back_to_sources(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # --- setup ---
    make_project(tmp_path, PROJECT)
    monkeypatch.chdir(tmp_path)

    # --- execute ---
    code = mod_cli.main(["src/index.js", "dist/out.js"])

    # --- verify ---
    assert code == 0
    text = read_bundle(tmp_path / "dist" / "out.js")
    assert '__getDirname("../src/lib/where.js")' in text
    assert '__getFilename("../src/lib/where.js")' in text


def test_browser_mode_leaves_tokens(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # --- setup ---
    make_project(tmp_path, PROJECT)
    monkeypatch.chdir(tmp_path)

    # --- execute ---
    code = mod_cli.main(["src/index.js", "dist/out.js", "--browser"])

    # --- verify ---
    assert code == 0
    text = read_bundle(tmp_path / "dist" / "out.js")
    assert "module.exports = [__dirname, __filename];" in text


def test_tokens_for_module_below_output_directory(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # --- setup ---
    make_project(
        tmp_path,
        {
            "index.js": 'module.exports = require("./a/b/x");\n',
            "a/b/x.js": "module.exports = __dirname;\n",
        },
    )
    monkeypatch.chdir(tmp_path)

    # --- execute ---
    code = mod_cli.main(["index.js", "out.js"])

    # --- verify ---
    assert code == 0
    assert '__getDirname("a/b/x.js")' in read_bundle(tmp_path / "out.js")
