# tests/50_core/test_diagnostics.py

from pathlib import Path

import pytest

import modconcat.diagnostics as mod_diagnostics
import modconcat.errors as mod_errors
import modconcat.graph as mod_graph


def test_record_addon_deduplicates(tmp_path: Path) -> None:
    # --- setup ---
    diagnostics = mod_diagnostics.Diagnostics()

    # --- execute ---
    first = diagnostics.record_addon(tmp_path / "a.node")
    second = diagnostics.record_addon(tmp_path / "a.node")

    # --- verify ---
    assert first is True
    assert second is False
    assert diagnostics.addons_excluded == [tmp_path / "a.node"]


def test_unresolved_kept_per_occurrence(tmp_path: Path) -> None:
    # --- setup ---
    diagnostics = mod_diagnostics.Diagnostics()

    # --- execute ---
    diagnostics.record_unresolved(tmp_path / "a.js", "x")
    diagnostics.record_unresolved(tmp_path / "a.js", "x")

    # --- verify ---
    assert len(diagnostics.unresolved_modules) == 2


def test_snapshot_requires_exhausted_graph(tmp_path: Path) -> None:
    # --- setup ---
    graph = mod_graph.ModuleGraph()
    graph.reserve(tmp_path / "a.js")
    diagnostics = mod_diagnostics.Diagnostics()

    # --- execute and verify ---
    with pytest.raises(mod_errors.IncompleteStateError, match="not yet available"):
        diagnostics.snapshot(graph)

    graph.mark_processed(0)
    stats = diagnostics.snapshot(graph)
    assert stats.files == [tmp_path / "a.js"]
    assert stats.as_dict() == {
        "files": [str(tmp_path / "a.js")],
        "addons_excluded": [],
        "unresolved_modules": [],
    }


def test_snapshot_is_a_copy(tmp_path: Path) -> None:
    # --- setup ---
    graph = mod_graph.ModuleGraph()
    diagnostics = mod_diagnostics.Diagnostics()
    stats = diagnostics.snapshot(graph)

    # --- execute ---
    diagnostics.record_addon(tmp_path / "late.node")

    # --- verify ---
    assert stats.addons_excluded == []
