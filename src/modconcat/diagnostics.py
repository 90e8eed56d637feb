# src/modconcat/diagnostics.py
"""Non-fatal findings collected while bundling, and the final stats."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import IncompleteStateError
from .graph import ModuleGraph


@dataclass(frozen=True)
class UnresolvedModule:
    """A `require()` that could not be resolved but was tolerated."""

    parent: Path
    module: str

    def as_dict(self) -> dict[str, str]:
        return {"parent": str(self.parent), "module": self.module}


@dataclass(frozen=True)
class BundleStats:
    files: list[Path]
    addons_excluded: list[Path]
    unresolved_modules: list[UnresolvedModule]

    def as_dict(self) -> dict[str, Any]:
        return {
            "files": [str(p) for p in self.files],
            "addons_excluded": [str(p) for p in self.addons_excluded],
            "unresolved_modules": [u.as_dict() for u in self.unresolved_modules],
        }


@dataclass
class Diagnostics:
    addons_excluded: list[Path] = field(default_factory=list)
    unresolved_modules: list[UnresolvedModule] = field(default_factory=list)

    def record_addon(self, path: Path) -> bool:
        """Remember an excluded native add-on; False if already known."""
        if path in self.addons_excluded:
            return False
        self.addons_excluded.append(path)
        return True

    def record_unresolved(self, parent: Path, module: str) -> None:
        self.unresolved_modules.append(UnresolvedModule(parent, module))

    def snapshot(self, graph: ModuleGraph) -> BundleStats:
        """Final stats; only available once every file has been processed."""
        if not graph.exhausted:
            xmsg = (
                "Statistics are not yet available:"
                f" {graph.cursor} of {len(graph)} files processed."
            )
            raise IncompleteStateError(xmsg)
        return BundleStats(
            files=graph.paths,
            addons_excluded=list(self.addons_excluded),
            unresolved_modules=list(self.unresolved_modules),
        )
