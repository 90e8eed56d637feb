# src/modconcat/templates.py
"""Runtime shim text wrapped around the bundled modules.

The text ships as package data under `runtime/` and is read once per
process. Per-file templates use `${id}` and `${path}` placeholders.
"""

from dataclasses import dataclass
from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from string import Template

from .meta import PROGRAM_PACKAGE


@dataclass(frozen=True)
class BundleTemplates:
    header: str
    footer: str
    file_header: str
    file_footer: str

    def wrap(self, module_id: int, path: Path | str, body: str) -> str:
        """Surround one module's rewritten body with its header and footer."""
        mapping = {"id": module_id, "path": str(path)}
        return (
            Template(self.file_header).safe_substitute(mapping)
            + body
            + Template(self.file_footer).safe_substitute(mapping)
        )


@lru_cache(maxsize=1)
def load_templates() -> BundleTemplates:
    runtime = files(PROGRAM_PACKAGE).joinpath("runtime")
    return BundleTemplates(
        header=runtime.joinpath("header.js").read_text(encoding="utf-8"),
        footer=runtime.joinpath("footer.js").read_text(encoding="utf-8"),
        file_header=runtime.joinpath("file_header.js").read_text(encoding="utf-8"),
        file_footer=runtime.joinpath("file_footer.js").read_text(encoding="utf-8"),
    )
