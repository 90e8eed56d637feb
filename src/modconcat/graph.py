# src/modconcat/graph.py
"""Ordered registry of the files admitted into a bundle.

Ids are handed out when a path is first *discovered*, not when it is
processed, so a file may reference a sibling whose content has not been
read yet. That is what makes circular requires resolvable.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from .utils import normalize_path


@dataclass
class ModuleRecord:
    id: int
    path: Path
    processed: bool = False


class ModuleGraph:
    """Growable queue of ModuleRecords with a forward-only read cursor."""

    def __init__(self) -> None:
        self._records: list[ModuleRecord] = []
        self._ids: dict[Path, int] = {}
        self._cursor = 0

    def reserve(self, path: Path | str) -> int:
        """Return the id for `path`, appending a new record on first sight."""
        key = normalize_path(path)
        module_id = self._ids.get(key)
        if module_id is None:
            module_id = len(self._records)
            self._records.append(ModuleRecord(module_id, key))
            self._ids[key] = module_id
        return module_id

    def get(self, path: Path | str) -> ModuleRecord | None:
        module_id = self._ids.get(normalize_path(path))
        return None if module_id is None else self._records[module_id]

    def next_pending(self) -> ModuleRecord | None:
        """The lowest-index unprocessed record, or None once exhausted."""
        if self._cursor < len(self._records):
            return self._records[self._cursor]
        return None

    def mark_processed(self, module_id: int) -> None:
        if module_id != self._cursor:
            xmsg = (
                f"Module {module_id} cannot be marked processed;"
                f" next pending is {self._cursor}"
            )
            raise ValueError(xmsg)
        self._records[module_id].processed = True
        self._cursor += 1

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def exhausted(self) -> bool:
        return self._cursor >= len(self._records)

    @property
    def records(self) -> list[ModuleRecord]:
        return list(self._records)

    @property
    def paths(self) -> list[Path]:
        return [r.path for r in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ModuleRecord]:
        return iter(list(self._records))

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return normalize_path(path) in self._ids
