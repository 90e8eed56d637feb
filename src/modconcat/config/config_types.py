# src/modconcat/config/config_types.py


from pathlib import Path
from typing import Any, Literal, TypedDict

from typing_extensions import NotRequired

from modconcat.policy import ResolutionPolicy


OriginType = Literal["cli", "config", "env", "default"]


class BundleConfig(TypedDict, total=False):
    entry: str  # entry module, relative to the config file
    out: str  # bundle path, relative to the config file
    extensions: list[str]
    compilers: dict[str, Any]  # callables (Python configs) or None
    exclude_files: list[str]
    exclude_node_modules: bool | list[str]
    browser: bool
    allow_unresolved_modules: bool

    # runtime behavior
    log_level: str
    strict_config: bool
    watch_interval: float


class MetaBundleConfigResolved(TypedDict):
    # sources of parameters
    cli_root: Path
    config_root: Path
    config_path: Path | None
    entry_origin: OriginType
    out_origin: OriginType


class BundleConfigResolved(TypedDict):
    entry: Path
    out: Path
    policy: ResolutionPolicy

    log_level: str
    strict_config: bool
    watch_interval: float
    dry_run: bool

    # meta only
    __meta__: NotRequired[MetaBundleConfigResolved]
