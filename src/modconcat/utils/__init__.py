# src/modconcat/utils/__init__.py

from .utils_files import (
    load_json_manifest,
    load_jsonc,
    load_toml,
    remove_path_in_error_message,
)
from .utils_paths import normalize_path, relative_posix, shorten_path_for_display
from .utils_text import plural
from .utils_types import cast_hint, safe_isinstance, schema_from_typeddict


__all__ = [  # noqa: RUF022
    # utils_files
    "load_json_manifest",
    "load_jsonc",
    "load_toml",
    "remove_path_in_error_message",
    # utils_paths
    "normalize_path",
    "relative_posix",
    "shorten_path_for_display",
    # utils_text
    "plural",
    # utils_types
    "cast_hint",
    "safe_isinstance",
    "schema_from_typeddict",
]
