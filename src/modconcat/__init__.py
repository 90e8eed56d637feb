# src/modconcat/__init__.py

"""Modconcat: concatenate a CommonJS project into a single file.

Full developer API
==================
This package re-exports all non-private symbols from its submodules,
making it suitable for programmatic use, custom integrations, or plugins.
Anything prefixed with "_" is considered internal and may change.

Highlights:
    - ModuleConcatStream  → Pull-driven bundle producer
    - write_bundle()      → Bundle a project into a file atomically
    - resolve()           → Node.js-style require() resolution
    - main()              → CLI entrypoint
    - get_metadata()      → Retrieve version / commit info
"""

from .actions import watch_for_changes
from .build import run_build, write_bundle, write_bundle_async
from .cli import main
from .config import (
    BundleConfig,
    BundleConfigResolved,
    ValidationSummary,
    find_config,
    load_and_validate_config,
    load_config,
    resolve_config,
    validate_config,
)
from .diagnostics import BundleStats, Diagnostics, UnresolvedModule
from .errors import (
    BundleError,
    BundleIOError,
    IncompleteStateError,
    ResolutionError,
    StreamClosedError,
    TransformError,
)
from .graph import ModuleGraph, ModuleRecord
from .logs import get_app_logger
from .meta import (
    PROGRAM_CONFIG,
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    Metadata,
    get_metadata,
)
from .policy import DEFAULT_COMPILERS, Compiler, ResolutionPolicy, compile_json
from .resolver import is_core_module, resolve
from .rewriter import RewriteOutcome, SourceRewriter
from .stream import ModuleConcatStream, StreamState
from .templates import BundleTemplates, load_templates


__all__ = [  # noqa: RUF022
    # actions
    "watch_for_changes",
    # build
    "run_build",
    "write_bundle",
    "write_bundle_async",
    # cli
    "main",
    # config
    "BundleConfig",
    "BundleConfigResolved",
    "ValidationSummary",
    "find_config",
    "load_and_validate_config",
    "load_config",
    "resolve_config",
    "validate_config",
    # diagnostics
    "BundleStats",
    "Diagnostics",
    "UnresolvedModule",
    # errors
    "BundleError",
    "BundleIOError",
    "IncompleteStateError",
    "ResolutionError",
    "StreamClosedError",
    "TransformError",
    # graph
    "ModuleGraph",
    "ModuleRecord",
    # logs
    "get_app_logger",
    # meta
    "PROGRAM_CONFIG",
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    "Metadata",
    "get_metadata",
    # policy
    "DEFAULT_COMPILERS",
    "Compiler",
    "ResolutionPolicy",
    "compile_json",
    # resolver
    "is_core_module",
    "resolve",
    # rewriter
    "RewriteOutcome",
    "SourceRewriter",
    # stream
    "ModuleConcatStream",
    "StreamState",
    # templates
    "BundleTemplates",
    "load_templates",
]
