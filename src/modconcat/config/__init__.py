# src/modconcat/config/__init__.py

"""Configuration handling for modconcat.

This module provides configuration loading, validation, and resolution.
"""

from .config_loader import (
    can_run_configless,
    find_config,
    load_and_validate_config,
    load_config,
)
from .config_resolve import resolve_config
from .config_types import (
    BundleConfig,
    BundleConfigResolved,
    MetaBundleConfigResolved,
    OriginType,
)
from .config_validate import ValidationSummary, validate_config


__all__ = [  # noqa: RUF022
    # config_loader
    "can_run_configless",
    "find_config",
    "load_and_validate_config",
    "load_config",
    # config_resolve
    "resolve_config",
    # config_types
    "BundleConfig",
    "BundleConfigResolved",
    "MetaBundleConfigResolved",
    "OriginType",
    # config_validate
    "ValidationSummary",
    "validate_config",
]
