# src/modconcat/config/config_resolve.py


import argparse
import os
from pathlib import Path
from typing import Any

from modconcat.constants import (
    DEFAULT_ALLOW_UNRESOLVED,
    DEFAULT_BROWSER,
    DEFAULT_DRY_RUN,
    DEFAULT_ENV_WATCH_INTERVAL,
    DEFAULT_EXTENSIONS,
    DEFAULT_STRICT_CONFIG,
    DEFAULT_WATCH_INTERVAL,
)
from modconcat.logs import get_app_logger
from modconcat.meta import PROGRAM_ENV
from modconcat.policy import ResolutionPolicy
from modconcat.utils import cast_hint, normalize_path

from .config_types import (
    BundleConfig,
    BundleConfigResolved,
    MetaBundleConfigResolved,
    OriginType,
)


def _normalize_extension(ext: str) -> str:
    return ext if ext.startswith(".") else f".{ext}"


def _resolve_required_path(
    key: str,
    cli_value: str | None,
    cfg_value: str | None,
    *,
    cwd: Path,
    config_dir: Path,
) -> tuple[Path, OriginType]:
    """CLI paths are relative to the cwd, config paths to the config file."""
    if cli_value:
        return normalize_path(Path(cli_value).expanduser(), cwd), "cli"
    if cfg_value:
        return normalize_path(Path(cfg_value).expanduser(), config_dir), "config"
    flag = "ENTRY" if key == "entry" else "OUT"
    xmsg = (
        f"No {key} given: pass {flag} on the command line"
        f" or set '{key}' in the config file."
    )
    raise ValueError(xmsg)


def _resolve_watch_interval(
    args: argparse.Namespace,
    config: BundleConfig,
) -> float:
    logger = get_app_logger()

    cli_interval: Any = getattr(args, "watch", None)
    if isinstance(cli_interval, (int, float)) and cli_interval > 0:
        return float(cli_interval)

    env_var = f"{PROGRAM_ENV}_{DEFAULT_ENV_WATCH_INTERVAL}"
    env_interval = os.getenv(env_var)
    if env_interval:
        try:
            value = float(env_interval)
        except ValueError:
            logger.warning(
                "Ignoring invalid %s=%r (expected seconds).", env_var, env_interval
            )
        else:
            if value > 0:
                return value
            logger.warning("Ignoring non-positive %s=%r.", env_var, env_interval)

    cfg_interval = config.get("watch_interval")
    if cfg_interval is not None:
        return float(cfg_interval)
    return DEFAULT_WATCH_INTERVAL


def _resolve_vendor_exclusion(
    args: argparse.Namespace,
    config: BundleConfig,
) -> bool | frozenset[str]:
    # --exclude-node-modules with no names means "all of them"
    cli_value: list[str] | None = getattr(args, "exclude_node_modules", None)
    if cli_value is not None:
        return frozenset(cli_value) if cli_value else True
    cfg_value = config.get("exclude_node_modules", False)
    if isinstance(cfg_value, bool):
        return cfg_value
    return frozenset(cfg_value)


def resolve_config(
    config: BundleConfig | None,
    args: argparse.Namespace,
    config_dir: Path,
    cwd: Path,
    *,
    config_path: Path | None = None,
) -> BundleConfigResolved:
    """Merge CLI arguments, config values and defaults into final settings.

    Precedence: CLI > config > defaults. Relative paths from the CLI are
    anchored at `cwd`, those from the config file at `config_dir`.
    """
    logger = get_app_logger()
    cfg: BundleConfig = config if config is not None else cast_hint(BundleConfig, {})
    logger.trace(f"[resolve_config] Resolving with {len(cfg)} config key(s)")

    entry, entry_origin = _resolve_required_path(
        "entry",
        getattr(args, "entry", None),
        cfg.get("entry"),
        cwd=cwd,
        config_dir=config_dir,
    )
    out, out_origin = _resolve_required_path(
        "out",
        getattr(args, "out", None),
        cfg.get("out"),
        cwd=cwd,
        config_dir=config_dir,
    )

    # --- extensions ---
    cli_extensions: list[str] | None = getattr(args, "extension", None)
    if cli_extensions:
        extensions = tuple(_normalize_extension(e) for e in cli_extensions)
    elif "extensions" in cfg:
        extensions = tuple(_normalize_extension(e) for e in cfg["extensions"])
    else:
        extensions = DEFAULT_EXTENSIONS

    # --- excluded files: config entries extended by the CLI ---
    exclude_files = {normalize_path(p, config_dir) for p in cfg.get("exclude_files", [])}
    for p in getattr(args, "exclude_file", None) or []:
        exclude_files.add(normalize_path(Path(p).expanduser(), cwd))

    # --- flags ---
    browser: bool | None = getattr(args, "browser", None)
    if browser is None:
        browser = cfg.get("browser", DEFAULT_BROWSER)
    allow_unresolved: bool | None = getattr(args, "allow_unresolved", None)
    if allow_unresolved is None:
        allow_unresolved = cfg.get("allow_unresolved_modules", DEFAULT_ALLOW_UNRESOLVED)

    policy = ResolutionPolicy(
        extensions=extensions,
        compilers=dict(cfg.get("compilers", {})),
        exclude_files=exclude_files,
        exclude_node_modules=_resolve_vendor_exclusion(args, cfg),
        browser=browser,
        allow_unresolved_modules=allow_unresolved,
        output_path=out,
    )

    meta: MetaBundleConfigResolved = {
        "cli_root": cwd,
        "config_root": config_dir,
        "config_path": config_path,
        "entry_origin": entry_origin,
        "out_origin": out_origin,
    }

    resolved: BundleConfigResolved = {
        "entry": entry,
        "out": out,
        "policy": policy,
        "log_level": logger.determine_log_level(
            args=args, root_log_level=cfg.get("log_level")
        ),
        "strict_config": cfg.get("strict_config", DEFAULT_STRICT_CONFIG),
        "watch_interval": _resolve_watch_interval(args, cfg),
        "dry_run": bool(getattr(args, "dry_run", DEFAULT_DRY_RUN)),
        "__meta__": meta,
    }
    logger.trace(f"[resolve_config] entry={entry} ({entry_origin}), out={out}")
    return resolved
