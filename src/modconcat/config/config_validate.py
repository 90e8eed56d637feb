# src/modconcat/config/config_validate.py


from dataclasses import dataclass, field
from difflib import get_close_matches
from typing import Any

from modconcat.constants import DEFAULT_STRICT_CONFIG
from modconcat.logs import get_app_logger
from modconcat.utils import cast_hint, safe_isinstance, schema_from_typeddict
from modconcat.utils_logs import LEVEL_ORDER

from .config_types import BundleConfig


# --- constants ------------------------------------------------------

DRYRUN_KEYS = {"dry-run", "dry_run", "dryrun", "no-op", "no_op", "noop"}
DRYRUN_MSG = (
    "Ignored config key(s) {keys}: this tool has no config option for it. "
    "Use the CLI flag '--dry-run' instead."
)

# Example values shown next to type errors
FIELD_EXAMPLES: dict[str, str] = {
    "entry": '"src/index.js"',
    "out": '"dist/bundle.js"',
    "extensions": '[".js", ".json"]',
    "compilers": '{".json": None}',
    "exclude_files": '["src/dev-only.js"]',
    "exclude_node_modules": 'true or ["left-pad"]',
    "browser": "false",
    "allow_unresolved_modules": "true",
    "log_level": '"debug"',
    "strict_config": "true",
    "watch_interval": "1.5",
}


@dataclass
class ValidationSummary:
    valid: bool = True
    errors: list[str] = field(default_factory=list)
    strict_warnings: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    strict: bool = DEFAULT_STRICT_CONFIG


def collect_msg(
    msg: str,
    *,
    strict: bool,
    summary: ValidationSummary,  # modified
    is_error: bool = False,
) -> None:
    """Route a message to errors, strict warnings or plain warnings."""
    if is_error:
        summary.errors.append(msg)
    elif strict:
        summary.strict_warnings.append(msg)
    else:
        summary.warnings.append(msg)


def _type_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__


def _check_unknown_keys(
    parsed_cfg: dict[str, Any],
    schema: dict[str, Any],
    *,
    summary: ValidationSummary,  # modified
) -> None:
    dryrun_found = sorted(k for k in parsed_cfg if k in DRYRUN_KEYS)
    if dryrun_found:
        collect_msg(
            DRYRUN_MSG.format(keys=", ".join(dryrun_found)),
            strict=summary.strict,
            summary=summary,
        )

    for key in parsed_cfg:
        if key in schema or key in DRYRUN_KEYS:
            continue
        msg = f"Unknown key {key!r} in configuration"
        close = get_close_matches(key, list(schema), n=1, cutoff=0.6)
        if close:
            msg += f" (did you mean {close[0]!r}?)"
        collect_msg(msg + ".", strict=summary.strict, summary=summary)


def _check_types(
    parsed_cfg: dict[str, Any],
    schema: dict[str, Any],
    *,
    summary: ValidationSummary,  # modified
) -> None:
    for key, expected in schema.items():
        if key not in parsed_cfg:
            continue
        value = parsed_cfg[key]
        if key == "compilers":
            _check_compilers(value, summary=summary)
            continue
        if not safe_isinstance(value, expected):
            example = FIELD_EXAMPLES.get(key)
            hint = f" (e.g. {example})" if example else ""
            collect_msg(
                f"{key!r} has the wrong type: got {_type_name(value)}{hint}.",
                strict=True,
                summary=summary,
                is_error=True,
            )

    log_level = parsed_cfg.get("log_level")
    if isinstance(log_level, str) and log_level.lower() not in LEVEL_ORDER:
        collect_msg(
            f"'log_level' must be one of {', '.join(LEVEL_ORDER)}; got {log_level!r}.",
            strict=True,
            summary=summary,
            is_error=True,
        )

    extensions = parsed_cfg.get("extensions")
    if isinstance(extensions, list):
        for ext in cast_hint(list[str], extensions):
            if isinstance(ext, str) and not ext.startswith("."):
                collect_msg(
                    f"Extension {ext!r} has no leading dot; using '.{ext}'.",
                    strict=False,
                    summary=summary,
                )

    interval = parsed_cfg.get("watch_interval")
    if safe_isinstance(interval, float) and interval <= 0:
        collect_msg(
            f"'watch_interval' must be positive; got {interval!r}.",
            strict=True,
            summary=summary,
            is_error=True,
        )


def _check_compilers(value: Any, *, summary: ValidationSummary) -> None:
    if not isinstance(value, dict):
        collect_msg(
            f"'compilers' must map extensions to callables; got {_type_name(value)}.",
            strict=True,
            summary=summary,
            is_error=True,
        )
        return
    for ext, compiler in cast_hint(dict[Any, Any], value).items():
        if not isinstance(ext, str) or not ext.startswith("."):
            collect_msg(
                f"Compiler key {ext!r} must be an extension such as '.json'.",
                strict=True,
                summary=summary,
                is_error=True,
            )
        if compiler is not None and not callable(compiler):
            collect_msg(
                f"Compiler for {ext!r} must be callable or None;"
                f" got {_type_name(compiler)}.",
                strict=True,
                summary=summary,
                is_error=True,
            )


def validate_config(
    parsed_cfg: Any,
    *,
    strict: bool | None = None,
) -> ValidationSummary:
    """Validate a loaded config against the BundleConfig schema.

    strict=True  →  warnings become fatal, but still listed separately
    strict=False →  warnings remain non-fatal

    When `strict` is None the `strict_config` key decides, falling back
    to the default (strict).
    """
    logger = get_app_logger()
    logger.trace(f"[validate_config] Starting validation (strict={strict})")

    summary = ValidationSummary()

    if not isinstance(parsed_cfg, dict):
        collect_msg(
            "Configuration must be an object with named keys"
            f" (not {_type_name(parsed_cfg)}).",
            strict=True,
            summary=summary,
            is_error=True,
        )
        summary.valid = False
        return summary
    cfg = cast_hint(dict[str, Any], parsed_cfg)

    strict_from_cfg: Any = cfg.get("strict_config")
    if strict is not None:
        summary.strict = strict
    elif isinstance(strict_from_cfg, bool):
        summary.strict = strict_from_cfg

    schema = schema_from_typeddict(BundleConfig)
    _check_unknown_keys(cfg, schema, summary=summary)
    _check_types(cfg, schema, summary=summary)

    summary.valid = not summary.errors and not summary.strict_warnings
    return summary
