# src/modconcat/rewriter.py
"""Rewrite one module's source so it can live inside a bundle.

Detection is regex based, not a parser. Known limitations:
    - dynamic requires (`require("./" + name)`) are left untouched
    - `require.resolve(...)` and `require.cache` are not rewritten
    - whole-line `//` comments are stripped even inside multi-line strings
"""

import json
import os
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .diagnostics import UnresolvedModule
from .errors import ResolutionError, TransformError
from .graph import ModuleGraph, ModuleRecord
from .logs import get_app_logger
from .policy import ResolutionPolicy
from .resolver import is_core_module, resolve
from .utils import relative_posix


ResolveFn = Callable[[str, Path, ResolutionPolicy], str]

# A line break followed by an indented `//` comment; the break goes too.
LINE_COMMENT_RE = re.compile(r"(?:\r\n?|\n)\s*//.*")

# require('...') / require("..."): group 1 is the quote, group 2 the
# specifier. Whitespace may appear anywhere; a backslash escapes the
# next character, so \" does not terminate a "-quoted string.
REQUIRE_RE = re.compile(r"""require\s*\(\s*(["'])((?:(?!\1)[^\\]|\\.)*)\1\s*\)""")

_ESCAPE_RE = re.compile(r"\\(.)")

DIRNAME_TOKEN = "__dirname"
FILENAME_TOKEN = "__filename"
PATH_TOKEN_RE = re.compile(rf"{DIRNAME_TOKEN}|{FILENAME_TOKEN}")


@dataclass
class RewriteOutcome:
    text: str
    dependencies: list[ModuleRecord] = field(default_factory=list)
    addons: list[Path] = field(default_factory=list)
    unresolved: list[UnresolvedModule] = field(default_factory=list)


def strip_line_comments(source: str) -> str:
    return LINE_COMMENT_RE.sub("", source)


def unescape_specifier(raw: str) -> str:
    return _ESCAPE_RE.sub(r"\1", raw)


class SourceRewriter:
    """Rewrites modules and registers what they require in the graph."""

    def __init__(
        self,
        policy: ResolutionPolicy,
        graph: ModuleGraph,
        *,
        resolve_fn: ResolveFn = resolve,
    ) -> None:
        self.policy = policy
        self.graph = graph
        self._resolve = resolve_fn

    def rewrite(self, record: ModuleRecord, source: str) -> RewriteOutcome:
        """Transform `source` (the contents of `record.path`)."""
        logger = get_app_logger()
        policy = self.policy

        compiler = policy.compiler_for(record.path)
        if compiler is not None:
            logger.trace(f"[rewrite] compiling {record.path}")
            try:
                source = compiler(source, policy, record.path)
            except Exception as e:
                raise TransformError(record.path, f"{type(e).__name__}: {e}") from e

        outcome = RewriteOutcome(text="")
        code = strip_line_comments(source)
        code = REQUIRE_RE.sub(
            lambda m: self._replace_require(m, record, outcome), code
        )

        if policy.rewrites_path_tokens:
            code = self._replace_path_tokens(code, record)

        outcome.text = code
        return outcome

    def _replace_require(
        self,
        match: re.Match[str],
        record: ModuleRecord,
        outcome: RewriteOutcome,
    ) -> str:
        logger = get_app_logger()
        policy = self.policy
        original = match.group(0)
        specifier = unescape_specifier(match.group(2))

        if is_core_module(specifier) and not policy.browser:
            return original

        if policy.excludes_vendor(specifier):
            logger.trace(f"[rewrite] vendor package excluded: {specifier!r}")
            return original

        basedir = record.path.parent
        if policy.probably_excluded(specifier, basedir):
            logger.trace(f"[rewrite] excluded file: {specifier!r}")
            return original

        try:
            resolved = self._resolve(specifier, basedir, policy)
        except ResolutionError:
            if not policy.allow_unresolved_modules:
                raise
            logger.debug("Unresolved module %r in %s", specifier, record.path)
            outcome.unresolved.append(UnresolvedModule(record.path, specifier))
            return original

        if is_core_module(resolved):
            return original

        resolved_path = Path(resolved)
        if policy.is_native(resolved_path):
            logger.debug("Native add-on left out of bundle: %s", resolved_path)
            if resolved_path not in outcome.addons:
                outcome.addons.append(resolved_path)
            return original

        target = self.graph.get(resolved_path)
        if target is None:
            if policy.is_excluded_file(resolved_path):
                logger.trace(f"[rewrite] excluded file: {resolved_path}")
                return original
            self.graph.reserve(resolved_path)
            target = self.graph.get(resolved_path)
            assert target is not None  # noqa: S101
            logger.trace(f"[rewrite] discovered #{target.id} {resolved_path}")

        if target not in outcome.dependencies:
            outcome.dependencies.append(target)
        return f"__require({target.id},{record.id})"

    def _replace_path_tokens(self, code: str, record: ModuleRecord) -> str:
        output_path = self.policy.output_path
        if output_path is None:
            return code
        rel = json.dumps(relative_posix(record.path, os.path.dirname(output_path)))
        helpers = {
            DIRNAME_TOKEN: f"__getDirname({rel})",
            FILENAME_TOKEN: f"__getFilename({rel})",
        }
        # one pass, so inserted paths are never rewritten again
        return PATH_TOKEN_RE.sub(lambda m: helpers[m.group(0)], code)
