# src/modconcat/stream.py
"""Pull-driven producer of a bundle.

The stream is a small state machine. Each `read()` returns the next chunk
of output, or None for end-of-output:

    START   →  global header
    BODY    →  one wrapped module per pull, in discovery order; once the
               graph is exhausted, the global footer
    END     →  None
    ERRORED →  error listeners (if not run yet), then None
    CLOSED  →  reading again raises StreamClosedError

Nothing is read from disk until the consumer asks for it, so a consumer
that writes each chunk before pulling the next gets backpressure for free
and the stream never buffers more than one chunk.

When a module cannot be read, resolved or compiled, the pull that hit
the failure returns an empty chunk, keeps the failure on `stream.error`
and moves to ERRORED. Listeners never run inside that `read()` call:
under a running asyncio loop they are scheduled with `call_soon`, and in
any case they have run before the next pull returns None. The error is
therefore always observed before end-of-output. Iteration (sync or
async) raises the error after end-of-output, so it is never mistaken for
a complete bundle.
"""

import asyncio
from collections.abc import AsyncIterator, Callable, Iterator
from enum import Enum
from pathlib import Path
from typing import TextIO

from .diagnostics import BundleStats, Diagnostics
from .errors import BundleError, BundleIOError, StreamClosedError
from .graph import ModuleGraph, ModuleRecord
from .logs import get_app_logger
from .policy import ResolutionPolicy
from .resolver import resolve
from .rewriter import ResolveFn, SourceRewriter
from .templates import BundleTemplates, load_templates
from .utils import normalize_path


ErrorListener = Callable[[BundleError], object]


class StreamState(Enum):
    START = "start"
    BODY = "body"
    END = "end"
    ERRORED = "errored"
    CLOSED = "closed"


class ModuleConcatStream:
    """Concatenate the project rooted at `entry_module_path`.

    Args:
        entry_module_path: The project's entry module; it gets id 0.
        policy: Bundling options (defaults to ResolutionPolicy()).
        templates: Runtime shim text (defaults to the packaged templates).
        resolve_fn: Specifier resolver (defaults to the Node.js algorithm).
    """

    def __init__(
        self,
        entry_module_path: Path | str,
        policy: ResolutionPolicy | None = None,
        *,
        templates: BundleTemplates | None = None,
        resolve_fn: ResolveFn = resolve,
    ) -> None:
        self.policy = policy if policy is not None else ResolutionPolicy()
        self.templates = templates if templates is not None else load_templates()
        self.entry = normalize_path(entry_module_path)
        self.graph = ModuleGraph()
        self.graph.reserve(self.entry)
        self.diagnostics = Diagnostics()
        self.state = StreamState.START
        self.error: BundleError | None = None

        self._rewriter = SourceRewriter(self.policy, self.graph, resolve_fn=resolve_fn)
        self._error_listeners: list[ErrorListener] = []
        self._listeners_pending = False

    # --- pull contract --------------------------------------------------------

    def read(self) -> str | None:
        """Produce the next chunk, or None at end-of-output.

        The pull that fails returns "" (no output); see the module docstring.
        """
        if self.state is StreamState.CLOSED:
            xmsg = "read() called after end-of-output"
            raise StreamClosedError(xmsg)

        if self.state is StreamState.START:
            self.state = StreamState.BODY
            return self.templates.header

        if self.state is StreamState.BODY:
            record = self.graph.next_pending()
            if record is not None:
                try:
                    return self._add_file(record)
                except BundleError as e:
                    self._fail(e)
                    return ""
            self.state = StreamState.END
            return self.templates.footer

        if self.state is StreamState.ERRORED:
            # error first, end-of-output last
            self._deliver_error()

        self.state = StreamState.CLOSED
        return None

    def _add_file(self, record: ModuleRecord) -> str:
        logger = get_app_logger()
        logger.trace(f"[stream] #{record.id} {record.path}")

        try:
            source = record.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise BundleIOError(record.path, str(e)) from e

        outcome = self._rewriter.rewrite(record, source)
        for addon in outcome.addons:
            self.diagnostics.record_addon(addon)
        for unresolved in outcome.unresolved:
            self.diagnostics.record_unresolved(unresolved.parent, unresolved.module)

        self.graph.mark_processed(record.id)
        return self.templates.wrap(record.id, record.path, outcome.text)

    # --- error signal ------------------------------------------------------------

    def add_error_listener(self, listener: ErrorListener) -> None:
        self._error_listeners.append(listener)

    def _fail(self, error: BundleError) -> None:
        logger = get_app_logger()
        logger.debug("Bundling stopped: %s", error)
        self.error = error
        self.state = StreamState.ERRORED
        self._listeners_pending = True

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        loop.call_soon(self._deliver_error)

    def _deliver_error(self) -> None:
        """Run the error listeners once.

        Called by the scheduled loop turn or by the next pull, whichever
        comes first.
        """
        if not self._listeners_pending or self.error is None:
            return
        self._listeners_pending = False
        for listener in self._error_listeners:
            listener(self.error)

    # --- consumers ------------------------------------------------------------------

    def __iter__(self) -> Iterator[str]:
        while self.state is not StreamState.CLOSED:
            chunk = self.read()
            if chunk is None:
                break
            if chunk:
                yield chunk
        if self.error is not None:
            raise self.error

    def __aiter__(self) -> AsyncIterator[str]:
        return self._aiter()

    async def _aiter(self) -> AsyncIterator[str]:
        while self.state is not StreamState.CLOSED:
            # each pull happens on its own turn of the event loop
            await asyncio.sleep(0)
            chunk = self.read()
            if chunk is None:
                break
            if chunk:
                yield chunk
        if self.error is not None:
            raise self.error

    def write_to(self, fp: TextIO) -> int:
        """Drain the stream into `fp`; returns the number of characters written."""
        written = 0
        for chunk in self:
            written += fp.write(chunk)
        return written

    # --- stats ----------------------------------------------------------------------

    def get_stats(self) -> BundleStats:
        """Files, excluded add-ons and unresolved modules of the finished bundle.

        Raises:
            IncompleteStateError: if called before every file was processed.
        """
        return self.diagnostics.snapshot(self.graph)
