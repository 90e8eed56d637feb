# src/modconcat/constants.py
"""Central constants used across the project."""

# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"
DEFAULT_ENV_WATCH_INTERVAL: str = "WATCH_INTERVAL"

# --- program defaults ---
DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_WATCH_INTERVAL: float = 1.0  # seconds

# --- config defaults ---
DEFAULT_STRICT_CONFIG: bool = True
DEFAULT_DRY_RUN: bool = False
DEFAULT_BROWSER: bool = False
DEFAULT_ALLOW_UNRESOLVED: bool = False

# --- resolution defaults ---
DEFAULT_EXTENSIONS: tuple[str, ...] = (".js", ".json")
# always probed last so native add-ons are detected instead of mis-resolved
NATIVE_EXTENSION: str = ".node"
PACKAGE_MANIFEST: str = "package.json"
VENDOR_DIR: str = "node_modules"

# Modules provided by the Node.js runtime itself; never inlined.
CORE_MODULES: frozenset[str] = frozenset(
    {
        "assert",
        "assert/strict",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "dns/promises",
        "domain",
        "events",
        "fs",
        "fs/promises",
        "http",
        "http2",
        "https",
        "inspector",
        "module",
        "net",
        "os",
        "path",
        "path/posix",
        "path/win32",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "readline/promises",
        "repl",
        "stream",
        "stream/promises",
        "stream/web",
        "string_decoder",
        "sys",
        "timers",
        "timers/promises",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "util/types",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    }
)
CORE_MODULE_PREFIX: str = "node:"
