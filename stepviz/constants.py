"""Named constants shared by every pipeline stage."""

from __future__ import annotations

HOST_LANGUAGE = "javascript"

LANG_JAVASCRIPT = "javascript"
LANG_CPP = "cpp"
LANG_JAVA = "java"
LANG_PYTHON = "python"

ENTRY_FUNCTION_NAME = "main"
STEP_CALLBACK_NAME = "step"

MAX_SAFE_INTEGER = 2**53 - 1

# Headroom for deeply recursive programs; each HostLang call nests about a
# dozen Python frames, so this allows a few thousand HostLang frames.
HOST_RECURSION_LIMIT = 30_000
HOST_THREAD_STACK_BYTES = 512 * 1024 * 1024

HOST_KEYWORDS: tuple[str, ...] = (
    "function",
    "return",
    "console",
    "const",
    "let",
    "var",
    "if",
    "else",
    "for",
    "while",
    "do",
    "switch",
    "case",
    "break",
    "continue",
    "class",
    "extends",
    "import",
    "export",
    "default",
    "async",
    "await",
    "new",
    "this",
    "try",
    "catch",
    "finally",
    "throw",
    "typeof",
    "of",
    "in",
)

# Names the runtime hands to every program; never worth snapshotting.
RUNTIME_NAMES: tuple[str, ...] = (
    "console",
    STEP_CALLBACK_NAME,
    "Math",
    "Array",
    "Map",
    "Set",
    "Object",
    "Number",
    "String",
    "Boolean",
    "JSON",
    "parseInt",
    "parseFloat",
    "isNaN",
    "push",
    "length",
    "fill",
    "map",
    "shift",
    "undefined",
    "null",
    "true",
    "false",
    "NaN",
    "Infinity",
)

RESERVED_IDENTIFIERS: frozenset[str] = frozenset(HOST_KEYWORDS + RUNTIME_NAMES)

SIMULATION_ERROR_PREFIX = "Sim Error: "
EMPTY_TRACE_MESSAGE = "No steps captured. Ensure code is valid."
UNSUPPORTED_LANGUAGE_TEMPLATE = "Visualization is not supported for {name} yet."

CAPTURE_MARKER_TEMPLATE = "/* capture: step({line}, scope) */"
