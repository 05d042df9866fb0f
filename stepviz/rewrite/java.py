"""JavaRuleset — Java surface rows."""

from __future__ import annotations

import re

from ._base import SurfaceRuleset
from .. import constants


def _allocated_as(match: re.Match, kinds: tuple[str, ...]) -> bool:
    """True when the receiver in group 1 is bound to ``new <kind>()`` in the program."""
    receiver = match.group(1)
    if not receiver:
        return False
    kind = "|".join(kinds)
    return re.search(rf"\b{re.escape(receiver)}\s*=\s*new\s+(?:{kind})\(", match.string) is not None


def _add_call(match: re.Match) -> str:
    method = "add" if _allocated_as(match, ("Set",)) else "push"
    return f"{match.group(1)}.{method}("


def _size_call(match: re.Match) -> str:
    member = "size" if _allocated_as(match, ("Set", "Map")) else "length"
    return f"{match.group(1)}.{member}"


def _contains_call(match: re.Match) -> str:
    method = "has" if _allocated_as(match, ("Set",)) else "includes"
    return f"{match.group(1)}.{method}("


class JavaRuleset(SurfaceRuleset):
    """Rewrites Java into HostLang."""

    LANGUAGE = constants.LANG_JAVA

    TYPE_KEYWORDS = SurfaceRuleset.TYPE_KEYWORDS + (
        "byte",
        "Integer",
        "Long",
        "Double",
        "Character",
        "Boolean",
        "LinkedList",
        "TreeMap",
        "Deque",
        "Queue",
        "Stack",
        "Set",
        "HashSet",
        "TreeSet",
        "LinkedHashSet",
    )

    MODIFIERS = SurfaceRuleset.MODIFIERS + (
        "abstract",
        "synchronized",
        "transient",
    )

    HEADER_PATTERNS = (
        r"^[ \t]*package\s+[\w.]+\s*;[ \t]*$",
        r"^[ \t]*import\s+(?:static\s+)?[\w.*]+\s*;[ \t]*$",
        r"@\w+(?:\([^)]*\))?",
    )

    ALLOCATION_TABLE = (
        (
            "list_constructor",
            r"new\s+(?:ArrayList|LinkedList|Vector|ArrayDeque|Stack)\s*\(\s*\)",
            "[]",
        ),
        (
            "map_constructor",
            r"new\s+(?:HashMap|TreeMap|LinkedHashMap)\s*\(\s*\)",
            "new Map()",
        ),
        (
            "set_constructor",
            r"new\s+(?:HashSet|TreeSet|LinkedHashSet)\s*\(\s*\)",
            "new Set()",
        ),
    )

    # Collection calls depend on how the receiver was allocated.
    METHOD_TABLE = (
        ("add", r"(\w*)\.add\(", _add_call),
        ("put", r"\.put\(", ".set("),
        ("contains_key", r"\.containsKey\(", ".has("),
        ("contains", r"(\w*)\.contains\(", _contains_call),
        ("size", r"(\w*)\.size\(\)", _size_call),
        ("length", r"\.length\(\)", ".length"),
        ("println", r"\bSystem\.out\.(?:println|print|printf)\((.*)\);", r"console.log(\1);"),
        ("int_max", r"\bInteger\.MAX_VALUE\b", "Number.MAX_SAFE_INTEGER"),
        ("int_min", r"\bInteger\.MIN_VALUE\b", "Number.MIN_SAFE_INTEGER"),
        ("parse_int", r"\bInteger\.parseInt\(", "parseInt("),
        ("value_of", r"\bString\.valueOf\(", "String("),
        ("arrays_to_string", r"\bArrays\.toString\(", "String("),
    )

    SIGNATURE_SUFFIX = r"(?:\s*throws\s+[\w\s,.]+?)?"

    UNWRAP_ENTRY_CLASS = True
