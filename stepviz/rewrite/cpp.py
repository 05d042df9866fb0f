"""CppRuleset — C++ surface rows."""

from __future__ import annotations

import re

from ._base import SurfaceRuleset
from .. import constants


def _cout_to_log(match: re.Match) -> str:
    parts = [p.strip() for p in match.group(1).split("<<")]
    args = [p for p in parts if p and p not in ("endl", '"\\n"', "'\\n'")]
    return f"console.log({', '.join(args)});"


class CppRuleset(SurfaceRuleset):
    """Rewrites C++ into HostLang."""

    LANGUAGE = constants.LANG_CPP

    TYPE_KEYWORDS = SurfaceRuleset.TYPE_KEYWORDS + (
        "size_t",
        "unordered_map",
        "map",
        "pair",
        "deque",
    )

    MODIFIERS = SurfaceRuleset.MODIFIERS + (
        "inline",
        "constexpr",
        "unsigned",
        "signed",
        "mutable",
        "virtual",
    )

    HEADER_PATTERNS = (
        r"^[ \t]*#\s*include\s*[<\"].*?[>\"][ \t]*$",
        r"^[ \t]*using\s+namespace\s+\w+\s*;[ \t]*$",
        r"\bstd::",
    )

    ALLOCATION_TABLE = (
        (
            "vector_2d",
            r"\bvector\s+(\w+)\s*\(([^,()]+),\s*vector\s*\(([^,()]+),([^()]+)\)\s*\)\s*;",
            r"let \1 = [...Array(\2)].map(() => new Array(\3).fill(\4));",
        ),
        (
            "vector_sized_fill",
            r"\bvector\s+(\w+)\s*\(([^,()]+),([^()]+)\)\s*;",
            r"let \1 = new Array(\2).fill(\3);",
        ),
        (
            "vector_sized",
            r"\bvector\s+(\w+)\s*\(([^,()]+)\)\s*;",
            r"let \1 = new Array(\2).fill(0);",
        ),
        ("vector_empty", r"\bvector\s+(\w+)\s*;", r"let \1 = [];"),
        ("map_empty", r"\b(?:unordered_)?map\s+(\w+)\s*;", r"let \1 = new Map();"),
    )

    METHOD_TABLE = (
        ("push_back", r"\.(?:push_back|emplace_back)\(", ".push("),
        ("pop_back", r"\.pop_back\(\)", ".pop()"),
        ("size", r"\.size\(\)", ".length"),
        ("length", r"\.length\(\)", ".length"),
        ("empty", r"\.empty\(\)", ".length === 0"),
        ("cout", r"\bcout\s*<<\s*(.*);", _cout_to_log),
        ("printf", r"\bprintf\(", "console.log("),
        (
            "math_call",
            r"(?<![\w.])(?<!function )(max|min|abs|sqrt|pow|floor|ceil)\(",
            r"Math.\1(",
        ),
    )
