"""SurfaceRuleset — language-agnostic textual rewrite infrastructure."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

logger = logging.getLogger(__name__)

Replacement = Union[str, Callable[[re.Match], str]]


class RewritePass(str, Enum):
    """Rewrite passes, declared in the order the transpiler applies them."""

    HEADERS = "headers"
    MODIFIERS = "modifiers"
    GENERICS = "generics"
    INITIALIZERS = "initializers"
    ALLOCATIONS = "allocations"
    SIGNATURES = "signatures"
    DECLARATIONS = "declarations"
    METHOD_CALLS = "method_calls"
    CLEANUP = "cleanup"


PASS_ORDER: tuple[RewritePass, ...] = tuple(RewritePass)


@dataclass(frozen=True)
class RewriteRule:
    """A single pattern → replacement row.

    ``fixed_point`` rules are re-applied until the text stops changing;
    ``count`` limits the number of substitutions per application (0 = all).
    """

    name: str
    pattern: re.Pattern
    replace: Replacement
    fixed_point: bool = False
    count: int = 0

    def apply(self, text: str) -> str:
        if not self.fixed_point:
            return self.pattern.sub(self.replace, text, count=self.count)
        previous = None
        while previous != text:
            previous = text
            text = self.pattern.sub(self.replace, text, count=self.count)
        return text


def rule(
    name: str,
    pattern: str,
    replace: Replacement,
    *,
    flags: int = 0,
    fixed_point: bool = False,
    count: int = 0,
) -> RewriteRule:
    return RewriteRule(
        name=name,
        pattern=re.compile(pattern, flags),
        replace=replace,
        fixed_point=fixed_point,
        count=count,
    )


def _alternation(words: tuple[str, ...]) -> str:
    # Longest first so `long long` style prefixes never shadow a longer keyword.
    return "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))


def _braces_to_brackets(match: re.Match) -> str:
    name, content = match.group(1), match.group(2)
    return f"{name} = {content.replace('{', '[').replace('}', ']')};"


def _untyped_params(params: str) -> str:
    """Reduce ``int a, String[] b, vector& c`` to ``a, b, c``."""
    names: list[str] = []
    for param in params.split(","):
        identifiers = re.findall(r"[A-Za-z_]\w*", param)
        if not identifiers or identifiers == ["void"]:
            continue
        names.append(identifiers[-1])
    return ", ".join(names)


class SurfaceRuleset:
    """Base class for per-language rewrite rulesets.

    Subclasses override the class-level tables; the rule construction below
    turns those tables into ordered ``RewriteRule`` rows, so adding a surface
    language means adding rows rather than code paths.
    """

    # ── overridable tables ───────────────────────────────────────

    LANGUAGE: str = ""

    TYPE_KEYWORDS: tuple[str, ...] = (
        "void",
        "int",
        "float",
        "double",
        "bool",
        "boolean",
        "char",
        "string",
        "String",
        "vector",
        "ArrayList",
        "List",
        "Map",
        "HashMap",
        "set",
        "queue",
        "stack",
        "long",
        "short",
        "auto",
    )

    MODIFIERS: tuple[str, ...] = (
        "public",
        "private",
        "protected",
        "static",
        "final",
        "volatile",
        "const",
    )

    HEADER_PATTERNS: tuple[str, ...] = ()

    CAST_TYPES: tuple[str, ...] = ("int", "long", "short", "double", "float", "char")

    # (name, pattern, replacement) rows applied at the head of ALLOCATIONS.
    ALLOCATION_TABLE: tuple[tuple[str, str, Replacement], ...] = ()

    # (name, pattern, replacement) rows for idiomatic calls and I/O.
    METHOD_TABLE: tuple[tuple[str, str, Replacement], ...] = ()

    SIGNATURE_SUFFIX: str = ""

    UNWRAP_ENTRY_CLASS: bool = False

    # ── construction ─────────────────────────────────────────────

    def __init__(self):
        self._types = _alternation(self.TYPE_KEYWORDS)
        self._passes: dict[RewritePass, tuple[RewriteRule, ...]] = {
            RewritePass.HEADERS: self._header_rules(),
            RewritePass.MODIFIERS: self._modifier_rules(),
            RewritePass.GENERICS: self._generic_rules(),
            RewritePass.INITIALIZERS: self._initializer_rules(),
            RewritePass.ALLOCATIONS: self._allocation_rules(),
            RewritePass.SIGNATURES: self._signature_rules(),
            RewritePass.DECLARATIONS: self._declaration_rules(),
            RewritePass.METHOD_CALLS: self._method_rules(),
            RewritePass.CLEANUP: self._cleanup_rules(),
        }

    def rules_for(self, rewrite_pass: RewritePass) -> tuple[RewriteRule, ...]:
        return self._passes[rewrite_pass]

    def all_rules(self) -> list[RewriteRule]:
        return [r for p in PASS_ORDER for r in self._passes[p]]

    # ── per-pass rule builders ───────────────────────────────────

    def _header_rules(self) -> tuple[RewriteRule, ...]:
        return tuple(
            rule(f"header_{i}", pattern, "", flags=re.MULTILINE)
            for i, pattern in enumerate(self.HEADER_PATTERNS)
        )

    def _modifier_rules(self) -> tuple[RewriteRule, ...]:
        return (
            rule("modifiers", rf"\b(?:{_alternation(self.MODIFIERS)})\b\s*", ""),
        )

    def _generic_rules(self) -> tuple[RewriteRule, ...]:
        # Innermost angle group glued to a type name; contents restricted to
        # type-argument characters so `i < n; i++) { ... >` is left alone.
        return (
            rule(
                "generics",
                r"(?<=[\w>])\s?<[\w\s,.:?\[\]*]*>",
                "",
                fixed_point=True,
            ),
        )

    def _initializer_rules(self) -> tuple[RewriteRule, ...]:
        return (
            rule(
                "aggregate_initializer",
                r"(\w+)\s*(?:\[[^\]\n]*\]\s*)*=\s*(\{[\s\S]*?\})\s*;",
                _braces_to_brackets,
            ),
        )

    def _allocation_rules(self) -> tuple[RewriteRule, ...]:
        types = self._types
        table = tuple(
            rule(name, pattern, replacement)
            for name, pattern, replacement in self.ALLOCATION_TABLE
        )
        return table + (
            rule(
                "fixed_array_2d",
                rf"\b(?:{types})\s+(\w+)\s*\[([^\]]+)\]\s*\[([^\]]+)\]\s*;",
                r"let \1 = [...Array(\2)].map(() => new Array(\3).fill(0));",
            ),
            rule(
                "fixed_array",
                rf"\b(?:{types})\s+(\w+)\s*\[([^\]]+)\]\s*;",
                r"let \1 = new Array(\2).fill(0);",
            ),
            rule(
                "new_array_2d",
                rf"new\s+(?:{types})\s*\[([^\]]+)\]\s*\[([^\]]+)\]",
                r"[...Array(\1)].map(() => new Array(\2).fill(0))",
            ),
            rule(
                "new_array",
                rf"new\s+(?:{types})\s*\[([^\]]+)\]",
                r"new Array(\1).fill(0)",
            ),
            rule("unsized_array_name", r"(\w+)\[\]\s*=", r"\1 ="),
            rule(
                "array_type_suffix",
                rf"\b({types})(?:\s*\[\s*\])+\s+(\w+)",
                r"\1 \2",
            ),
        )

    def _signature_rules(self) -> tuple[RewriteRule, ...]:
        types = self._types

        def _to_function(match: re.Match) -> str:
            name, params = match.group(1), match.group(2)
            return f"async function {name}({_untyped_params(params)}) {{"

        return (
            rule(
                "forward_declaration",
                rf"^[ \t]*(?:{types})[\s*&]+\w+\s*\([^)]*\)\s*;[ \t]*$",
                "",
                flags=re.MULTILINE,
            ),
            rule(
                "typed_function",
                rf"\b(?:{types})(?:\s*\[\s*\])*[\s*&]+(\w+)\s*\(([^)]*)\)"
                rf"{self.SIGNATURE_SUFFIX}\s*\{{",
                _to_function,
            ),
        )

    def _declaration_rules(self) -> tuple[RewriteRule, ...]:
        types = self._types
        return (
            rule(
                "numeric_cast",
                rf"\(\s*(?:{_alternation(self.CAST_TYPES)})\s*\)\s*",
                "",
            ),
            rule(
                "range_for",
                rf"for\s*\(\s*(?:{types})[\s*&]+(\w+)\s*:\s*([^)]+)\)",
                r"for (let \1 of \2)",
            ),
            rule(
                "typed_declaration",
                rf"\b(?:(?:{types})\b[\s*&]*)+(?=[A-Za-z_]\w*\s*(?:=|;|,|\)|\[))",
                "let ",
            ),
        )

    def _method_rules(self) -> tuple[RewriteRule, ...]:
        return tuple(
            rule(name, pattern, replacement)
            for name, pattern, replacement in self.METHOD_TABLE
        )

    def _cleanup_rules(self) -> tuple[RewriteRule, ...]:
        return (
            rule("arrow_member", r"->", "."),
            rule("null_pointer", r"\b(?:nullptr|NULL)\b", "null"),
            rule(
                "pointer_sigils",
                r"(^|[(,=;{}!]|\breturn\b)([ \t]*)[*&]+(?=[ \t]*[A-Za-z_(])",
                r"\1\2",
                flags=re.MULTILINE,
            ),
        )
