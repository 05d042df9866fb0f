"""Structure Analyzer — coarse loop-nesting complexity estimate and function outline.

The classification is a textual heuristic, not a complexity analysis: it does
not see recursion depth, amortized behaviour or data-dependent bounds, and the
brace counting misfires on multi-statement lines or unusual formatting.  Treat
the result as advisory.
"""

from __future__ import annotations

import logging
import re
from enum import Enum

from pydantic import BaseModel

from . import constants

logger = logging.getLogger(__name__)


class ComplexityClass(str, Enum):
    CONSTANT = "O(1)"
    LOGARITHMIC = "O(log n)"
    LINEAR = "O(n)"
    QUADRATIC = "O(n²)"
    CUBIC = "O(n³)"


NESTING_TO_COMPLEXITY: dict[int, ComplexityClass] = {
    0: ComplexityClass.CONSTANT,
    1: ComplexityClass.LINEAR,
    2: ComplexityClass.QUADRATIC,
}

LOOP_KEYWORD = re.compile(r"^(?:for|while)\b")

MULTIPLICATIVE_UPDATE = re.compile(
    r"(?:\*=|/=|<<=|>>=)"
    r"|\b(\w+)\s*(?<![=!<>])=(?!=)\s*\1\s*[*/]"
)

DECLARING_KEYWORDS: tuple[str, ...] = (
    "function",
    "def",
    "void",
    "int",
    "long",
    "float",
    "double",
    "bool",
    "boolean",
    "char",
    "string",
    "String",
    "auto",
    "vector",
)

FUNCTION_DECLARATION = re.compile(
    rf"\b(?:{'|'.join(DECLARING_KEYWORDS)})\b(?:\s*\[\s*\])*[\s*&]+([A-Za-z_]\w*)\s*\("
)


class FunctionEntry(BaseModel):
    name: str
    line: int


class StructureReport(BaseModel):
    complexity: ComplexityClass = ComplexityClass.CONSTANT
    max_nesting: int = 0
    functions: list[FunctionEntry] = []

    def function_names(self) -> list[str]:
        return [f.name for f in self.functions]


def classify_nesting(max_nesting: int) -> ComplexityClass:
    return NESTING_TO_COMPLEXITY.get(max_nesting, ComplexityClass.CUBIC)


class StructureAnalyzer:
    """Single top-to-bottom scan tracking loop nesting and declared functions."""

    def __init__(self, indentation_scoped: bool = False):
        self._indentation_scoped = indentation_scoped
        self.current_nesting = 0
        self.max_nesting = 0
        self.logarithmic = False
        self.functions: list[FunctionEntry] = []
        self._loop_indents: list[int] = []

    def scan(self, source: str) -> StructureReport:
        for lineno, line in enumerate(source.split("\n"), start=1):
            self._visit_line(lineno, line)
        complexity = (
            ComplexityClass.LOGARITHMIC
            if self.logarithmic
            else classify_nesting(self.max_nesting)
        )
        return StructureReport(
            complexity=complexity,
            max_nesting=self.max_nesting,
            functions=self.functions,
        )

    def _visit_line(self, lineno: int, line: str):
        trimmed = line.strip()
        if self._indentation_scoped and trimmed:
            self._close_dedented_loops(len(line) - len(line.lstrip()))

        if LOOP_KEYWORD.match(trimmed):
            self.current_nesting += 1
            self.max_nesting = max(self.max_nesting, self.current_nesting)
            if self._indentation_scoped:
                self._loop_indents.append(len(line) - len(line.lstrip()))
            if MULTIPLICATIVE_UPDATE.search(trimmed):
                self.logarithmic = True

        if (
            not self._indentation_scoped
            and "}" in trimmed
            and "{" not in trimmed
            and self.current_nesting > 0
        ):
            self.current_nesting -= 1

        match = FUNCTION_DECLARATION.search(line)
        if match:
            self.functions.append(FunctionEntry(name=match.group(1), line=lineno))

    def _close_dedented_loops(self, indent: int):
        while self._loop_indents and indent <= self._loop_indents[-1]:
            self._loop_indents.pop()
            self.current_nesting -= 1


def analyze(source: str, language: str | None = None) -> StructureReport:
    """Estimate loop nesting, complexity class and declared functions of *source*."""
    analyzer = StructureAnalyzer(indentation_scoped=language == constants.LANG_PYTHON)
    report = analyzer.scan(source)
    logger.debug(
        "analyze: nesting=%d complexity=%s functions=%s",
        report.max_nesting,
        report.complexity.value,
        report.function_names(),
    )
    return report
