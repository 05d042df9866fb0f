"""Instrumentation Engine — decides where capture steps go in a HostLang program."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from . import constants

logger = logging.getLogger(__name__)

IDENTIFIER_TOKEN = re.compile(r"\b[a-zA-Z_]\w*\b")
FUNCTION_OPENER = re.compile(r"\bfunction\b|=>")
ASYNC_KEYWORD = re.compile(r"\basync\b")
COMMENT_PREFIXES = ("//", "/*")


def candidate_identifiers(host_source: str) -> tuple[str, ...]:
    """Identifier-shaped tokens of *host_source*, first-seen order, minus reserved names."""
    seen: dict[str, None] = {}
    for match in IDENTIFIER_TOKEN.finditer(host_source):
        token = match.group(0)
        if token not in constants.RESERVED_IDENTIFIERS:
            seen.setdefault(token, None)
    return tuple(seen)


@dataclass(frozen=True)
class InstrumentedProgram:
    """A HostLang program plus the capture plan computed for it.

    ``capture_lines`` are 1-based lines after which a snapshot is taken;
    ``non_suspending_ranges`` are inclusive line ranges inside plain
    (non-``async``) function bodies, which are never captured line by line.
    """

    source: str
    candidates: tuple[str, ...]
    capture_lines: frozenset[int]
    non_suspending_ranges: tuple[tuple[int, int], ...] = ()

    def is_capture_line(self, line: int) -> bool:
        return line in self.capture_lines

    def in_non_suspending_body(self, line: int) -> bool:
        return any(start <= line <= end for start, end in self.non_suspending_ranges)

    def listing(self) -> str:
        """The program with a capture marker after every captured line."""
        out: list[str] = []
        for lineno, line in enumerate(self.source.split("\n"), start=1):
            out.append(line)
            if lineno in self.capture_lines:
                indent = line[: len(line) - len(line.lstrip())]
                out.append(indent + constants.CAPTURE_MARKER_TEMPLATE.format(line=lineno))
        return "\n".join(out)


def _is_capturable(trimmed: str) -> bool:
    return bool(trimmed) and not trimmed.startswith(COMMENT_PREFIXES)


def instrument(host_source: str, candidates: tuple[str, ...] | None = None) -> InstrumentedProgram:
    """Walk *host_source* line by line and plan a capture after each executable line.

    Brace depth is tracked so that lines inside a function body that is not
    declared ``async`` are skipped: such bodies run to completion without
    suspending, so they are observed only at their call site.
    """
    if candidates is None:
        candidates = candidate_identifiers(host_source)

    capture_lines: set[int] = set()
    ranges: list[tuple[int, int]] = []
    brace_level = 0
    in_sync_body = False
    body_start_level = 0
    body_start_line = 0

    for lineno, line in enumerate(host_source.split("\n"), start=1):
        if FUNCTION_OPENER.search(line) and not ASYNC_KEYWORD.search(line) and not in_sync_body:
            in_sync_body = True
            body_start_level = brace_level
            body_start_line = lineno
        brace_level += line.count("{") - line.count("}")
        if in_sync_body and brace_level <= body_start_level:
            in_sync_body = False
            if lineno > body_start_line:
                ranges.append((body_start_line, lineno - 1))

        if _is_capturable(line.strip()) and not in_sync_body:
            capture_lines.add(lineno)

    if in_sync_body:
        ranges.append((body_start_line, lineno))

    logger.info(
        "Instrumented %d capture lines, %d non-suspending bodies, %d candidates",
        len(capture_lines),
        len(ranges),
        len(candidates),
    )
    return InstrumentedProgram(
        source=host_source,
        candidates=tuple(candidates),
        capture_lines=frozenset(capture_lines),
        non_suspending_ranges=tuple(ranges),
    )
