"""Transpiler — applies a surface ruleset in fixed pass order to produce HostLang."""

from __future__ import annotations

import logging
import re

from . import constants
from .rewrite import PASS_ORDER, RewritePass, SurfaceRuleset, get_ruleset

logger = logging.getLogger(__name__)

_ENTRY_CLASS_OPEN = re.compile(r"^[ \t]*class\s+\w+\s*\{[ \t]*\n?", re.MULTILINE)
_TRAILING_BRACE = re.compile(r"\}\s*\Z")


def _unwrap_entry_class(text: str) -> str:
    """Drop the single public wrapper class so its members stand at top level."""
    if not _ENTRY_CLASS_OPEN.search(text):
        return text
    text = _ENTRY_CLASS_OPEN.sub("", text, count=1)
    return _TRAILING_BRACE.sub("", text, count=1).rstrip() + "\n"


def _has_entry_call(text: str, entry: str) -> bool:
    for match in re.finditer(rf"\b{re.escape(entry)}\s*\(", text):
        if not re.search(r"function\s+$", text[: match.start()]):
            return True
    return False


def _append_entry_call(text: str, entry: str = constants.ENTRY_FUNCTION_NAME) -> str:
    declared = re.search(rf"\basync\s+function\s+{re.escape(entry)}\s*\(", text)
    if declared and not _has_entry_call(text, entry):
        return text.rstrip() + f"\nawait {entry}();\n"
    return text


def apply_ruleset(source: str, ruleset: SurfaceRuleset) -> str:
    """Run every pass of *ruleset* over *source* in ``PASS_ORDER``."""
    text = source
    for rewrite_pass in PASS_ORDER:
        for rewrite_rule in ruleset.rules_for(rewrite_pass):
            rewritten = rewrite_rule.apply(text)
            if rewritten != text:
                logger.debug("rule %s rewrote %s pass", rewrite_rule.name, rewrite_pass.value)
            text = rewritten
        if rewrite_pass == RewritePass.CLEANUP:
            if ruleset.UNWRAP_ENTRY_CLASS:
                text = _unwrap_entry_class(text)
            text = _append_entry_call(text)
    return text


def transpile(source: str, language: str) -> str:
    """Rewrite *source* written in *language* into HostLang.

    HostLang-native sources are returned unchanged.  Raises
    ``UnsupportedLanguageError`` for languages with no ruleset.
    """
    if language == constants.HOST_LANGUAGE:
        return source
    ruleset = get_ruleset(language)
    logger.info("Transpiling %d bytes of %s", len(source), language)
    return apply_ruleset(source, ruleset)
