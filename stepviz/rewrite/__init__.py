"""Per-language textual rewrite rulesets for surface → HostLang transpilation."""

from __future__ import annotations

import importlib

from ._base import PASS_ORDER, RewritePass, RewriteRule, SurfaceRuleset
from ..languages import UnsupportedLanguageError

# Lazy imports to avoid building every ruleset at startup
_RULESET_CLASSES: dict[str, str] = {
    "cpp": "cpp.CppRuleset",
    "java": "java.JavaRuleset",
}

_CACHE: dict[str, SurfaceRuleset] = {}


def get_ruleset(language: str) -> SurfaceRuleset:
    """Return the (cached) ruleset for *language*.

    Raises ``UnsupportedLanguageError`` if *language* has no transpile path.
    """
    if language in _CACHE:
        return _CACHE[language]
    spec = _RULESET_CLASSES.get(language)
    if spec is None:
        raise UnsupportedLanguageError(f"No transpile path for language: {language}")
    module_name, class_name = spec.split(".")
    mod = importlib.import_module(f".{module_name}", package=__package__)
    ruleset = getattr(mod, class_name)()
    _CACHE[language] = ruleset
    return ruleset


TRANSPILABLE_LANGUAGES: tuple[str, ...] = tuple(_RULESET_CLASSES.keys())

__all__ = [
    "PASS_ORDER",
    "RewritePass",
    "RewriteRule",
    "SurfaceRuleset",
    "get_ruleset",
    "TRANSPILABLE_LANGUAGES",
]
