"""Surface language registry."""

from __future__ import annotations

from pydantic import BaseModel

from . import constants


class UnsupportedLanguageError(ValueError):
    """Raised when a language has no registry entry or no transpile path."""


class LanguageSpec(BaseModel):
    key: str
    name: str
    version: str
    keywords: tuple[str, ...] = ()
    host_native: bool = False
    transpilable: bool = False

    @property
    def visualizable(self) -> bool:
        return self.host_native or self.transpilable


LANGUAGES: dict[str, LanguageSpec] = {
    constants.LANG_JAVASCRIPT: LanguageSpec(
        key=constants.LANG_JAVASCRIPT,
        name="JavaScript",
        version="18.15.0",
        keywords=constants.HOST_KEYWORDS,
        host_native=True,
    ),
    constants.LANG_CPP: LanguageSpec(
        key=constants.LANG_CPP,
        name="C++",
        version="10.2.0",
        keywords=(
            "int", "float", "double", "char", "void", "return", "cout", "cin",
            "if", "else", "for", "while", "class", "struct", "public", "private",
            "include", "std", "vector", "string", "map", "unordered_map",
        ),
        transpilable=True,
    ),
    constants.LANG_JAVA: LanguageSpec(
        key=constants.LANG_JAVA,
        name="Java",
        version="15.0.2",
        keywords=(
            "public", "static", "void", "main", "class", "int", "String",
            "System", "out", "println", "if", "else", "for", "while", "new",
            "return", "extends", "implements", "ArrayList", "HashMap",
        ),
        transpilable=True,
    ),
    constants.LANG_PYTHON: LanguageSpec(
        key=constants.LANG_PYTHON,
        name="Python",
        version="3.10.0",
        keywords=(
            "def", "return", "print", "if", "else", "elif", "for", "in",
            "range", "class", "import", "from", "as", "pass", "break", "continue",
        ),
    ),
}

SUPPORTED_LANGUAGES: tuple[str, ...] = tuple(LANGUAGES.keys())


def get_language(key: str) -> LanguageSpec:
    """Look up *key* in the registry.

    Raises ``UnsupportedLanguageError`` if *key* is not registered.
    """
    spec = LANGUAGES.get(key)
    if spec is None:
        raise UnsupportedLanguageError(f"Unsupported language: {key}")
    return spec


def is_visualizable(key: str) -> bool:
    spec = LANGUAGES.get(key)
    return spec is not None and spec.visualizable
