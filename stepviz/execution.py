"""Remote execution request — the payload a sandboxed run service receives.

This pipeline is independent of visualization: the original surface source is
sent verbatim, never the transpiled HostLang program.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel

from . import constants
from .languages import get_language

logger = logging.getLogger(__name__)

REMOTE_LANGUAGE_IDS: dict[str, str] = {constants.LANG_CPP: "c++"}

ENTRY_FILE_NAMES: dict[str, str] = {constants.LANG_JAVA: "Main.java"}

ASYNC_USAGE = re.compile(r"\b(?:await|async)\b")

ASYNC_WRAPPER_TEMPLATE = "(async () => {{\n{code}\n}})();"


class ExecutionFile(BaseModel):
    name: str | None = None
    content: str


class ExecutionRequest(BaseModel):
    language: str
    version: str
    files: list[ExecutionFile]


def _prepare_content(source: str, language: str) -> str:
    if language == constants.LANG_JAVASCRIPT and ASYNC_USAGE.search(source):
        return ASYNC_WRAPPER_TEMPLATE.format(code=source)
    return source


def build_execution_request(source: str, language: str) -> ExecutionRequest:
    """Build the remote run payload for *source*.

    Raises ``UnsupportedLanguageError`` if *language* is not registered.
    """
    spec = get_language(language)
    request = ExecutionRequest(
        language=REMOTE_LANGUAGE_IDS.get(language, language),
        version=spec.version,
        files=[
            ExecutionFile(
                name=ENTRY_FILE_NAMES.get(language),
                content=_prepare_content(source, language),
            )
        ],
    )
    logger.info("Execution request for %s %s", request.language, request.version)
    return request
