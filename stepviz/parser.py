"""Tree-sitter parsing for HostLang programs."""

from __future__ import annotations

import logging
import threading
from functools import lru_cache

import tree_sitter_language_pack as tslp

from . import constants

logger = logging.getLogger(__name__)

# Runs advance on worker threads; the shared parser takes one document at a time.
_parse_lock = threading.Lock()


@lru_cache(maxsize=None)
def host_parser():
    """The shared tree-sitter parser for the host grammar."""
    logger.debug("Loading tree-sitter grammar for %s", constants.HOST_LANGUAGE)
    return tslp.get_parser(constants.HOST_LANGUAGE)


def parse_host(source: str):
    with _parse_lock:
        return host_parser().parse(source.encode("utf-8"))


def first_error(node):
    """First ERROR or missing node under *node* in document order, or None."""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = first_error(child)
            if found is not None:
                return found
    return None
