"""Snapshot — deep, JSON-safe copies of HostLang values at a capture point."""

from __future__ import annotations

import logging
import math
from typing import Any

from . import constants
from .host.errors import HostError
from .host.values import UNDEFINED, BigInt, JSMap, JSSet, is_callable

logger = logging.getLogger(__name__)


class SnapshotCycleError(ValueError):
    """The value reaches itself; it has no finite JSON form."""


def _snapshot_number(value: Any) -> Any:
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer() and abs(value) > constants.MAX_SAFE_INTEGER:
            return str(int(value))
        return value
    if abs(value) > constants.MAX_SAFE_INTEGER:
        return str(value)
    return value


def snapshot_value(value: Any, _active: frozenset[int] = frozenset()) -> Any:
    """Return a JSON-representable deep copy of *value*.

    Functions inside objects are dropped and become ``None`` inside arrays;
    ``BigInt`` and integers beyond the safe range become decimal strings.
    Raises ``SnapshotCycleError`` if *value* contains itself.
    """
    if value is UNDEFINED or value is None:
        return None
    if isinstance(value, bool) or isinstance(value, str):
        return value
    if isinstance(value, BigInt):
        return str(int(value))
    if isinstance(value, (int, float)):
        return _snapshot_number(value)
    if is_callable(value):
        return None

    if id(value) in _active:
        raise SnapshotCycleError("Converting circular structure to JSON")
    active = _active | {id(value)}

    if isinstance(value, list):
        return [snapshot_value(item, active) for item in value]
    if isinstance(value, JSSet):
        return [snapshot_value(item, active) for item in value.values()]
    if isinstance(value, JSMap):
        return {
            _map_key(key): snapshot_value(item, active)
            for key, item in value.items()
            if not is_callable(item)
        }
    if isinstance(value, dict):
        return {
            key: snapshot_value(item, active)
            for key, item in value.items()
            if item is not UNDEFINED and not is_callable(item)
        }
    return None


def _map_key(key: Any) -> str:
    from .host.operators import to_display_string

    return to_display_string(key)


def capture_scope(env: Any, candidates: tuple[str, ...]) -> dict[str, Any]:
    """Snapshot every candidate visible from *env*.

    Names that are not in scope, hold functions, or cannot be copied are
    omitted from the result.
    """
    scope: dict[str, Any] = {}
    for name in candidates:
        try:
            value = env.lookup(name)
        except HostError:
            continue
        if is_callable(value):
            continue
        try:
            scope[name] = snapshot_value(value)
        except SnapshotCycleError:
            logger.debug("snapshot: skipping cyclic binding %s", name)
    return scope
