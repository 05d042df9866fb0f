"""HostLang runtime value types (pure data, no evaluation logic).

Primitive HostLang values map onto Python values: numbers are ``int`` /
``float``, strings are ``str``, booleans are ``bool``, ``null`` is ``None``.
Arrays are Python ``list`` and plain objects are ``dict`` so that reference
identity behaves the way HostLang programs expect.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable


class _Undefined:
    """Singleton for HostLang ``undefined``."""

    _instance: "_Undefined | None" = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


class BigInt(int):
    """Arbitrary-precision integer literal (``123n``)."""

    def __repr__(self) -> str:
        return f"{int(self)}n"


@dataclass(eq=False)
class JSFunction:
    """A user-defined function closed over its defining environment."""

    name: str
    params: Any  # formal_parameters node, or a lone identifier for `x => ...`
    body: Any  # statement_block node, or an expression node for arrow bodies
    closure: Any  # Environment
    is_async: bool = False
    is_arrow: bool = False
    line: int = 0

    def __repr__(self) -> str:
        return f"<function {self.name or '(anonymous)'}>"


@dataclass(eq=False)
class NativeFunction:
    """A runtime-provided function.

    ``impl(interpreter, this, args)`` returns the result directly.  With
    ``is_generator`` set it is a generator that may call back into HostLang
    functions, returning its result via ``StopIteration``.
    """

    name: str
    impl: Callable[..., Any]
    is_generator: bool = False
    constructor: Callable[..., Any] | None = None
    properties: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"<native {self.name}>"


def _hash_key(value: Any) -> Any:
    # bool is an int subclass in Python; keep `true` and `1` distinct keys.
    if isinstance(value, bool):
        return ("bool", value)
    if isinstance(value, float) and value != value:
        return ("nan",)
    if isinstance(value, (list, dict, JSMap, JSSet, JSFunction, NativeFunction)):
        return ("ref", id(value))
    return value


@dataclass(eq=False)
class JSMap:
    """Insertion-ordered ``Map``; keys compare by HostLang SameValueZero."""

    entries: dict[Any, tuple[Any, Any]] = field(default_factory=dict)

    def get(self, key: Any, default: Any = None) -> Any:
        entry = self.entries.get(_hash_key(key))
        return default if entry is None else entry[1]

    def set(self, key: Any, value: Any):
        self.entries[_hash_key(key)] = (key, value)

    def has(self, key: Any) -> bool:
        return _hash_key(key) in self.entries

    def delete(self, key: Any) -> bool:
        return self.entries.pop(_hash_key(key), None) is not None

    def items(self) -> list[tuple[Any, Any]]:
        return list(self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(eq=False)
class JSSet:
    """Insertion-ordered ``Set`` with the same key semantics as ``JSMap``."""

    members: dict[Any, Any] = field(default_factory=dict)

    def add(self, value: Any):
        self.members.setdefault(_hash_key(value), value)

    def has(self, value: Any) -> bool:
        return _hash_key(value) in self.members

    def delete(self, value: Any) -> bool:
        key = _hash_key(value)
        if key not in self.members:
            return False
        del self.members[key]
        return True

    def values(self) -> list[Any]:
        return list(self.members.values())

    def __len__(self) -> int:
        return len(self.members)


def is_callable(value: Any) -> bool:
    return isinstance(value, (JSFunction, NativeFunction))
