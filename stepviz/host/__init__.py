"""HostLang evaluator: values, scopes, operators, builtins and the interpreter.

``HostInterpreter`` lives in ``stepviz.host.interpreter``; it is not imported
here so that ``stepviz.snapshot`` can depend on the value types alone.
"""

from .errors import (
    HostError,
    HostRangeError,
    HostReferenceError,
    HostSyntaxError,
    HostThrow,
    HostTypeError,
)
from .values import UNDEFINED, BigInt, JSFunction, JSMap, JSSet, NativeFunction

__all__ = [
    "HostError",
    "HostRangeError",
    "HostReferenceError",
    "HostSyntaxError",
    "HostThrow",
    "HostTypeError",
    "UNDEFINED",
    "BigInt",
    "JSFunction",
    "JSMap",
    "JSSet",
    "NativeFunction",
]
