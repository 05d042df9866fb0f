"""Lexical scope chain with explicit bindings."""

from __future__ import annotations

from typing import Any

from .errors import HostReferenceError, HostTypeError

KIND_LET = "let"
KIND_CONST = "const"
KIND_VAR = "var"
KIND_FUNCTION = "function"
KIND_PARAM = "param"


class Environment:
    """One lexical scope.

    ``function_scope`` marks the scope that owns ``var`` declarations (a
    function body or the program itself).
    """

    def __init__(self, parent: "Environment | None" = None, function_scope: bool = False):
        self.parent = parent
        self.function_scope = function_scope or parent is None
        self.bindings: dict[str, Any] = {}
        self.kinds: dict[str, str] = {}

    def child(self, function_scope: bool = False) -> "Environment":
        return Environment(self, function_scope=function_scope)

    def declare(self, name: str, value: Any, kind: str = KIND_LET):
        target = self._var_scope() if kind == KIND_VAR else self
        target.bindings[name] = value
        target.kinds[name] = kind

    def _var_scope(self) -> "Environment":
        env = self
        while not env.function_scope and env.parent is not None:
            env = env.parent
        return env

    def _resolve(self, name: str) -> "Environment | None":
        env: Environment | None = self
        while env is not None:
            if name in env.bindings:
                return env
            env = env.parent
        return None

    def has(self, name: str) -> bool:
        return self._resolve(name) is not None

    def lookup(self, name: str) -> Any:
        env = self._resolve(name)
        if env is None:
            raise HostReferenceError(f"{name} is not defined")
        return env.bindings[name]

    def assign(self, name: str, value: Any):
        env = self._resolve(name)
        if env is None:
            # Sloppy-mode implicit global.
            self.root().declare(name, value, KIND_VAR)
            return
        if env.kinds.get(name) == KIND_CONST:
            raise HostTypeError("Assignment to constant variable.")
        env.bindings[name] = value

    def root(self) -> "Environment":
        env = self
        while env.parent is not None:
            env = env.parent
        return env

    def snapshot_let_bindings(self) -> "Environment":
        """Copy this scope's bindings into a sibling scope (per-iteration loop env)."""
        copy = Environment(self.parent, function_scope=self.function_scope)
        copy.bindings = dict(self.bindings)
        copy.kinds = dict(self.kinds)
        return copy
