"""HostLang runtime errors."""

from __future__ import annotations

from typing import Any


class HostError(Exception):
    """An error raised by the running HostLang program.

    ``name`` mirrors the HostLang error constructor (``TypeError`` etc.) so
    messages read the way the program's author expects.
    """

    name: str = "Error"

    def __init__(self, message: str, line: int = 0):
        super().__init__(message)
        self.message = message
        self.line = line

    def describe(self) -> str:
        return f"{self.name}: {self.message}"


class HostTypeError(HostError):
    name = "TypeError"


class HostReferenceError(HostError):
    name = "ReferenceError"


class HostRangeError(HostError):
    name = "RangeError"


class HostSyntaxError(HostError):
    name = "SyntaxError"


class HostThrow(HostError):
    """A value thrown by a ``throw`` statement and not caught by the program."""

    def __init__(self, value: Any, line: int = 0):
        from .operators import to_display_string

        super().__init__(to_display_string(value), line)
        self.value = value
        if isinstance(value, dict) and isinstance(value.get("name"), str):
            self.name = value["name"]
            self.message = str(value.get("message", ""))
        else:
            self.name = "Uncaught"

    def describe(self) -> str:
        if self.name == "Uncaught":
            return f"Uncaught {self.message}"
        return f"{self.name}: {self.message}"
