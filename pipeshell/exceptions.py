"""Exception hierarchy for pipeshell."""

from __future__ import annotations


class ShellError(Exception):
    """Base error for the interpreter."""

    exit_code = 1


class LexError(ShellError):
    exit_code = 2


class UnterminatedQuote(LexError):
    def __init__(self, quote: str) -> None:
        super().__init__(f"unterminated quote: {quote}")
        self.quote = quote


class ShellSyntaxError(ShellError):
    exit_code = 2


class CommandNotFound(ShellError):
    exit_code = 127

    def __init__(self, name: str) -> None:
        super().__init__(f"{name}: command not found")
        self.name = name


class LaunchError(ShellError):
    exit_code = 126


class FileAccessError(ShellError):
    """Raised when a builtin cannot open one of its file operands."""


__all__ = [
    "ShellError",
    "LexError",
    "UnterminatedQuote",
    "ShellSyntaxError",
    "CommandNotFound",
    "LaunchError",
    "FileAccessError",
]
