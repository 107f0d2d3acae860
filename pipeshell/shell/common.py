"""Shared shell types."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, BinaryIO

if TYPE_CHECKING:
    from .registry import CommandRegistry


def encode_text(text: str) -> bytes:
    """Encode output text, restoring bytes that arrived as surrogate escapes."""
    return text.encode("utf-8", "surrogateescape")


@dataclass(slots=True)
class CommandResult:
    """Outcome of running one or more input lines."""

    exit_code: int = 0
    stage_statuses: list[int] = field(default_factory=list)
    should_exit: bool = False


@dataclass(frozen=True, slots=True)
class ExitRequest:
    """Returned by ``exit`` to ask the read loop to stop."""

    status: int = 0


@dataclass(slots=True)
class CommandContext:
    """Everything a builtin may touch while it runs."""

    name: str
    stdin: BinaryIO
    stdout: BinaryIO
    stderr: BinaryIO
    env: Mapping[str, str]
    cwd: str
    registry: CommandRegistry | None = None

    def error(self, message: str) -> None:
        self.stderr.write(encode_text(f"{self.name}: {message}\n"))
        self.stderr.flush()


ShellCommand = Callable[[CommandContext, list[str]], int | ExitRequest]


__all__ = ["encode_text", "CommandResult", "CommandContext", "ExitRequest", "ShellCommand"]
