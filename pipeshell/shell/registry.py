"""Registry for builtin commands."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Iterable

from .common import ShellCommand


@dataclass(slots=True)
class CommandSpec:
    name: str
    handler: ShellCommand
    description: str = ""


class CommandRegistry:
    """Name-keyed table of builtin handlers."""

    def __init__(self) -> None:
        self._commands: dict[str, CommandSpec] = {}

    def register(
        self,
        name: str,
        handler: ShellCommand,
        *,
        description: str = "",
    ) -> ShellCommand:
        self._commands[name] = CommandSpec(name, handler, description)
        return handler

    def command(
        self,
        name: str,
        *,
        description: str = "",
    ) -> Callable[[ShellCommand], ShellCommand]:
        """Decorator variant for registering builtins."""

        def decorator(func: ShellCommand) -> ShellCommand:
            return self.register(name, func, description=description)

        return decorator

    def resolve(self, name: str) -> ShellCommand | None:
        spec = self._commands.get(name)
        return spec.handler if spec else None

    def describe(self, name: str) -> str:
        spec = self._commands.get(name)
        return spec.description if spec else ""

    def names(self) -> list[str]:
        return sorted(self._commands)

    def iter_commands(self) -> Iterable[CommandSpec]:
        return tuple(self._commands.values())

    def copy(self) -> "CommandRegistry":
        clone = CommandRegistry()
        for spec in self.iter_commands():
            clone.register(spec.name, spec.handler, description=spec.description)
        return clone


COMMAND_REGISTRY = CommandRegistry()


__all__ = ["COMMAND_REGISTRY", "CommandRegistry", "CommandSpec"]
