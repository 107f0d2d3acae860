"""pipeshell package: a small shell interpreter with quoting, variables and pipelines."""

from .environment import EnvironmentStore, Overlay
from .exceptions import (
    CommandNotFound,
    FileAccessError,
    LaunchError,
    LexError,
    ShellError,
    ShellSyntaxError,
    UnterminatedQuote,
)
from .shell import CommandContext, CommandResult, ExitRequest, Shell
from .shell.registry import COMMAND_REGISTRY, CommandRegistry

__all__ = [
    "Shell",
    "CommandResult",
    "CommandContext",
    "ExitRequest",
    "CommandRegistry",
    "COMMAND_REGISTRY",
    "EnvironmentStore",
    "Overlay",
    "ShellError",
    "LexError",
    "UnterminatedQuote",
    "ShellSyntaxError",
    "CommandNotFound",
    "LaunchError",
    "FileAccessError",
]
