"""Shell session package."""

from .common import CommandContext, CommandResult, ExitRequest
from .core import Shell

__all__ = ["Shell", "CommandResult", "CommandContext", "ExitRequest"]
