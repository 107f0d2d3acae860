"""Core Shell implementation."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable, Mapping
from typing import BinaryIO

from ..environment import EnvironmentStore
from ..exceptions import LexError, ShellSyntaxError
from ..expander import expand
from ..shell_parser import parse_pipeline
from .common import CommandResult, ShellCommand, encode_text
from .executor import Executor
from .planner import plan_pipeline
from .registry import COMMAND_REGISTRY, CommandRegistry

logger = logging.getLogger(__name__)

DIAGNOSTIC_PREFIX = "pipeshell"


class Shell:
    """Runs input lines as pipelines of builtins and external programs."""

    def __init__(
        self,
        *,
        env: Mapping[str, str] | None = None,
        inherit_env: bool = True,
        cwd: str | None = None,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
        stderr: BinaryIO | None = None,
        external_commands: bool = True,
    ) -> None:
        self.store = EnvironmentStore.from_process() if inherit_env else EnvironmentStore()
        if env:
            self.store.update(env)
        self.cwd = cwd or os.getcwd()
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout.buffer
        self.stderr = stderr if stderr is not None else sys.stderr.buffer
        self.external_commands = external_commands
        self.registry = self._register_builtin_commands()
        self.last_status = 0
        self.executor = Executor(
            stdin=self.stdin,
            stdout=self.stdout,
            stderr=self.stderr,
            cwd=self.cwd,
            registry=self.registry,
        )

    # ------------------------------------------------------------------
    # Command registration
    # ------------------------------------------------------------------
    def register_command(
        self,
        name: str,
        handler: ShellCommand,
        *,
        description: str = "",
    ) -> None:
        self.registry.register(name, handler, description=description)

    def available_commands(self) -> list[str]:
        return self.registry.names()

    def _register_builtin_commands(self) -> CommandRegistry:
        # Import command modules for their side effects (registration)
        from . import commands  # noqa: F401

        return COMMAND_REGISTRY.copy()

    # ------------------------------------------------------------------
    # Dispatcher
    # ------------------------------------------------------------------
    def exec(self, command: str) -> CommandResult:
        return self.run_lines(command.splitlines())

    def run_lines(self, lines: Iterable[str]) -> CommandResult:
        last_result = CommandResult()
        for line in lines:
            if not line.strip():
                continue
            last_result = self.run_line(line)
            if last_result.should_exit:
                break
        return last_result

    def run_line(self, line: str) -> CommandResult:
        if not line.strip():
            return CommandResult()
        try:
            pipeline = parse_pipeline(line)
        except (LexError, ShellSyntaxError) as exc:
            self._report(str(exc))
            return self._finish(CommandResult(exit_code=exc.exit_code))

        stages = expand(pipeline, self.store)
        planned = plan_pipeline(
            stages,
            self.store,
            self.registry,
            external_commands=self.external_commands,
        )
        outcome = self.executor.execute(planned)
        return self._finish(
            CommandResult(
                exit_code=outcome.status,
                stage_statuses=list(outcome.statuses),
                should_exit=outcome.exit_requested,
            )
        )

    def _finish(self, result: CommandResult) -> CommandResult:
        self.last_status = result.exit_code
        logger.debug("line finished with status %d", result.exit_code)
        return result

    def _report(self, message: str) -> None:
        self.stderr.write(encode_text(f"{DIAGNOSTIC_PREFIX}: {message}\n"))
        self.stderr.flush()


__all__ = ["Shell"]
