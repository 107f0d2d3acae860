"""Command-line interface for pipeshell."""

from __future__ import annotations

import argparse
import logging
import sys

from .shell import Shell

DEFAULT_PROMPT = "$ "
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--no-external",
        action="store_true",
        help="Only run builtins; unknown commands report 'command not found'.",
    )
    parser.add_argument(
        "--clean-env",
        action="store_true",
        help="Start with no variables instead of the process environment.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity written to stderr.",
    )


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT, stream=sys.stderr)


def _build_shell(args: argparse.Namespace) -> Shell:
    _configure_logging(args.log_level)
    return Shell(
        inherit_env=not args.clean_env,
        external_commands=not args.no_external,
    )


def _run_exec(args: argparse.Namespace) -> int:
    shell = _build_shell(args)
    return shell.exec(args.command).exit_code


def _run_shell(args: argparse.Namespace) -> int:
    shell = _build_shell(args)
    try:
        while True:
            prompt = shell.store.get("PS1") or DEFAULT_PROMPT
            line = input(prompt)
            result = shell.run_line(line)
            if result.should_exit:
                return result.exit_code
    except (EOFError, KeyboardInterrupt):
        return shell.last_status


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="pipeshell")
    subparsers = parser.add_subparsers(dest="command_name", required=True)

    exec_parser = subparsers.add_parser("exec", help="Run a command line")
    _add_common_flags(exec_parser)
    exec_parser.add_argument("command", help="Command string to execute")
    exec_parser.set_defaults(func=_run_exec)

    shell_parser = subparsers.add_parser("shell", help="Start an interactive shell")
    _add_common_flags(shell_parser)
    shell_parser.set_defaults(func=_run_shell)

    args = parser.parse_args(argv)
    exit_code = args.func(args)
    raise SystemExit(exit_code)


__all__ = ["main"]
