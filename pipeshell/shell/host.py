"""Launching external programs on the host."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Mapping, Sequence
from typing import IO

from ..exceptions import CommandNotFound, LaunchError

logger = logging.getLogger(__name__)

SIGNAL_STATUS_BASE = 128

StreamArg = int | IO[bytes] | None


def spawn(
    program: str,
    argv: Sequence[str],
    env: Mapping[str, str],
    *,
    stdin: StreamArg,
    stdout: StreamArg,
    stderr: StreamArg,
    cwd: str | None = None,
) -> subprocess.Popen[bytes]:
    """Start ``program`` with ``argv``; the search path comes from ``env``."""

    if not program:
        raise CommandNotFound(program)
    logger.debug("spawning %s", program)
    try:
        return subprocess.Popen(
            list(argv),
            stdin=stdin,
            stdout=stdout,
            stderr=stderr,
            env=dict(env),
            cwd=cwd,
        )
    except FileNotFoundError as exc:
        raise CommandNotFound(program) from exc
    except OSError as exc:
        reason = exc.strerror or str(exc)
        raise LaunchError(f"{program}: {reason}") from exc


def status_from_returncode(returncode: int) -> int:
    """Map ``Popen.returncode`` to a shell status (``128 + n`` for signal ``n``)."""

    if returncode < 0:
        return SIGNAL_STATUS_BASE - returncode
    return returncode


def wait(process: subprocess.Popen[bytes]) -> int:
    return status_from_returncode(process.wait())


__all__ = ["spawn", "wait", "status_from_returncode", "SIGNAL_STATUS_BASE"]
