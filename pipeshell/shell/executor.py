"""Run planned stages concurrently, wired together with OS pipes."""

from __future__ import annotations

import abc
import contextlib
import io
import logging
import os
import signal
import subprocess
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import BinaryIO

from ..exceptions import ShellError
from . import host
from .common import CommandContext, ExitRequest, encode_text
from .planner import AssignmentStage, BuiltinStage, ExternalStage, PlannedStage
from .registry import CommandRegistry

logger = logging.getLogger(__name__)

BROKEN_PIPE_STATUS = host.SIGNAL_STATUS_BASE + signal.SIGPIPE
_CHUNK_SIZE = 64 * 1024


@dataclass(slots=True)
class ExecutionResult:
    statuses: list[int] = field(default_factory=list)
    exit_requested: bool = False

    @property
    def status(self) -> int:
        return self.statuses[-1] if self.statuses else 0


def _fileno(stream: BinaryIO) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return None


def _close_quietly(stream: BinaryIO) -> None:
    # The reader may already be gone; flushing on close would raise EPIPE.
    with contextlib.suppress(OSError):
        stream.close()


def _copy_stream(source: BinaryIO, dest: BinaryIO, *, close_dest: bool) -> None:
    read = getattr(source, "read1", source.read)
    try:
        while chunk := read(_CHUNK_SIZE):
            dest.write(chunk)
            dest.flush()
    except BrokenPipeError:
        logger.debug("pump destination closed early")
    finally:
        if close_dest:
            _close_quietly(dest)
        else:
            _close_quietly(source)


class _StageRun(abc.ABC):
    exit_request: ExitRequest | None = None

    @abc.abstractmethod
    def wait(self) -> int:
        """Block until the stage finishes and return its status."""


class _FinishedRun(_StageRun):
    def __init__(self, status: int) -> None:
        self.status = status

    def wait(self) -> int:
        return self.status


class _ThreadRun(_StageRun):
    def __init__(
        self,
        stage: BuiltinStage,
        ctx: CommandContext,
        owned: list[BinaryIO],
    ) -> None:
        self.stage = stage
        self.ctx = ctx
        self.owned = owned
        self.status = 0
        self.thread = threading.Thread(
            target=self._run,
            name=f"pipeshell-{stage.name}",
            daemon=True,
        )

    def start(self) -> None:
        self.thread.start()

    def _run(self) -> None:
        name = self.stage.name
        try:
            result = self.stage.handler(self.ctx, self.stage.argv[1:])
            self.ctx.stdout.flush()
        except BrokenPipeError:
            self.status = BROKEN_PIPE_STATUS
        except ShellError as exc:
            self.ctx.error(str(exc))
            self.status = exc.exit_code
        except Exception as exc:  # unexpected failure path
            logger.debug("builtin %s raised", name, exc_info=True)
            self.ctx.stderr.write(encode_text(f"{name} failed: {exc}\n"))
            self.status = 1
        else:
            if isinstance(result, ExitRequest):
                self.exit_request = result
                self.status = result.status
            else:
                self.status = 0 if result is None else int(result)
        finally:
            for stream in self.owned:
                _close_quietly(stream)

    def wait(self) -> int:
        self.thread.join()
        return self.status


class _ProcessRun(_StageRun):
    def __init__(self, process: subprocess.Popen[bytes], pumps: list[threading.Thread]) -> None:
        self.process = process
        self.pumps = pumps

    def wait(self) -> int:
        status = host.wait(self.process)
        for pump in self.pumps:
            pump.join()
        return status


class Executor:
    """Starts every stage of a pipeline, then waits for all of them."""

    def __init__(
        self,
        *,
        stdin: BinaryIO,
        stdout: BinaryIO,
        stderr: BinaryIO,
        cwd: str,
        registry: CommandRegistry | None = None,
    ) -> None:
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr
        self.cwd = cwd
        self.registry = registry

    def execute(self, stages: Sequence[PlannedStage]) -> ExecutionResult:
        if not stages:
            return ExecutionResult()
        pipes = [os.pipe() for _ in range(len(stages) - 1)]
        runs: list[_StageRun] = []
        for idx, stage in enumerate(stages):
            read_fd = pipes[idx - 1][0] if idx > 0 else None
            write_fd = pipes[idx][1] if idx < len(stages) - 1 else None
            runs.append(self._start(stage, read_fd, write_fd))

        statuses: list[int] = []
        for stage, run in zip(stages, runs):
            try:
                statuses.append(run.wait())
            finally:
                if stage.overlay is not None:
                    stage.overlay.close()
        self._flush_session()
        logger.debug("pipeline statuses: %s", statuses)
        exit_requested = len(runs) == 1 and runs[0].exit_request is not None
        return ExecutionResult(statuses=statuses, exit_requested=exit_requested)

    def _start(self, stage: PlannedStage, read_fd: int | None, write_fd: int | None) -> _StageRun:
        # Each starter takes ownership of read_fd/write_fd and closes them.
        if isinstance(stage, BuiltinStage):
            return self._start_builtin(stage, read_fd, write_fd)
        if isinstance(stage, ExternalStage):
            return self._start_external(stage, read_fd, write_fd)
        if isinstance(stage, AssignmentStage):
            for fd in (read_fd, write_fd):
                if fd is not None:
                    os.close(fd)
            return _FinishedRun(0)
        raise TypeError(f"Unknown stage type: {type(stage).__name__}")

    def _start_builtin(
        self, stage: BuiltinStage, read_fd: int | None, write_fd: int | None
    ) -> _StageRun:
        owned: list[BinaryIO] = []
        stdin = self.stdin
        stdout = self.stdout
        if read_fd is not None:
            stdin = os.fdopen(read_fd, "rb")
            owned.append(stdin)
        if write_fd is not None:
            stdout = os.fdopen(write_fd, "wb")
            owned.append(stdout)
        ctx = CommandContext(
            name=stage.name,
            stdin=stdin,
            stdout=stdout,
            stderr=self.stderr,
            env=stage.env,
            cwd=self.cwd,
            registry=self.registry,
        )
        run = _ThreadRun(stage, ctx, owned)
        run.start()
        return run

    def _start_external(
        self, stage: ExternalStage, read_fd: int | None, write_fd: int | None
    ) -> _StageRun:
        stdin_arg = read_fd if read_fd is not None else self._session_arg(self.stdin)
        stdout_arg = write_fd if write_fd is not None else self._session_arg(self.stdout)
        stderr_arg = self._session_arg(self.stderr)
        try:
            process = host.spawn(
                stage.program,
                stage.argv,
                stage.env,
                stdin=stdin_arg,
                stdout=stdout_arg,
                stderr=stderr_arg,
                cwd=self.cwd,
            )
        except ShellError as exc:
            logger.warning("cannot run %s: %s", stage.program, exc)
            self.stderr.write(encode_text(f"pipeshell: {exc}\n"))
            self.stderr.flush()
            return _FinishedRun(exc.exit_code)
        finally:
            for fd in (read_fd, write_fd):
                if fd is not None:
                    os.close(fd)

        pumps: list[threading.Thread] = []
        if process.stdin is not None:
            pumps.append(self._pump(self.stdin, process.stdin, close_dest=True))
        if process.stdout is not None:
            pumps.append(self._pump(process.stdout, self.stdout, close_dest=False))
        if process.stderr is not None:
            pumps.append(self._pump(process.stderr, self.stderr, close_dest=False))
        return _ProcessRun(process, pumps)

    def _session_arg(self, stream: BinaryIO) -> int:
        """Real descriptors go straight to the child; anything else is pumped."""
        fd = _fileno(stream)
        if fd is None:
            return subprocess.PIPE
        with contextlib.suppress(ValueError, OSError):
            stream.flush()
        return fd

    def _pump(self, source: BinaryIO, dest: BinaryIO, *, close_dest: bool) -> threading.Thread:
        thread = threading.Thread(
            target=_copy_stream,
            args=(source, dest),
            kwargs={"close_dest": close_dest},
            daemon=True,
        )
        thread.start()
        return thread

    def _flush_session(self) -> None:
        for stream in (self.stdout, self.stderr):
            with contextlib.suppress(ValueError, OSError):
                stream.flush()


__all__ = ["ExecutionResult", "Executor", "BROKEN_PIPE_STATUS"]
