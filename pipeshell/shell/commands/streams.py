"""Input helpers shared by builtins that read files or standard input."""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from typing import BinaryIO

from ...exceptions import FileAccessError
from ...fileio import open_read
from ..common import CommandContext

STDIN_OPERAND = "-"
CHUNK_SIZE = 64 * 1024


@contextlib.contextmanager
def operand(ctx: CommandContext, path: str) -> Iterator[BinaryIO | None]:
    """Yield an open stream for ``path``, or ``None`` after reporting why not.

    ``-`` is the builtin's own input and is left open afterwards.
    """
    if path == STDIN_OPERAND:
        yield ctx.stdin
        return
    try:
        stream = open_read(path, ctx.cwd)
    except FileAccessError as exc:
        ctx.error(str(exc))
        yield None
        return
    with stream:
        yield stream


def iter_chunks(stream: BinaryIO) -> Iterator[bytes]:
    read = getattr(stream, "read1", stream.read)
    while chunk := read(CHUNK_SIZE):
        yield chunk


def decode_line(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").removesuffix("\n").removesuffix("\r")


__all__ = ["operand", "iter_chunks", "decode_line", "STDIN_OPERAND"]
