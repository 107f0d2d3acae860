"""File access used by the builtins that take file operands."""

from __future__ import annotations

import os
from typing import BinaryIO

from .exceptions import FileAccessError


def resolve_path(path: str, cwd: str) -> str:
    return os.path.join(cwd, path)


def open_read(path: str, cwd: str) -> BinaryIO:
    """Open ``path`` (relative to ``cwd``) for binary reading."""

    try:
        return open(resolve_path(path, cwd), "rb")
    except OSError as exc:
        reason = exc.strerror or str(exc)
        raise FileAccessError(f"{path}: {reason}") from exc


__all__ = ["open_read", "resolve_path"]
