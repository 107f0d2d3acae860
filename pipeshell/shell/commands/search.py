"""Search-oriented commands."""

from __future__ import annotations

import re
from typing import BinaryIO

from ..common import CommandContext, encode_text
from ..registry import COMMAND_REGISTRY
from .streams import STDIN_OPERAND, decode_line, operand

_USAGE = "usage: grep [-i] [-w] [-A NUM] PATTERN [FILE...]"


def _parse_context(ctx: CommandContext, value: str) -> int | None:
    try:
        count = int(value)
    except ValueError:
        count = -1
    if count < 0:
        ctx.error(f"{value}: invalid context length argument")
        return None
    return count


@COMMAND_REGISTRY.command("grep", description="Print lines matching a pattern")
def grep(ctx: CommandContext, args: list[str]) -> int:
    ignore_case = False
    whole_word = False
    after = 0
    pattern: str | None = None
    paths: list[str] = []
    options_done = False
    idx = 0
    while idx < len(args):
        token = args[idx]
        idx += 1
        if options_done or token == STDIN_OPERAND or not token.startswith("-"):
            if pattern is None:
                pattern = token
            else:
                paths.append(token)
            continue
        if token == "--":
            options_done = True
            continue
        if token == "--ignore-case":
            ignore_case = True
            continue
        if token == "--word-regexp":
            whole_word = True
            continue
        if token.startswith("--after-context="):
            count = _parse_context(ctx, token.partition("=")[2])
            if count is None:
                return 2
            after = count
            continue
        if token.startswith("--"):
            ctx.error(f"unrecognized option '{token}'")
            return 2
        flags = token[1:]
        pos = 0
        while pos < len(flags):
            flag = flags[pos]
            pos += 1
            if flag == "i":
                ignore_case = True
            elif flag == "w":
                whole_word = True
            elif flag == "A":
                value = flags[pos:]
                pos = len(flags)
                if not value:
                    if idx >= len(args):
                        ctx.error("option requires an argument -- 'A'")
                        return 2
                    value = args[idx]
                    idx += 1
                count = _parse_context(ctx, value)
                if count is None:
                    return 2
                after = count
            else:
                ctx.error(f"invalid option -- '{flag}'")
                return 2

    if pattern is None:
        ctx.error(_USAGE)
        return 2

    try:
        regex = re.compile(pattern, re.IGNORECASE if ignore_case else 0)
    except re.error as exc:
        ctx.error(f"invalid regex: {exc}")
        return 2

    found = False
    had_error = False
    prefixed = len(paths) > 1
    for path in paths or [STDIN_OPERAND]:
        with operand(ctx, path) as stream:
            if stream is None:
                had_error = True
                continue
            prefix = f"{path}:" if prefixed else ""
            found |= _search(
                ctx, regex, stream, after=after, prefix=prefix, whole_word=whole_word
            )
    if had_error:
        return 2
    return 0 if found else 1


def _search(
    ctx: CommandContext,
    regex: re.Pattern[str],
    stream: BinaryIO,
    *,
    after: int,
    prefix: str,
    whole_word: bool,
) -> bool:
    found = False
    remaining = 0
    for raw in stream:
        line = decode_line(raw)
        if _matches(regex, line, whole_word=whole_word):
            found = True
            # Overlapping context windows extend rather than repeat lines.
            remaining = after + 1
        if remaining:
            remaining -= 1
            ctx.stdout.write(encode_text(f"{prefix}{line}\n"))
            ctx.stdout.flush()
    return found


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def _matches(regex: re.Pattern[str], line: str, *, whole_word: bool) -> bool:
    if not whole_word:
        return regex.search(line) is not None
    for match in regex.finditer(line):
        start, end = match.span()
        # Empty matches never count as a word.
        if start == end:
            continue
        if start > 0 and _is_word_char(line[start - 1]):
            continue
        if end < len(line) and _is_word_char(line[end]):
            continue
        return True
    return False
