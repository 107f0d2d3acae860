"""Text processing commands."""

from __future__ import annotations

from typing import BinaryIO

from ..common import CommandContext, encode_text
from ..registry import COMMAND_REGISTRY
from .streams import STDIN_OPERAND, iter_chunks, operand


@COMMAND_REGISTRY.command("echo", description="Print arguments separated by spaces")
def echo(ctx: CommandContext, args: list[str]) -> int:
    ctx.stdout.write(encode_text(" ".join(args) + "\n"))
    return 0


@COMMAND_REGISTRY.command("cat", description="Concatenate files to standard output")
def cat(ctx: CommandContext, args: list[str]) -> int:
    status = 0
    for path in args or [STDIN_OPERAND]:
        with operand(ctx, path) as stream:
            if stream is None:
                status = 1
                continue
            for chunk in iter_chunks(stream):
                ctx.stdout.write(chunk)
                ctx.stdout.flush()
    return status


_WC_FLAGS = {"l": "lines", "w": "words", "c": "bytes"}
_WC_LONG_FLAGS = {"--lines": "lines", "--words": "words", "--bytes": "bytes"}


def _count(stream: BinaryIO) -> dict[str, int]:
    counts = {"lines": 0, "words": 0, "bytes": 0}
    for line in stream:
        # A trailing line without a newline still counts as a line.
        counts["lines"] += 1
        counts["words"] += len(line.split())
        counts["bytes"] += len(line)
    return counts


@COMMAND_REGISTRY.command("wc", description="Count lines, words and bytes")
def wc(ctx: CommandContext, args: list[str]) -> int:
    selected: set[str] = set()
    paths: list[str] = []
    idx = 0
    while idx < len(args):
        token = args[idx]
        if token == "--":
            paths.extend(args[idx + 1 :])
            break
        if token in _WC_LONG_FLAGS:
            selected.add(_WC_LONG_FLAGS[token])
        elif token.startswith("-") and token != STDIN_OPERAND:
            for flag in token[1:]:
                if flag not in _WC_FLAGS:
                    ctx.error(f"invalid option -- '{flag}'")
                    return 2
                selected.add(_WC_FLAGS[flag])
        else:
            paths.append(token)
        idx += 1

    fields = [key for key in ("lines", "words", "bytes") if not selected or key in selected]

    def render(counts: dict[str, int], label: str | None) -> None:
        line = " ".join(str(counts[key]) for key in fields)
        if label is not None:
            line = f"{line} {label}"
        ctx.stdout.write(encode_text(f"{line}\n"))

    status = 0
    totals = {"lines": 0, "words": 0, "bytes": 0}
    labelled = len(paths) > 1
    for path in paths or [STDIN_OPERAND]:
        with operand(ctx, path) as stream:
            if stream is None:
                status = 1
                continue
            counts = _count(stream)
        for key, value in counts.items():
            totals[key] += value
        render(counts, path if labelled else None)
    if labelled:
        render(totals, "total")
    return status
