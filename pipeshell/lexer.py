"""Quote-aware tokenizer for a single input line."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from .exceptions import UnterminatedQuote

logger = logging.getLogger(__name__)

_WHITESPACE = frozenset(" \t\r\n")


class Quoting(enum.Enum):
    UNQUOTED = "unquoted"
    SINGLE = "single"
    DOUBLE = "double"


@dataclass(frozen=True, slots=True)
class Span:
    """A run of characters that share one quoting context."""

    text: str
    quoting: Quoting


@dataclass(frozen=True, slots=True)
class WordToken:
    spans: tuple[Span, ...]

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


@dataclass(frozen=True, slots=True)
class PipeToken:
    pass


Token = WordToken | PipeToken


class _WordBuilder:
    def __init__(self) -> None:
        self.spans: list[Span] = []
        self._chars: list[str] = []
        self._quoting: Quoting | None = None

    @property
    def started(self) -> bool:
        return bool(self.spans) or self._quoting is not None

    def open_span(self, quoting: Quoting) -> None:
        # Quotes always start a fresh span, even an empty one ('' is still a word).
        self._flush()
        self._quoting = quoting

    def add(self, char: str, quoting: Quoting) -> None:
        if self._quoting is not quoting:
            self._flush()
            self._quoting = quoting
        self._chars.append(char)

    def close_span(self) -> None:
        self._flush()

    def _flush(self) -> None:
        if self._quoting is not None:
            self.spans.append(Span("".join(self._chars), self._quoting))
        self._chars = []
        self._quoting = None

    def build(self) -> WordToken:
        self._flush()
        return WordToken(tuple(self.spans))


def tokenize(line: str) -> list[Token]:
    tokens: list[Token] = []
    word = _WordBuilder()
    state = Quoting.UNQUOTED

    def finish_word() -> None:
        nonlocal word
        if word.started:
            tokens.append(word.build())
        word = _WordBuilder()

    for char in line:
        if state is Quoting.SINGLE:
            if char == "'":
                word.close_span()
                state = Quoting.UNQUOTED
            else:
                word.add(char, Quoting.SINGLE)
            continue
        if state is Quoting.DOUBLE:
            if char == '"':
                word.close_span()
                state = Quoting.UNQUOTED
            else:
                word.add(char, Quoting.DOUBLE)
            continue
        if char in _WHITESPACE:
            finish_word()
        elif char == "|":
            finish_word()
            tokens.append(PipeToken())
        elif char == "'":
            word.open_span(Quoting.SINGLE)
            state = Quoting.SINGLE
        elif char == '"':
            word.open_span(Quoting.DOUBLE)
            state = Quoting.DOUBLE
        else:
            word.add(char, Quoting.UNQUOTED)

    if state is Quoting.SINGLE:
        raise UnterminatedQuote("'")
    if state is Quoting.DOUBLE:
        raise UnterminatedQuote('"')
    finish_word()
    logger.debug("tokenized %r into %d tokens", line, len(tokens))
    return tokens


__all__ = ["Quoting", "Span", "WordToken", "PipeToken", "Token", "tokenize"]
