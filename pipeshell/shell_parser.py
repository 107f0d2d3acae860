"""Parser turning lexer tokens into a pipeline of stages."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from .exceptions import ShellSyntaxError
from .lexer import PipeToken, Quoting, Span, Token, WordToken, tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Literal:
    text: str
    quoting: Quoting = Quoting.UNQUOTED


@dataclass(frozen=True, slots=True)
class Variable:
    name: str
    quoting: Quoting = Quoting.UNQUOTED


WordPart = Literal | Variable


@dataclass(frozen=True, slots=True)
class Word:
    parts: tuple[WordPart, ...] = ()


@dataclass(frozen=True, slots=True)
class Assignment:
    name: str
    value: Word


@dataclass(frozen=True, slots=True)
class Stage:
    assignments: tuple[Assignment, ...] = ()
    argv: tuple[Word, ...] = ()


@dataclass(frozen=True, slots=True)
class Pipeline:
    stages: tuple[Stage, ...]


_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_identifier(text: str) -> bool:
    return _IDENTIFIER_RE.fullmatch(text) is not None


def parse(tokens: Sequence[Token]) -> Pipeline:
    if not tokens:
        raise ShellSyntaxError("empty command")

    stages: list[Stage] = []
    current: list[WordToken] = []
    for token in tokens:
        if isinstance(token, PipeToken):
            if not current:
                raise ShellSyntaxError("syntax error near unexpected token `|'")
            stages.append(_build_stage(current))
            current = []
            continue
        current.append(token)
    if not current:
        raise ShellSyntaxError("syntax error: missing command after `|'")
    stages.append(_build_stage(current))

    pipeline = Pipeline(tuple(stages))
    logger.debug("parsed pipeline with %d stage(s)", len(pipeline.stages))
    return pipeline


def parse_pipeline(command_line: str) -> Pipeline:
    return parse(tokenize(command_line))


def _build_stage(tokens: list[WordToken]) -> Stage:
    assignments: list[Assignment] = []
    idx = 0
    while idx < len(tokens):
        assignment = _split_assignment(tokens[idx])
        if assignment is None:
            break
        assignments.append(assignment)
        idx += 1
    argv = tuple(_build_word(token.spans) for token in tokens[idx:])
    return Stage(assignments=tuple(assignments), argv=argv)


def _split_assignment(token: WordToken) -> Assignment | None:
    first = token.spans[0]
    if first.quoting is not Quoting.UNQUOTED:
        return None
    name, sep, rest = first.text.partition("=")
    if not sep or not is_identifier(name):
        return None
    value_spans: list[Span] = []
    if rest:
        value_spans.append(Span(rest, Quoting.UNQUOTED))
    value_spans.extend(token.spans[1:])
    return Assignment(name=name, value=_build_word(value_spans))


def _build_word(spans: Sequence[Span]) -> Word:
    parts: list[WordPart] = []
    for span in spans:
        parts.extend(_split_span(span))
    return Word(tuple(parts))


def _split_span(span: Span) -> list[WordPart]:
    if span.quoting is Quoting.SINGLE:
        return [Literal(span.text, span.quoting)]

    parts: list[WordPart] = []
    text = span.text
    literal_start = 0
    idx = 0
    while idx < len(text):
        if text[idx] != "$":
            idx += 1
            continue
        match = _IDENTIFIER_RE.match(text, idx + 1)
        if match is None:
            idx += 1
            continue
        if idx > literal_start:
            parts.append(Literal(text[literal_start:idx], span.quoting))
        parts.append(Variable(match.group(0), span.quoting))
        idx = literal_start = match.end()
    if literal_start < len(text) or not parts:
        # An empty quoted span still contributes an (empty) literal.
        parts.append(Literal(text[literal_start:], span.quoting))
    return parts


__all__ = [
    "Literal",
    "Variable",
    "WordPart",
    "Word",
    "Assignment",
    "Stage",
    "Pipeline",
    "is_identifier",
    "parse",
    "parse_pipeline",
]
