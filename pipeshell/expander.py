"""Variable substitution and quote removal over a parsed pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field

from .environment import EnvironmentStore
from .shell_parser import Literal, Pipeline, Stage, Variable, Word


@dataclass(slots=True)
class ExpandedStage:
    argv: list[str] = field(default_factory=list)
    assignments: dict[str, str] = field(default_factory=dict)


def expand_word(word: Word, store: EnvironmentStore) -> str:
    """Concatenate the parts of ``word``; unset variables expand to ``""``.

    The result is always one string: substituted values are never split.
    Single-quoted text only ever reaches here as :class:`Literal` parts.
    """
    chunks: list[str] = []
    for part in word.parts:
        if isinstance(part, Literal):
            chunks.append(part.text)
        elif isinstance(part, Variable):
            chunks.append(store.get(part.name) or "")
    return "".join(chunks)


def expand_stage(stage: Stage, store: EnvironmentStore) -> ExpandedStage:
    expanded = ExpandedStage()
    for assignment in stage.assignments:
        expanded.assignments[assignment.name] = expand_word(assignment.value, store)
    expanded.argv = [expand_word(word, store) for word in stage.argv]
    return expanded


def expand(pipeline: Pipeline, store: EnvironmentStore) -> list[ExpandedStage]:
    return [expand_stage(stage, store) for stage in pipeline.stages]


__all__ = ["ExpandedStage", "expand", "expand_stage", "expand_word"]
