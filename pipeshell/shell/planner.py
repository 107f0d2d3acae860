"""Classify expanded stages and bind their environments."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from ..environment import EnvironmentStore, Overlay
from ..expander import ExpandedStage
from .common import CommandContext, ShellCommand
from .registry import CommandRegistry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BuiltinStage:
    name: str
    handler: ShellCommand
    argv: list[str]
    env: Mapping[str, str]
    overlay: Overlay | None = None


@dataclass(slots=True)
class ExternalStage:
    program: str
    argv: list[str]
    env: Mapping[str, str]
    overlay: Overlay | None = None


@dataclass(slots=True)
class AssignmentStage:
    """Assignments-only stage, already committed to the store."""

    assignments: dict[str, str] = field(default_factory=dict)
    overlay: Overlay | None = None


PlannedStage = BuiltinStage | ExternalStage | AssignmentStage


def _command_not_found(ctx: CommandContext, _: list[str]) -> int:
    ctx.error("command not found")
    return 127


def plan(
    stage: ExpandedStage,
    store: EnvironmentStore,
    registry: CommandRegistry,
    *,
    external_commands: bool = True,
) -> PlannedStage:
    if not stage.argv:
        store.update(stage.assignments)
        logger.debug("committed %s", ", ".join(stage.assignments))
        return AssignmentStage(dict(stage.assignments))

    overlay: Overlay | None = None
    if stage.assignments:
        overlay = store.overlay(stage.assignments)
        env = overlay.view
    else:
        env = store.snapshot()

    name = stage.argv[0]
    handler = registry.resolve(name)
    if handler is not None:
        logger.debug("planned builtin %s", name)
        return BuiltinStage(name, handler, list(stage.argv), env, overlay)
    if not external_commands:
        logger.debug("external commands disabled, %s not found", name)
        return BuiltinStage(name, _command_not_found, list(stage.argv), env, overlay)
    logger.debug("planned external %s", name)
    return ExternalStage(name, list(stage.argv), env, overlay)


def plan_pipeline(
    stages: Sequence[ExpandedStage],
    store: EnvironmentStore,
    registry: CommandRegistry,
    *,
    external_commands: bool = True,
) -> list[PlannedStage]:
    return [
        plan(stage, store, registry, external_commands=external_commands)
        for stage in stages
    ]


__all__ = [
    "AssignmentStage",
    "BuiltinStage",
    "ExternalStage",
    "PlannedStage",
    "plan",
    "plan_pipeline",
]
