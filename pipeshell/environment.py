"""Session variable store and stage-scoped overlays."""

from __future__ import annotations

import logging
import os
from collections import ChainMap
from collections.abc import Mapping
from types import MappingProxyType

from .exceptions import ShellError

logger = logging.getLogger(__name__)


class Overlay:
    """Temporary bindings layered over a snapshot of the store.

    The overlay is handed to exactly one stage. Releasing it drops the layer;
    the underlying store is never written.
    """

    def __init__(self, base: Mapping[str, str], pairs: Mapping[str, str]) -> None:
        self._chain: ChainMap[str, str] | None = ChainMap(dict(pairs), dict(base))
        self._view: Mapping[str, str] | None = MappingProxyType(self._chain)

    @property
    def released(self) -> bool:
        return self._view is None

    @property
    def view(self) -> Mapping[str, str]:
        if self._view is None:
            raise ShellError("overlay already released")
        return self._view

    def close(self) -> None:
        self._view = None
        self._chain = None

    def __enter__(self) -> Mapping[str, str]:
        return self.view

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class EnvironmentStore:
    """Variables that live for the whole session."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._vars: dict[str, str] = dict(initial or {})

    @classmethod
    def from_process(cls) -> "EnvironmentStore":
        return cls(os.environ)

    def get(self, name: str) -> str | None:
        return self._vars.get(name)

    def set(self, name: str, value: str) -> None:
        logger.debug("set %s", name)
        self._vars[name] = value

    def update(self, pairs: Mapping[str, str]) -> None:
        for name, value in pairs.items():
            self.set(name, value)

    def snapshot(self) -> dict[str, str]:
        return dict(self._vars)

    def overlay(self, pairs: Mapping[str, str]) -> Overlay:
        return Overlay(self._vars, pairs)

    def __contains__(self, name: object) -> bool:
        return name in self._vars


__all__ = ["EnvironmentStore", "Overlay"]
