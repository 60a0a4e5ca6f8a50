"""
Scope selection and activation hooks.

The selector records which org and project are active and pushes a scope
frame for each into HyperMind. Observers are told about every activation;
they do bookkeeping only and can never fail an activation.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from .hypermind import HyperMind
from .types import ScopeDescriptor, ScopeFrame

logger = logging.getLogger(__name__)


class ScopeObserver(ABC):
    """Receives a notification whenever a scope becomes active."""

    @abstractmethod
    def on_scope_activated(self, descriptor: ScopeDescriptor, frame: ScopeFrame) -> None:
        """Called after the scope frame has been pushed."""


@dataclass
class ShapeEntry:
    """Placeholder shape record for a scope."""

    name: str
    shape: tuple[int, ...]
    scope_id: str


class ShapeRegistry(ScopeObserver):
    """Records a ``scope_<id>`` shape entry per activated scope."""

    def __init__(self, default_shape: tuple[int, ...] = (1, 1)):
        self.default_shape = default_shape
        self._entries: dict[str, ShapeEntry] = {}

    def on_scope_activated(self, descriptor: ScopeDescriptor, frame: ScopeFrame) -> None:
        name = f"scope_{descriptor.id}"
        self._entries[name] = ShapeEntry(name=name, shape=self.default_shape, scope_id=frame.id)

    def get(self, name: str) -> ShapeEntry | None:
        return self._entries.get(name)

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class DomainEntry:
    """Placeholder domain record for a scope."""

    name: str
    boundary: str
    boundary_kind: str  # periodic or dirichlet
    dimensions: int
    constraints: dict[str, Any] = field(default_factory=dict)


class DomainRegistry(ScopeObserver):
    """Records a ``domain_<type>_<id>`` entry per activated scope."""

    def __init__(self) -> None:
        self._domains: dict[str, DomainEntry] = {}

    def on_scope_activated(self, descriptor: ScopeDescriptor, frame: ScopeFrame) -> None:
        if descriptor.is_project:
            dimensions = 3
        elif descriptor.is_org:
            dimensions = 2
        else:
            dimensions = 1

        name = f"domain_{descriptor.type}_{descriptor.id}"
        self._domains[name] = DomainEntry(
            name=name,
            boundary=f"boundary_{descriptor.type}",
            boundary_kind="periodic" if descriptor.is_global else "dirichlet",
            dimensions=dimensions,
            constraints={"scope_type": descriptor.type, "scope_id": descriptor.id},
        )

    def get(self, name: str) -> DomainEntry | None:
        return self._domains.get(name)

    def names(self) -> list[str]:
        return list(self._domains)

    def __len__(self) -> int:
        return len(self._domains)


class ScopeSelector:
    """
    Tracks the selected org and project.

    Selecting a scope pushes a frame with config
    ``{"scopeId", "scopeType", "scope"}`` and notifies observers.
    """

    def __init__(self, mind: HyperMind, observers: list[ScopeObserver] | None = None):
        self.mind = mind
        self.observers: list[ScopeObserver] = list(observers or [])
        self.org: ScopeDescriptor | None = None
        self.project: ScopeDescriptor | None = None

    def add_observer(self, observer: ScopeObserver) -> None:
        self.observers.append(observer)

    def initialize_scope(self, descriptor: ScopeDescriptor | None) -> ScopeFrame | None:
        """Push a frame for the descriptor and notify observers. None is ignored."""
        if descriptor is None:
            return None

        frame = self.mind.push_scope(
            {
                "scopeId": descriptor.id,
                "scopeType": descriptor.type,
                "scope": descriptor.to_dict(),
            }
        )
        self._notify(descriptor, frame)
        return frame

    def set_org(self, descriptor: ScopeDescriptor | None) -> ScopeFrame | None:
        self.org = descriptor
        return self.initialize_scope(descriptor)

    def set_project(self, descriptor: ScopeDescriptor | None) -> ScopeFrame | None:
        self.project = descriptor
        return self.initialize_scope(descriptor)

    def _notify(self, descriptor: ScopeDescriptor, frame: ScopeFrame) -> None:
        for observer in self.observers:
            try:
                observer.on_scope_activated(descriptor, frame)
            except Exception:
                logger.warning(
                    "Scope observer %s failed for scope %s",
                    type(observer).__name__,
                    descriptor.id,
                    exc_info=True,
                )


__all__ = [
    "DomainEntry",
    "DomainRegistry",
    "ScopeObserver",
    "ScopeSelector",
    "ShapeEntry",
    "ShapeRegistry",
]
