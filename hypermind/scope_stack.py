"""
LIFO stack of scope frames.

Frames are kept in an id-keyed arena; the stack itself is a list of ids.
A frame's parent is stored as an id and resolved through the arena, so a
popped and archived frame never holds a live reference to another frame.

Lock order: stack -> graph on push, stack -> store on pop.
"""

from __future__ import annotations

import itertools
import logging
import threading
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from .config import ScopePolicyConfig
from .context_graph import ContextGraph
from .errors import EmptyStackError
from .tier_store import TierStore
from .types import ScopeFrame, Tier, utc_now

logger = logging.getLogger(__name__)


class ScopeStack:
    """
    Push/pop stack of scope frames.

    Pushing records the frame in the context graph; popping archives it in
    the tier store under ``archive_key_prefix + frame.id``.
    """

    def __init__(
        self,
        store: TierStore,
        graph: ContextGraph,
        policy: ScopePolicyConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.graph = graph
        self.policy = policy or ScopePolicyConfig()
        self._clock = clock

        self._frames: dict[str, ScopeFrame] = {}
        self._order: list[str] = []
        self._sequence = itertools.count(1)
        self._lock = threading.RLock()

    def push(self, config: dict[str, Any]) -> ScopeFrame:
        """
        Push a new frame whose parent is the current top.

        The graph is updated before this returns.
        """
        with self._lock:
            now = self._clock()
            frame = ScopeFrame(
                id=self._generate_id(now),
                config=config,
                created_at=now,
                parent_id=self._order[-1] if self._order else None,
            )
            self._frames[frame.id] = frame
            self._order.append(frame.id)
            self.graph.record_push(frame)
            logger.debug("Pushed scope %s (parent=%s)", frame.id, frame.parent_id)
            return frame

    def pop(self) -> ScopeFrame:
        """
        Remove the top frame and archive it.

        The frame leaves the stack only once it is archived.

        Raises:
            EmptyStackError: If the stack is empty. Nothing is mutated.
        """
        with self._lock:
            if not self._order:
                raise EmptyStackError()

            frame = self._frames[self._order[-1]]
            self.store.store(self.archive_key(frame), frame, tier=Tier.ARCHIVED)
            self._order.pop()
            del self._frames[frame.id]
            logger.debug("Popped and archived scope %s", frame.id)
            return frame

    def top(self) -> ScopeFrame | None:
        """Current frame, or None if the stack is empty."""
        with self._lock:
            return self._frames[self._order[-1]] if self._order else None

    def get(self, frame_id: str) -> ScopeFrame | None:
        """Look up a frame that is still on the stack."""
        with self._lock:
            return self._frames.get(frame_id)

    def parent_of(self, frame: ScopeFrame) -> ScopeFrame | None:
        """Resolve a frame's parent while the parent is on the stack."""
        if frame.parent_id is None:
            return None
        return self.get(frame.parent_id)

    def frames(self) -> list[ScopeFrame]:
        """Snapshot of the stack, bottom first."""
        with self._lock:
            return [self._frames[frame_id] for frame_id in self._order]

    def archive_key(self, frame: ScopeFrame) -> str:
        return f"{self.policy.archive_key_prefix}{frame.id}"

    @property
    def depth(self) -> int:
        with self._lock:
            return len(self._order)

    def __len__(self) -> int:
        return self.depth

    def clear(self) -> None:
        """Drop every frame without archiving. Only used on teardown."""
        with self._lock:
            self._frames.clear()
            self._order.clear()

    def _generate_id(self, now: datetime) -> str:
        millis = int(now.timestamp() * 1000)
        return f"{self.policy.id_prefix}_{millis}_{next(self._sequence)}_{uuid.uuid4().hex[:9]}"


__all__ = ["ScopeStack"]
