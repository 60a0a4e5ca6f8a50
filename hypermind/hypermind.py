"""
HyperMind: tiered context memory with scope tracking.

Owns one TierStore, ContextGraph, ScopeStack and SearchRouter. Instances
are independent; nothing is shared at module level.

Usage:
    from hypermind import HyperMind

    with HyperMind() as mind:
        parent = mind.push_scope({"name": "parent"})
        mind.store_context("k1", {"a": 1})
        mind.search_contexts({"searchType": "graph", "term": "parent"})
        mind.pop_scope()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from .config import HyperMindConfig
from .context_graph import ContextGraph
from .errors import StoreClosedError
from .scope_stack import ScopeStack
from .search import SearchRequest, SearchRouter
from .tier_store import TierStore
from .types import ContextEntry, ScopeFrame, SearchHit, StoreStats, Tier, utc_now

logger = logging.getLogger(__name__)


class HyperMind:
    """
    Multi-tier context store with a scope stack and a context graph.

    Lifecycle: construct, use, ``close()``. Use after close raises
    StoreClosedError.
    """

    def __init__(
        self,
        config: HyperMindConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize HyperMind.

        Args:
            config: Tier and scope policy (defaults if None)
            clock: Source of the current time, shared by every component
        """
        self.config = config or HyperMindConfig()
        self.store = TierStore(policy=self.config.tiers, clock=clock)
        self.graph = ContextGraph()
        self.scopes = ScopeStack(self.store, self.graph, policy=self.config.scopes, clock=clock)
        self.router = SearchRouter(self.store, self.graph)
        self._closed = False

    def __enter__(self) -> HyperMind:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Scopes
    # -------------------------------------------------------------------------

    def push_scope(self, config: dict[str, Any]) -> ScopeFrame:
        self._check_open()
        return self.scopes.push(config)

    def pop_scope(self) -> ScopeFrame:
        self._check_open()
        return self.scopes.pop()

    def current_scope(self) -> ScopeFrame | None:
        self._check_open()
        return self.scopes.top()

    # -------------------------------------------------------------------------
    # Context
    # -------------------------------------------------------------------------

    def store_context(
        self,
        key: str,
        value: Any,
        tier: Tier | str = Tier.HOT,
        significance: float | None = None,
    ) -> ContextEntry:
        self._check_open()
        return self.store.store(key, value, tier=tier, significance=significance)

    def retrieve_context(self, key: str) -> Any | None:
        self._check_open()
        return self.store.retrieve(key)

    def search_contexts(self, query: SearchRequest | Mapping[str, Any]) -> list[SearchHit]:
        self._check_open()
        return self.router.search(query)

    def maintain(self) -> int:
        """Run a maintenance pass outside of a store call."""
        self._check_open()
        return self.store.maintain()

    def stats(self) -> StoreStats:
        self._check_open()
        return self.store.stats()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Discard all state. Safe to call more than once."""
        if self._closed:
            return
        self.scopes.clear()
        self.graph.clear()
        self.store.clear()
        self._closed = True
        logger.debug("HyperMind closed")

    def _check_open(self) -> None:
        if self._closed:
            raise StoreClosedError("HyperMind instance is closed")


__all__ = ["HyperMind"]
