"""
Search dispatch across the tier store and the context graph.

Two modes:
- chronological: key substring match over every tier, most recent first
- graph: substring match over serialized scope nodes

Unknown modes return no results rather than raising.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .context_graph import ContextGraph
from .tier_store import TierStore
from .types import SearchHit

logger = logging.getLogger(__name__)


class SearchType(str, Enum):
    """Supported search modes."""

    CHRONOLOGICAL = "chronological"
    GRAPH = "graph"


@dataclass
class SearchRequest:
    """A search query."""

    term: str | None
    search_type: SearchType | str = SearchType.CHRONOLOGICAL

    def __post_init__(self) -> None:
        # A missing term matches everything
        if self.term is None:
            self.term = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchRequest:
        """Build from a mapping using ``searchType`` or ``search_type``."""
        search_type = data.get("search_type", data.get("searchType", SearchType.CHRONOLOGICAL))
        return cls(term=data.get("term"), search_type=search_type)


class SearchRouter:
    """Routes a SearchRequest to the matching backend."""

    def __init__(self, store: TierStore, graph: ContextGraph):
        self.store = store
        self.graph = graph

    def search(self, request: SearchRequest | Mapping[str, Any]) -> list[SearchHit]:
        """
        Run a search.

        Args:
            request: SearchRequest or mapping with ``term`` and an optional
                search type

        Returns:
            Normalized hits; empty for unrecognized search types
        """
        if not isinstance(request, SearchRequest):
            request = SearchRequest.from_dict(request)

        try:
            search_type = SearchType(request.search_type)
        except ValueError:
            logger.debug("Unknown search type %r, returning no results", request.search_type)
            return []

        if search_type is SearchType.GRAPH:
            return self.graph.traverse_search(request.term)
        return self.store.search_chronological(request.term)


__all__ = ["SearchRequest", "SearchRouter", "SearchType"]
