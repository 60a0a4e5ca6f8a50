"""
HyperMind: in-memory tiered context store with hierarchical scope tracking.

Exports the HyperMind facade, its components and the core types.
"""

from .canonical import canonicalize
from .config import HyperMindConfig, ScopePolicyConfig, TierPolicyConfig
from .context_graph import ContextGraph
from .errors import EmptyStackError, HyperMindError, StoreClosedError
from .hypermind import HyperMind
from .scope_selector import DomainRegistry, ScopeObserver, ScopeSelector, ShapeRegistry
from .scope_stack import ScopeStack
from .search import SearchRequest, SearchRouter, SearchType
from .tier_store import TierStore
from .types import (
    SCAN_ORDER,
    ContextEntry,
    GraphEdge,
    GraphNode,
    ScopeDescriptor,
    ScopeFrame,
    SearchHit,
    StoreStats,
    Tier,
    TransitionRecord,
)

__all__ = [
    "SCAN_ORDER",
    "ContextEntry",
    "ContextGraph",
    "DomainRegistry",
    "EmptyStackError",
    "GraphEdge",
    "GraphNode",
    "HyperMind",
    "HyperMindConfig",
    "HyperMindError",
    "ScopeDescriptor",
    "ScopeFrame",
    "ScopeObserver",
    "ScopePolicyConfig",
    "ScopeSelector",
    "ScopeStack",
    "SearchHit",
    "SearchRequest",
    "SearchRouter",
    "SearchType",
    "ShapeRegistry",
    "StoreClosedError",
    "StoreStats",
    "Tier",
    "TierPolicyConfig",
    "TierStore",
    "TransitionRecord",
    "canonicalize",
]
