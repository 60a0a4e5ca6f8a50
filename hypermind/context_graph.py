"""
Append-only graph of scope pushes.

One node per pushed frame and one parent-child edge per push that had a
parent. Nothing is ever removed.
"""

from __future__ import annotations

import threading

from .canonical import canonicalize
from .types import GraphEdge, GraphNode, ScopeFrame, SearchHit


class ContextGraph:
    """Nodes and edges recorded as scopes are pushed."""

    def __init__(self) -> None:
        self._nodes: list[GraphNode] = []
        self._edges: list[GraphEdge] = []
        self._lock = threading.RLock()

    def add_node(self, frame: ScopeFrame) -> GraphNode:
        """Append a node holding a snapshot of the frame."""
        node = GraphNode(id=frame.id, data=frame.to_dict())
        with self._lock:
            self._nodes.append(node)
        return node

    def add_edge_if_parent(self, frame: ScopeFrame) -> GraphEdge | None:
        """Append a parent -> frame edge when the frame has a parent."""
        if frame.parent_id is None:
            return None
        edge = GraphEdge(source=frame.parent_id, target=frame.id)
        with self._lock:
            self._edges.append(edge)
        return edge

    def record_push(self, frame: ScopeFrame) -> None:
        """Add the node and, if any, the parent edge as one step."""
        with self._lock:
            self.add_node(frame)
            self.add_edge_if_parent(frame)

    def traverse_search(self, term: str) -> list[SearchHit]:
        """
        Return nodes whose serialized data contains term.

        A flat scan in insertion order; edges are not followed.
        """
        with self._lock:
            nodes = list(self._nodes)
        return [
            SearchHit(key=node.id, value=node.data, metadata={"type": "graph-node"})
            for node in nodes
            if term in canonicalize(node.data)
        ]

    def nodes(self) -> list[GraphNode]:
        with self._lock:
            return list(self._nodes)

    def edges(self) -> list[GraphEdge]:
        with self._lock:
            return list(self._edges)

    def children_of(self, node_id: str) -> list[str]:
        """Ids of nodes pushed directly on top of node_id."""
        with self._lock:
            return [edge.target for edge in self._edges if edge.source == node_id]

    def parent_of(self, node_id: str) -> str | None:
        with self._lock:
            for edge in self._edges:
                if edge.target == node_id:
                    return edge.source
            return None

    @property
    def node_count(self) -> int:
        with self._lock:
            return len(self._nodes)

    @property
    def edge_count(self) -> int:
        with self._lock:
            return len(self._edges)

    def clear(self) -> None:
        """Drop every node and edge. Only used on teardown."""
        with self._lock:
            self._nodes.clear()
            self._edges.clear()


__all__ = ["ContextGraph"]
