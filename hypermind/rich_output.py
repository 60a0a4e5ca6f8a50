"""
Rich terminal output for HyperMind.

Renders the tier contents, the scope stack and the context graph using the
Rich library with:
- A small symbol vocabulary (no emoji)
- One color per tier
- Configurable verbosity levels
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from .canonical import canonicalize
from .hypermind import HyperMind
from .types import SCAN_ORDER, SearchHit, Tier

# ============================================================================
# Visual Language
# ============================================================================


class Symbol(str, Enum):
    """Symbols used in HyperMind output."""

    SCOPE = "◆"
    ENTRY = "∿"
    SEARCH = "⊕"
    EDGE = "→"
    EMPTY = "∅"


TIER_COLORS: dict[Tier, str] = {
    Tier.HOT: "red",
    Tier.WARM: "yellow",
    Tier.COLD: "blue",
    Tier.ARCHIVED: "dim",
}


# ============================================================================
# Configuration
# ============================================================================


@dataclass
class OutputConfig:
    """Configuration for Rich output."""

    verbosity: Literal["quiet", "normal", "verbose"] = "normal"
    colors: bool = True
    max_value_width: int = 60
    panel_width: int | None = None  # Auto-detect if None

    @classmethod
    def from_env(cls) -> OutputConfig:
        """
        Load configuration from environment variables.

        Respects NO_COLOR and HYPERMIND_VERBOSITY.
        """
        no_color = os.environ.get("NO_COLOR") is not None

        verbosity = os.environ.get("HYPERMIND_VERBOSITY", "normal")
        if verbosity not in ("quiet", "normal", "verbose"):
            verbosity = "normal"

        return cls(
            verbosity=verbosity,  # type: ignore[arg-type]
            colors=not no_color,
        )


def truncate(value: Any, width: int) -> str:
    """Canonical form of a value, cut to width characters."""
    text = value if isinstance(value, str) else canonicalize(value)
    return text if len(text) <= width else text[: width - 3] + "..."


# ============================================================================
# Console
# ============================================================================


class HyperMindConsole:
    """Rich-formatted views of a HyperMind instance."""

    def __init__(self, config: OutputConfig | None = None, console: Console | None = None):
        self.config = config or OutputConfig.from_env()
        self.console = console or Console(
            no_color=not self.config.colors,
            width=self.config.panel_width,
        )

    def _should_emit(self, level: str) -> bool:
        levels = ["quiet", "normal", "verbose"]
        event_level = levels.index(level) if level in levels else 1
        return event_level <= levels.index(self.config.verbosity)

    def tier_table(self, mind: HyperMind) -> Table:
        """Table of every entry, one row per entry, tiers in scan order."""
        table = Table(title="Context tiers")
        table.add_column("Tier")
        table.add_column("Key")
        table.add_column("Accesses", justify="right")
        table.add_column("Created")
        if self._should_emit("verbose"):
            table.add_column("Value")

        for tier in SCAN_ORDER:
            for key, entry in mind.store.tier_entries(tier).items():
                row = [
                    Text(tier.value, style=TIER_COLORS[tier]),
                    Text(key),
                    str(entry.access_count),
                    entry.created_at.isoformat(timespec="seconds"),
                ]
                if self._should_emit("verbose"):
                    row.append(Text(truncate(entry.value, self.config.max_value_width)))
                table.add_row(*row)
        return table

    def scope_tree(self, mind: HyperMind) -> Tree:
        """Scope stack as a nested tree, bottom frame at the root."""
        frames = mind.scopes.frames()
        root = Tree(Text(f"{Symbol.SCOPE.value} scopes ({len(frames)})", style="bold cyan"))
        if not frames:
            root.add(Text(f"{Symbol.EMPTY.value} empty", style="dim"))
            return root

        node = root
        for frame in frames:
            label = Text(f"{Symbol.SCOPE.value} {frame.id}", style="cyan")
            label.append(f" {truncate(frame.config, self.config.max_value_width)}", style="dim")
            node = node.add(label)
        return root

    def graph_panel(self, mind: HyperMind) -> Panel:
        """Node and edge summary of the context graph."""
        text = Text()
        text.append(f"nodes: {mind.graph.node_count}  edges: {mind.graph.edge_count}\n")
        if self._should_emit("verbose"):
            for edge in mind.graph.edges():
                text.append(f"  {edge.source} {Symbol.EDGE.value} {edge.target}\n", style="dim")
        return Panel(text, title="Context graph", width=self.config.panel_width)

    def emit_state(self, mind: HyperMind) -> None:
        """Print tiers, scopes and graph."""
        if not self._should_emit("normal"):
            return
        self.console.print(self.tier_table(mind))
        self.console.print(self.scope_tree(mind))
        self.console.print(self.graph_panel(mind))

    def emit_results(self, term: str, hits: list[SearchHit]) -> None:
        """Print search results, one line per hit."""
        if not self._should_emit("normal"):
            return

        header = Text(f"{Symbol.SEARCH.value} ", style="bold blue")
        header.append(f'"{term}"', style="bold")
        header.append(f" {len(hits)} result(s)", style="dim")
        self.console.print(header)

        for hit in hits:
            line = Text(f"  {Symbol.ENTRY.value} {hit.key}")
            if hit.tier is not None:
                line.append(f" [{hit.tier.value}]", style=TIER_COLORS[hit.tier])
            else:
                line.append(f" [{hit.metadata.get('type', 'node')}]", style="magenta")
            self.console.print(line)


__all__ = [
    "TIER_COLORS",
    "HyperMindConsole",
    "OutputConfig",
    "Symbol",
    "truncate",
]
