"""
Configuration management for HyperMind.

Tier policy thresholds and scope naming, loadable from a JSON file.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CONFIG_PATH = Path.home() / ".hypermind" / "config.json"


@dataclass
class TierPolicyConfig:
    """
    Thresholds driving tier transitions.

    - Hot entries older than ``demotion_age_hours`` with fewer than
      ``demotion_max_access_count`` accesses are demoted to warm.
    - Entries accessed more than ``promotion_access_threshold`` times are
      promoted one tier per retrieval.
    """

    demotion_age_hours: float = 24.0
    demotion_max_access_count: int = 5
    promotion_access_threshold: int = 10
    # Tiers whose values take part in deduplication, in scan order
    dedup_tiers: list[str] = field(default_factory=lambda: ["hot", "warm", "cold"])


@dataclass
class ScopePolicyConfig:
    """Naming of scope frames and their archive keys."""

    id_prefix: str = "scope"
    archive_key_prefix: str = "scope_"


@dataclass
class HyperMindConfig:
    """Complete HyperMind configuration."""

    tiers: TierPolicyConfig = field(default_factory=TierPolicyConfig)
    scopes: ScopePolicyConfig = field(default_factory=ScopePolicyConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> "HyperMindConfig":
        """Load configuration from file."""
        if path is None:
            path = DEFAULT_CONFIG_PATH

        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        return cls(
            tiers=TierPolicyConfig(**data.get("tiers", {})),
            scopes=ScopePolicyConfig(**data.get("scopes", {})),
        )

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = DEFAULT_CONFIG_PATH

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(
                {
                    "tiers": self.tiers.__dict__,
                    "scopes": self.scopes.__dict__,
                },
                f,
                indent=2,
            )
