"""Structural statistics record produced by every stats operation."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class GraphStats:
    """Node, edge and out-degree summary of one persisted graph.

    A zero-filled record is returned both for unreadable files and for
    genuinely empty graphs; ``error`` tells them apart (None on success).
    ``degree_stats_available`` is False when the layout stores no per-node
    degrees that could be scanned (multi-sector disk-index nodes).
    """

    total_nodes: int = 0
    active_nodes: int = 0
    frozen_nodes: int = 0
    total_edges: int = 0
    degree_min: int = 0
    degree_avg: float = 0.0
    degree_max: int = 0
    weak_count: int = 0
    entry_point: int = 0
    weak_threshold: int = 2
    degree_stats_available: bool = True
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: str, weak_threshold: int = 2) -> "GraphStats":
        """Fail-closed result: all counters zero, ``error`` set."""
        return cls(weak_threshold=weak_threshold, error=error)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)
