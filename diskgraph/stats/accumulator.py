"""Single-pass reducer over per-node out-degrees."""

import numpy as np

from diskgraph.stats.types import GraphStats

DEFAULT_WEAK_THRESHOLD = 2


class StatsAccumulator:
    """Running node/edge counts and degree min, max and weak count.

    Holds O(1) state regardless of how many degrees are fed in. Header-known
    counts (total, frozen, entry point) are supplied at finalize time, since
    a raw graph only learns its node count by reaching the end of the stream.
    """

    def __init__(self, weak_threshold: int = DEFAULT_WEAK_THRESHOLD) -> None:
        if weak_threshold < 1:
            raise ValueError(f"weak_threshold must be >= 1, got {weak_threshold}")
        self.weak_threshold = weak_threshold
        self.count = 0
        self.total_edges = 0
        self.degree_min: int | None = None
        self.degree_max = 0
        self.weak_count = 0

    def add(self, degree: int) -> None:
        """Fold one node's out-degree into the running totals."""
        self.count += 1
        self.total_edges += degree
        if self.degree_min is None or degree < self.degree_min:
            self.degree_min = degree
        if degree > self.degree_max:
            self.degree_max = degree
        if degree < self.weak_threshold:
            self.weak_count += 1

    def add_many(self, degrees: np.ndarray) -> None:
        """Fold a batch of out-degrees (any integer array) at once."""
        degrees = np.asarray(degrees, dtype=np.int64)
        if degrees.size == 0:
            return
        batch_min = int(degrees.min())
        self.count += int(degrees.size)
        self.total_edges += int(degrees.sum())
        if self.degree_min is None or batch_min < self.degree_min:
            self.degree_min = batch_min
        self.degree_max = max(self.degree_max, int(degrees.max()))
        self.weak_count += int(np.count_nonzero(degrees < self.weak_threshold))

    @property
    def degree_avg(self) -> float:
        """Mean over the degrees observed so far (0.0 before any)."""
        if self.count == 0:
            return 0.0
        return self.total_edges / self.count

    def finalize(
        self,
        total_nodes: int | None = None,
        frozen_nodes: int = 0,
        active_nodes: int | None = None,
        entry_point: int = 0,
        degree_stats_available: bool = True,
    ) -> GraphStats:
        """Build the GraphStats record.

        Args:
            total_nodes: Node count from the header; defaults to the number
                of degrees observed.
            frozen_nodes: Header-declared frozen node count.
            active_nodes: Defaults to total_nodes - frozen_nodes, floored at 0.
            entry_point: Traversal start node id from the header.
            degree_stats_available: False when degrees could not be scanned.
        """
        if total_nodes is None:
            total_nodes = self.count
        if active_nodes is None:
            active_nodes = max(total_nodes - frozen_nodes, 0)
        return GraphStats(
            total_nodes=total_nodes,
            active_nodes=active_nodes,
            frozen_nodes=frozen_nodes,
            total_edges=self.total_edges,
            degree_min=self.degree_min if self.degree_min is not None else 0,
            degree_avg=self.degree_avg,
            degree_max=self.degree_max,
            weak_count=self.weak_count,
            entry_point=entry_point,
            weak_threshold=self.weak_threshold,
            degree_stats_available=degree_stats_available,
        )
