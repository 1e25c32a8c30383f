"""Bounded adjacency previews taken from the first nodes of a graph file."""

from dataclasses import dataclass, field

import numpy as np
import scipy.sparse

from diskgraph.scan.types import NodeAdjacency


@dataclass(frozen=True)
class AdjacencySample:
    """Degrees and capped neighbor prefixes for node ids 0..len(nodes)-1.

    ``requested`` is the window size asked for; ``nodes`` may be shorter
    when the file holds fewer nodes or is truncated.
    """

    entry_point: int
    requested: int
    max_neighbors: int  # 0 = uncapped
    nodes: list[NodeAdjacency] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, eq=False)
class SmallGraph:
    """Forward and in-window reverse adjacency of the first N nodes.

    Both lists are indexed by node id. ``forward[u]`` holds every out-neighbor
    of u that was read, including ids outside the window; ``referenced_by[v]``
    lists the window nodes u with an edge u -> v, in scan order. Edges that
    leave the window never produce reverse entries.
    """

    entry_point: int
    requested: int
    forward: list[np.ndarray] = field(default_factory=list)
    referenced_by: list[list[int]] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def num_nodes(self) -> int:
        return len(self.forward)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SmallGraph):
            return NotImplemented
        return (
            self.entry_point == other.entry_point
            and self.requested == other.requested
            and self.referenced_by == other.referenced_by
            and self.error == other.error
            and len(self.forward) == len(other.forward)
            and all(np.array_equal(a, b) for a, b in zip(self.forward, other.forward))
        )

    def to_csr(self) -> scipy.sparse.csr_matrix:
        """In-window edges as an (N, N) sparse matrix, row = source node."""
        n = self.num_nodes
        rows: list[np.ndarray] = []
        cols: list[np.ndarray] = []
        for u, nbrs in enumerate(self.forward):
            inside = nbrs[nbrs < n].astype(np.int64)
            rows.append(np.full(inside.size, u, dtype=np.int64))
            cols.append(inside)
        if rows:
            row_idx = np.concatenate(rows)
            col_idx = np.concatenate(cols)
        else:
            row_idx = col_idx = np.empty(0, dtype=np.int64)
        data = np.ones(row_idx.size, dtype=np.int32)
        return scipy.sparse.csr_matrix((data, (row_idx, col_idx)), shape=(n, n))
