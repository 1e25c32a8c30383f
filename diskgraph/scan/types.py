"""Per-node records produced by the graph file scanners."""

from dataclasses import dataclass

import numpy as np

NEIGHBOR_DTYPE = np.dtype("<u4")
NO_NEIGHBORS = np.empty(0, dtype=NEIGHBOR_DTYPE)


@dataclass(frozen=True, eq=False)
class NodeAdjacency:
    """One node's out-degree and a (possibly capped) prefix of its neighbors.

    Uses frozen=True but omits slots=True since numpy arrays don't interact
    well with __slots__. Equality compares neighbor ids element-wise.
    """

    node_id: int
    degree: int  # neighbor count as stored in the file
    neighbors: np.ndarray  # u32 ids, at most degree of them

    @property
    def truncated(self) -> bool:
        """True when fewer ids were read than the node actually has."""
        return self.degree > len(self.neighbors)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeAdjacency):
            return NotImplemented
        return (
            self.node_id == other.node_id
            and self.degree == other.degree
            and np.array_equal(self.neighbors, other.neighbors)
        )
