"""Inspection configuration dataclass, frozen and slotted for immutability."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class InspectConfig:
    """Report and sanity-bound parameters for one inspection run.

    Validation runs in __post_init__ to reject invalid configurations early.
    """

    adjacency_sample: int = 0  # nodes in the adjacency listing (0 = off)
    small_graph: int = 0  # nodes in the forward/reverse listing (0 = off)
    max_neighbors: int = 20  # neighbor ids shown per node (0 = no cap)
    weak_threshold: int = 2  # degree below this counts as weak
    max_reasonable_degree: int = 10_000_000
    max_reasonable_nodes: int = 500_000_000

    def __post_init__(self) -> None:
        for name in (
            "adjacency_sample",
            "small_graph",
            "max_neighbors",
            "max_reasonable_degree",
            "max_reasonable_nodes",
        ):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")
        if self.weak_threshold < 1:
            raise ValueError(
                f"weak_threshold must be >= 1, got {self.weak_threshold}"
            )
