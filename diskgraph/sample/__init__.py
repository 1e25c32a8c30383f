"""Bounded adjacency sampling and first-N small-graph extraction."""

from diskgraph.sample.adjacency import (
    DEFAULT_MAX_NEIGHBORS,
    sample_adjacency,
    sample_adjacency_from_disk_index,
    sample_adjacency_from_graph_file,
)
from diskgraph.sample.small_graph import (
    extract_small_graph,
    extract_small_graph_from_disk_index,
    extract_small_graph_from_graph_file,
)
from diskgraph.sample.types import AdjacencySample, NodeAdjacency, SmallGraph

__all__ = [
    "AdjacencySample",
    "DEFAULT_MAX_NEIGHBORS",
    "NodeAdjacency",
    "SmallGraph",
    "extract_small_graph",
    "extract_small_graph_from_disk_index",
    "extract_small_graph_from_graph_file",
    "sample_adjacency",
    "sample_adjacency_from_disk_index",
    "sample_adjacency_from_graph_file",
]
