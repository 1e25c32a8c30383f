"""Streaming degree statistics for persisted and in-memory graphs."""

from diskgraph.stats.accumulator import DEFAULT_WEAK_THRESHOLD, StatsAccumulator
from diskgraph.stats.compute import (
    compute_graph_stats,
    compute_stats_from_disk_index,
    compute_stats_from_graph_file,
    compute_stats_from_unified_index,
    locate_unified_graph,
)
from diskgraph.stats.types import GraphStats

__all__ = [
    "DEFAULT_WEAK_THRESHOLD",
    "GraphStats",
    "StatsAccumulator",
    "compute_graph_stats",
    "compute_stats_from_disk_index",
    "compute_stats_from_graph_file",
    "compute_stats_from_unified_index",
    "locate_unified_graph",
]
