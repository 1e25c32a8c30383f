"""Text reports for graph stats, adjacency samples and small graphs."""

from diskgraph.reporting.text import (
    format_id_list,
    render_adjacency_sample,
    render_small_graph,
    render_summary,
)

__all__ = [
    "format_id_list",
    "render_adjacency_sample",
    "render_small_graph",
    "render_summary",
]
