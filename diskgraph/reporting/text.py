"""Plain-text rendering of stats summaries and adjacency listings.

Produces the three report shapes printed by the inspection driver: a
one-line structural summary, a capped "id: [n1, n2, ...]" listing, and a
forward plus referenced_by listing for a small graph window.
"""

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from diskgraph.sample.types import AdjacencySample, SmallGraph
from diskgraph.stats.types import GraphStats

log = logging.getLogger(__name__)

# Template directory relative to this file
_TEMPLATE_DIR = Path(__file__).parent / "templates"


def _sig6(value: float) -> str:
    """Six significant digits, trailing zeros dropped (printf %g)."""
    return f"{value:g}"


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["sig6"] = _sig6
    return env


_ENV = _environment()


def format_id_list(ids: Sequence[int], total: int | None = None) -> str:
    """Join ids with ", ", appending "... (total total)" when more exist."""
    parts = [str(int(i)) for i in ids]
    if total is not None and total > len(parts):
        parts.append(f"... ({total} total)")
    return ", ".join(parts)


def _render(template_name: str, **context: Any) -> str:
    return _ENV.get_template(template_name).render(**context)


def render_summary(stats: GraphStats) -> str:
    """One-line structural summary of a GraphStats record."""
    return _render("summary.txt.j2", s=stats)


def render_adjacency_sample(sample: AdjacencySample) -> str:
    """Header line plus one "id: [ids]" line per sampled node."""
    rows = [
        {"node_id": node.node_id, "ids": format_id_list(node.neighbors, node.degree)}
        for node in sample.nodes
    ]
    return _render(
        "adjacency.txt.j2",
        error=sample.error,
        requested=sample.requested,
        entry_point=sample.entry_point,
        rows=rows,
    )


def render_small_graph(graph: SmallGraph, max_neighbors: int = 0) -> str:
    """Header plus "id: out [..]  referenced_by [..]" lines.

    Out lists are cut to ``max_neighbors`` ids for display (0 = all);
    referenced_by lists are shown in full.
    """
    rows = []
    for node_id, (out, back) in enumerate(zip(graph.forward, graph.referenced_by)):
        shown = out[:max_neighbors] if max_neighbors > 0 else out
        rows.append(
            {
                "node_id": node_id,
                "out": format_id_list(shown, len(out)),
                "referenced_by": format_id_list(back),
            }
        )
    return _render(
        "small_graph.txt.j2",
        error=graph.error,
        num_nodes=graph.num_nodes,
        entry_point=graph.entry_point,
        rows=rows,
    )
