"""Bounded per-node neighbor previews for raw graphs and disk indexes."""

import logging
from pathlib import Path
from typing import BinaryIO

from diskgraph.formats.detect import (
    GraphFileError,
    parse_data_type,
    read_raw_graph_header,
    read_sector_index,
)
from diskgraph.formats.types import DiskIndexDataType, GraphLayout, UnifiedContainerLayout
from diskgraph.sample.types import AdjacencySample
from diskgraph.scan import iter_records

log = logging.getLogger(__name__)

DEFAULT_MAX_NEIGHBORS = 20


def check_window(num_nodes: int, max_neighbors: int) -> None:
    """Reject negative window sizes and neighbor caps."""
    if num_nodes < 0:
        raise ValueError(f"num_nodes must be >= 0, got {num_nodes}")
    if max_neighbors < 0:
        raise ValueError(f"max_neighbors must be >= 0, got {max_neighbors}")


def sample_adjacency(
    fh: BinaryIO,
    layout: GraphLayout,
    num_nodes: int,
    max_neighbors: int = DEFAULT_MAX_NEIGHBORS,
) -> AdjacencySample:
    """Read the first ``num_nodes`` nodes of an already-resolved layout.

    Each node keeps its true degree and the first min(degree, max_neighbors)
    ids (all ids when max_neighbors is 0). Fewer nodes are returned when the
    graph is smaller than the window or the file is truncated.
    """
    check_window(num_nodes, max_neighbors)
    if isinstance(layout, UnifiedContainerLayout):
        layout = layout.graph
    nodes = list(
        iter_records(fh, layout, neighbor_cap=max_neighbors, max_nodes=num_nodes)
    )
    log.debug("Sampled %d of %d requested nodes", len(nodes), num_nodes)
    return AdjacencySample(
        entry_point=layout.entry_point,
        requested=num_nodes,
        max_neighbors=max_neighbors,
        nodes=nodes,
    )


def sample_adjacency_from_graph_file(
    path: str | Path,
    offset: int,
    num_nodes: int,
    max_neighbors: int = DEFAULT_MAX_NEIGHBORS,
) -> AdjacencySample:
    """Adjacency preview of a raw graph whose header sits at ``offset``.

    Returns an empty sample with ``error`` set if the header is unreadable.
    """
    check_window(num_nodes, max_neighbors)
    try:
        with open(path, "rb") as fh:
            layout = read_raw_graph_header(fh, offset)
            return sample_adjacency(fh, layout, num_nodes, max_neighbors)
    except (OSError, GraphFileError) as exc:
        log.warning("Could not sample adjacency from %s: %s", path, exc)
        return AdjacencySample(
            entry_point=0,
            requested=num_nodes,
            max_neighbors=max_neighbors,
            error=str(exc),
        )


def sample_adjacency_from_disk_index(
    path: str | Path,
    data_type: str | DiskIndexDataType,
    num_nodes: int,
    max_neighbors: int = DEFAULT_MAX_NEIGHBORS,
) -> AdjacencySample:
    """Adjacency preview of a disk index.

    Multi-sector layouts yield an empty but successful sample.
    """
    check_window(num_nodes, max_neighbors)
    data_type = parse_data_type(data_type)
    try:
        with open(path, "rb") as fh:
            layout = read_sector_index(fh, data_type)
            return sample_adjacency(fh, layout, num_nodes, max_neighbors)
    except (OSError, GraphFileError) as exc:
        log.warning("Could not sample adjacency from %s: %s", path, exc)
        return AdjacencySample(
            entry_point=0,
            requested=num_nodes,
            max_neighbors=max_neighbors,
            error=str(exc),
        )
