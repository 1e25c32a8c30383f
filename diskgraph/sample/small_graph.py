"""Forward plus derived reverse adjacency over the first N nodes.

Reverse lists are index-addressed by node id and only cover the window:
an edge u -> v yields a referenced_by entry iff v < N. Edges leaving the
window stay in the forward lists. If the scan ends early both structures
shrink to the number of nodes actually read.
"""

import logging
from pathlib import Path
from typing import BinaryIO

from diskgraph.formats.detect import (
    GraphFileError,
    parse_data_type,
    read_raw_graph_header,
    read_sector_index,
)
from diskgraph.formats.types import (
    NEIGHBOR_ID_SIZE,
    DiskIndexDataType,
    GraphLayout,
    RawGraphLayout,
    SectorIndexLayout,
    UnifiedContainerLayout,
)
from diskgraph.sample.types import SmallGraph
from diskgraph.scan import iter_records, stream_size

log = logging.getLogger(__name__)


def extract_small_graph(
    fh: BinaryIO, layout: GraphLayout, num_nodes: int
) -> SmallGraph:
    """Build forward and referenced_by lists for node ids [0, num_nodes)."""
    if num_nodes < 0:
        raise ValueError(f"num_nodes must be >= 0, got {num_nodes}")
    if isinstance(layout, UnifiedContainerLayout):
        layout = layout.graph
    # the window never exceeds the records the file can hold
    window = num_nodes
    if isinstance(layout, SectorIndexLayout):
        window = min(window, layout.node_count)
    elif isinstance(layout, RawGraphLayout):
        readable = max(stream_size(fh) - layout.records_offset, 0)
        window = min(window, layout.max_records, readable // NEIGHBOR_ID_SIZE)

    forward = []
    referenced_by: list[list[int]] = [[] for _ in range(window)]
    for record in iter_records(fh, layout, neighbor_cap=0, max_nodes=window):
        if record.node_id != len(forward):
            log.debug("Node ids skip from %d to %d", len(forward), record.node_id)
            break
        forward.append(record.neighbors)
        for v in record.neighbors[record.neighbors < window]:
            referenced_by[int(v)].append(record.node_id)

    if len(forward) < window:
        log.debug("Small graph shrunk from %d to %d nodes", window, len(forward))
        del referenced_by[len(forward):]

    return SmallGraph(
        entry_point=layout.entry_point,
        requested=num_nodes,
        forward=forward,
        referenced_by=referenced_by,
    )


def extract_small_graph_from_graph_file(
    path: str | Path, offset: int, num_nodes: int
) -> SmallGraph:
    """Small graph of a raw graph whose header sits at ``offset``."""
    if num_nodes < 0:
        raise ValueError(f"num_nodes must be >= 0, got {num_nodes}")
    try:
        with open(path, "rb") as fh:
            layout = read_raw_graph_header(fh, offset)
            return extract_small_graph(fh, layout, num_nodes)
    except (OSError, GraphFileError) as exc:
        log.warning("Could not extract small graph from %s: %s", path, exc)
        return SmallGraph(entry_point=0, requested=num_nodes, error=str(exc))


def extract_small_graph_from_disk_index(
    path: str | Path, data_type: str | DiskIndexDataType, num_nodes: int
) -> SmallGraph:
    """Small graph of a disk index; empty for multi-sector layouts."""
    if num_nodes < 0:
        raise ValueError(f"num_nodes must be >= 0, got {num_nodes}")
    data_type = parse_data_type(data_type)
    try:
        with open(path, "rb") as fh:
            layout = read_sector_index(fh, data_type)
            return extract_small_graph(fh, layout, num_nodes)
    except (OSError, GraphFileError) as exc:
        log.warning("Could not extract small graph from %s: %s", path, exc)
        return SmallGraph(entry_point=0, requested=num_nodes, error=str(exc))
