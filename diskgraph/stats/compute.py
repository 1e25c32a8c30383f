"""Graph statistics from persisted files and from in-memory adjacency.

File-level functions never raise for unreadable or malformed files: they
log a warning and return a zero-filled GraphStats whose ``error`` holds the
reason. Invalid arguments (unknown data type, weak_threshold < 1) still
raise ValueError.
"""

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO

import numpy as np
import scipy.sparse

from diskgraph.formats.detect import (
    GraphFileError,
    LayoutError,
    parse_data_type,
    read_raw_graph_header,
    read_sector_index,
    read_unified_container,
)
from diskgraph.formats.types import DiskIndexDataType, RawGraphLayout
from diskgraph.scan.raw import iter_raw_records
from diskgraph.scan.sector import iter_sector_records
from diskgraph.stats.accumulator import DEFAULT_WEAK_THRESHOLD, StatsAccumulator
from diskgraph.stats.types import GraphStats

log = logging.getLogger(__name__)


def _failed(path: str | Path, exc: Exception, weak_threshold: int) -> GraphStats:
    log.warning("Could not compute graph stats for %s: %s", path, exc)
    return GraphStats.failed(str(exc), weak_threshold)


def _scan_raw_graph(
    fh: BinaryIO, layout: RawGraphLayout, acc: StatsAccumulator
) -> GraphStats:
    for record in iter_raw_records(fh, layout):
        acc.add(record.degree)
    return acc.finalize(
        frozen_nodes=layout.frozen_count, entry_point=layout.entry_point
    )


def compute_stats_from_graph_file(
    path: str | Path,
    offset: int = 0,
    weak_threshold: int = DEFAULT_WEAK_THRESHOLD,
) -> GraphStats:
    """Compute stats for a raw graph stored at ``offset`` of ``path``.

    The node count is the number of records fully read, so a truncated file
    yields stats over its readable prefix instead of an error.

    Args:
        path: Raw graph file, or any file embedding a raw graph region.
        offset: Byte offset of the 24-byte graph header.
        weak_threshold: Degrees below this are counted as weak.

    Returns:
        GraphStats; total_nodes == 0 with ``error`` set on failure.
    """
    acc = StatsAccumulator(weak_threshold)
    try:
        with open(path, "rb") as fh:
            layout = read_raw_graph_header(fh, offset)
            return _scan_raw_graph(fh, layout, acc)
    except (OSError, GraphFileError) as exc:
        return _failed(path, exc, weak_threshold)


def compute_stats_from_unified_index(
    path: str | Path, weak_threshold: int = DEFAULT_WEAK_THRESHOLD
) -> GraphStats:
    """Compute stats for the graph region embedded in a unified container."""
    acc = StatsAccumulator(weak_threshold)
    try:
        with open(path, "rb") as fh:
            container = read_unified_container(fh)
            return _scan_raw_graph(fh, container.graph, acc)
    except (OSError, GraphFileError) as exc:
        return _failed(path, exc, weak_threshold)


def locate_unified_graph(path: str | Path) -> int | None:
    """Return the graph offset of a unified container, None if not one."""
    try:
        with open(path, "rb") as fh:
            return read_unified_container(fh).metadata_size
    except (OSError, LayoutError) as exc:
        log.info("%s is not a readable unified container: %s", path, exc)
        return None


def compute_stats_from_disk_index(
    path: str | Path,
    data_type: str | DiskIndexDataType,
    weak_threshold: int = DEFAULT_WEAK_THRESHOLD,
) -> GraphStats:
    """Compute stats for a sector-aligned disk index.

    Node count and entry point come from the metadata header; degrees are
    read from every fully present sector. When nodes span several sectors
    only the metadata is reported and ``degree_stats_available`` is False.

    Args:
        path: Disk index file.
        data_type: Coordinate element type (float, uint8 or int8).
        weak_threshold: Degrees below this are counted as weak.

    Returns:
        GraphStats; total_nodes == 0 with ``error`` set on failure.
    """
    data_type = parse_data_type(data_type)
    acc = StatsAccumulator(weak_threshold)
    try:
        with open(path, "rb") as fh:
            layout = read_sector_index(fh, data_type)
            if layout.multi_sector_nodes:
                log.warning(
                    "%s stores nodes across several sectors; "
                    "degree statistics are not computed",
                    path,
                )
                return acc.finalize(
                    total_nodes=layout.node_count,
                    entry_point=layout.entry_point,
                    degree_stats_available=False,
                )
            for record in iter_sector_records(fh, layout):
                acc.add(record.degree)
    except (OSError, GraphFileError) as exc:
        return _failed(path, exc, weak_threshold)

    if acc.count < layout.node_count:
        log.warning(
            "%s: read degrees for %d of %d nodes", path, acc.count, layout.node_count
        )
    return acc.finalize(
        total_nodes=layout.node_count, entry_point=layout.entry_point
    )


def compute_graph_stats(
    adjacency: Sequence[Sequence[int]] | scipy.sparse.spmatrix | scipy.sparse.sparray,
    nd: int,
    num_frozen: int,
    entry_point: int,
    weak_threshold: int = DEFAULT_WEAK_THRESHOLD,
) -> GraphStats:
    """Compute stats for an in-memory graph of nd + num_frozen nodes.

    Args:
        adjacency: Per-node neighbor lists, or a sparse matrix whose row i
            holds node i's out-edges.
        nd: Number of active (data) nodes.
        num_frozen: Number of frozen nodes following the active ones.
        entry_point: Traversal start node id.
        weak_threshold: Degrees below this are counted as weak.

    Returns:
        GraphStats over the first nd + num_frozen rows.

    Raises:
        ValueError: If adjacency has fewer rows than nd + num_frozen.
    """
    total = nd + num_frozen
    if scipy.sparse.issparse(adjacency):
        degrees = np.diff(scipy.sparse.csr_matrix(adjacency).indptr)
        n_rows = adjacency.shape[0]
    else:
        n_rows = len(adjacency)
        degrees = np.fromiter(
            (len(adjacency[i]) for i in range(min(total, n_rows))),
            dtype=np.int64,
            count=min(total, n_rows),
        )
    if n_rows < total:
        raise ValueError(
            f"adjacency has {n_rows} rows, need nd + num_frozen = {total}"
        )

    acc = StatsAccumulator(weak_threshold)
    acc.add_many(degrees[:total])
    return acc.finalize(
        total_nodes=total,
        frozen_nodes=num_frozen,
        active_nodes=nd,
        entry_point=entry_point,
    )
