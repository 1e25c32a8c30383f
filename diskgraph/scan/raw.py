"""Sequential reader for the count-prefixed adjacency stream.

A raw graph region is a 24-byte header followed by one record per node,
numbered implicitly from 0: a u32 neighbor count and that many u32 ids.
The node count is not stored; the stream ends when the bytes consumed
(header included) equal the declared size. Stats-only scans seek over the
id lists, sampling scans read a capped prefix and seek over the rest, so
both paths advance by exactly 4 + 4 * degree bytes per record.
"""

import logging
import os
from collections.abc import Iterator
from typing import BinaryIO

import numpy as np

from diskgraph.formats.types import NEIGHBOR_ID_SIZE, RAW_GRAPH_HEADER_SIZE, RawGraphLayout
from diskgraph.scan.types import NEIGHBOR_DTYPE, NO_NEIGHBORS, NodeAdjacency

log = logging.getLogger(__name__)


def stream_size(fh: BinaryIO) -> int:
    """Total size of the underlying stream; leaves the position unchanged."""
    position = fh.tell()
    size = fh.seek(0, os.SEEK_END)
    fh.seek(position)
    return size


def iter_raw_records(
    fh: BinaryIO,
    layout: RawGraphLayout,
    neighbor_cap: int | None = None,
    max_nodes: int | None = None,
) -> Iterator[NodeAdjacency]:
    """Yield node records of a raw graph region in id order.

    Truncation is not an error: a record whose count or id list runs past
    the end of the file ends the scan without being yielded, so callers see
    only fully-consumed records.

    Args:
        fh: Binary file handle opened for reading.
        layout: Header of the region to scan.
        neighbor_cap: None to skip id lists entirely, 0 to read every id,
            otherwise the maximum number of leading ids read per node.
        max_nodes: Stop after this many records (None = whole region).

    Yields:
        NodeAdjacency per node, neighbors empty when neighbor_cap is None.
    """
    end_of_file = stream_size(fh)
    position = layout.records_offset
    fh.seek(position)
    consumed = RAW_GRAPH_HEADER_SIZE
    node_id = 0

    while consumed != layout.expected_size:
        if max_nodes is not None and node_id >= max_nodes:
            log.debug("Raw scan stopped at sample size %d", max_nodes)
            return

        count_bytes = fh.read(NEIGHBOR_ID_SIZE)
        if len(count_bytes) < NEIGHBOR_ID_SIZE:
            log.debug(
                "Raw scan truncated after %d nodes (%d of %d bytes)",
                node_id, consumed, layout.expected_size,
            )
            return
        degree = int.from_bytes(count_bytes, "little")
        list_bytes = degree * NEIGHBOR_ID_SIZE
        record_end = position + NEIGHBOR_ID_SIZE + list_bytes
        if record_end > end_of_file:
            log.debug(
                "Raw scan truncated inside node %d (degree %d)", node_id, degree
            )
            return

        if neighbor_cap is None:
            neighbors = NO_NEIGHBORS
        else:
            take = degree if neighbor_cap == 0 else min(degree, neighbor_cap)
            id_bytes = fh.read(take * NEIGHBOR_ID_SIZE)
            if len(id_bytes) < take * NEIGHBOR_ID_SIZE:
                log.debug("Raw scan truncated inside node %d", node_id)
                return
            neighbors = np.frombuffer(id_bytes, dtype=NEIGHBOR_DTYPE)
        fh.seek(record_end)

        yield NodeAdjacency(node_id=node_id, degree=degree, neighbors=neighbors)

        position = record_end
        consumed += NEIGHBOR_ID_SIZE + list_bytes
        node_id += 1

    log.debug("Raw scan complete: %d nodes, %d bytes", node_id, consumed)
