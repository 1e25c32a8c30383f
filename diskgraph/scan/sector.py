"""Strided reader for the sector-aligned disk index.

Data starts at byte 4096 and is read one whole 4096-byte sector at a time;
a partial trailing sector ends the scan. Sector s holds the nodes
s * nodes_per_sector onward, slot j at byte j * max_node_length, laid out
as coordinates, a u32 neighbor count, then the u32 neighbor ids. Every
field is bounds-checked against the sector before it is decoded.
"""

import logging
from collections.abc import Iterator
from typing import BinaryIO

import numpy as np

from diskgraph.formats.types import (
    DISK_INDEX_DATA_OFFSET,
    NEIGHBOR_ID_SIZE,
    SECTOR_LEN,
    SectorIndexLayout,
)
from diskgraph.scan.types import NEIGHBOR_DTYPE, NO_NEIGHBORS, NodeAdjacency

log = logging.getLogger(__name__)


def iter_sector_records(
    fh: BinaryIO,
    layout: SectorIndexLayout,
    neighbor_cap: int | None = None,
    max_nodes: int | None = None,
) -> Iterator[NodeAdjacency]:
    """Yield node records of a disk index in id order.

    Yields nothing when nodes span several sectors (nodes_per_sector == 0).
    Neighbor ids that would run past the end of their sector are clipped,
    so a record may carry fewer ids than the cap even for a small degree.

    Args:
        fh: Binary file handle opened for reading.
        layout: Validated disk-index metadata.
        neighbor_cap: None to skip id lists entirely, 0 to read every id
            that fits in the sector, otherwise the maximum ids per node.
        max_nodes: Stop after this many records (None = whole index).

    Yields:
        NodeAdjacency per node, neighbors empty when neighbor_cap is None.
    """
    if layout.multi_sector_nodes:
        log.debug("Multi-sector nodes; no per-node records to scan")
        return

    count_offset = layout.neighbor_count_offset
    fh.seek(DISK_INDEX_DATA_OFFSET)
    emitted = 0

    for sector in range(layout.total_sectors):
        if max_nodes is not None and emitted >= max_nodes:
            log.debug("Sector scan stopped at sample size %d", max_nodes)
            return
        buf = fh.read(SECTOR_LEN)
        if len(buf) < SECTOR_LEN:
            log.debug(
                "Sector scan truncated at sector %d of %d (%d nodes read)",
                sector, layout.total_sectors, emitted,
            )
            return

        first_node = sector * layout.nodes_per_sector
        for slot in range(layout.slots_in_sector(sector)):
            if max_nodes is not None and emitted >= max_nodes:
                return
            count_at = slot * layout.max_node_length + count_offset
            ids_at = count_at + NEIGHBOR_ID_SIZE
            if ids_at > SECTOR_LEN:
                # later slots start even further into the sector
                log.debug(
                    "Slot %d of sector %d overflows the sector", slot, sector
                )
                break
            degree = int.from_bytes(buf[count_at:ids_at], "little")

            if neighbor_cap is None:
                neighbors = NO_NEIGHBORS
            else:
                take = degree if neighbor_cap == 0 else min(degree, neighbor_cap)
                take = min(take, (SECTOR_LEN - ids_at) // NEIGHBOR_ID_SIZE)
                neighbors = np.frombuffer(
                    buf, dtype=NEIGHBOR_DTYPE, count=take, offset=ids_at
                ).copy()

            yield NodeAdjacency(
                node_id=first_node + slot, degree=degree, neighbors=neighbors
            )
            emitted += 1

    log.debug("Sector scan complete: %d nodes", emitted)
