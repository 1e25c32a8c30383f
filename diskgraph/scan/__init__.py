"""Record scanners for raw graph streams and sector-aligned disk indexes."""

from collections.abc import Iterator
from typing import BinaryIO

from diskgraph.formats.types import (
    GraphLayout,
    RawGraphLayout,
    SectorIndexLayout,
    UnifiedContainerLayout,
)
from diskgraph.scan.raw import iter_raw_records, stream_size
from diskgraph.scan.sector import iter_sector_records
from diskgraph.scan.types import NEIGHBOR_DTYPE, NodeAdjacency


def iter_records(
    fh: BinaryIO,
    layout: GraphLayout,
    neighbor_cap: int | None = None,
    max_nodes: int | None = None,
) -> Iterator[NodeAdjacency]:
    """Dispatch to the scanner matching a resolved layout variant."""
    if isinstance(layout, UnifiedContainerLayout):
        layout = layout.graph
    if isinstance(layout, RawGraphLayout):
        return iter_raw_records(fh, layout, neighbor_cap, max_nodes)
    if isinstance(layout, SectorIndexLayout):
        return iter_sector_records(fh, layout, neighbor_cap, max_nodes)
    raise TypeError(f"unsupported layout {type(layout).__name__}")


__all__ = [
    "NEIGHBOR_DTYPE",
    "NodeAdjacency",
    "iter_raw_records",
    "iter_records",
    "iter_sector_records",
    "stream_size",
]
