"""On-disk layout descriptors and format detection for graph index files."""

from diskgraph.formats.detect import (
    LAYOUT_KINDS,
    GraphFileError,
    LayoutError,
    detect_layout,
    parse_data_type,
    read_raw_graph_header,
    read_sector_index,
    read_unified_container,
)
from diskgraph.formats.types import (
    DISK_INDEX_DATA_OFFSET,
    SECTOR_LEN,
    BareSectorLayout,
    DiskIndexDataType,
    GraphLayout,
    MarkedSectorLayout,
    RawGraphLayout,
    SectorIndexLayout,
    UnifiedContainerLayout,
)

__all__ = [
    "BareSectorLayout",
    "DISK_INDEX_DATA_OFFSET",
    "DiskIndexDataType",
    "GraphFileError",
    "GraphLayout",
    "LAYOUT_KINDS",
    "LayoutError",
    "MarkedSectorLayout",
    "RawGraphLayout",
    "SECTOR_LEN",
    "SectorIndexLayout",
    "UnifiedContainerLayout",
    "detect_layout",
    "parse_data_type",
    "read_raw_graph_header",
    "read_sector_index",
    "read_unified_container",
]
