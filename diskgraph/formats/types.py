"""Layout descriptors for the three persisted graph formats.

Each supported on-disk variant is one frozen dataclass. They form a closed
union (GraphLayout) that the detector resolves once per file; scanners
dispatch on the concrete class and never re-inspect raw header bytes.
"""

from dataclasses import dataclass
from enum import StrEnum

import numpy as np

SECTOR_LEN = 4096  # page size of the disk index, also its I/O unit
DISK_INDEX_DATA_OFFSET = 4096  # first data sector, with or without marker
UNIFIED_METADATA_SIZE = 4096  # field[0] of a unified container
NEIGHBOR_ID_SIZE = 4  # u32 neighbor ids and counts
RAW_GRAPH_HEADER_SIZE = 24

# Little-endian candidate header structures, one per variant.
RAW_GRAPH_HEADER_DTYPE = np.dtype(
    [
        ("expected_size", "<u8"),
        ("max_out_degree", "<u4"),
        ("entry_point", "<u4"),
        ("frozen_count", "<u8"),
    ]
)
SECTOR_METADATA_DTYPE = np.dtype(
    [
        ("node_count", "<u8"),
        ("dimensionality", "<u8"),
        ("entry_point", "<u8"),
        ("max_node_length", "<u8"),
        ("nodes_per_sector", "<u8"),
    ]
)
SECTOR_MARKER_DTYPE = np.dtype([("marker_rows", "<i4"), ("marker_cols", "<i4")])
UNIFIED_METADATA_DTYPE = np.dtype([("fields", "<u8", (5,))])

# The marker pair is the (rows, cols) prefix of a saved u64 matrix; a real
# metadata block always has at least five rows.
MIN_MARKER_ROWS = 5


class DiskIndexDataType(StrEnum):
    """Coordinate element type of a disk index, not inferable from bytes."""

    FLOAT = "float"
    UINT8 = "uint8"
    INT8 = "int8"

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(_NUMPY_TYPES[self])

    @property
    def element_size(self) -> int:
        return self.dtype.itemsize


_NUMPY_TYPES = {
    DiskIndexDataType.FLOAT: "<f4",
    DiskIndexDataType.UINT8: "u1",
    DiskIndexDataType.INT8: "i1",
}


@dataclass(frozen=True, slots=True)
class RawGraphLayout:
    """Count-prefixed adjacency stream starting at ``offset``."""

    offset: int  # byte offset of the 24-byte header
    expected_size: int  # header + records, in bytes, relative to offset
    max_out_degree: int
    entry_point: int
    frozen_count: int

    @property
    def records_offset(self) -> int:
        return self.offset + RAW_GRAPH_HEADER_SIZE

    @property
    def max_records(self) -> int:
        """Upper bound on the node count; every record takes >= 4 bytes."""
        return (self.expected_size - RAW_GRAPH_HEADER_SIZE) // NEIGHBOR_ID_SIZE


@dataclass(frozen=True, slots=True)
class UnifiedContainerLayout:
    """Single-file index whose first page holds five u64 metadata fields."""

    metadata_size: int  # field[0], always 4096
    next_section_offset: int  # field[1], strictly after the metadata page
    fields: tuple[int, ...]
    graph: RawGraphLayout  # embedded graph region at metadata_size


@dataclass(frozen=True, slots=True)
class SectorIndexLayout:
    """Fixed-stride node records packed into 4096-byte sectors."""

    node_count: int
    dimensionality: int
    entry_point: int
    max_node_length: int
    nodes_per_sector: int
    data_type: DiskIndexDataType

    @property
    def element_size(self) -> int:
        return self.data_type.element_size

    @property
    def neighbor_count_offset(self) -> int:
        """Byte offset of the u32 neighbor count inside a node record."""
        return self.dimensionality * self.element_size

    @property
    def multi_sector_nodes(self) -> bool:
        return self.nodes_per_sector == 0

    @property
    def total_sectors(self) -> int:
        if self.nodes_per_sector == 0:
            return 0
        return -(-self.node_count // self.nodes_per_sector)

    def slots_in_sector(self, sector: int) -> int:
        """Number of slots in ``sector`` that hold a node id < node_count."""
        if sector < 0 or sector >= self.total_sectors:
            return 0
        first = sector * self.nodes_per_sector
        return min(self.nodes_per_sector, self.node_count - first)


@dataclass(frozen=True, slots=True)
class MarkedSectorLayout(SectorIndexLayout):
    """Disk index whose metadata follows an 8-byte (rows, cols) marker."""

    marker_rows: int = 0
    marker_cols: int = 0


@dataclass(frozen=True, slots=True)
class BareSectorLayout(SectorIndexLayout):
    """Disk index whose five metadata fields start at byte 0."""


GraphLayout = (
    RawGraphLayout | MarkedSectorLayout | BareSectorLayout | UnifiedContainerLayout
)
