"""Format detection and header extraction for persisted graph files.

Resolves a file to exactly one GraphLayout variant from its leading bytes.
Detection fails closed: any short read or inconsistent header field raises
LayoutError, and nothing is committed until the candidate header validates.

The disk index has two header variants that are told apart heuristically:
an optional (rows, cols) marker pair written by the u64 matrix saver, then
five u64 metadata fields. A first marker value of at least 5 selects the
marked variant; a smaller one rewinds the handle and decodes the same bytes
with the bare metadata structure. The selected variant is never abandoned
for the other one when it fails validation.
"""

import logging
from pathlib import Path
from typing import BinaryIO

import numpy as np

from diskgraph.formats.types import (
    MIN_MARKER_ROWS,
    NEIGHBOR_ID_SIZE,
    RAW_GRAPH_HEADER_DTYPE,
    RAW_GRAPH_HEADER_SIZE,
    SECTOR_LEN,
    SECTOR_MARKER_DTYPE,
    SECTOR_METADATA_DTYPE,
    UNIFIED_METADATA_DTYPE,
    UNIFIED_METADATA_SIZE,
    BareSectorLayout,
    DiskIndexDataType,
    GraphLayout,
    MarkedSectorLayout,
    RawGraphLayout,
    SectorIndexLayout,
    UnifiedContainerLayout,
)

log = logging.getLogger(__name__)

LAYOUT_KINDS = ("graph", "index", "disk-index")


class GraphFileError(Exception):
    """Base class for unreadable or structurally invalid graph files."""


class LayoutError(GraphFileError):
    """Raised when a file's header does not match the requested layout."""


def parse_data_type(value: str | DiskIndexDataType) -> DiskIndexDataType:
    """Map a type name (float, uint8, int8) to a DiskIndexDataType.

    Raises:
        ValueError: If the name is not a supported element type.
    """
    try:
        return DiskIndexDataType(value)
    except ValueError:
        choices = ", ".join(t.value for t in DiskIndexDataType)
        raise ValueError(
            f"data type must be one of {choices}, got {value!r}"
        ) from None


def _read_struct(fh: BinaryIO, dtype: np.dtype, what: str) -> np.void:
    """Read one record of ``dtype`` at the current position or raise."""
    buf = fh.read(dtype.itemsize)
    if len(buf) != dtype.itemsize:
        raise LayoutError(
            f"short read for {what}: wanted {dtype.itemsize} bytes, "
            f"got {len(buf)}"
        )
    return np.frombuffer(buf, dtype=dtype, count=1)[0]


def read_raw_graph_header(fh: BinaryIO, offset: int = 0) -> RawGraphLayout:
    """Read the 24-byte raw graph header located at ``offset``.

    Args:
        fh: Binary file handle opened for reading.
        offset: Byte offset of the header (0 for a raw graph file, the
            metadata size for a unified container).

    Returns:
        RawGraphLayout for the stream starting at ``offset``.
    """
    if offset < 0:
        raise LayoutError(f"negative graph offset {offset}")
    fh.seek(offset)
    header = _read_struct(fh, RAW_GRAPH_HEADER_DTYPE, "raw graph header")
    expected_size = int(header["expected_size"])
    if expected_size < RAW_GRAPH_HEADER_SIZE:
        raise LayoutError(
            f"raw graph declares {expected_size} bytes, less than its "
            f"{RAW_GRAPH_HEADER_SIZE}-byte header"
        )
    return RawGraphLayout(
        offset=offset,
        expected_size=expected_size,
        max_out_degree=int(header["max_out_degree"]),
        entry_point=int(header["entry_point"]),
        frozen_count=int(header["frozen_count"]),
    )


def read_unified_container(fh: BinaryIO) -> UnifiedContainerLayout:
    """Validate the unified-container metadata page and locate its graph.

    The first 40 bytes are five u64 fields. field[0] must be the metadata
    page size (4096) and field[1] must lie beyond it; the embedded graph
    region starts right after the metadata page.
    """
    fh.seek(0)
    meta = _read_struct(fh, UNIFIED_METADATA_DTYPE, "unified metadata")
    fields = tuple(int(v) for v in meta["fields"])
    if fields[0] != UNIFIED_METADATA_SIZE or fields[1] <= fields[0]:
        raise LayoutError(
            "not a unified container: expected field[0] == "
            f"{UNIFIED_METADATA_SIZE} and field[1] > field[0], "
            f"got {fields[0]} and {fields[1]}"
        )
    # The graph region sits at field[0] (the 4 KiB metadata page), not field[1].
    graph = read_raw_graph_header(fh, fields[0])
    return UnifiedContainerLayout(
        metadata_size=fields[0],
        next_section_offset=fields[1],
        fields=fields,
        graph=graph,
    )


def _check_stride(layout: SectorIndexLayout) -> None:
    """A node record must hold its coordinates and count, within one sector."""
    min_len = layout.neighbor_count_offset + NEIGHBOR_ID_SIZE
    if layout.max_node_length < min_len or layout.max_node_length > SECTOR_LEN:
        raise LayoutError(
            f"max_node_length {layout.max_node_length} outside "
            f"[{min_len}, {SECTOR_LEN}] for dimensionality "
            f"{layout.dimensionality} and {layout.data_type.value} elements"
        )


def _sector_fields(meta: np.void) -> dict[str, int]:
    return {name: int(meta[name]) for name in SECTOR_METADATA_DTYPE.names}


def read_sector_index(
    fh: BinaryIO, data_type: DiskIndexDataType
) -> MarkedSectorLayout | BareSectorLayout:
    """Read disk-index metadata, trying the marker-prefixed variant first.

    A first marker value >= 5 selects the marked variant; otherwise the
    handle is rewound and the same leading bytes are decoded as bare
    metadata. Whichever variant is selected must pass the stride check.

    Args:
        fh: Binary file handle opened for reading.
        data_type: Coordinate element type declared by the caller.

    Returns:
        MarkedSectorLayout if a plausible marker precedes the metadata,
        otherwise BareSectorLayout.

    Raises:
        LayoutError: If the selected reading is short or fails validation.
    """
    fh.seek(0)
    marker = _read_struct(fh, SECTOR_MARKER_DTYPE, "disk index marker")
    marker_rows = int(marker["marker_rows"])

    if marker_rows >= MIN_MARKER_ROWS:
        meta = _read_struct(fh, SECTOR_METADATA_DTYPE, "disk index metadata")
        layout: MarkedSectorLayout | BareSectorLayout = MarkedSectorLayout(
            **_sector_fields(meta),
            data_type=data_type,
            marker_rows=marker_rows,
            marker_cols=int(marker["marker_cols"]),
        )
    else:
        fh.seek(0)
        meta = _read_struct(fh, SECTOR_METADATA_DTYPE, "disk index metadata")
        layout = BareSectorLayout(**_sector_fields(meta), data_type=data_type)

    _check_stride(layout)
    log.debug("Disk index header: %s", layout)
    return layout


def detect_layout(
    path: str | Path,
    kind: str,
    data_type: str | DiskIndexDataType | None = None,
    offset: int = 0,
) -> GraphLayout:
    """Open ``path`` read-only and resolve its layout.

    Args:
        path: File to inspect.
        kind: "graph" (raw graph at ``offset``), "index" (unified container)
            or "disk-index" (sector-aligned index, requires ``data_type``).
        data_type: Coordinate element type for "disk-index".
        offset: Raw graph header offset for "graph".

    Returns:
        The resolved layout variant.

    Raises:
        LayoutError: If the header does not validate.
        OSError: If the file cannot be opened or read.
        ValueError: On an unknown kind or missing data type.
    """
    if kind not in LAYOUT_KINDS:
        raise ValueError(f"kind must be one of {LAYOUT_KINDS}, got {kind!r}")
    if kind == "disk-index" and data_type is None:
        raise ValueError("disk-index layout requires a data type")

    with open(path, "rb") as fh:
        if kind == "graph":
            layout: GraphLayout = read_raw_graph_header(fh, offset)
        elif kind == "index":
            layout = read_unified_container(fh)
        else:
            layout = read_sector_index(fh, parse_data_type(data_type))

    log.info("Resolved %s as %s", path, type(layout).__name__)
    return layout
