"""Tests for layout descriptors and format detection."""

import io

import numpy as np
import pytest

from diskgraph.formats import (
    BareSectorLayout,
    DiskIndexDataType,
    LayoutError,
    MarkedSectorLayout,
    RawGraphLayout,
    UnifiedContainerLayout,
    detect_layout,
    parse_data_type,
    read_raw_graph_header,
    read_sector_index,
    read_unified_container,
)
from tests.builders import disk_index_bytes, raw_graph_bytes, unified_index_bytes


class TestDataType:
    """Element types map to numpy dtypes and sizes."""

    @pytest.mark.parametrize(
        "name,size", [("float", 4), ("uint8", 1), ("int8", 1)]
    )
    def test_element_size(self, name, size) -> None:
        assert parse_data_type(name).element_size == size

    def test_dtype(self) -> None:
        assert DiskIndexDataType.FLOAT.dtype == np.dtype("<f4")
        assert DiskIndexDataType.INT8.dtype == np.dtype("i1")

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValueError, match="float, uint8, int8"):
            parse_data_type("double")

    def test_enum_passthrough(self) -> None:
        assert parse_data_type(DiskIndexDataType.UINT8) is DiskIndexDataType.UINT8


class TestRawGraphHeader:
    """24-byte raw graph header parsing."""

    def test_fields(self) -> None:
        data = raw_graph_bytes([[1, 2], [0]], entry_point=1, frozen=1)
        layout = read_raw_graph_header(io.BytesIO(data))
        assert layout == RawGraphLayout(
            offset=0,
            expected_size=len(data),
            max_out_degree=2,
            entry_point=1,
            frozen_count=1,
        )
        assert layout.records_offset == 24

    def test_header_at_offset(self) -> None:
        data = b"\xff" * 100 + raw_graph_bytes([[1], [0]], entry_point=1)
        layout = read_raw_graph_header(io.BytesIO(data), offset=100)
        assert layout.offset == 100
        assert layout.records_offset == 124
        assert layout.entry_point == 1

    def test_short_header_rejected(self) -> None:
        data = raw_graph_bytes([[1]])[:20]
        with pytest.raises(LayoutError, match="short read"):
            read_raw_graph_header(io.BytesIO(data))

    def test_offset_past_end_rejected(self) -> None:
        data = raw_graph_bytes([[1]])
        with pytest.raises(LayoutError):
            read_raw_graph_header(io.BytesIO(data), offset=len(data))

    def test_declared_size_below_header_rejected(self) -> None:
        data = raw_graph_bytes([[1]], expected_size=8)
        with pytest.raises(LayoutError, match="less than"):
            read_raw_graph_header(io.BytesIO(data))

    def test_empty_graph_header(self) -> None:
        layout = read_raw_graph_header(io.BytesIO(raw_graph_bytes([])))
        assert layout.expected_size == 24


class TestUnifiedContainer:
    """Unified container metadata validation."""

    def test_valid_container(self) -> None:
        data = unified_index_bytes([[1], [0]], entry_point=1)
        layout = read_unified_container(io.BytesIO(data))
        assert isinstance(layout, UnifiedContainerLayout)
        assert layout.metadata_size == 4096
        assert layout.next_section_offset > 4096
        assert layout.graph.offset == 4096
        assert layout.graph.entry_point == 1

    def test_graph_read_at_metadata_size_not_second_field(self) -> None:
        data = unified_index_bytes(
            [[1], [0]], fields=(4096, 1 << 20, 0, 0, 0), entry_point=1
        )
        layout = read_unified_container(io.BytesIO(data))
        assert layout.next_section_offset == 1 << 20
        assert layout.graph.offset == 4096
        assert layout.graph.entry_point == 1

    def test_wrong_metadata_size_rejected(self) -> None:
        data = unified_index_bytes([[1]], fields=(2048, 8192, 0, 0, 0))
        with pytest.raises(LayoutError, match="not a unified container"):
            read_unified_container(io.BytesIO(data))

    def test_second_field_must_exceed_first(self) -> None:
        data = unified_index_bytes([[1]], fields=(4096, 4096, 0, 0, 0))
        with pytest.raises(LayoutError, match="not a unified container"):
            read_unified_container(io.BytesIO(data))

    def test_raw_graph_is_not_a_container(self) -> None:
        with pytest.raises(LayoutError):
            read_unified_container(io.BytesIO(raw_graph_bytes([[1], [0]])))

    def test_missing_graph_region_rejected(self) -> None:
        data = unified_index_bytes([[1]])[:4096]
        with pytest.raises(LayoutError, match="short read"):
            read_unified_container(io.BytesIO(data))


class TestSectorIndexDetection:
    """Marker-prefixed vs bare disk-index metadata."""

    def test_marked_header(self) -> None:
        data = disk_index_bytes([[1, 2], [0], [0, 1]], dim=4, entry_point=2)
        layout = read_sector_index(io.BytesIO(data), DiskIndexDataType.FLOAT)
        assert isinstance(layout, MarkedSectorLayout)
        assert layout.marker_rows == 9
        assert layout.marker_cols == 1
        assert layout.node_count == 3
        assert layout.dimensionality == 4
        assert layout.entry_point == 2
        assert layout.max_node_length == 16 + 4 + 8
        assert layout.nodes_per_sector == 4096 // 28

    def test_bare_header_small_node_count(self) -> None:
        data = disk_index_bytes([[1], [2], [0]], dim=4, marker=False)
        layout = read_sector_index(io.BytesIO(data), DiskIndexDataType.FLOAT)
        assert isinstance(layout, BareSectorLayout)
        assert layout.node_count == 3

    def test_marked_header_with_bad_stride_does_not_fall_back(self) -> None:
        # marker (9, 1), then max_node_length 5000 past the sector size; the
        # bare reading of the same bytes would claim 2**32 + 9 nodes
        data = disk_index_bytes(
            [[1]] * 10,
            dim=2,
            entry_point=100,
            max_node_length=5000,
            nodes_per_sector=1,
        )
        with pytest.raises(LayoutError, match="max_node_length"):
            read_sector_index(io.BytesIO(data), DiskIndexDataType.FLOAT)

    def test_large_bare_node_count_reads_as_marker(self) -> None:
        # a bare node count >= 5 selects the marked variant, whose shifted
        # metadata then fails validation
        adjacency = [[(i + k) % 100 for k in range(1, 5)] for i in range(100)]
        data = disk_index_bytes(adjacency, dim=8, marker=False, entry_point=50)
        with pytest.raises(LayoutError):
            read_sector_index(io.BytesIO(data), DiskIndexDataType.FLOAT)

    def test_negative_marker_means_bare(self) -> None:
        data = bytearray(disk_index_bytes([[1], [0]], dim=2, marker=False))
        data[0:8] = np.array([2**32 - 1], dtype="<u8").tobytes()
        layout = read_sector_index(io.BytesIO(bytes(data)), DiskIndexDataType.FLOAT)
        assert isinstance(layout, BareSectorLayout)
        assert layout.node_count == 2**32 - 1

    def test_stride_too_small_rejected(self) -> None:
        data = disk_index_bytes([[1], [0]], dim=4, max_node_length=16)
        with pytest.raises(LayoutError, match="max_node_length"):
            read_sector_index(io.BytesIO(data), DiskIndexDataType.FLOAT)

    def test_stride_larger_than_sector_rejected(self) -> None:
        data = disk_index_bytes(
            [[1], [0]], dim=4, max_node_length=5000, nodes_per_sector=0
        )
        with pytest.raises(LayoutError, match="max_node_length"):
            read_sector_index(io.BytesIO(data), DiskIndexDataType.FLOAT)

    def test_stride_check_uses_element_size(self) -> None:
        # 16 one-byte coordinates + count fit in 24 bytes, 16 floats do not.
        data = disk_index_bytes(
            [[1], [0]], dim=16, data_type="uint8", max_node_length=24
        )
        layout = read_sector_index(io.BytesIO(data), DiskIndexDataType.UINT8)
        assert layout.neighbor_count_offset == 16
        with pytest.raises(LayoutError):
            read_sector_index(io.BytesIO(data), DiskIndexDataType.FLOAT)

    def test_short_file_rejected(self) -> None:
        with pytest.raises(LayoutError, match="short read"):
            read_sector_index(io.BytesIO(b"\x09\x00\x00\x00"), DiskIndexDataType.FLOAT)


class TestSectorMath:
    """Sector count and per-sector slot occupancy."""

    def _layout(self, node_count: int, nodes_per_sector: int) -> BareSectorLayout:
        return BareSectorLayout(
            node_count=node_count,
            dimensionality=4,
            entry_point=0,
            max_node_length=64,
            nodes_per_sector=nodes_per_sector,
            data_type=DiskIndexDataType.FLOAT,
        )

    @pytest.mark.parametrize("per_sector", [1, 3, 64])
    def test_partial_last_sector(self, per_sector) -> None:
        layout = self._layout(3 * per_sector + 1, per_sector)
        assert layout.total_sectors == 4
        assert layout.slots_in_sector(3) == 1
        assert layout.slots_in_sector(0) == per_sector

    def test_exact_fill(self) -> None:
        layout = self._layout(12, 4)
        assert layout.total_sectors == 3
        assert layout.slots_in_sector(2) == 4
        assert layout.slots_in_sector(3) == 0

    def test_multi_sector_nodes(self) -> None:
        layout = self._layout(10, 0)
        assert layout.multi_sector_nodes
        assert layout.total_sectors == 0
        assert layout.slots_in_sector(0) == 0

    def test_neighbor_count_offset(self) -> None:
        assert self._layout(1, 1).neighbor_count_offset == 16


class TestDetectLayout:
    """File-level layout resolution."""

    def test_graph_kind(self, raw_graph_file) -> None:
        path = raw_graph_file([[1], [0]])
        assert isinstance(detect_layout(path, "graph"), RawGraphLayout)

    def test_index_kind(self, unified_index_file) -> None:
        path = unified_index_file([[1], [0]])
        layout = detect_layout(path, "index")
        assert isinstance(layout, UnifiedContainerLayout)

    def test_disk_index_kind(self, disk_index_file) -> None:
        path = disk_index_file([[1], [0]], data_type="int8")
        layout = detect_layout(path, "disk-index", data_type="int8")
        assert isinstance(layout, MarkedSectorLayout)
        assert layout.data_type is DiskIndexDataType.INT8

    def test_disk_index_requires_data_type(self, disk_index_file) -> None:
        path = disk_index_file([[1], [0]])
        with pytest.raises(ValueError, match="data type"):
            detect_layout(path, "disk-index")

    def test_unknown_kind(self, raw_graph_file) -> None:
        with pytest.raises(ValueError, match="kind"):
            detect_layout(raw_graph_file([[1]]), "csv")

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(OSError):
            detect_layout(tmp_path / "absent", "graph")
