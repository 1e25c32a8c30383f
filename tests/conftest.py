"""Fixtures that write small graph files in each persisted layout."""

from pathlib import Path
from typing import Callable

import pytest

from tests.builders import disk_index_bytes, raw_graph_bytes, unified_index_bytes


@pytest.fixture
def raw_graph_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a raw graph file; ``truncate`` drops trailing bytes."""

    def _make(adjacency, name="graph.bin", truncate=0, **kwargs) -> Path:
        data = raw_graph_bytes(adjacency, **kwargs)
        path = tmp_path / name
        path.write_bytes(data[: len(data) - truncate])
        return path

    return _make


@pytest.fixture
def unified_index_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a unified container with an embedded raw graph."""

    def _make(adjacency, name="index.unified", **kwargs) -> Path:
        path = tmp_path / name
        path.write_bytes(unified_index_bytes(adjacency, **kwargs))
        return path

    return _make


@pytest.fixture
def disk_index_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a sector-aligned disk index; ``truncate`` drops bytes."""

    def _make(adjacency, name="disk.index", truncate=0, **kwargs) -> Path:
        data = disk_index_bytes(adjacency, **kwargs)
        path = tmp_path / name
        path.write_bytes(data[: len(data) - truncate])
        return path

    return _make
