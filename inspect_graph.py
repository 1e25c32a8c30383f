#!/usr/bin/env python3
"""Entry point for inspecting the structure of persisted graph index files.

Prints a one-line structural summary and, optionally, a capped adjacency
listing and a small forward/referenced_by graph for the first nodes.

Usage:
    python inspect_graph.py --graph-file index_graph
    python inspect_graph.py --index-file index.unified --adjacency-sample 10
    python inspect_graph.py --disk-index index_disk.index --data-type float \
        --small-graph 8 --max-neighbors 5
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dacite import DaciteError

from diskgraph.config import DEFAULT_CONFIG, InspectConfig, config_from_json
from diskgraph.formats import DiskIndexDataType, parse_data_type
from diskgraph.reporting import (
    render_adjacency_sample,
    render_small_graph,
    render_summary,
)
from diskgraph.sample import (
    extract_small_graph_from_disk_index,
    extract_small_graph_from_graph_file,
    sample_adjacency_from_disk_index,
    sample_adjacency_from_graph_file,
)
from diskgraph.stats import (
    GraphStats,
    compute_stats_from_disk_index,
    compute_stats_from_graph_file,
    locate_unified_graph,
)

log = logging.getLogger(__name__)

# Config fields that can be overridden from the command line.
_OVERRIDABLE = ("adjacency_sample", "small_graph", "max_neighbors", "weak_threshold")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report degree statistics and adjacency samples of a "
        "persisted graph, unified index or disk index."
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--graph-file", help="Raw graph file (header at offset 0)"
    )
    source.add_argument(
        "--index-file", help="Single-file unified index (graph at 4 KiB)"
    )
    source.add_argument(
        "--disk-index", help="Sector-aligned disk index; requires --data-type"
    )
    parser.add_argument(
        "--data-type",
        choices=[t.value for t in DiskIndexDataType],
        help="Coordinate element type of --disk-index",
    )
    parser.add_argument(
        "--adjacency-sample", type=int, metavar="N",
        help="Print neighbor lists for the first N nodes",
    )
    parser.add_argument(
        "--max-neighbors", type=int, metavar="M",
        help="Cap neighbors shown per node (0 = no cap)",
    )
    parser.add_argument(
        "--small-graph", type=int, metavar="N",
        help="Print the first N nodes with out-neighbors and referenced_by",
    )
    parser.add_argument(
        "--weak-threshold", type=int, metavar="W",
        help="Degrees below W count as weak",
    )
    parser.add_argument(
        "--config", help="Path to an inspection config JSON file"
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the stats record as JSON"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable DEBUG-level logging"
    )
    return parser


def resolve_config(args: argparse.Namespace) -> InspectConfig:
    """Load the config file (if any) and apply command-line overrides."""
    config = DEFAULT_CONFIG
    if args.config:
        config = config_from_json(Path(args.config).read_text())
    overrides = {
        name: getattr(args, name)
        for name in _OVERRIDABLE
        if getattr(args, name) is not None
    }
    return replace(config, **overrides)


def _fail(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def _looks_like_raw_graph(stats: GraphStats, config: InspectConfig) -> bool:
    return (
        stats.degree_max <= config.max_reasonable_degree
        and stats.total_nodes <= config.max_reasonable_nodes
    )


def run(argv: list[str] | None = None) -> int:
    """Parse arguments, inspect the selected file and print the reports.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not (args.graph_file or args.index_file or args.disk_index):
        return _fail("provide one of --graph-file, --index-file, or --disk-index.")
    if args.disk_index and not args.data_type:
        return _fail("--disk-index requires --data-type (float, uint8, or int8).")

    try:
        config = resolve_config(args)
    except (OSError, ValueError, DaciteError) as exc:
        return _fail(f"invalid configuration: {exc}")

    log.debug("Resolved config: %s", config)

    if args.disk_index:
        path = Path(args.disk_index)
        data_type = parse_data_type(args.data_type)
        stats = compute_stats_from_disk_index(path, data_type, config.weak_threshold)
    else:
        offset = 0
        if args.index_file:
            path = Path(args.index_file)
            located = locate_unified_graph(path)
            if located is None:
                return _fail(
                    f"{path} does not look like a single-file unified index "
                    "(expected first 8 bytes = 4096, next 8 bytes > 4096). "
                    "Use --disk-index for *_disk.index files."
                )
            offset = located
        else:
            path = Path(args.graph_file)
        stats = compute_stats_from_graph_file(path, offset, config.weak_threshold)

    if not stats.ok:
        return _fail(f"failed to read graph from {path}: {stats.error}")
    if stats.total_nodes == 0:
        return _fail("no nodes read (empty graph).")
    if args.graph_file and not _looks_like_raw_graph(stats, config):
        return _fail(
            "file does not look like a raw graph. "
            "Use --disk-index for *_disk.index files."
        )

    if args.json:
        print(json.dumps(stats.as_dict(), indent=2, sort_keys=True))
    else:
        print(render_summary(stats), end="")

    if config.adjacency_sample > 0:
        print()
        if args.disk_index:
            sample = sample_adjacency_from_disk_index(
                path, data_type, config.adjacency_sample, config.max_neighbors
            )
        else:
            sample = sample_adjacency_from_graph_file(
                path, offset, config.adjacency_sample, config.max_neighbors
            )
        print(render_adjacency_sample(sample), end="")

    if config.small_graph > 0:
        print()
        if args.disk_index:
            graph = extract_small_graph_from_disk_index(
                path, data_type, config.small_graph
            )
        else:
            graph = extract_small_graph_from_graph_file(
                path, offset, config.small_graph
            )
        print(render_small_graph(graph, config.max_neighbors), end="")

    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
