"""Inspection configuration with frozen, serializable dataclasses."""

from diskgraph.config.defaults import DEFAULT_CONFIG
from diskgraph.config.inspect import InspectConfig
from diskgraph.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
)

__all__ = [
    "InspectConfig",
    "DEFAULT_CONFIG",
    "config_to_json",
    "config_from_json",
    "config_to_dict",
    "config_from_dict",
]
