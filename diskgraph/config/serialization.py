"""JSON serialization and deserialization for inspection configs."""

import json
from dataclasses import asdict
from typing import Any

from dacite import from_dict, Config as DaciteConfig

from diskgraph.config.inspect import InspectConfig

_DACITE_CONFIG = DaciteConfig(check_types=True, strict=True)


def config_to_json(config: InspectConfig) -> str:
    """Serialize an InspectConfig to a JSON string.

    Uses sorted keys and 2-space indent for human readability and diffability.
    """
    return json.dumps(asdict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> InspectConfig:
    """Deserialize a JSON string to an InspectConfig.

    Uses dacite with strict=True to reject unknown keys, so a misspelled
    option fails loudly instead of silently falling back to its default.
    """
    return config_from_dict(json.loads(json_str))


def config_to_dict(config: InspectConfig) -> dict[str, Any]:
    """Convert an InspectConfig to a plain dictionary."""
    return asdict(config)


def config_from_dict(d: dict[str, Any]) -> InspectConfig:
    """Reconstruct an InspectConfig from a plain dictionary."""
    return from_dict(data_class=InspectConfig, data=d, config=_DACITE_CONFIG)
