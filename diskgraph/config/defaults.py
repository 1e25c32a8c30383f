"""Default configuration, matching the flags of the inspection driver."""

from diskgraph.config.inspect import InspectConfig

# All-default values: no samples, 20 neighbors per listed node, weak below 2.
DEFAULT_CONFIG = InspectConfig()
