"""Read-only structural analysis of persisted ANN graph index files."""
