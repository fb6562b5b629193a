"""HTTP API serving registered tables."""
