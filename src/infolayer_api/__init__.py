"""HTTP API for the info layer."""
