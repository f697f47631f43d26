"""HTTP API for the knowledge network."""
