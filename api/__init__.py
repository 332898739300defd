"""HTTP API for the earning engine."""
