"""HTTP API for SmartSkip."""
