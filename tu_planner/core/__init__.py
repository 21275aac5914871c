"""Core infrastructure shared across tu_planner: errors, HTTP client, logging."""
