"""HTTP API for tu_planner."""
