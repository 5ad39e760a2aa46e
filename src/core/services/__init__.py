"""Application services (orchestration of the core)."""
