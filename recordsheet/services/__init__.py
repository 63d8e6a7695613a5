"""Import/export services and their CLI helpers (progress, summary)."""
