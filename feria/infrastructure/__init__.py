"""Infrastructure adapters for the core ports."""
