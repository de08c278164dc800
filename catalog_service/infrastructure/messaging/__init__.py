"""Domain event publishers."""
