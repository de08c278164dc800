"""Infrastructure adapters for the catalog service."""
