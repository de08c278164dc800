"""Domain layer for the catalog service."""
