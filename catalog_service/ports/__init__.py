"""Port interfaces for the catalog service."""
