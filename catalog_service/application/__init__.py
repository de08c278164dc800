"""Application services orchestrating the catalog use cases."""
