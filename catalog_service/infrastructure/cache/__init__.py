"""Read-through caching layered over the repository ports."""
