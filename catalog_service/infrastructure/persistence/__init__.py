"""Store-backed repository adapters."""
