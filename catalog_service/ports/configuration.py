"""Configuration port interface."""

from __future__ import annotations

from typing import Protocol

from ..domain.models import CatalogConfiguration


class ConfigurationPort(Protocol):
    """Protocol interface for configuration operations."""

    def load_configuration(self) -> CatalogConfiguration:
        """Load service configuration from external sources.

        Raises:
            ConfigurationException: If configuration is invalid or missing
        """
        ...
