"""Configuration adapter implementation.

Concrete implementation of the ConfigurationPort interface.
Loads configuration from environment variables.
"""

from __future__ import annotations

import os
from typing import Any

from ..domain.exceptions import ConfigurationException
from ..domain.models import CatalogConfiguration
from ..ports.configuration import ConfigurationPort

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

# environment variable -> configuration field
_STRING_SETTINGS = {
    "CACHE_BUCKET": "cache_bucket",
    "BRAND_IMAGE_BUCKET": "brand_image_bucket",
    "CATEGORY_IMAGE_BUCKET": "category_image_bucket",
    "PRODUCT_IMAGE_BUCKET": "product_image_bucket",
    "DEFAULT_BRAND_IMAGE_NAME": "default_brand_image_name",
    "DEFAULT_CATEGORY_IMAGE_NAME": "default_category_image_name",
    "PRODUCT_DELETED_SUBJECT": "product_deleted_subject",
}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {raw}")


class EnvironmentConfigurationAdapter(ConfigurationPort):
    """Adapter that loads configuration from environment variables."""

    def load_configuration(self) -> CatalogConfiguration:
        """Load service configuration from environment variables.

        Unset variables fall back to the ``CatalogConfiguration`` defaults.

        Returns:
            CatalogConfiguration: Validated configuration

        Raises:
            ConfigurationException: If configuration is invalid
        """
        try:
            settings: dict[str, Any] = {}

            if nats_url := os.getenv("NATS_URL"):
                settings["nats_url"] = nats_url
            if api_port := os.getenv("API_PORT"):
                settings["api_port"] = int(api_port)
            if log_level := os.getenv("LOG_LEVEL"):
                settings["log_level"] = log_level.upper()
            if environment := os.getenv("ENVIRONMENT"):
                settings["environment"] = environment.lower()

            if cache_backend := os.getenv("CACHE_BACKEND"):
                settings["cache_backend"] = cache_backend.lower()
            if cache_ttl := os.getenv("CACHE_TTL_SECONDS"):
                settings["cache_ttl_seconds"] = float(cache_ttl)
            if fail_open := os.getenv("CACHE_FAIL_OPEN"):
                settings["cache_fail_open"] = _parse_bool("CACHE_FAIL_OPEN", fail_open)
            if blob_backend := os.getenv("BLOB_BACKEND"):
                settings["blob_backend"] = blob_backend.lower()
            if max_images := os.getenv("MAX_PRODUCT_IMAGES"):
                settings["max_product_images"] = int(max_images)

            for env_name, field_name in _STRING_SETTINGS.items():
                value = os.getenv(env_name)
                if value:
                    settings[field_name] = value

            return CatalogConfiguration(**settings)

        except Exception as e:
            raise ConfigurationException(f"Failed to load configuration: {str(e)}") from e
