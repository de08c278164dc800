"""Catalog service: brands, categories, products and product images."""

__version__ = "0.1.0"
