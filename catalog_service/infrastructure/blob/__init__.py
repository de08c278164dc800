"""Blob storage adapters for catalog images."""
