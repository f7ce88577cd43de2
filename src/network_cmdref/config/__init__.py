"""Catalog settings management."""
from .settings import CatalogSettings, load_settings, find_settings_file

__all__ = ["CatalogSettings", "load_settings", "find_settings_file"]
