"""Device profile and palette catalog."""

from .catalog import (
    Catalog,
    catalog_from_json,
    get_default_catalog,
    load_catalog,
    reload_default_catalog,
)
from .catalog_json import palettes_from_json, profiles_from_json, read_json_document

__all__ = [
    "Catalog",
    "catalog_from_json",
    "get_default_catalog",
    "load_catalog",
    "palettes_from_json",
    "profiles_from_json",
    "read_json_document",
    "reload_default_catalog",
]
