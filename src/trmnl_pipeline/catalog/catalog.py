"""Read-only catalog of device profiles and palettes."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any

from ..exceptions import NotFoundError
from ..models.enums import PROFILE_ALIASES, DeviceKind, Model
from ..models.palette import PaletteSpec
from ..models.profile import DeviceProfile
from .catalog_json import palettes_from_json, profiles_from_json, read_json_document

_LOGGER = logging.getLogger(__name__)

MODELS_FILE = "models.json"
PALETTES_FILE = "palettes.json"


class Catalog:
    """Immutable snapshot of device profiles and palettes.

    Lookups never mutate the snapshot, so one instance can be shared by
    any number of concurrent pipeline runs.

    Usage:
        catalog = load_catalog()
        profile = catalog.profile_by_name("og_png")
        palette = catalog.palette_by_id("gray-4")  # None if unknown
    """

    def __init__(
            self,
            profiles: Mapping[str, DeviceProfile] | Iterable[DeviceProfile],
            palettes: Mapping[str, PaletteSpec] | Iterable[PaletteSpec] = (),
            aliases: Mapping[str, str] | None = None,
    ):
        """Initialize catalog.

        Args:
            profiles: Profiles keyed by name, or an iterable of profiles
            palettes: Palettes keyed by id, or an iterable of palettes
            aliases: Identifier redirects (default: PROFILE_ALIASES)

        Raises:
            ValueError: If a key is duplicated or does not match its record
        """
        self._profiles = MappingProxyType(_index(profiles, "name"))
        self._palettes = MappingProxyType(_index(palettes, "id"))
        self._aliases = MappingProxyType(
            dict(PROFILE_ALIASES if aliases is None else aliases)
        )

    def __repr__(self) -> str:
        return (
            f"Catalog(profiles={len(self._profiles)}, "
            f"palettes={len(self._palettes)})"
        )

    @property
    def profiles(self) -> Mapping[str, DeviceProfile]:
        return self._profiles

    @property
    def palettes(self) -> Mapping[str, PaletteSpec]:
        return self._palettes

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    @property
    def profile_names(self) -> tuple[str, ...]:
        """Profile names in declaration order."""
        return tuple(self._profiles)

    @property
    def palette_ids(self) -> tuple[str, ...]:
        """Palette ids in declaration order."""
        return tuple(self._palettes)

    def resolve_alias(self, name: str | Model) -> str:
        """Return the record key an identifier refers to."""
        key = name.value if isinstance(name, Model) else str(name)
        return self._aliases.get(key, key)

    def profile_by_name(self, name: str | Model) -> DeviceProfile:
        """Get a device profile by name or alias.

        Raises:
            NotFoundError: If no profile has that name
        """
        key = self.resolve_alias(name)
        try:
            return self._profiles[key]
        except KeyError:
            raise NotFoundError(name.value if isinstance(name, Model) else str(name)) from None

    def profiles_by_kind(self, kind: str | DeviceKind) -> tuple[DeviceProfile, ...]:
        """All profiles of one category, in declaration order."""
        tag = kind.value if isinstance(kind, DeviceKind) else str(kind)
        return tuple(p for p in self._profiles.values() if p.kind == tag)

    def palette_by_id(self, palette_id: str) -> PaletteSpec | None:
        """Get a palette by id, or None if the catalog has no such palette."""
        return self._palettes.get(palette_id)

    def palettes_for_profile(self, profile: DeviceProfile | str | Model) -> tuple[PaletteSpec, ...]:
        """Known palettes compatible with a profile, preferred first.

        Palette ids the catalog does not contain are skipped.
        """
        if not isinstance(profile, DeviceProfile):
            profile = self.profile_by_name(profile)
        found = []
        for palette_id in profile.palette_ids:
            palette = self._palettes.get(palette_id)
            if palette is None:
                _LOGGER.debug(
                    "Profile %s lists unknown palette %s", profile.name, palette_id
                )
                continue
            found.append(palette)
        return tuple(found)


def _index(records: Mapping[str, Any] | Iterable[Any], key_attr: str) -> dict[str, Any]:
    if isinstance(records, Mapping):
        indexed = dict(records)
        for key, record in indexed.items():
            if getattr(record, key_attr) != key:
                raise ValueError(
                    f"Catalog key {key!r} does not match record {key_attr} "
                    f"{getattr(record, key_attr)!r}"
                )
        return indexed

    indexed = {}
    for record in records:
        key = getattr(record, key_attr)
        if key in indexed:
            raise ValueError(f"Duplicate catalog key: {key!r}")
        indexed[key] = record
    return indexed


def catalog_from_json(
        models: Any,
        palettes: Any,
        aliases: Mapping[str, str] | None = None,
) -> Catalog:
    """Build a catalog from already decoded models and palettes documents.

    Raises:
        CatalogLoadError: If either document cannot be turned into records
    """
    return Catalog(
        profiles_from_json(models),
        palettes_from_json(palettes),
        aliases=aliases,
    )


def load_catalog(
        models_path: Path | str | None = None,
        palettes_path: Path | str | None = None,
) -> Catalog:
    """Load a catalog from JSON files.

    Args:
        models_path: Models file (default: bundled models.json)
        palettes_path: Palettes file (default: bundled palettes.json)

    Returns:
        New catalog snapshot

    Raises:
        CatalogLoadError: If a file is unreadable, malformed, or a record
            is missing its key
    """
    data_dir = resources.files(__package__) / "data"

    if models_path is None:
        with resources.as_file(data_dir / MODELS_FILE) as path:
            models = read_json_document(path, MODELS_FILE)
        models_source = MODELS_FILE
    else:
        models = read_json_document(models_path)
        models_source = str(models_path)

    if palettes_path is None:
        with resources.as_file(data_dir / PALETTES_FILE) as path:
            palettes = read_json_document(path, PALETTES_FILE)
        palettes_source = PALETTES_FILE
    else:
        palettes = read_json_document(palettes_path)
        palettes_source = str(palettes_path)

    catalog = Catalog(
        profiles_from_json(models, models_source),
        palettes_from_json(palettes, palettes_source),
    )
    _LOGGER.info(
        "Loaded catalog: %d profiles, %d palettes",
        len(catalog.profiles),
        len(catalog.palettes),
    )
    return catalog


_default_catalog: Catalog | None = None
_default_lock = threading.Lock()


def get_default_catalog() -> Catalog:
    """Return the bundled catalog, loading it on first use."""
    global _default_catalog
    catalog = _default_catalog
    if catalog is not None:
        return catalog
    with _default_lock:
        if _default_catalog is None:
            _default_catalog = load_catalog()
        return _default_catalog


def reload_default_catalog(
        models_path: Path | str | None = None,
        palettes_path: Path | str | None = None,
) -> Catalog:
    """Load a fresh snapshot and swap it in as the default catalog.

    The previous snapshot stays valid for callers still holding it. If
    loading fails, the current default is kept.
    """
    global _default_catalog
    catalog = load_catalog(models_path, palettes_path)
    with _default_lock:
        _default_catalog = catalog
    return catalog
