"""JSON deserialization for the device profile and palette catalogs.

Compatible with the TRMNL models/palettes API format:
``{"data": [{"name": "og_png", "width": 800, ...}, ...]}``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..exceptions import CatalogErrorReason, CatalogLoadError
from ..models.palette import PaletteSpec
from ..models.profile import DeviceProfile

_LOGGER = logging.getLogger(__name__)


def _parse_int(value: str | int | float, field: str, source: str) -> int:
    """Parse integer from JSON value (int, float or decimal/"0x" string)."""
    try:
        if isinstance(value, bool):
            raise ValueError("boolean is not a number")
        if isinstance(value, (int, float)):
            return int(value)
        text = str(value).strip()
        if text.startswith("0x") or text.startswith("0X"):
            return int(text, 16)
        return int(float(text))
    except (TypeError, ValueError, OverflowError) as err:
        raise CatalogLoadError(
            f"Invalid value for '{field}' in {source}: {value!r}",
            CatalogErrorReason.MALFORMED,
            source,
        ) from err


def _parse_float(value: str | int | float, field: str, source: str) -> float:
    try:
        if isinstance(value, bool):
            raise ValueError("boolean is not a number")
        return float(value)
    except (TypeError, ValueError) as err:
        raise CatalogLoadError(
            f"Invalid value for '{field}' in {source}: {value!r}",
            CatalogErrorReason.MALFORMED,
            source,
        ) from err


def _records(data: Any, kind: str, source: str) -> list[dict[str, Any]]:
    """Return the "data" array of a catalog document."""
    if not isinstance(data, dict):
        raise CatalogLoadError(
            "Invalid JSON structure: expected object",
            CatalogErrorReason.MALFORMED,
            source,
        )
    records = data.get("data")
    if not isinstance(records, list):
        raise CatalogLoadError(
            f"Invalid {kind} JSON structure: missing 'data' array",
            CatalogErrorReason.MALFORMED,
            source,
        )
    for record in records:
        if not isinstance(record, dict):
            raise CatalogLoadError(
                f"Invalid {kind} record: expected object, got {type(record).__name__}",
                CatalogErrorReason.MALFORMED,
                source,
            )
    return records


def read_json_document(path: Path | str, source: str | None = None) -> Any:
    """Read and decode a JSON catalog file.

    Args:
        path: File to read
        source: Label used in error messages (defaults to the path)

    Raises:
        CatalogLoadError: UNREADABLE if the file cannot be read,
            MALFORMED if it is not valid JSON
    """
    source = source or str(path)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise CatalogLoadError(
            f"Catalog file could not be read: {source} ({err})",
            CatalogErrorReason.UNREADABLE,
            source,
        ) from err

    try:
        return json.loads(text)
    except json.JSONDecodeError as err:
        raise CatalogLoadError(
            f"Invalid JSON in {source}: {err}",
            CatalogErrorReason.MALFORMED,
            source,
        ) from err


def profiles_from_json(data: Any, source: str = "models") -> dict[str, DeviceProfile]:
    """Build device profiles from a models document.

    Args:
        data: Decoded JSON document with a "data" array
        source: Label used in error messages

    Returns:
        Profiles keyed by name, in declaration order

    Raises:
        CatalogLoadError: If the structure is invalid, a record has no
            "name", a name is duplicated, or a value is not a number
    """
    profiles: dict[str, DeviceProfile] = {}

    for record in _records(data, "models", source):
        name = record.get("name")
        if not name:
            raise CatalogLoadError(
                "Model data missing required 'name' field",
                CatalogErrorReason.MISSING_KEY,
                source,
            )
        name = str(name)
        if name in profiles:
            raise CatalogLoadError(
                f"Duplicate model name '{name}'",
                CatalogErrorReason.MALFORMED,
                source,
            )

        palette_ids = record.get("palette_ids") or []
        if not isinstance(palette_ids, list):
            raise CatalogLoadError(
                f"Model '{name}': 'palette_ids' must be an array",
                CatalogErrorReason.MALFORMED,
                source,
            )

        try:
            profiles[name] = DeviceProfile(
                name=name,
                label=str(record.get("label") or ""),
                description=str(record.get("description") or ""),
                width=_parse_int(record.get("width", 0), "width", source),
                height=_parse_int(record.get("height", 0), "height", source),
                colors=_parse_int(record.get("colors", 0), "colors", source),
                bit_depth=_parse_int(record.get("bit_depth", 0), "bit_depth", source),
                scale_factor=_parse_float(
                    record.get("scale_factor", 1.0), "scale_factor", source
                ),
                rotation=_parse_int(record.get("rotation", 0), "rotation", source),
                mime_type=str(record.get("mime_type") or "image/png"),
                offset_x=_parse_int(record.get("offset_x", 0), "offset_x", source),
                offset_y=_parse_int(record.get("offset_y", 0), "offset_y", source),
                published_at=str(record.get("published_at") or ""),
                kind=str(record.get("kind") or ""),
                palette_ids=tuple(str(p) for p in palette_ids),
            )
        except ValueError as err:
            raise CatalogLoadError(
                f"Model '{name}': {err}",
                CatalogErrorReason.MALFORMED,
                source,
            ) from err

    _LOGGER.debug("Parsed %d device profiles from %s", len(profiles), source)
    return profiles


def palettes_from_json(data: Any, source: str = "palettes") -> dict[str, PaletteSpec]:
    """Build palette specs from a palettes document.

    Args:
        data: Decoded JSON document with a "data" array
        source: Label used in error messages

    Returns:
        Palettes keyed by id, in declaration order

    Raises:
        CatalogLoadError: If the structure is invalid, a record has no
            "id", an id is duplicated, or a color is not a hex string
    """
    palettes: dict[str, PaletteSpec] = {}

    for record in _records(data, "palettes", source):
        palette_id = record.get("id")
        if not palette_id:
            raise CatalogLoadError(
                "Palette data missing required 'id' field",
                CatalogErrorReason.MISSING_KEY,
                source,
            )
        palette_id = str(palette_id)
        if palette_id in palettes:
            raise CatalogLoadError(
                f"Duplicate palette id '{palette_id}'",
                CatalogErrorReason.MALFORMED,
                source,
            )

        colors = record.get("colors")
        if colors is not None and not isinstance(colors, list):
            raise CatalogLoadError(
                f"Palette '{palette_id}': 'colors' must be an array or null",
                CatalogErrorReason.MALFORMED,
                source,
            )

        try:
            palettes[palette_id] = PaletteSpec(
                id=palette_id,
                name=str(record.get("name") or ""),
                grays=_parse_int(record.get("grays", 0), "grays", source),
                colors=tuple(str(c) for c in colors) if colors is not None else None,
                framework_class=str(record.get("framework_class") or ""),
            )
        except ValueError as err:
            raise CatalogLoadError(
                f"Palette '{palette_id}': {err}",
                CatalogErrorReason.MALFORMED,
                source,
            ) from err

    _LOGGER.debug("Parsed %d palettes from %s", len(palettes), source)
    return palettes
