"""TRMNL image pipeline.

  Turns rendered screenshots into device-ready e-ink rasters: resize, offset,
  rotate, quantize with Floyd–Steinberg dithering, palette remap and PNG/BMP
  encoding, driven by a catalog of device profiles.
  """

from .backends import BlankBackend, PillowBackend, TransformBackend
from .catalog import (
    Catalog,
    catalog_from_json,
    get_default_catalog,
    load_catalog,
    reload_default_catalog,
)
from .encoding import EncodedImage, encode_image, pack_pixels
from .exceptions import (
    CatalogErrorReason,
    CatalogLoadError,
    InvalidInputError,
    NotFoundError,
    TransformError,
    TrmnlPipelineError,
)
from .models import (
    PROFILE_ALIASES,
    DeviceKind,
    DeviceProfile,
    Model,
    OutputFormat,
    PaletteSpec,
    Rotation,
    TransformOverrides,
    TransformParameters,
    resolve_parameters,
)
from .pipeline import TransformPipeline, prepare_image
from .processing import IndexedRaster, QuantizedRaster, quantize
from .raster import RasterBuffer

__version__ = "0.1.0"

__all__ = [
    # Main API
    "TransformPipeline",
    "prepare_image",
    "RasterBuffer",
    "EncodedImage",
    # Backends
    "TransformBackend",
    "PillowBackend",
    "BlankBackend",
    # Catalog
    "Catalog",
    "catalog_from_json",
    "get_default_catalog",
    "load_catalog",
    "reload_default_catalog",
    # Models
    "DeviceProfile",
    "PaletteSpec",
    "TransformOverrides",
    "TransformParameters",
    "resolve_parameters",
    "IndexedRaster",
    "QuantizedRaster",
    # Enums
    "DeviceKind",
    "Model",
    "OutputFormat",
    "Rotation",
    "PROFILE_ALIASES",
    # Stages
    "quantize",
    "encode_image",
    "pack_pixels",
    # Exceptions
    "TrmnlPipelineError",
    "CatalogErrorReason",
    "CatalogLoadError",
    "NotFoundError",
    "InvalidInputError",
    "TransformError",
]
