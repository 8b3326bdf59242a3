"""Raster buffer: the working image of the geometry stages."""

from __future__ import annotations

import io
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from .exceptions import InvalidInputError

WHITE = (255, 255, 255)


class RasterBuffer:
    """Owned RGB pixel grid with explicit width and height.

    Pixels are 8 bits per channel with implicit full opacity. Whoever holds
    a buffer owns it; stages return either the same buffer (no-op) or a new
    one, never a view shared with another stage.

    Usage:
        with RasterBuffer.open("screenshot.png") as buffer:
            print(buffer.size)
    """

    __slots__ = ("_image",)

    def __init__(self, image: Image.Image):
        """Wrap an RGB image without copying.

        Args:
            image: PIL image in mode 'RGB'

        Raises:
            InvalidInputError: If the image is not RGB
        """
        if image.mode != "RGB":
            raise InvalidInputError(f"Expected RGB image, got {image.mode}")
        self._image = image

    def __repr__(self) -> str:
        return f"RasterBuffer({self.width}x{self.height})"

    def __enter__(self) -> RasterBuffer:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @classmethod
    def new(cls, width: int, height: int, fill: tuple[int, int, int] = WHITE) -> RasterBuffer:
        """Allocate a buffer filled with one color (white by default)."""
        if width < 0 or height < 0:
            raise InvalidInputError(f"Invalid buffer size: {width}x{height}")
        return cls(Image.new("RGB", (width, height), fill))

    @classmethod
    def from_image(cls, image: Image.Image) -> RasterBuffer:
        """Copy a PIL image of any mode into a new RGB buffer.

        Transparent areas are flattened onto white.
        """
        if image.mode in ("RGBA", "LA", "PA") or (
            image.mode == "P" and "transparency" in image.info
        ):
            rgba = image.convert("RGBA")
            flattened = Image.new("RGB", rgba.size, WHITE)
            flattened.paste(rgba, mask=rgba.getchannel("A"))
            return cls(flattened)
        if image.mode == "RGB":
            return cls(image.copy())
        return cls(image.convert("RGB"))

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> RasterBuffer:
        """Create a buffer from a (height, width) gray or (height, width, 3) RGB array.

        Raises:
            InvalidInputError: If the array shape or value range is unusable
        """
        array = np.asarray(pixels)
        if array.ndim == 2:
            array = np.repeat(array[:, :, np.newaxis], 3, axis=2)
        if array.ndim != 3 or array.shape[2] != 3:
            raise InvalidInputError(f"Expected (H, W) or (H, W, 3) array, got shape {array.shape}")
        if array.dtype != np.uint8:
            if np.issubdtype(array.dtype, np.floating) and not np.isfinite(array).all():
                raise InvalidInputError("Pixel values must be finite")
            if array.size and (array.min() < 0 or array.max() > 255):
                raise InvalidInputError("Pixel values must be in range 0-255")
            array = array.astype(np.uint8)
        array = np.ascontiguousarray(array)
        height, width = array.shape[:2]
        return cls(Image.frombytes("RGB", (width, height), array.tobytes()))

    @classmethod
    def from_bytes(cls, data: bytes) -> RasterBuffer:
        """Decode an encoded image (PNG, JPEG, ...) into a buffer.

        Raises:
            InvalidInputError: If the bytes are not a readable image
        """
        if not data:
            raise InvalidInputError("No image data provided")
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                return cls.from_image(image)
        except Image.DecompressionBombError as err:
            raise InvalidInputError(f"Image too large: {err}") from err
        except (UnidentifiedImageError, OSError) as err:
            raise InvalidInputError(f"Unreadable image data: {err}") from err

    @classmethod
    def open(cls, path: Path | str) -> RasterBuffer:
        """Read an image file into a buffer.

        Raises:
            InvalidInputError: If the file is missing or not a readable image
        """
        try:
            with Image.open(path) as image:
                image.load()
                return cls.from_image(image)
        except FileNotFoundError as err:
            raise InvalidInputError(f"Invalid or missing image file: {path}") from err
        except Image.DecompressionBombError as err:
            raise InvalidInputError(f"Image file too large {path}: {err}") from err
        except (UnidentifiedImageError, OSError) as err:
            raise InvalidInputError(f"Unreadable image file {path}: {err}") from err

    @property
    def image(self) -> Image.Image:
        """Underlying PIL image (owned by this buffer)."""
        return self._image

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def getpixel(self, xy: tuple[int, int]) -> tuple[int, int, int]:
        return self._image.getpixel(xy)

    def to_array(self) -> np.ndarray:
        """Copy pixels into a (height, width, 3) uint8 array."""
        return np.array(self._image, dtype=np.uint8)

    def to_image(self) -> Image.Image:
        """Copy pixels into a new PIL image."""
        return self._image.copy()

    def copy(self) -> RasterBuffer:
        return RasterBuffer(self._image.copy())

    def close(self) -> None:
        """Release the pixel store."""
        self._image.close()
