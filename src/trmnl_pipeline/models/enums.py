from __future__ import annotations

from enum import Enum, IntEnum
from typing import Final


class Rotation(IntEnum):
    """Display rotation angles in degrees (clockwise)."""
    ROTATE_0 = 0
    ROTATE_90 = 90
    ROTATE_180 = 180
    ROTATE_270 = 270


class OutputFormat(str, Enum):
    """Container format of the encoded image."""
    PNG = "png"
    BMP = "bmp"

    @classmethod
    def from_mime_type(cls, mime_type: str) -> OutputFormat:
        """Map a catalog mime type (or bare format name) to an output format.

        Anything that is not BMP encodes as PNG.
        """
        if mime_type.strip().lower() in ("image/bmp", "bmp"):
            return cls.BMP
        return cls.PNG

    @property
    def extension(self) -> str:
        return self.value

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"


class DeviceKind(str, Enum):
    """Device category tag used by the catalog."""
    TRMNL = "trmnl"
    KINDLE = "kindle"
    BYOD = "byod"


class Model(str, Enum):
    """Known device profile identifiers.

    ``OG`` has no catalog record of its own, see ``PROFILE_ALIASES``.
    """
    OG = "og"
    OG_PNG = "og_png"
    OG_BMP = "og_bmp"
    V2 = "v2"
    AMAZON_KINDLE_2024 = "amazon_kindle_2024"
    AMAZON_KINDLE_PAPERWHITE_6TH_GEN = "amazon_kindle_paperwhite_6th_gen"
    AMAZON_KINDLE_PAPERWHITE_7TH_GEN = "amazon_kindle_paperwhite_7th_gen"
    INKPLATE_10 = "inkplate_10"
    AMAZON_KINDLE_7 = "amazon_kindle_7"
    INKY_IMPRESSION_7_3 = "inky_impression_7_3"
    KOBO_LIBRA_2 = "kobo_libra_2"
    AMAZON_KINDLE_OASIS_2 = "amazon_kindle_oasis_2"
    OG_PLUS = "og_plus"
    KOBO_AURA_ONE = "kobo_aura_one"
    KOBO_AURA_HD = "kobo_aura_hd"
    INKY_IMPRESSION_13_3 = "inky_impression_13_3"
    M5_PAPER_S3 = "m5_paper_s3"
    AMAZON_KINDLE_SCRIBE = "amazon_kindle_scribe"
    SEEED_E1001 = "seeed_e1001"
    SEEED_E1002 = "seeed_e1002"
    WAVESHARE_4_26 = "waveshare_4_26"
    WAVESHARE_7_5_BW = "waveshare_7_5_bw"


# Identifiers that reuse another profile's record
PROFILE_ALIASES: Final[dict[str, str]] = {
    Model.OG.value: Model.OG_PLUS.value,
}
