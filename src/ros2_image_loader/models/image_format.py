"""
Image Format Models
===================

Canonical pixel-format descriptors for decoded images.

An ImageFormat describes how the bytes of an image buffer are laid out.
It takes exactly one of three shapes:

    1. Color:  color_model + channel_datatype   (interleaved RGB, BGRA, L, ...)
    2. Packed: pixel_format                     (sub-sampled YUY2, NV12)
    3. Depth:  channel_datatype only            (single channel depth maps)

Rules:
    - Exactly one shape is populated (validated on construction)
    - Presence of a color model is the only signal used downstream to
      classify a frame as "color" vs "depth"
    - Descriptors are immutable and hashable
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import pyarrow as pa


class ColorModel(str, Enum):
    """
    Semantic channel layout of an interleaved image.

    Attributes:
        L: Single channel luminance (grayscale)
        RGB: Red, green, blue
        RGBA: Red, green, blue, alpha
        BGR: Blue, green, red
        BGRA: Blue, green, red, alpha
    """

    L = "L"
    RGB = "RGB"
    RGBA = "RGBA"
    BGR = "BGR"
    BGRA = "BGRA"


class ChannelDatatype(str, Enum):
    """Element type of a single image channel."""

    U8 = "U8"
    I8 = "I8"
    U16 = "U16"
    I16 = "I16"
    U32 = "U32"
    I32 = "I32"
    U64 = "U64"
    I64 = "I64"
    F16 = "F16"
    F32 = "F32"
    F64 = "F64"


class PixelFormat(str, Enum):
    """
    Named packed / chroma sub-sampled pixel layouts.

    Attributes:
        YUY2: YUV 4:2:2, interleaved Y0 U Y1 V
        NV12: YUV 4:2:0, Y plane followed by interleaved UV plane
    """

    YUY2 = "YUY2"
    NV12 = "NV12"


@dataclass(frozen=True, slots=True)
class ImageFormat:
    """
    Pixel-format descriptor for one image.

    Prefer the classmethod constructors over building this directly.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        color_model: Set for interleaved color layouts only
        channel_datatype: Set for color and depth layouts
        pixel_format: Set for packed layouts only
    """

    width: int
    height: int
    color_model: Optional[ColorModel] = None
    channel_datatype: Optional[ChannelDatatype] = None
    pixel_format: Optional[PixelFormat] = None

    ARROW_TYPE = pa.struct([
        pa.field("width", pa.uint32(), nullable=False),
        pa.field("height", pa.uint32(), nullable=False),
        pa.field("color_model", pa.string()),
        pa.field("channel_datatype", pa.string()),
        pa.field("pixel_format", pa.string()),
    ])

    def __post_init__(self) -> None:
        """Validate that exactly one descriptor shape is populated."""
        if self.width < 0 or self.height < 0:
            raise ValueError("width and height must be non-negative")

        is_color = self.color_model is not None
        is_packed = self.pixel_format is not None
        if is_color and is_packed:
            raise ValueError("color_model and pixel_format are mutually exclusive")
        if is_color and self.channel_datatype is None:
            raise ValueError("color_model requires a channel_datatype")
        if is_packed and self.channel_datatype is not None:
            raise ValueError("pixel_format does not take a channel_datatype")
        if not is_color and not is_packed and self.channel_datatype is None:
            raise ValueError("ImageFormat needs a color model, pixel format or datatype")

    @classmethod
    def from_color_model(
        cls,
        dimensions: Tuple[int, int],
        color_model: ColorModel,
        channel_datatype: ChannelDatatype,
    ) -> "ImageFormat":
        width, height = dimensions
        return cls(
            width=width,
            height=height,
            color_model=color_model,
            channel_datatype=channel_datatype,
        )

    @classmethod
    def from_pixel_format(
        cls,
        dimensions: Tuple[int, int],
        pixel_format: PixelFormat,
    ) -> "ImageFormat":
        width, height = dimensions
        return cls(width=width, height=height, pixel_format=pixel_format)

    @classmethod
    def depth(
        cls,
        dimensions: Tuple[int, int],
        channel_datatype: ChannelDatatype,
    ) -> "ImageFormat":
        """Single channel depth image (no color model)."""
        width, height = dimensions
        return cls(width=width, height=height, channel_datatype=channel_datatype)

    @classmethod
    def rgb8(cls, dimensions: Tuple[int, int]) -> "ImageFormat":
        return cls.from_color_model(dimensions, ColorModel.RGB, ChannelDatatype.U8)

    @classmethod
    def rgba8(cls, dimensions: Tuple[int, int]) -> "ImageFormat":
        return cls.from_color_model(dimensions, ColorModel.RGBA, ChannelDatatype.U8)

    @property
    def dimensions(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)

    def to_dict(self) -> Dict[str, Any]:
        """Export as a plain dict matching ARROW_TYPE."""
        return {
            "width": self.width,
            "height": self.height,
            "color_model": self.color_model.value if self.color_model else None,
            "channel_datatype": (
                self.channel_datatype.value if self.channel_datatype else None
            ),
            "pixel_format": self.pixel_format.value if self.pixel_format else None,
        }

    def __repr__(self) -> str:
        if self.color_model is not None:
            kind = f"{self.color_model.value}/{self.channel_datatype.value}"
        elif self.pixel_format is not None:
            kind = self.pixel_format.value
        else:
            kind = f"depth/{self.channel_datatype.value}"
        return f"ImageFormat({self.width}x{self.height}, {kind})"
