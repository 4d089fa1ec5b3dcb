"""
Image Format Resolver
=====================

Maps ROS image encoding strings to canonical ImageFormat descriptors.

The vocabulary is fixed. Matching is exact and case-sensitive, so
"RGB8" is rejected even though "rgb8" is supported.

Encodings:
    Color:  rgb8, rgba8, rgb16, rgba16, bgr8, bgra8, bgr16, bgra16,
            mono8, mono16
    Packed: yuyv, yuv422_yuy2 (YUY2), nv12 (NV12)
    Depth:  8UC1, 8SC1, 16UC1, 16SC1, 32SC1, 32FC1
"""

from typing import Callable, Dict, Tuple

from ros2_image_loader.errors import UnsupportedFormatError
from ros2_image_loader.models.image_format import (
    ChannelDatatype,
    ColorModel,
    ImageFormat,
    PixelFormat,
)


Dimensions = Tuple[int, int]


def _color(model: ColorModel, datatype: ChannelDatatype) -> Callable[[Dimensions], ImageFormat]:
    return lambda dims: ImageFormat.from_color_model(dims, model, datatype)


def _packed(pixel_format: PixelFormat) -> Callable[[Dimensions], ImageFormat]:
    return lambda dims: ImageFormat.from_pixel_format(dims, pixel_format)


def _depth(datatype: ChannelDatatype) -> Callable[[Dimensions], ImageFormat]:
    return lambda dims: ImageFormat.depth(dims, datatype)


_ENCODINGS: Dict[str, Callable[[Dimensions], ImageFormat]] = {
    "rgb8": ImageFormat.rgb8,
    "rgba8": ImageFormat.rgba8,
    "rgb16": _color(ColorModel.RGB, ChannelDatatype.U16),
    "rgba16": _color(ColorModel.RGBA, ChannelDatatype.U16),
    "bgr8": _color(ColorModel.BGR, ChannelDatatype.U8),
    "bgra8": _color(ColorModel.BGRA, ChannelDatatype.U8),
    "bgr16": _color(ColorModel.BGR, ChannelDatatype.U16),
    "bgra16": _color(ColorModel.BGRA, ChannelDatatype.U16),
    "mono8": _color(ColorModel.L, ChannelDatatype.U8),
    "mono16": _color(ColorModel.L, ChannelDatatype.U16),
    "yuyv": _packed(PixelFormat.YUY2),
    "yuv422_yuy2": _packed(PixelFormat.YUY2),
    "nv12": _packed(PixelFormat.NV12),
    # Depth image formats
    "8UC1": _depth(ChannelDatatype.U8),
    "8SC1": _depth(ChannelDatatype.I8),
    "16UC1": _depth(ChannelDatatype.U16),
    "16SC1": _depth(ChannelDatatype.I16),
    "32SC1": _depth(ChannelDatatype.I32),
    "32FC1": _depth(ChannelDatatype.F32),
}

SUPPORTED_ENCODINGS = frozenset(_ENCODINGS)


def resolve_image_format(encoding: str, dimensions: Dimensions) -> ImageFormat:
    """
    Resolve an encoding string to a pixel-format descriptor.

    Args:
        encoding: ROS encoding string, matched exactly
        dimensions: (width, height) in pixels

    Returns:
        ImageFormat carrying the given dimensions

    Raises:
        UnsupportedFormatError: If the encoding is not in the table
    """
    try:
        factory = _ENCODINGS[encoding]
    except KeyError:
        raise UnsupportedFormatError(encoding) from None
    return factory(dimensions)
