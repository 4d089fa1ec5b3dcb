"""
Image Archetypes
================

Column construction for the Image and DepthImage archetypes.

Both archetypes share the same two components:
    - buffer: raw pixel bytes, one blob per row
    - format: ImageFormat descriptor, one struct per row

The buffer column is a `large_binary` ChunkedArray with one single-row
arrow chunk per blob. Each arrow chunk wraps the decoded blob as its data
buffer, so pixel bytes are never copied on their way into the output.
"""

from enum import Enum
from typing import Dict, Sequence

import numpy as np
import pyarrow as pa

from ros2_image_loader.chunk.chunk import Column, ComponentDescriptor
from ros2_image_loader.errors import BatchConstructionError
from ros2_image_loader.models.image_format import ImageFormat


class ImageArchetype(str, Enum):
    """
    Archetype an image column is tagged with.

    Attributes:
        IMAGE: Color or packed image
        DEPTH_IMAGE: Single channel depth image
    """

    IMAGE = "Image"
    DEPTH_IMAGE = "DepthImage"

    @property
    def buffer_descriptor(self) -> ComponentDescriptor:
        return ComponentDescriptor.partial("buffer").with_archetype(self.value)

    @property
    def format_descriptor(self) -> ComponentDescriptor:
        return ComponentDescriptor.partial("format").with_archetype(self.value)


BLOB_TYPE = pa.large_binary()


def blob_array(blob: pa.Buffer) -> pa.LargeBinaryArray:
    """
    Wrap one blob as a single-row `large_binary` array without copying.

    The returned array's data buffer is `blob` itself.
    """
    offsets = pa.py_buffer(np.array([0, blob.size], dtype=np.int64))
    return pa.Array.from_buffers(BLOB_TYPE, 1, [None, offsets, blob])


def image_columns(
    archetype: ImageArchetype,
    blobs: Sequence[pa.Buffer],
    formats: Sequence[ImageFormat],
) -> Dict[ComponentDescriptor, Column]:
    """
    Build the buffer and format columns of an image archetype.

    Args:
        archetype: Archetype to tag both columns with
        blobs: Pixel buffers, one per row
        formats: Pixel-format descriptors, one per row

    Returns:
        Mapping of descriptor to column

    Raises:
        BatchConstructionError: If blobs and formats differ in length, or
            arrow rejects the format values
    """
    if len(blobs) != len(formats):
        raise BatchConstructionError(
            f"{archetype.value}: {len(blobs)} buffers but {len(formats)} formats"
        )

    buffer = pa.chunked_array([blob_array(blob) for blob in blobs], type=BLOB_TYPE)
    try:
        fmt = pa.array([f.to_dict() for f in formats], type=ImageFormat.ARROW_TYPE)
    except (pa.ArrowInvalid, pa.ArrowTypeError) as e:
        raise BatchConstructionError(f"{archetype.value}: invalid format column: {e}") from e

    return {
        archetype.buffer_descriptor: buffer,
        archetype.format_descriptor: fmt,
    }
