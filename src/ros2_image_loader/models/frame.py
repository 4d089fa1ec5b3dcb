"""
Frame Data Model
=================

Decoded representation of one `sensor_msgs/msg/Image` message.

This module defines the typed ImageFrame class that is passed from the
CDR decoder to the message parser.

Design Rules:
    - Created once per raw message, consumed immediately by the parser
    - Does NOT interpret or convert pixel data
    - `data` is a zero-copy view into the raw message payload
"""

from dataclasses import dataclass
from typing import Tuple

import pyarrow as pa


@dataclass(frozen=True, slots=True)
class ImageFrame:
    """
    Decoded image message.

    It is immutable (frozen) so the same instance can be handed around
    without defensive copies.

    Attributes:
        timestamp_ns: Sensor timestamp from the message header,
            in nanoseconds since the UNIX epoch
        frame_id: Coordinate frame name from the message header
        height: Image height in rows
        width: Image width in columns
        encoding: Pixel encoding string, e.g. "rgb8" or "16UC1"
        is_bigendian: Whether multi-byte pixel data is big-endian
        step: Row stride in bytes
        data: Raw pixel buffer (NOT decoded)
    """

    timestamp_ns: int
    frame_id: str
    height: int
    width: int
    encoding: str
    is_bigendian: bool
    step: int
    data: pa.Buffer

    @property
    def dimensions(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixel buffer."""
        return (
            f"ImageFrame(t={self.timestamp_ns}ns, "
            f"{self.width}x{self.height}, "
            f"encoding={self.encoding!r}, "
            f"step={self.step}, "
            f"bytes={self.data.size})"
        )
