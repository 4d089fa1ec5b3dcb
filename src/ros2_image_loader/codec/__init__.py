"""
Codec Module
============

Binary decoding of recorded ROS 2 messages.

Components:
    - CdrReader / CdrWriter: Common Data Representation primitives
    - decode_image_message: CDR payload -> ImageFrame
    - encode_image_message: ImageFrame -> CDR payload
"""

from ros2_image_loader.codec.cdr import CdrReader, CdrWriter
from ros2_image_loader.codec.sensor_msgs import (
    SCHEMA_NAME,
    decode_image_message,
    encode_image_message,
)


__all__ = [
    "CdrReader",
    "CdrWriter",
    "SCHEMA_NAME",
    "decode_image_message",
    "encode_image_message",
]
