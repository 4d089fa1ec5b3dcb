"""
Image Message Decoder
=====================

Dedicated module for decoding CDR `sensor_msgs/msg/Image` payloads.

Design Rules:
    - This is the ONLY place in the codebase that decodes image messages
    - Pure: same payload yields the same frame or the same DecodeError
    - Fails fast on truncated or malformed payloads
    - Pixel data is NOT copied or interpreted

Wire Layout (ROS 2):
    std_msgs/Header header
        builtin_interfaces/Time stamp
            int32  sec
            uint32 nanosec
        string frame_id
    uint32 height
    uint32 width
    string encoding
    uint8  is_bigendian
    uint32 step
    uint8[] data
"""

import logging

from ros2_image_loader.codec.cdr import BytesLike, CdrReader, CdrWriter
from ros2_image_loader.models.frame import ImageFrame


logger = logging.getLogger(__name__)


SCHEMA_NAME = "sensor_msgs/msg/Image"

NANOS_PER_SECOND = 1_000_000_000


def decode_image_message(payload: BytesLike) -> ImageFrame:
    """
    Decode one CDR image message into an ImageFrame.

    Args:
        payload: Serialized message, including the encapsulation header

    Returns:
        ImageFrame whose `data` shares memory with `payload`

    Raises:
        DecodeError: If the payload is truncated or violates the layout
    """
    reader = CdrReader(payload)

    sec = reader.read_int32()
    nanosec = reader.read_uint32()
    frame_id = reader.read_string()

    height = reader.read_uint32()
    width = reader.read_uint32()
    encoding = reader.read_string()
    is_bigendian = reader.read_bool()
    step = reader.read_uint32()
    data = reader.read_byte_sequence()

    if reader.remaining >= 4:
        logger.debug(f"Ignoring {reader.remaining} trailing bytes after image data")

    return ImageFrame(
        timestamp_ns=sec * NANOS_PER_SECOND + nanosec,
        frame_id=frame_id,
        height=height,
        width=width,
        encoding=encoding,
        is_bigendian=is_bigendian,
        step=step,
        data=data,
    )


def encode_image_message(frame: ImageFrame, big_endian: bool = False) -> bytes:
    """
    Serialize an ImageFrame back into a CDR payload.

    Args:
        frame: Frame to serialize
        big_endian: Emit CDR_BE instead of CDR_LE

    Returns:
        Serialized payload with encapsulation header
    """
    sec, nanosec = divmod(frame.timestamp_ns, NANOS_PER_SECOND)

    writer = CdrWriter(big_endian=big_endian)
    writer.write_int32(sec)
    writer.write_uint32(nanosec)
    writer.write_string(frame.frame_id)
    writer.write_uint32(frame.height)
    writer.write_uint32(frame.width)
    writer.write_string(frame.encoding)
    writer.write_bool(frame.is_bigendian)
    writer.write_uint32(frame.step)
    writer.write_byte_sequence(frame.data)
    return writer.to_bytes()
