"""
Test Configuration
==================

Pytest fixtures and test configuration for ros2-image-loader.

Payloads are produced with the package's own CDR writer, so every test
works from realistic serialized `sensor_msgs/msg/Image` messages.
"""

import pyarrow as pa
import pytest

from ros2_image_loader.codec import SCHEMA_NAME, encode_image_message
from ros2_image_loader.models import Channel, ImageFrame, Message


BYTES_PER_PIXEL = {
    "rgb8": 3,
    "rgba8": 4,
    "bgr8": 3,
    "mono8": 1,
    "mono16": 2,
    "16UC1": 2,
    "32FC1": 4,
    "yuyv": 2,
}


def build_frame(
    encoding="rgb8",
    width=4,
    height=2,
    timestamp_ns=1_700_000_000_123_456_789,
    frame_id="camera_optical",
    is_bigendian=False,
    data=None,
):
    """Build an ImageFrame with deterministic pixel bytes."""
    step = width * BYTES_PER_PIXEL.get(encoding, 1)
    if data is None:
        data = bytes(i % 256 for i in range(step * height))
    return ImageFrame(
        timestamp_ns=timestamp_ns,
        frame_id=frame_id,
        height=height,
        width=width,
        encoding=encoding,
        is_bigendian=is_bigendian,
        step=step,
        data=pa.py_buffer(data),
    )


@pytest.fixture
def make_frame():
    """Factory for ImageFrame records."""
    return build_frame


@pytest.fixture
def make_payload():
    """Factory for serialized image payloads."""

    def _make(big_endian=False, **frame_kwargs):
        return encode_image_message(build_frame(**frame_kwargs), big_endian=big_endian)

    return _make


@pytest.fixture
def image_channel():
    """Provide a sample image channel."""
    return Channel(
        id=1,
        topic="/camera/color/image_raw",
        schema_name=SCHEMA_NAME,
    )


@pytest.fixture
def make_message(image_channel):
    """Factory for Message records on the image channel."""

    def _make(data, sequence=0, log_time=None, publish_time=None, channel=None):
        log_time = 1_000 + sequence if log_time is None else log_time
        publish_time = 500 + sequence if publish_time is None else publish_time
        return Message(
            channel=channel or image_channel,
            sequence=sequence,
            log_time=log_time,
            publish_time=publish_time,
            data=data,
        )

    return _make


@pytest.fixture
def image_messages(make_payload, make_message):
    """Five valid rgb8 messages with increasing timestamps."""
    return [
        make_message(
            make_payload(timestamp_ns=1_700_000_000_000_000_000 + i * 33_000_000),
            sequence=i,
        )
        for i in range(5)
    ]
