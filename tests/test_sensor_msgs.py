"""
Image Message Decoder Tests
===========================

Tests for decoding CDR `sensor_msgs/msg/Image` payloads.
"""

import struct

import numpy as np
import pyarrow as pa
import pytest

from ros2_image_loader.codec import CdrWriter, decode_image_message
from ros2_image_loader.errors import DecodeError


class TestDecodeImageMessage:
    """Tests for decode_image_message."""

    def test_rgb8_4x2(self, make_payload):
        """A 4x2 rgb8 frame decodes with all fields intact."""
        pixels = bytes(range(24))
        frame = decode_image_message(
            make_payload(encoding="rgb8", width=4, height=2, data=pixels)
        )

        assert frame.timestamp_ns == 1_700_000_000_123_456_789
        assert frame.frame_id == "camera_optical"
        assert (frame.width, frame.height) == (4, 2)
        assert frame.dimensions == (4, 2)
        assert frame.encoding == "rgb8"
        assert frame.is_bigendian is False
        assert frame.step == 12
        assert frame.data.to_pybytes() == pixels

    def test_32fc1_depth(self, make_payload):
        """Float depth pixels survive decoding bit-for-bit."""
        depth = np.array([[0.5, 1.25, 2.0], [3.5, -1.0, 0.0]], dtype="<f4")
        frame = decode_image_message(
            make_payload(encoding="32FC1", width=3, height=2, data=depth.tobytes())
        )

        assert frame.encoding == "32FC1"
        assert frame.step == 12
        decoded = np.frombuffer(frame.data, dtype="<f4").reshape(2, 3)
        np.testing.assert_array_equal(decoded, depth)

    def test_big_endian_payload(self, make_payload):
        """CDR_BE payloads decode to the same frame."""
        le = decode_image_message(make_payload(big_endian=False))
        be = decode_image_message(make_payload(big_endian=True))
        assert le == be

    def test_data_shares_payload_memory(self, make_payload):
        """Pixel bytes are a slice of the payload, not a copy."""
        payload = pa.py_buffer(make_payload())
        frame = decode_image_message(payload)

        start = frame.data.address - payload.address
        assert start == payload.size - frame.data.size
        assert payload.slice(start).equals(frame.data)

    def test_pre_epoch_timestamp(self, make_payload):
        """Negative seconds are preserved through the nanosecond conversion."""
        frame = decode_image_message(make_payload(timestamp_ns=-1_500_000_000))
        assert frame.timestamp_ns == -1_500_000_000

    def test_nanosec_overflow_carries_into_seconds(self):
        """A nanosec field past one second is added as-is, not rejected."""
        writer = CdrWriter()
        writer.write_int32(1)
        writer.write_uint32(1_500_000_000)
        writer.write_string("camera")
        writer.write_uint32(1)
        writer.write_uint32(1)
        writer.write_string("mono8")
        writer.write_bool(False)
        writer.write_uint32(1)
        writer.write_byte_sequence(b"\x7f")

        frame = decode_image_message(writer.to_bytes())
        assert frame.timestamp_ns == 2_500_000_000
        assert frame.data.to_pybytes() == b"\x7f"

    @pytest.mark.parametrize("cut", [3, 10, 30, 1])
    def test_truncated_payload(self, make_payload, cut):
        """Every truncation point raises DecodeError."""
        payload = make_payload()
        with pytest.raises(DecodeError):
            decode_image_message(payload[:-cut])

    def test_data_length_exceeds_payload(self, make_payload):
        """A data length prefix larger than what follows is rejected."""
        payload = bytearray(make_payload(width=1, height=1))
        # Last field: uint32 length (3) followed by 3 pixel bytes
        struct.pack_into("<I", payload, len(payload) - 7, 1000)
        with pytest.raises(DecodeError, match="byte sequence"):
            decode_image_message(bytes(payload))

    def test_trailing_padding_ignored(self, make_payload):
        frame = decode_image_message(make_payload() + b"\x00\x00\x00\x00")
        assert frame.data.size == 24
