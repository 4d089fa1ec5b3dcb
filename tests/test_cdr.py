"""
CDR Codec Tests
===============

Tests for the CDR reader/writer primitives.
"""

import struct

import pyarrow as pa
import pytest

from ros2_image_loader.codec.cdr import (
    ENCAPSULATION_HEADER_SIZE,
    CdrReader,
    CdrWriter,
)
from ros2_image_loader.errors import DecodeError, PluginError


LE_HEADER = b"\x00\x01\x00\x00"


class TestEncapsulationHeader:
    """Tests for header parsing."""

    def test_short_payload_rejected(self):
        """Payloads shorter than the header fail at byte 0."""
        with pytest.raises(DecodeError) as exc_info:
            CdrReader(b"\x00\x01")
        assert exc_info.value.offset == 0

    def test_unknown_representation_rejected(self):
        """Only CDR and PLAIN_CDR2 identifiers are accepted."""
        with pytest.raises(DecodeError, match="0x0002"):
            CdrReader(b"\x00\x02\x00\x00")

    @pytest.mark.parametrize("header,little", [
        (b"\x00\x00\x00\x00", False),
        (b"\x00\x01\x00\x00", True),
        (b"\x00\x06\x00\x00", False),
        (b"\x00\x07\x00\x00", True),
    ])
    def test_supported_representations(self, header, little):
        """Byte order follows the representation identifier."""
        reader = CdrReader(header)
        assert reader.little_endian is little
        assert reader.offset == ENCAPSULATION_HEADER_SIZE
        assert reader.remaining == 0

    def test_decode_error_is_plugin_error(self):
        """Callers can catch every codec failure as PluginError."""
        with pytest.raises(PluginError):
            CdrReader(b"")


class TestPrimitives:
    """Tests for primitive reads and alignment."""

    @pytest.mark.parametrize("big_endian", [False, True])
    def test_writer_reader_symmetry(self, big_endian):
        """Values written by CdrWriter read back identically."""
        writer = CdrWriter(big_endian=big_endian)
        writer.write_uint8(7)
        writer.write_int32(-5)
        writer.write_bool(True)
        writer.write_uint32(0xDEADBEEF)
        writer.write_string("camera")

        reader = CdrReader(writer.to_bytes())
        assert reader.little_endian is not big_endian
        assert reader.read_uint8() == 7
        assert reader.read_int32() == -5
        assert reader.read_bool() is True
        assert reader.read_uint32() == 0xDEADBEEF
        assert reader.read_string() == "camera"
        assert reader.remaining == 0

    def test_alignment_relative_to_header(self):
        """A uint32 after a uint8 is padded to the next 4-byte boundary."""
        payload = LE_HEADER + b"\x09\x00\x00\x00" + struct.pack("<I", 42)
        reader = CdrReader(payload)
        assert reader.read_uint8() == 9
        assert reader.offset == 5
        assert reader.read_uint32() == 42
        assert reader.offset == 12

    def test_truncated_int_reports_offset(self):
        """Running out of bytes raises with the failing position."""
        reader = CdrReader(LE_HEADER + b"\x01\x02")
        with pytest.raises(DecodeError) as exc_info:
            reader.read_int32()
        assert exc_info.value.offset == 4
        assert "at byte 4" in str(exc_info.value)

    def test_invalid_bool_rejected(self):
        reader = CdrReader(LE_HEADER + b"\x02")
        with pytest.raises(DecodeError, match="boolean"):
            reader.read_bool()


class TestStringsAndSequences:
    """Tests for variable-length fields."""

    def test_empty_string_without_terminator(self):
        """A zero length prefix decodes as the empty string."""
        reader = CdrReader(LE_HEADER + struct.pack("<I", 0))
        assert reader.read_string() == ""

    def test_invalid_utf8_rejected(self):
        payload = LE_HEADER + struct.pack("<I", 3) + b"\xff\xfe\x00"
        reader = CdrReader(payload)
        with pytest.raises(DecodeError, match="UTF-8") as exc_info:
            reader.read_string()
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_string_length_past_end(self):
        payload = LE_HEADER + struct.pack("<I", 50) + b"abc\x00"
        with pytest.raises(DecodeError, match="string"):
            CdrReader(payload).read_string()

    def test_byte_sequence_is_zero_copy(self):
        """The returned buffer shares memory with the payload."""
        payload = pa.py_buffer(LE_HEADER + struct.pack("<I", 3) + b"xyz")
        data = CdrReader(payload).read_byte_sequence()

        assert data.to_pybytes() == b"xyz"
        assert data.address == payload.address + 8

    def test_byte_sequence_length_past_end(self):
        payload = LE_HEADER + struct.pack("<I", 100) + b"\x01\x02"
        with pytest.raises(DecodeError, match="byte sequence") as exc_info:
            CdrReader(payload).read_byte_sequence()
        assert exc_info.value.offset == 8
