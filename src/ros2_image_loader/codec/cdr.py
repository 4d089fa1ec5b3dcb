"""
CDR Codec
=========

Reader and writer for the OMG Common Data Representation used by ROS 2.

A serialized message starts with a 4-byte encapsulation header:

    byte 0-1: representation identifier (big-endian)
        0x0000  CDR_BE          0x0001  CDR_LE
        0x0006  PLAIN_CDR2_BE   0x0007  PLAIN_CDR2_LE
    byte 2-3: options (ignored)

Primitives are aligned to their own size, measured from the end of the
encapsulation header. Strings are a uint32 length (including the NUL
terminator) followed by the bytes. Sequences are a uint32 element count
followed by the elements.

Design Rules:
    - Fails fast: any overrun raises DecodeError with the byte offset
    - Byte sequences are returned as zero-copy pyarrow buffer slices
    - Only the primitives needed by the supported schemas are exposed
"""

import struct
from typing import Union

import pyarrow as pa

from ros2_image_loader.errors import DecodeError


ENCAPSULATION_HEADER_SIZE = 4

CDR_BE = 0x0000
CDR_LE = 0x0001
PLAIN_CDR2_BE = 0x0006
PLAIN_CDR2_LE = 0x0007

_LITTLE_ENDIAN_KINDS = {CDR_LE, PLAIN_CDR2_LE}
_SUPPORTED_KINDS = {CDR_BE, CDR_LE, PLAIN_CDR2_BE, PLAIN_CDR2_LE}

BytesLike = Union[bytes, bytearray, memoryview, pa.Buffer]


class CdrReader:
    """
    Sequential reader over one CDR-encoded payload.

    Attributes:
        little_endian: Byte order declared by the encapsulation header
        offset: Current read position (absolute, header included)

    Example:
        reader = CdrReader(payload)
        sec = reader.read_int32()
        frame_id = reader.read_string()
    """

    def __init__(self, payload: BytesLike) -> None:
        """
        Initialize reader and parse the encapsulation header.

        Args:
            payload: Complete serialized message, header included

        Raises:
            DecodeError: If the header is missing or names an unsupported
                representation
        """
        self._buffer = payload if isinstance(payload, pa.Buffer) else pa.py_buffer(payload)
        self._view = memoryview(self._buffer).cast("B")
        self._size = len(self._view)

        if self._size < ENCAPSULATION_HEADER_SIZE:
            raise DecodeError(
                f"Payload too short for CDR encapsulation header: {self._size} bytes",
                offset=0,
            )

        kind = (self._view[0] << 8) | self._view[1]
        if kind not in _SUPPORTED_KINDS:
            raise DecodeError(
                f"Unsupported CDR representation identifier: 0x{kind:04x}",
                offset=0,
            )

        self.little_endian = kind in _LITTLE_ENDIAN_KINDS
        self._prefix = "<" if self.little_endian else ">"
        self.offset = ENCAPSULATION_HEADER_SIZE

    @property
    def remaining(self) -> int:
        """Bytes left after the current position."""
        return self._size - self.offset

    def _align(self, size: int) -> None:
        padding = -(self.offset - ENCAPSULATION_HEADER_SIZE) % size
        self._require(padding, f"{size}-byte alignment")
        self.offset += padding

    def _require(self, count: int, what: str) -> None:
        if count > self._size - self.offset:
            raise DecodeError(
                f"Truncated payload reading {what}: need {count} bytes, "
                f"{self._size - self.offset} left",
                offset=self.offset,
            )

    def _unpack(self, fmt: str, size: int, what: str) -> int:
        self._align(size)
        self._require(size, what)
        (value,) = struct.unpack_from(self._prefix + fmt, self._view, self.offset)
        self.offset += size
        return value

    def read_uint8(self) -> int:
        return self._unpack("B", 1, "uint8")

    def read_bool(self) -> bool:
        value = self.read_uint8()
        if value > 1:
            raise DecodeError(f"Invalid boolean value: {value}", offset=self.offset - 1)
        return bool(value)

    def read_int32(self) -> int:
        return self._unpack("i", 4, "int32")

    def read_uint32(self) -> int:
        return self._unpack("I", 4, "uint32")

    def read_string(self) -> str:
        """
        Read a length-prefixed, NUL-terminated UTF-8 string.

        A zero length is accepted as the empty string (some writers omit
        the terminator for empty strings).
        """
        length = self.read_uint32()
        start = self.offset
        self._require(length, "string")
        raw = bytes(self._view[start:start + length])
        self.offset += length

        if raw.endswith(b"\x00"):
            raw = raw[:-1]
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"String is not valid UTF-8: {e}", offset=start) from e

    def read_byte_sequence(self) -> pa.Buffer:
        """
        Read a uint8 sequence without copying it.

        Returns:
            A pyarrow buffer slice that shares memory with the payload
        """
        length = self.read_uint32()
        self._require(length, "byte sequence")
        data = self._buffer.slice(self.offset, length)
        self.offset += length
        return data


class CdrWriter:
    """
    Sequential CDR encoder, symmetric to CdrReader.

    Example:
        writer = CdrWriter()
        writer.write_int32(sec)
        writer.write_string("camera")
        payload = writer.to_bytes()
    """

    def __init__(self, big_endian: bool = False) -> None:
        self._prefix = ">" if big_endian else "<"
        kind = CDR_BE if big_endian else CDR_LE
        self._data = bytearray(struct.pack(">HH", kind, 0))

    def _align(self, size: int) -> None:
        padding = -(len(self._data) - ENCAPSULATION_HEADER_SIZE) % size
        self._data.extend(b"\x00" * padding)

    def _pack(self, fmt: str, size: int, value: int) -> None:
        self._align(size)
        self._data.extend(struct.pack(self._prefix + fmt, value))

    def write_uint8(self, value: int) -> None:
        self._pack("B", 1, value)

    def write_bool(self, value: bool) -> None:
        self._pack("B", 1, 1 if value else 0)

    def write_int32(self, value: int) -> None:
        self._pack("i", 4, value)

    def write_uint32(self, value: int) -> None:
        self._pack("I", 4, value)

    def write_string(self, value: str) -> None:
        encoded = value.encode("utf-8") + b"\x00"
        self.write_uint32(len(encoded))
        self._data.extend(encoded)

    def write_byte_sequence(self, value: BytesLike) -> None:
        raw = memoryview(value).cast("B")
        self.write_uint32(raw.nbytes)
        self._data += raw

    def to_bytes(self) -> bytes:
        return bytes(self._data)
