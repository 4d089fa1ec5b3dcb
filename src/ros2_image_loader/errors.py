"""
Loader Errors
=============

Exception hierarchy for the image loader.

Every error raised by a schema plugin derives from PluginError, so a host
can catch a single type while still inspecting the specific cause.

Error Kinds:
    - DecodeError: Malformed or truncated CDR payload
    - UnsupportedFormatError: Encoding string outside the known vocabulary
    - BatchConstructionError: Output columns or timelines disagree on length
    - ParserStateError: Parser used after it was finalized
    - UnknownSchemaError: No plugin registered for a schema name

Rules:
    - Nothing here is retried internally
    - Skip / abort policy belongs to the host (see loader.ChannelLoader)
"""

from typing import Optional


class PluginError(Exception):
    """Base error surfaced by schema plugins and their parsers."""
    pass


class DecodeError(PluginError):
    """
    Raised when a binary message payload cannot be decoded.

    Attributes:
        offset: Byte offset into the payload where decoding failed,
            or None if the failure is not tied to a position.
    """

    def __init__(self, message: str, offset: Optional[int] = None) -> None:
        self.offset = offset
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)


class UnsupportedFormatError(PluginError):
    """
    Raised when an image encoding string is not in the supported table.

    Attributes:
        encoding: The rejected encoding string, verbatim
    """

    def __init__(self, encoding: str) -> None:
        self.encoding = encoding
        super().__init__(f"Unsupported image format: {encoding}")


class BatchConstructionError(PluginError):
    """Raised when output columns cannot be assembled into a chunk."""
    pass


class ParserStateError(PluginError):
    """Raised when a finalized parser is used again."""
    pass


class UnknownSchemaError(PluginError):
    """
    Raised when no plugin is registered for a schema.

    Attributes:
        schema_name: The schema name that was looked up
    """

    def __init__(self, schema_name: str) -> None:
        self.schema_name = schema_name
        super().__init__(f"No schema plugin registered for: {schema_name}")
