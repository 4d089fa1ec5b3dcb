"""
Schema Plugin Interfaces
========================

Pluggable per-schema parsing for recorded channels.

A SchemaPlugin is registered under a schema name and creates one
MessageParser per channel. The parser accumulates that channel's
messages and is finalized exactly once into output chunks.

Parser Lifecycle:
    ACCUMULATING --append()*--> ACCUMULATING --finalize()--> FINALIZED

Design Rules:
    - append() calls are sequential per parser (caller-serialized)
    - Parsers share no mutable state with each other
    - finalize() consumes the parser; any later call raises ParserStateError
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List

from ros2_image_loader.chunk import Chunk, ParserContext
from ros2_image_loader.errors import ParserStateError
from ros2_image_loader.models.channel import Channel, Message


class ParserState(str, Enum):
    """
    Lifecycle state of a MessageParser.

    Attributes:
        ACCUMULATING: Accepting messages
        FINALIZED: Output handed over, terminal
    """

    ACCUMULATING = "ACCUMULATING"
    FINALIZED = "FINALIZED"


class MessageParser(ABC):
    """
    Accumulates one channel's messages into columnar output.

    Subclasses implement _append() and _finalize(); the public methods
    enforce the lifecycle.
    """

    def __init__(self) -> None:
        self._state = ParserState.ACCUMULATING

    @property
    def state(self) -> ParserState:
        return self._state

    def _require_accumulating(self, operation: str) -> None:
        if self._state is not ParserState.ACCUMULATING:
            raise ParserStateError(
                f"{type(self).__name__}.{operation}() called on a finalized parser"
            )

    def append(self, ctx: ParserContext, message: Message) -> None:
        """
        Decode one message and append it as a row.

        Args:
            ctx: Channel context (receives the message's sensor time)
            message: Raw message from the channel

        Raises:
            ParserStateError: If the parser was already finalized
            PluginError: If the message cannot be decoded or converted.
                Previously appended rows are left intact.
        """
        self._require_accumulating("append")
        self._append(ctx, message)

    def finalize(self, ctx: ParserContext) -> List[Chunk]:
        """
        Consume the parser and build its output chunks.

        The parser moves to FINALIZED even if building the output fails;
        a failed channel produces no partial output.

        Args:
            ctx: Channel context holding the finished time index

        Returns:
            Output chunks, sharing ctx's timelines

        Raises:
            ParserStateError: If the parser was already finalized
            BatchConstructionError: If the accumulated columns are inconsistent
        """
        self._require_accumulating("finalize")
        self._state = ParserState.FINALIZED
        return self._finalize(ctx)

    @abstractmethod
    def _append(self, ctx: ParserContext, message: Message) -> None:
        ...

    @abstractmethod
    def _finalize(self, ctx: ParserContext) -> List[Chunk]:
        ...


class SchemaPlugin(ABC):
    """
    Factory for parsers of one message schema.

    Implementations must provide:
        - name(): the schema name channels are routed by
        - create_message_parser(): a fresh parser for one channel
    """

    @abstractmethod
    def name(self) -> str:
        """Schema name, e.g. "sensor_msgs/msg/Image"."""
        ...

    @abstractmethod
    def create_message_parser(self, channel: Channel, num_rows: int) -> MessageParser:
        """
        Create a parser for one channel.

        Args:
            channel: Channel being parsed (routing information only)
            num_rows: Expected message count, a capacity hint

        Returns:
            New parser in the ACCUMULATING state
        """
        ...
