"""
Channel and Message Records
===========================

Minimal host-side records describing a recorded channel and its messages.

These mirror the fields a log container exposes per channel / message.
Parsers treat a Channel as read-only routing information and never
interpret it beyond that.
"""

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class Channel:
    """
    One logical stream of a single message schema.

    Attributes:
        id: Channel id, unique within a recording
        topic: Topic name, e.g. "/camera/color/image_raw"
        schema_name: Message schema, e.g. "sensor_msgs/msg/Image"
        message_encoding: Wire encoding of the messages
        metadata: Free-form channel metadata from the container
    """

    id: int
    topic: str
    schema_name: str
    message_encoding: str = "cdr"
    metadata: Dict[str, str] = field(default_factory=dict, hash=False, compare=False)


@dataclass(frozen=True)
class Message:
    """
    One raw message read from a channel.

    Attributes:
        channel: Channel the message belongs to
        sequence: Publisher sequence number
        log_time: Time the recorder received the message (ns since epoch)
        publish_time: Time the publisher sent the message (ns since epoch)
        data: Raw serialized payload
    """

    channel: Channel
    sequence: int
    log_time: int
    publish_time: int
    data: bytes

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the payload."""
        return (
            f"Message(topic={self.channel.topic!r}, "
            f"sequence={self.sequence}, "
            f"log_time={self.log_time}, "
            f"bytes={len(self.data)})"
        )
