"""
Channel Loader
==============

Host-side driver that turns one channel's messages into chunks.

This module provides the ChannelLoader class which:
    - Looks up the schema plugin for a channel
    - Creates the parser and its ParserContext
    - Feeds messages to the parser strictly in order
    - Registers `log_time` / `publish_time` for every accepted message
    - Applies the configured error policy to bad messages
    - Finalizes the parser into chunks

Design Rules:
    - One parser and one context per channel, never shared
    - Host timelines are added only after a successful append, which
      keeps every timeline row-aligned with the parser's columns
    - "abort" re-raises the first PluginError; "skip" logs and continues
    - Finalize failures always propagate (no partial output)
"""

import logging
from typing import Iterable, List, Literal, Optional, Sequence

from ros2_image_loader.chunk import Chunk, ParserContext, entity_path_for_topic
from ros2_image_loader.config import LoaderConfig
from ros2_image_loader.errors import PluginError
from ros2_image_loader.models.channel import Channel, Message
from ros2_image_loader.plugins.registry import PluginRegistry


logger = logging.getLogger(__name__)


ErrorPolicy = Literal["abort", "skip"]


class LoaderMetrics:
    """Metrics for ChannelLoader observability."""

    __slots__ = (
        "channels_loaded",
        "channels_skipped",
        "messages_seen",
        "messages_appended",
        "messages_skipped",
        "chunks_emitted",
    )

    def __init__(self) -> None:
        self.channels_loaded: int = 0
        self.channels_skipped: int = 0
        self.messages_seen: int = 0
        self.messages_appended: int = 0
        self.messages_skipped: int = 0
        self.chunks_emitted: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "channels_loaded": self.channels_loaded,
            "channels_skipped": self.channels_skipped,
            "messages_seen": self.messages_seen,
            "messages_appended": self.messages_appended,
            "messages_skipped": self.messages_skipped,
            "chunks_emitted": self.chunks_emitted,
        }


class ChannelLoader:
    """
    Drives schema plugins over recorded channels.

    Attributes:
        registry: Plugins to route channels to
        error_policy: "abort" or "skip" on a bad message
        default_num_rows: Row hint when the message count is unknown
        metrics: Operational metrics, accumulated across channels

    Example:
        loader = ChannelLoader(default_registry(), error_policy="skip")
        chunks = loader.load_channel(channel, messages)
    """

    def __init__(
        self,
        registry: PluginRegistry,
        error_policy: ErrorPolicy = "abort",
        default_num_rows: int = 0,
    ) -> None:
        """
        Initialize channel loader.

        Args:
            registry: Plugins to route channels to
            error_policy: What to do with a message the parser rejects
            default_num_rows: Row hint for message iterables without len()
        """
        if error_policy not in ("abort", "skip"):
            raise ValueError(f"Unknown error policy: {error_policy}")

        self.registry = registry
        self.error_policy = error_policy
        self.default_num_rows = default_num_rows
        self.metrics = LoaderMetrics()

    @classmethod
    def from_config(cls, registry: PluginRegistry, config: LoaderConfig) -> "ChannelLoader":
        return cls(
            registry,
            error_policy=config.error_policy,
            default_num_rows=config.default_num_rows,
        )

    def load_channel(
        self,
        channel: Channel,
        messages: Iterable[Message],
        num_rows_hint: Optional[int] = None,
    ) -> List[Chunk]:
        """
        Parse every message of a channel into chunks.

        Args:
            channel: Channel the messages belong to
            messages: Messages in recording order
            num_rows_hint: Expected message count. Defaults to len(messages)
                when available, else default_num_rows.

        Returns:
            Chunks produced by the channel's parser, or [] when no plugin
            handles the channel's schema

        Raises:
            PluginError: With the "abort" policy, the first message error.
                Any finalize error, regardless of policy.
        """
        if channel.schema_name not in self.registry:
            self.metrics.channels_skipped += 1
            logger.info(
                f"No plugin for schema {channel.schema_name!r}, "
                f"skipping channel {channel.topic}"
            )
            return []

        if num_rows_hint is None:
            num_rows_hint = (
                len(messages) if isinstance(messages, Sequence) else self.default_num_rows
            )

        ctx = ParserContext(entity_path_for_topic(channel.topic))
        parser = self.registry.create_parser(channel, num_rows_hint)

        for message in messages:
            self.metrics.messages_seen += 1
            try:
                parser.append(ctx, message)
            except PluginError as e:
                if self.error_policy == "abort":
                    logger.error(
                        f"Aborting channel {channel.topic} at sequence "
                        f"{message.sequence}: {e}"
                    )
                    raise
                self.metrics.messages_skipped += 1
                logger.warning(
                    f"Skipping message {message.sequence} on {channel.topic}: {e}"
                )
                continue

            ctx.add_message_times(message)
            self.metrics.messages_appended += 1

        chunks = parser.finalize(ctx)
        self.metrics.channels_loaded += 1
        self.metrics.chunks_emitted += len(chunks)
        return chunks
