"""
Image Schema Plugin
===================

Parses `sensor_msgs/msg/Image` channels into two chunks:

    1. Image chunk: `buffer` + `format`, tagged Image or DepthImage
    2. Metadata chunk: `height`, `width`, `encoding`, `is_bigendian`,
       `step`, tagged with the `sensor_msgs.msg.Image` archetype

Both chunks share the channel's timelines and row order, so they can be
joined by row position.

Per-message Flow:
    decode -> resolve format -> register sensor time -> append row

Nothing is written to the context or the columns until decoding and
format resolution have both succeeded, so a bad message never leaves a
partial row behind.

Known Limitation:
    The Image vs DepthImage decision is channel-wide and taken from the
    LAST appended frame. A channel that mixes color and depth encodings
    is emitted entirely under the archetype of its final frame. Packed
    formats (yuyv, nv12) have no color model and count as depth.
"""

import logging
from typing import Dict, List, Optional

import pyarrow as pa

from ros2_image_loader.chunk import (
    Chunk,
    ChunkIdGenerator,
    ComponentDescriptor,
    FixedSizeListBuilder,
    ImageArchetype,
    ParserContext,
    image_columns,
    new_chunk_id,
)
from ros2_image_loader.codec.sensor_msgs import SCHEMA_NAME, decode_image_message
from ros2_image_loader.config import ParserConfig
from ros2_image_loader.formats import resolve_image_format
from ros2_image_loader.models.channel import Channel, Message
from ros2_image_loader.models.image_format import ImageFormat
from ros2_image_loader.plugins.base import MessageParser, SchemaPlugin


logger = logging.getLogger(__name__)


class ImageMessageParser(MessageParser):
    """
    Accumulates decoded image messages for one channel.

    Attributes:
        timestamp_timeline: Timeline the header stamp is registered under
        log_every_n_frames: Debug-log progress every N frames (0 = never)

    Example:
        parser = ImageMessageParser(num_rows=len(messages))
        for message in messages:
            parser.append(ctx, message)
        image_chunk, metadata_chunk = parser.finalize(ctx)
    """

    ARCHETYPE_NAME = "sensor_msgs.msg.Image"

    def __init__(
        self,
        num_rows: int = 0,
        timestamp_timeline: str = "timestamp",
        log_every_n_frames: int = 0,
        chunk_id_generator: ChunkIdGenerator = new_chunk_id,
    ) -> None:
        """
        Initialize parser.

        Args:
            num_rows: Expected number of messages (capacity hint only)
            timestamp_timeline: Timeline name for the header stamp
            log_every_n_frames: Debug-log progress every N frames
            chunk_id_generator: Source of ids for the output chunks
        """
        super().__init__()
        self.timestamp_timeline = timestamp_timeline
        self.log_every_n_frames = log_every_n_frames
        self._new_chunk_id = chunk_id_generator

        # Pixel blobs are handed to the output as-is, never copied
        self._blobs: List[pa.Buffer] = []
        self._image_formats: List[ImageFormat] = []

        self._height = FixedSizeListBuilder(pa.uint32(), 1, num_rows)
        self._width = FixedSizeListBuilder(pa.uint32(), 1, num_rows)
        self._encoding = FixedSizeListBuilder(pa.string(), 1, num_rows)
        self._is_bigendian = FixedSizeListBuilder(pa.uint32(), 1, num_rows)
        self._step = FixedSizeListBuilder(pa.uint32(), 1, num_rows)

        self._is_depth_image = False

    @property
    def num_rows(self) -> int:
        """Rows accumulated so far."""
        return len(self._blobs)

    @property
    def is_depth_image(self) -> bool:
        """Whether the most recent frame had no color model."""
        return self._is_depth_image

    def column_lengths(self) -> Dict[str, int]:
        """Length of every accumulated collection, for invariant checks."""
        return {
            "blobs": len(self._blobs),
            "formats": len(self._image_formats),
            "height": len(self._height),
            "width": len(self._width),
            "encoding": len(self._encoding),
            "is_bigendian": len(self._is_bigendian),
            "step": len(self._step),
        }

    def _append(self, ctx: ParserContext, message: Message) -> None:
        frame = decode_image_message(message.data)
        image_format = resolve_image_format(frame.encoding, frame.dimensions)

        # `log_time` and `publish_time` are added by the host
        ctx.add_time_cell(self.timestamp_timeline, frame.timestamp_ns)

        # Channel-wide, last frame wins. `color_model` is None for depth formats.
        self._is_depth_image = image_format.color_model is None

        self._blobs.append(frame.data)
        self._image_formats.append(image_format)

        self._height.append(frame.height)
        self._width.append(frame.width)
        self._encoding.append(frame.encoding)
        self._is_bigendian.append(int(frame.is_bigendian))
        self._step.append(frame.step)

        if self.log_every_n_frames and self.num_rows % self.log_every_n_frames == 0:
            logger.debug(
                f"{ctx.entity_path()}: {self.num_rows} frames, "
                f"last {frame!r} -> {image_format!r}"
            )

    def _finalize(self, ctx: ParserContext) -> List[Chunk]:
        blobs, self._blobs = self._blobs, []
        image_formats, self._image_formats = self._image_formats, []

        entity_path = ctx.entity_path()
        timelines = ctx.build_timelines()

        archetype = (
            ImageArchetype.DEPTH_IMAGE if self._is_depth_image else ImageArchetype.IMAGE
        )

        image_chunk = Chunk.from_auto_row_ids(
            self._new_chunk_id(),
            entity_path,
            timelines,
            image_columns(archetype, blobs, image_formats),
        )

        metadata_chunk = Chunk.from_auto_row_ids(
            self._new_chunk_id(),
            entity_path,
            timelines,
            {
                self._descriptor("height"): self._height.finish(),
                self._descriptor("width"): self._width.finish(),
                self._descriptor("encoding"): self._encoding.finish(),
                self._descriptor("is_bigendian"): self._is_bigendian.finish(),
                self._descriptor("step"): self._step.finish(),
            },
        )

        logger.info(
            f"Finalized {entity_path}: {image_chunk.num_rows} rows as {archetype.value}"
        )
        return [image_chunk, metadata_chunk]

    @classmethod
    def _descriptor(cls, component: str) -> ComponentDescriptor:
        return ComponentDescriptor.partial(component).with_archetype(cls.ARCHETYPE_NAME)


class ImageSchemaPlugin(SchemaPlugin):
    """
    Plugin that parses `sensor_msgs/msg/Image` messages.

    Attributes:
        config: Parser settings applied to every parser it creates
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self.config = config or ParserConfig()

    def name(self) -> str:
        return SCHEMA_NAME

    def create_message_parser(self, channel: Channel, num_rows: int) -> ImageMessageParser:
        logger.debug(f"Creating image parser for {channel.topic} (hint: {num_rows} rows)")
        return ImageMessageParser(
            num_rows=num_rows,
            timestamp_timeline=self.config.timestamp_timeline,
            log_every_n_frames=self.config.log_every_n_frames,
        )
