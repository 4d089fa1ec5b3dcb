"""
Chunk Module
============

Columnar output batches and the pieces used to assemble them.

Components:
    - FixedSizeListBuilder: Append-only per-row metadata column
    - ParserContext / TimeColumn: Host-owned time index
    - Chunk / ComponentDescriptor / ChunkId: Immutable output batch
    - ImageArchetype / image_columns: Image and DepthImage columns

Example:
    ctx = ParserContext("/camera/image_raw")
    ctx.add_time_cell("timestamp", frame.timestamp_ns)

    chunk = Chunk.from_auto_row_ids(
        new_chunk_id(),
        ctx.entity_path(),
        ctx.build_timelines(),
        image_columns(ImageArchetype.IMAGE, blobs, formats),
    )
"""

from ros2_image_loader.chunk.archetypes import ImageArchetype, blob_array, image_columns
from ros2_image_loader.chunk.builders import FixedSizeListBuilder
from ros2_image_loader.chunk.chunk import (
    Chunk,
    ChunkId,
    ChunkIdGenerator,
    ComponentDescriptor,
    new_chunk_id,
)
from ros2_image_loader.chunk.timeline import (
    LOG_TIME,
    PUBLISH_TIME,
    ParserContext,
    TimeColumn,
    entity_path_for_topic,
)


__all__ = [
    "Chunk",
    "ChunkId",
    "ChunkIdGenerator",
    "ComponentDescriptor",
    "FixedSizeListBuilder",
    "ImageArchetype",
    "LOG_TIME",
    "PUBLISH_TIME",
    "ParserContext",
    "TimeColumn",
    "blob_array",
    "entity_path_for_topic",
    "image_columns",
    "new_chunk_id",
]
