"""
ros2-image-loader
=================

Loads recorded ROS 2 `sensor_msgs/msg/Image` channels into columnar,
timeline-indexed arrow chunks.

Raw CDR messages are decoded, their encoding is resolved to a canonical
pixel-format descriptor, and each channel is accumulated into two chunks
sharing the same rows and timelines: the image chunk (pixel buffer and
format) and the metadata chunk (height, width, encoding, is_bigendian, step).

Components:
    - codec: CDR reader/writer and the image message decoder
    - formats: Encoding string -> ImageFormat resolver
    - chunk: Column builders, timelines and the Chunk output type
    - plugins: Schema plugin interface, image parser, registry
    - loader: Host-side driver applying the error policy per channel
    - config: pydantic settings from YAML and environment

Example:
    from ros2_image_loader import ChannelLoader, default_registry

    loader = ChannelLoader(default_registry(), error_policy="skip")
    image_chunk, metadata_chunk = loader.load_channel(channel, messages)
"""

__version__ = "0.1.0"

from ros2_image_loader.chunk import Chunk, ComponentDescriptor, ParserContext
from ros2_image_loader.errors import (
    BatchConstructionError,
    DecodeError,
    ParserStateError,
    PluginError,
    UnknownSchemaError,
    UnsupportedFormatError,
)
from ros2_image_loader.formats import resolve_image_format
from ros2_image_loader.loader import ChannelLoader, LoaderMetrics
from ros2_image_loader.models import Channel, ImageFormat, ImageFrame, Message
from ros2_image_loader.plugins import (
    ImageMessageParser,
    ImageSchemaPlugin,
    PluginRegistry,
    default_registry,
)


__all__ = [
    "__version__",
    # Host
    "Channel",
    "ChannelLoader",
    "LoaderMetrics",
    "Message",
    # Plugins
    "ImageMessageParser",
    "ImageSchemaPlugin",
    "PluginRegistry",
    "default_registry",
    # Output
    "Chunk",
    "ComponentDescriptor",
    "ParserContext",
    # Formats
    "ImageFormat",
    "ImageFrame",
    "resolve_image_format",
    # Errors
    "BatchConstructionError",
    "DecodeError",
    "ParserStateError",
    "PluginError",
    "UnknownSchemaError",
    "UnsupportedFormatError",
]
