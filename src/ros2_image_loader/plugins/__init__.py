"""
Plugins Module
==============

Per-schema message parsing.

Components:
    - SchemaPlugin / MessageParser: Plugin and parser interfaces
    - ImageSchemaPlugin / ImageMessageParser: `sensor_msgs/msg/Image`
    - PluginRegistry: Schema name -> plugin routing

Design Philosophy:
    Each schema is a pluggable black box. The host routes a channel by
    its schema name and only ever talks to the MessageParser interface.
"""

from ros2_image_loader.plugins.base import MessageParser, ParserState, SchemaPlugin
from ros2_image_loader.plugins.image import ImageMessageParser, ImageSchemaPlugin
from ros2_image_loader.plugins.registry import PluginRegistry, default_registry


__all__ = [
    "ImageMessageParser",
    "ImageSchemaPlugin",
    "MessageParser",
    "ParserState",
    "PluginRegistry",
    "SchemaPlugin",
    "default_registry",
]
