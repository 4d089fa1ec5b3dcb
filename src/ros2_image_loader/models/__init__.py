"""
Data Models
===========

Typed records for the image loader.

This module re-exports all data models for convenient access.

Models:
    Host:
        - Channel: A recorded channel and its schema name
        - Message: One raw message from a channel

    Frame:
        - ImageFrame: Decoded `sensor_msgs/msg/Image`

    Format:
        - ColorModel, ChannelDatatype, PixelFormat: Format vocabularies
        - ImageFormat: Canonical pixel-format descriptor
"""

from ros2_image_loader.models.channel import Channel, Message
from ros2_image_loader.models.frame import ImageFrame
from ros2_image_loader.models.image_format import (
    ChannelDatatype,
    ColorModel,
    ImageFormat,
    PixelFormat,
)

__all__ = [
    # Host
    "Channel",
    "Message",
    # Frame
    "ImageFrame",
    # Format
    "ColorModel",
    "ChannelDatatype",
    "PixelFormat",
    "ImageFormat",
]
