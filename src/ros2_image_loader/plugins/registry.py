"""
Plugin Registry
===============

Routes channels to schema plugins by schema name.

The registry knows plugins only through the SchemaPlugin interface;
it never inspects the concrete parser types they create.
"""

import logging
from typing import Dict, List, Optional

from ros2_image_loader.config import ParserConfig
from ros2_image_loader.errors import UnknownSchemaError
from ros2_image_loader.models.channel import Channel
from ros2_image_loader.plugins.base import MessageParser, SchemaPlugin
from ros2_image_loader.plugins.image import ImageSchemaPlugin


logger = logging.getLogger(__name__)


class PluginRegistry:
    """
    Mapping of schema name to SchemaPlugin.

    Example:
        registry = PluginRegistry()
        registry.register(ImageSchemaPlugin())

        parser = registry.create_parser(channel, num_rows=120)
    """

    def __init__(self) -> None:
        self._plugins: Dict[str, SchemaPlugin] = {}

    def register(self, plugin: SchemaPlugin) -> None:
        """
        Register a plugin under its name().

        A later registration for the same schema replaces the earlier one.
        """
        name = plugin.name()
        if name in self._plugins:
            logger.warning(f"Replacing schema plugin for {name}")
        self._plugins[name] = plugin

    def get(self, schema_name: str) -> Optional[SchemaPlugin]:
        """Plugin for a schema, or None if nothing is registered."""
        return self._plugins.get(schema_name)

    def schema_names(self) -> List[str]:
        return sorted(self._plugins)

    def __contains__(self, schema_name: str) -> bool:
        return schema_name in self._plugins

    def create_parser(self, channel: Channel, num_rows: int) -> MessageParser:
        """
        Create a parser for a channel using the plugin for its schema.

        Args:
            channel: Channel to parse
            num_rows: Expected message count (capacity hint)

        Raises:
            UnknownSchemaError: If no plugin handles channel.schema_name
        """
        plugin = self.get(channel.schema_name)
        if plugin is None:
            raise UnknownSchemaError(channel.schema_name)
        return plugin.create_message_parser(channel, num_rows)


def default_registry(parser_config: Optional[ParserConfig] = None) -> PluginRegistry:
    """Registry with every built-in plugin registered."""
    registry = PluginRegistry()
    registry.register(ImageSchemaPlugin(parser_config))
    return registry
