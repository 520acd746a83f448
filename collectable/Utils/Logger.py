from __future__ import annotations

import logging
import sys
from typing import Optional, Dict, Union

from collectable.Support.Config import config

LogContext = Dict[str, Union[str, int, float, bool, None]]


class CollectionLogger:
    """
    Module logger writing under the configured channel.

    Only the channel logger gets a handler and a level; module loggers
    propagate to it, so a record is written once whatever the nesting.
    """

    def __init__(self, name: str, channel: str) -> None:
        self.name = name
        self.channel = channel
        self.logger = logging.getLogger(name)
        _setup_channel(channel)

    def is_enabled(self, level: int = logging.DEBUG) -> bool:
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, context: Optional[LogContext] = None) -> None:
        """Log debug message, rendering the context only when it will be written."""
        if self.is_enabled(logging.DEBUG):
            self.logger.debug(self._format_message(message, context))

    def _format_message(self, message: str, context: Optional[LogContext] = None) -> str:
        """Format message with context."""
        if context:
            context_str = " | ".join(f"{k}={v}" for k, v in context.items())
            return f"{message} | {context_str}"
        return message


def _setup_channel(channel: str) -> None:
    channel_logger = logging.getLogger(channel)
    if channel_logger.handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    channel_logger.addHandler(handler)
    channel_logger.setLevel(_configured_level())


def _configured_level() -> int:
    level = logging.getLevelName(str(config.get('collection.log_level', 'warning')).upper())
    return level if isinstance(level, int) else logging.WARNING


def get_logger(name: Optional[str] = None) -> CollectionLogger:
    """Get a logger named under the configured channel."""
    channel = config.get('collection.log_channel', 'collectable')
    if name is None:
        name = channel
    elif name != channel and not name.startswith(f"{channel}."):
        name = f"{channel}.{name}"
    return CollectionLogger(name, channel)
