"""
Extensia Logging - Simple logging wrapper.
"""
import asyncio
import functools
import logging
import sys

from extensia.settings import get_settings
from extensia.version import __version__

NAME = 'extensia'


class InstrumentedLogger(logging.Logger):
    """Logger with instrument decorator for method tracing."""

    def _format(self, message_template: str, args, kwargs) -> str:
        try:
            if args and hasattr(args[0], '__class__'):
                return message_template.format(self=args[0], **kwargs)
            return message_template.format(**kwargs)
        except (KeyError, AttributeError, IndexError):
            return message_template

    def instrument(self, message_template: str = ""):
        """
        Decorator that logs entry to a function/method.

        Args:
            message_template: Format string that can reference {self} and keyword arguments
        """
        def decorator(func):
            @functools.wraps(func)
            def sync_wrapper(*args, **kwargs):
                msg = self._format(message_template, args, kwargs)
                if msg:
                    self.info(msg)
                return func(*args, **kwargs)

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                msg = self._format(message_template, args, kwargs)
                if msg:
                    self.info(msg)
                return await func(*args, **kwargs)

            if asyncio.iscoroutinefunction(func):
                return async_wrapper
            return sync_wrapper

        return decorator


def get_logger(name: str, version: str = "", level: str = "INFO") -> InstrumentedLogger:
    """Create an instrumented logger."""
    logging.setLoggerClass(InstrumentedLogger)

    logger = logging.getLogger(name)
    logger.__class__ = InstrumentedLogger

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter('%(asctime)s.%(msecs)03d %(message)s', datefmt='%H:%M:%S'))
        logger.addHandler(handler)
        logger.setLevel(level.upper())
        if version:
            logger.debug(f'{name} {version} logging at {level.upper()}')

    return logger


# Create the main logger
logger = get_logger(
    name=NAME,
    version=__version__,
    level=get_settings().log_level,
)
