"""
Interception helpers that drive the monitor hooks around send calls.

Provides a context manager, sync/async decorators and a channel proxy.
All of them record the outcome exactly once per call and re-raise the
original exception unchanged.
"""

import inspect
import logging
from functools import wraps
from typing import Any, Callable, TypeVar

from .channel_monitor import MessageChannelMonitor, SendContext

T = TypeVar("T")
logger = logging.getLogger(__name__)


class monitor_send:
    """
    Context manager recording one send attempt.

    Usage:
        with monitor_send(monitor):
            channel.send(message)

    The attempt succeeds iff the block exits without an exception.
    Exceptions are never suppressed.
    """

    __slots__ = ("monitor", "context")

    def __init__(self, monitor: MessageChannelMonitor):
        """
        Initialize send measurement.

        Args:
            monitor: Monitor of the channel being sent on
        """
        self.monitor = monitor
        self.context: SendContext = None

    def __enter__(self):
        """Record send start."""
        self.context = self.monitor.on_start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Record send outcome."""
        self.monitor.on_complete(self.context, success=exc_type is None)
        return False  # Don't suppress exceptions


def monitored(monitor: MessageChannelMonitor):
    """
    Decorator monitoring every call of a sync send function.

    Args:
        monitor: Monitor of the channel the function sends on

    Usage:
        @monitored(registry.get("orders"))
        def publish(order):
            broker.send(order)
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs):
            with monitor_send(monitor):
                return func(*args, **kwargs)

        return wrapper

    return decorator


def monitored_async(monitor: MessageChannelMonitor):
    """
    Decorator monitoring every call of an async send function.

    Args:
        monitor: Monitor of the channel the coroutine sends on

    Usage:
        @monitored_async(registry.get("fills"))
        async def publish(fill):
            await queue.put(fill)
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            with monitor_send(monitor):
                return await func(*args, **kwargs)

        return wrapper

    return decorator


class MonitoredChannel:
    """
    Proxy that monitors ``send`` on a wrapped channel.

    Only send calls are timed and counted; every other attribute is
    passed through to the wrapped channel untouched. Async channels
    (coroutine ``send``) are supported transparently.
    """

    def __init__(self, channel: Any, monitor: MessageChannelMonitor):
        self._channel = channel
        self._monitor = monitor

    @property
    def monitor(self) -> MessageChannelMonitor:
        return self._monitor

    @property
    def channel(self) -> Any:
        return self._channel

    def send(self, *args, **kwargs):
        """Send through the wrapped channel, recording the attempt."""
        if inspect.iscoroutinefunction(self._channel.send):
            return self._send_async(*args, **kwargs)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Intercepted send on {self._channel!r}")
        with monitor_send(self._monitor):
            return self._channel.send(*args, **kwargs)

    async def _send_async(self, *args, **kwargs):
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Intercepted async send on {self._channel!r}")
        with monitor_send(self._monitor):
            return await self._channel.send(*args, **kwargs)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._channel, name)

    def __repr__(self) -> str:
        return f"MonitoredChannel({self._channel!r}, monitor={self._monitor.name!r})"
