"""Deduplicating registry of open channels."""

from __future__ import annotations

import logging
from typing import Callable

from .channel import Channel

logger = logging.getLogger(__name__)


class ChannelPool:
    """Owns every serial and file channel opened during a run.

    At most one channel exists per distinct key.  The pool has no locking;
    callers that share it across threads must serialise ``get_or_create``.

    ``teardown()`` flushes and closes all owned channels.  Using the pool
    after teardown is a programming error and raises RuntimeError.
    """

    def __init__(self):
        self._channels: dict[str, Channel] = {}
        self._closed = False

    def get_or_create(self, key: str, factory: Callable[[], Channel]) -> Channel:
        """Return the channel pooled under *key*, creating it on first use."""
        if self._closed:
            raise RuntimeError("ChannelPool used after teardown")
        channel = self._channels.get(key)
        if channel is None:
            channel = factory()
            self._channels[key] = channel
            logger.debug("pooled %s", key)
        return channel

    def get(self, key: str) -> Channel | None:
        return self._channels.get(key)

    def teardown(self) -> None:
        """Flush and close every owned channel.  Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        channels = self._channels
        self._channels = {}

        error: Exception | None = None
        for key, channel in channels.items():
            try:
                channel.flush()
            except Exception as e:
                logger.warning("flush failed for %s: %s", key, e)
                error = error or e
            finally:
                try:
                    channel.close()
                except Exception as e:
                    logger.warning("close failed for %s: %s", key, e)
                    error = error or e
        if error is not None:
            raise error

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._channels)

    def __contains__(self, key: str) -> bool:
        return key in self._channels

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.teardown()
