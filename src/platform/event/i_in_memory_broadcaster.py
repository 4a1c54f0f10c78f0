"""
In-memory Event Broadcaster Interface

Pub/sub within one process: committed booking events fan out to whoever
subscribed for a key (a customer id, or ALL_SUBSCRIBERS_KEY for every event).
"""

from typing import Any, Protocol

from anyio.streams.memory import MemoryObjectReceiveStream


class IInMemoryEventBroadcaster(Protocol):
    async def subscribe(self, *, key: str) -> MemoryObjectReceiveStream[Any]:
        """
        Subscribe to events published under key

        Returns:
            MemoryObjectReceiveStream that will receive event objects
        """
        ...

    async def broadcast(self, *, key: str, event: Any) -> None:
        """
        Broadcast event to subscribers of key and of ALL_SUBSCRIBERS_KEY

        Note:
            - Silently ignores if no subscribers exist
            - Drops event if subscriber stream is full (prevents blocking)
        """
        ...

    async def unsubscribe(self, *, key: str, stream: MemoryObjectReceiveStream[Any]) -> None:
        """Safe to call with non-existent key or stream"""
        ...
