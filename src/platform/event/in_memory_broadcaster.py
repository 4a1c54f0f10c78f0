"""
In-memory Event Broadcaster Implementation

Fans committed booking events out to in-process subscribers (notification
delivery workers, tests) without ever blocking the publisher.
"""

from typing import Any, Dict, List

from anyio import WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from src.platform.logging.loguru_io import Logger


# Subscribing under this key receives every broadcast event
ALL_SUBSCRIBERS_KEY = '*'


class InMemoryEventBroadcasterImpl:
    """
    In-memory pub/sub keyed by string

    Memory Management:
    - Stream max buffer: max_buffer_size events per subscriber
    - Drop policy: drop if stream full (send_nowait raises WouldBlock)
    - Cleanup: Remove empty lists on unsubscribe and close streams
    """

    def __init__(self, *, max_buffer_size: int = 10) -> None:
        self.max_buffer_size = max_buffer_size
        # key → list of (send_stream, receive_stream) tuples
        self._subscribers: Dict[
            str, List[tuple[MemoryObjectSendStream[Any], MemoryObjectReceiveStream[Any]]]
        ] = {}

    async def subscribe(self, *, key: str) -> MemoryObjectReceiveStream[Any]:
        send_stream, receive_stream = create_memory_object_stream[Any](
            max_buffer_size=self.max_buffer_size
        )
        self._subscribers.setdefault(key, []).append((send_stream, receive_stream))

        Logger.base.debug(
            f'📡 [BROADCASTER] Subscribed to {key} (total subscribers: {len(self._subscribers[key])})'
        )
        return receive_stream

    async def broadcast(self, *, key: str, event: Any) -> None:
        targets = list(self._subscribers.get(key, []))
        if key != ALL_SUBSCRIBERS_KEY:
            targets += self._subscribers.get(ALL_SUBSCRIBERS_KEY, [])

        if not targets:
            Logger.base.debug(f'📡 [BROADCASTER] No subscribers for {key}')
            return

        delivered = 0
        dropped = 0
        for send_stream, _ in targets:
            try:
                send_stream.send_nowait(event)
                delivered += 1
            except WouldBlock:
                # Slow consumer
                dropped += 1
                Logger.base.warning(
                    f'⚠️ [BROADCASTER] Stream full for {key}, dropping {type(event).__name__}'
                )

        Logger.base.info(
            f'📡 [BROADCASTER] {type(event).__name__} to {key}: delivered={delivered}, dropped={dropped}'
        )

    async def unsubscribe(self, *, key: str, stream: MemoryObjectReceiveStream[Any]) -> None:
        if key not in self._subscribers:
            return

        subscribers = self._subscribers[key]
        for i, (send_stream, receive_stream) in enumerate(subscribers):
            if receive_stream is stream:
                await send_stream.aclose()
                await receive_stream.aclose()
                subscribers.pop(i)
                Logger.base.debug(
                    f'📡 [BROADCASTER] Unsubscribed from {key} (remaining: {len(subscribers)})'
                )
                break

        if not self._subscribers[key]:
            del self._subscribers[key]
