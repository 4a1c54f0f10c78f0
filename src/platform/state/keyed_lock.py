"""
Keyed Lock

In-process mutual exclusion keyed by an identifier (schedule id, booking id).
Same acquire-with-deadline contract as a distributed SET NX lock, backed by
anyio locks so waiters are served in arrival order.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import anyio

from src.platform.exception.exceptions import LockTimeoutError
from src.platform.logging.loguru_io import Logger


class KeyedLock:
    """
    One anyio.Lock per key, created lazily.

    Usage:
        async with schedule_locks.hold(key='schedule:S1', timeout=5.0):
            ...
    """

    def __init__(self, *, name: str) -> None:
        self.name = name
        self._locks: Dict[str, anyio.Lock] = {}

    def _lock_for(self, key: str) -> anyio.Lock:
        # No await between lookup and insert, so this is atomic on the event loop
        lock = self._locks.get(key)
        if lock is None:
            lock = anyio.Lock()
            self._locks[key] = lock
        return lock

    def locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, *, key: str, timeout: Optional[float]) -> AsyncIterator[None]:
        """
        Acquire the lock for key, waiting at most timeout seconds

        Raises:
            LockTimeoutError: the lock was not acquired before the deadline
        """
        lock = self._lock_for(key)
        try:
            with anyio.fail_after(timeout):
                await lock.acquire()
        except TimeoutError:
            Logger.base.warning(f'⏳ [LOCK] {self.name}:{key} not acquired within {timeout}s')
            raise LockTimeoutError(f'Timed out waiting for {self.name} {key}')

        Logger.base.debug(f'🔒 [LOCK] Acquired {self.name}:{key}')
        try:
            yield
        finally:
            lock.release()
            Logger.base.debug(f'🔓 [LOCK] Released {self.name}:{key}')
