"""
Unit of Work - the persistence sink of the booking engine

Architecture:
- One unit of work per core operation (book, pay, confirm, cancel, ...)
- Writes are staged on the unit and become durable only on commit()
- Leaving the block without commit rolls the staged writes back
- Any backend failure inside the block surfaces as PersistenceFailureError,
  after which the booking service restores its in-memory state
"""

from __future__ import annotations

import abc
from types import TracebackType
from typing import Optional

from src.platform.exception.exceptions import CustomBaseError, PersistenceFailureError
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.payment_entity import Payment


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow_factory() as uow:
            await uow.update_seat_availability(schedule_id='S1', seat_id='A1', available=False)
            await uow.persist_booking(booking=booking)
            await uow.commit()
    """

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.rollback()
        if isinstance(exc, Exception) and not isinstance(exc, CustomBaseError):
            raise PersistenceFailureError(f'Unit of work failed: {exc}') from exc

    async def commit(self) -> None:
        """
        Commit the staged writes, all or none

        Raises:
            PersistenceFailureError: any failure while committing, domain errors included
        """
        try:
            await self._commit()
        except PersistenceFailureError:
            raise
        except Exception as e:
            raise PersistenceFailureError(f'Commit failed: {e}') from e

    @abc.abstractmethod
    async def persist_booking(self, *, booking: Booking) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def persist_payment(self, *, payment: Payment) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def update_seat_availability(
        self, *, schedule_id: str, seat_id: str, available: bool
    ) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        """Discard staged writes. Must be a no-op after a successful commit."""
        raise NotImplementedError
