"""
In-memory persistence sink.

InMemoryBookingStore plays the booking/payment tables; InMemoryUnitOfWork
stages writes and applies them at commit. The next store and catalog state
is built on copies and swapped in only once every staged write applied, so a
failing commit leaves both exactly as they were.
"""

from typing import Dict, List, Tuple

from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.payment_entity import Payment
from src.service.booking.driven_adapter.in_memory_catalog import InMemoryCatalog


class InMemoryBookingStore:
    def __init__(self) -> None:
        self.bookings: Dict[UUID, Booking] = {}
        self.payments: Dict[UUID, Payment] = {}
        self.commit_count = 0


class InMemoryUnitOfWork(AbstractUnitOfWork):
    def __init__(self, *, store: InMemoryBookingStore, catalog: InMemoryCatalog) -> None:
        self.store = store
        self.catalog = catalog
        self._bookings: Dict[UUID, Booking] = {}
        self._payments: Dict[UUID, Payment] = {}
        self._seat_updates: List[Tuple[str, str, bool]] = []
        self.committed = False

    @property
    def staged_count(self) -> int:
        return len(self._bookings) + len(self._payments) + len(self._seat_updates)

    async def persist_booking(self, *, booking: Booking) -> None:
        self._bookings[booking.id] = booking

    async def persist_payment(self, *, payment: Payment) -> None:
        self._payments[payment.id] = payment

    async def update_seat_availability(
        self, *, schedule_id: str, seat_id: str, available: bool
    ) -> None:
        self._seat_updates.append((schedule_id, seat_id, available))

    async def _commit(self) -> None:
        bookings = dict(self.store.bookings)
        bookings.update(self._bookings)
        payments = dict(self.store.payments)
        payments.update(self._payments)
        schedules = self.catalog.stage_seat_availability(self._seat_updates)

        # Nothing below can fail
        self.store.bookings = bookings
        self.store.payments = payments
        self.catalog.commit_schedules(schedules)
        self.store.commit_count += 1
        self.committed = True

        Logger.base.debug(f'💾 [UOW] Committed {self.staged_count} writes')
        self._clear()

    async def rollback(self) -> None:
        if self.staged_count:
            Logger.base.debug(f'↩️ [UOW] Rolled back {self.staged_count} staged writes')
        self._clear()

    def _clear(self) -> None:
        self._bookings.clear()
        self._payments.clear()
        self._seat_updates.clear()
