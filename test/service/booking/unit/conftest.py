"""
Unit test fixtures for the booking engine.

Seeded catalog:
- Route R1 Taipei → Kaohsiung, base price 1000
- Schedule S1 (economy) departs 2026-11-01 10:00 UTC, seats A1-A4, B1-B4
- Schedule S2 (business) same route and departure, seats A1-A4
- Cancellation policies: ≥48h → 75 %, ≥24h → 50 %
- Promo codes: WELCOME10 (10 %, valid), OLD5 (5 %, expired)

The service clock is pinned to 2026-10-01 09:00 UTC.
"""

from collections.abc import Callable
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.service.booking.app.booking_service import BookingService
from src.service.booking.domain.entity.cancellation_policy_entity import CancellationPolicy
from src.service.booking.domain.entity.promotional_code_entity import PromotionalCode
from src.service.booking.domain.entity.route_entity import Route
from src.service.booking.domain.entity.schedule_entity import Schedule
from src.service.booking.domain.entity.seat_entity import Seat
from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.driven_adapter.in_memory_catalog import InMemoryCatalog
from src.service.booking.driven_adapter.in_memory_unit_of_work import (
    InMemoryBookingStore,
    InMemoryUnitOfWork,
)


DEPARTURE = datetime(2026, 11, 1, 10, 0, tzinfo=timezone.utc)
NOW = datetime(2026, 10, 1, 9, 0, tzinfo=timezone.utc)


def _seats(rows: str, per_row: int, seat_type: SeatClass) -> list[Seat]:
    return [Seat(seat_id=f'{row}{n}', seat_type=seat_type) for row in rows for n in range(1, per_row + 1)]


@pytest.fixture
def departure() -> datetime:
    return DEPARTURE


@pytest.fixture
def before_departure() -> Callable[[float], Callable[[], datetime]]:
    """Clock factory: before_departure(48) → now_fn reading 48h before departure"""

    def _make(hours: float) -> Callable[[], datetime]:
        return lambda: DEPARTURE - timedelta(hours=hours)

    return _make


@pytest.fixture
def catalog() -> InMemoryCatalog:
    catalog = InMemoryCatalog()
    catalog.add_route(
        Route.create(id='R1', source='Taipei', destination='Kaohsiung', base_price=Decimal('1000'))
    )
    catalog.add_schedule(
        Schedule.create(
            id='S1',
            route_id='R1',
            date=date(2026, 11, 1),
            departure_time=time(10, 0),
            arrival_time=time(12, 0),
            seat_class='economy',
            seats=_seats('AB', 4, SeatClass.ECONOMY),
        )
    )
    catalog.add_schedule(
        Schedule.create(
            id='S2',
            route_id='R1',
            date=date(2026, 11, 1),
            departure_time=time(10, 0),
            arrival_time=time(12, 0),
            seat_class='business',
            seats=_seats('A', 4, SeatClass.BUSINESS),
        )
    )
    catalog.add_cancellation_policy(
        CancellationPolicy.create(
            id='P48', refund_percentage=Decimal('75'), hours_before_departure=48,
            description='Two days or more before departure',
        )
    )
    catalog.add_cancellation_policy(
        CancellationPolicy.create(
            id='P24', refund_percentage=Decimal('50'), hours_before_departure=24,
            description='One day or more before departure',
        )
    )
    catalog.add_promotional_code(
        PromotionalCode.create(
            code='WELCOME10', expires_on=date(2026, 12, 31), discount_percentage=Decimal('10')
        )
    )
    catalog.add_promotional_code(
        PromotionalCode.create(
            code='OLD5', expires_on=date(2026, 1, 1), discount_percentage=Decimal('5')
        )
    )
    return catalog


@pytest.fixture
def store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def event_publisher() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
async def service(catalog, store, event_publisher) -> BookingService:
    service = BookingService(
        schedule_source=catalog,
        policy_source=catalog,
        promo_source=catalog,
        uow_factory=lambda: InMemoryUnitOfWork(store=store, catalog=catalog),
        event_publisher=event_publisher,
        clock=lambda: NOW,
    )
    await service.refresh_catalogs()
    return service


@pytest.fixture
def paid_booking(service):
    """Factory: book seats on a schedule and take the payment through to completed"""

    async def _make(*, seat_ids=('A1',), schedule_id='S1', customer_id='alice'):
        booking = await service.book_seats(
            customer_id=customer_id, schedule_id=schedule_id, seat_ids=list(seat_ids)
        )
        await service.pay(booking_id=booking.id, method='credit_card')
        await service.confirm_payment(booking_id=booking.id)
        return service.get_booking(booking_id=booking.id)

    return _make
