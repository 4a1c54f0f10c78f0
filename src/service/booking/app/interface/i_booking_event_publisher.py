"""
Booking Event Publisher Interface

Hands committed booking transitions to the notification collaborator.
Implementations must not block the caller on delivery.
"""

from typing import Protocol

from src.service.booking.domain.domain_event.booking_domain_event import (
    BookingCancelledEvent,
    BookingConfirmedEvent,
    PaymentConfirmedEvent,
)


class IBookingEventPublisher(Protocol):
    async def publish_booking_confirmed(self, *, event: BookingConfirmedEvent) -> None: ...

    async def publish_payment_confirmed(self, *, event: PaymentConfirmedEvent) -> None: ...

    async def publish_booking_cancelled(self, *, event: BookingCancelledEvent) -> None: ...
