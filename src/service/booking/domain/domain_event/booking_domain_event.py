"""
Booking Domain Events

Emitted by the booking service after a transition has been committed, for
the notification collaborator to deliver. Delivery is fire-and-forget.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple, Union

import attrs
from uuid_utils import UUID

from src.service.booking.domain.entity.booking_entity import Booking


@attrs.frozen
class BookingConfirmedEvent:
    """Domain event fired when seats are claimed and the booking is created"""

    booking_id: UUID
    customer_id: str
    schedule_id: str
    seat_ids: Tuple[str, ...]
    total_amount: Decimal
    occurred_at: datetime

    @classmethod
    def from_booking(cls, *, booking: Booking) -> 'BookingConfirmedEvent':
        return cls(
            booking_id=booking.id,
            customer_id=booking.customer_id,
            schedule_id=booking.schedule_id,
            seat_ids=booking.seat_ids,
            total_amount=booking.total_amount,
            occurred_at=booking.created_at,
        )


@attrs.frozen
class PaymentConfirmedEvent:
    booking_id: UUID
    customer_id: str
    payment_id: UUID
    amount: Decimal
    occurred_at: datetime

    @classmethod
    def from_booking(cls, *, booking: Booking) -> 'PaymentConfirmedEvent':
        assert booking.payment is not None and booking.payment.confirmed_at is not None
        return cls(
            booking_id=booking.id,
            customer_id=booking.customer_id,
            payment_id=booking.payment.id,
            amount=booking.payment.amount,
            occurred_at=booking.payment.confirmed_at,
        )


@attrs.frozen
class BookingCancelledEvent:
    booking_id: UUID
    customer_id: str
    schedule_id: str
    released_seat_ids: Tuple[str, ...]
    refund_amount: Decimal
    policy_id: Optional[str]
    occurred_at: datetime

    @classmethod
    def from_booking(
        cls, *, booking: Booking, released_seat_ids: Tuple[str, ...], policy_id: Optional[str]
    ) -> 'BookingCancelledEvent':
        assert booking.cancelled_at is not None and booking.refund_amount is not None
        return cls(
            booking_id=booking.id,
            customer_id=booking.customer_id,
            schedule_id=booking.schedule_id,
            released_seat_ids=released_seat_ids,
            refund_amount=booking.refund_amount,
            policy_id=policy_id,
            occurred_at=booking.cancelled_at,
        )


BookingDomainEvent = Union[BookingConfirmedEvent, PaymentConfirmedEvent, BookingCancelledEvent]
