from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Optional

import attrs
from uuid_utils import UUID
import uuid_utils

from src.platform.exception.exceptions import DomainError, InvalidTransitionError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.payment_entity import Payment, PaymentStatus
from src.service.booking.domain.entity.reservation_entity import Reservation
from src.service.booking.domain.value_object.money import percentage_of, to_money


class BookingStatus(StrEnum):
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'


@attrs.define
class Booking:
    """
    A customer's claim on seats of one schedule.

    total_amount is priced once at creation and never recomputed from current
    route or class data; only an explicit promo application may lower it before
    payment. Refunds are computed from this locked amount.
    """

    id: UUID
    customer_id: str
    reservation: Reservation
    total_amount: Decimal
    created_at: datetime
    status: BookingStatus = BookingStatus.CONFIRMED
    is_paid: bool = False
    payment: Optional[Payment] = None
    promo_code: Optional[str] = None
    refund_amount: Optional[Decimal] = None
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        customer_id: str,
        reservation: Reservation,
        total_amount: Decimal,
        created_at: datetime,
        promo_code: Optional[str] = None,
    ) -> 'Booking':
        if not customer_id:
            raise DomainError('customer_id is required')
        if total_amount < 0:
            raise DomainError('Booking total cannot be negative')

        return cls(
            id=uuid_utils.uuid7(),
            customer_id=customer_id,
            reservation=reservation,
            total_amount=to_money(total_amount),
            created_at=created_at,
            status=BookingStatus.CONFIRMED,
            promo_code=promo_code,
        )

    @property
    def schedule_id(self) -> str:
        return self.reservation.schedule_id

    @property
    def seat_ids(self) -> tuple[str, ...]:
        return self.reservation.seat_ids

    @property
    def payment_state(self) -> str:
        """'paid' or 'unpaid' sub-state of a confirmed booking"""
        return 'paid' if self.is_paid else 'unpaid'

    def _require_confirmed_unpaid(self, action: str) -> None:
        if self.status != BookingStatus.CONFIRMED or self.is_paid:
            raise InvalidTransitionError(
                f'Cannot {action} booking in state {self.status}({self.payment_state})'
            )

    @Logger.io
    def attach_payment(self, *, payment: Payment) -> 'Booking':
        """
        Attach a payment to an unpaid confirmed booking

        Re-attaching the payment already on the booking is a no-op. A failed
        payment may be replaced; any other existing payment blocks attachment.
        """
        self._require_confirmed_unpaid('attach payment to')

        if self.payment is not None:
            if self.payment.id == payment.id:
                return self
            if self.payment.is_live:
                raise InvalidTransitionError(
                    f'Booking {self.id} already has a {self.payment.status} payment'
                )

        if payment.booking_id != self.id:
            raise DomainError('Payment belongs to a different booking')

        return attrs.evolve(self, payment=payment)

    @Logger.io
    def update_payment(self, *, payment: Payment) -> 'Booking':
        """Swap in a newer state of the payment already attached"""
        if self.payment is None or self.payment.id != payment.id:
            raise DomainError('Payment is not attached to this booking')
        return attrs.evolve(self, payment=payment)

    @Logger.io
    def mark_paid(self) -> 'Booking':
        self._require_confirmed_unpaid('mark paid')
        if self.payment is None or self.payment.status != PaymentStatus.COMPLETED:
            raise InvalidTransitionError('Booking can only be marked paid after payment completes')
        return attrs.evolve(self, is_paid=True)

    @Logger.io
    def complete(self, *, completed_at: datetime) -> 'Booking':
        if self.status != BookingStatus.CONFIRMED or not self.is_paid:
            raise InvalidTransitionError(
                f'Cannot complete booking in state {self.status}({self.payment_state})'
            )
        return attrs.evolve(self, status=BookingStatus.COMPLETED, completed_at=completed_at)

    @Logger.io
    def apply_discount(self, *, promo_code: str, discounted_total: Decimal) -> 'Booking':
        self._require_confirmed_unpaid('apply a promotion to')
        if self.payment is not None and self.payment.is_live:
            raise InvalidTransitionError('Cannot apply a promotion once payment has started')
        if self.promo_code is not None:
            raise InvalidTransitionError(f'Promotion {self.promo_code} already applied')
        if discounted_total < 0 or discounted_total > self.total_amount:
            raise DomainError('Discounted total must be between 0 and the current total')

        return attrs.evolve(self, promo_code=promo_code, total_amount=to_money(discounted_total))

    @Logger.io
    def cancel(
        self, *, refund_percentage: Decimal, cancelled_at: datetime
    ) -> 'Booking':
        """
        Cancel a confirmed booking (Domain validation)

        A completed payment is refunded by refund_percentage of its amount; a
        payment still in flight is failed. Seat release is the caller's job.

        Raises:
            InvalidTransitionError: booking is already cancelled or completed
        """
        if self.status != BookingStatus.CONFIRMED:
            raise InvalidTransitionError(f'Cannot cancel a {self.status} booking')
        if not Decimal(0) <= refund_percentage <= Decimal(100):
            raise DomainError('Refund percentage must be between 0 and 100')

        payment = self.payment
        refund_amount = to_money(0)
        if payment is not None:
            if payment.status == PaymentStatus.COMPLETED:
                refund_amount = percentage_of(payment.amount, refund_percentage)
                payment = payment.refund(amount=refund_amount, refunded_at=cancelled_at)
            elif payment.status in (PaymentStatus.PENDING, PaymentStatus.PROCESSING):
                payment = payment.fail()

        return attrs.evolve(
            self,
            status=BookingStatus.CANCELLED,
            payment=payment,
            refund_amount=refund_amount,
            cancelled_at=cancelled_at,
        )
