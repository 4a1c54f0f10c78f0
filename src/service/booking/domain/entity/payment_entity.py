from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Optional

import attrs
from uuid_utils import UUID
import uuid_utils

from src.platform.exception.exceptions import (
    DomainError,
    InvalidTransitionError,
    RefundExceedsPaymentError,
)
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.value_object.money import to_money


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    PROCESSING = 'processing'
    COMPLETED = 'completed'
    FAILED = 'failed'
    REFUNDED = 'refunded'


# A live payment is one that can still move money
LIVE_PAYMENT_STATUSES = frozenset(
    {PaymentStatus.PENDING, PaymentStatus.PROCESSING, PaymentStatus.COMPLETED}
)


@attrs.define
class Payment:
    id: UUID
    booking_id: UUID
    amount: Decimal
    method: str
    status: PaymentStatus = PaymentStatus.PENDING
    confirmed_at: Optional[datetime] = None
    refunded_amount: Optional[Decimal] = None
    refunded_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(cls, *, booking_id: UUID, amount: Decimal, method: str) -> 'Payment':
        if amount < 0:
            raise DomainError('Payment amount cannot be negative')
        if not method or not method.strip():
            raise DomainError('Payment method is required')

        return cls(
            id=uuid_utils.uuid7(),
            booking_id=booking_id,
            amount=to_money(amount),
            method=method.strip(),
            status=PaymentStatus.PENDING,
        )

    @property
    def is_live(self) -> bool:
        return self.status in LIVE_PAYMENT_STATUSES

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.COMPLETED

    @Logger.io
    def initiate(self) -> 'Payment':
        if self.status != PaymentStatus.PENDING:
            raise InvalidTransitionError(f'Cannot initiate a {self.status} payment')
        return attrs.evolve(self, status=PaymentStatus.PROCESSING)

    @Logger.io
    def confirm(self, *, confirmed_at: datetime) -> 'Payment':
        """
        Gateway callback: the money arrived

        Raises:
            InvalidTransitionError: unless the payment is processing
        """
        if self.status != PaymentStatus.PROCESSING:
            raise InvalidTransitionError(f'Cannot confirm a {self.status} payment')
        return attrs.evolve(self, status=PaymentStatus.COMPLETED, confirmed_at=confirmed_at)

    @Logger.io
    def fail(self) -> 'Payment':
        if self.status not in (PaymentStatus.PENDING, PaymentStatus.PROCESSING):
            raise InvalidTransitionError(f'Cannot fail a {self.status} payment')
        return attrs.evolve(self, status=PaymentStatus.FAILED)

    @Logger.io
    def refund(self, *, amount: Decimal, refunded_at: datetime) -> 'Payment':
        """
        Give back part or all of a completed payment

        Raises:
            InvalidTransitionError: unless the payment is completed
            RefundExceedsPaymentError: amount is larger than what was paid
        """
        if self.status != PaymentStatus.COMPLETED:
            raise InvalidTransitionError(f'Cannot refund a {self.status} payment')
        amount = to_money(amount)
        if amount < 0:
            raise DomainError('Refund amount cannot be negative')
        if amount > self.amount:
            raise RefundExceedsPaymentError(
                f'Refund {amount} exceeds payment amount {self.amount}'
            )
        return attrs.evolve(
            self,
            status=PaymentStatus.REFUNDED,
            refunded_amount=amount,
            refunded_at=refunded_at,
        )
