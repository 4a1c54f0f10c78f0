from decimal import Decimal

import attrs

from src.platform.exception.exceptions import DomainError


@attrs.define
class CancellationPolicy:
    id: str
    refund_percentage: Decimal
    hours_before_departure: int
    description: str

    @classmethod
    def create(
        cls,
        *,
        id: str,
        refund_percentage: Decimal,
        hours_before_departure: int,
        description: str,
    ) -> 'CancellationPolicy':
        policy = cls(
            id=id,
            refund_percentage=Decimal(str(refund_percentage)),
            hours_before_departure=hours_before_departure,
            description=description,
        )
        policy.validate()
        return policy

    def validate(self) -> None:
        if not Decimal(0) <= self.refund_percentage <= Decimal(100):
            raise DomainError('Refund percentage must be between 0 and 100')
        if self.hours_before_departure < 0:
            raise DomainError('Hours before departure cannot be negative')
        if not self.description or not self.description.strip():
            raise DomainError('Policy description is required')

    def matches(self, hours_before_departure: float) -> bool:
        return hours_before_departure >= self.hours_before_departure
