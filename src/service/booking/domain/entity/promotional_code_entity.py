from datetime import date
from decimal import Decimal

import attrs

from src.platform.exception.exceptions import DomainError


def normalize_code(code: str) -> str:
    return code.strip().upper()


@attrs.define
class PromotionalCode:
    code: str
    expires_on: date
    discount_percentage: Decimal
    is_active: bool = True

    @classmethod
    def create(
        cls,
        *,
        code: str,
        expires_on: date,
        discount_percentage: Decimal,
        is_active: bool = True,
    ) -> 'PromotionalCode':
        if not code or not code.strip():
            raise DomainError('Promotional code is required')
        discount_percentage = Decimal(str(discount_percentage))
        if not Decimal(0) < discount_percentage <= Decimal(100):
            raise DomainError('Discount percentage must be in (0, 100]')

        return cls(
            code=normalize_code(code),
            expires_on=expires_on,
            discount_percentage=discount_percentage,
            is_active=is_active,
        )

    def is_usable(self, *, today: date) -> bool:
        return self.is_active and today <= self.expires_on

    def deactivate(self) -> 'PromotionalCode':
        return attrs.evolve(self, is_active=False)
