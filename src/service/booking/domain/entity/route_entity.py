from decimal import Decimal
from typing import List

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.booking.domain.value_object.money import to_money


@attrs.define
class Route:
    id: str
    source: str
    destination: str
    base_price: Decimal
    schedule_ids: List[str] = attrs.field(factory=list)

    @classmethod
    def create(
        cls,
        *,
        id: str,
        source: str,
        destination: str,
        base_price: Decimal,
        schedule_ids: List[str] | None = None,
    ) -> 'Route':
        if source.strip().lower() == destination.strip().lower():
            raise DomainError('Route source and destination must differ')
        if base_price < 0:
            raise DomainError('Base price cannot be negative')

        return cls(
            id=id,
            source=source,
            destination=destination,
            base_price=to_money(base_price),
            schedule_ids=list(schedule_ids or []),
        )
