from decimal import Decimal

import attrs

from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.domain.value_object.money import to_money


@attrs.define
class Seat:
    seat_id: str  # row letter + number, e.g. 'A1'
    seat_type: SeatClass = SeatClass.ECONOMY
    price_adjustment: Decimal = attrs.field(default=Decimal('0'), converter=to_money)
    available: bool = True

    def mark_unavailable(self) -> 'Seat':
        return attrs.evolve(self, available=False)

    def mark_available(self) -> 'Seat':
        return attrs.evolve(self, available=True)
