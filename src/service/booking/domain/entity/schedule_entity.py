from datetime import date, datetime, time, tzinfo
from decimal import Decimal
from typing import List, Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.booking.domain.entity.seat_entity import Seat


@attrs.define
class Schedule:
    id: str
    route_id: str
    date: date
    departure_time: time
    arrival_time: time
    seat_class: str
    class_percentage: Decimal = Decimal('100')
    seats: List[Seat] = attrs.field(factory=list)

    @classmethod
    def create(
        cls,
        *,
        id: str,
        route_id: str,
        date: date,
        departure_time: time,
        arrival_time: time,
        seat_class: str,
        class_percentage: Decimal = Decimal('100'),
        seats: Optional[List[Seat]] = None,
    ) -> 'Schedule':
        if arrival_time <= departure_time:
            raise DomainError('Arrival time must be after departure time')
        if class_percentage < 0:
            raise DomainError('Class percentage cannot be negative')

        seats = list(seats or [])
        seat_ids = [seat.seat_id for seat in seats]
        if len(seat_ids) != len(set(seat_ids)):
            raise DomainError(f'Duplicate seat ids in schedule {id}')

        return cls(
            id=id,
            route_id=route_id,
            date=date,
            departure_time=departure_time,
            arrival_time=arrival_time,
            seat_class=seat_class,
            class_percentage=class_percentage,
            seats=seats,
        )

    def departure_at(self, tz: tzinfo) -> datetime:
        return datetime.combine(self.date, self.departure_time, tzinfo=tz)
