from typing import Iterable, Tuple

import attrs
from uuid_utils import UUID
import uuid_utils

from src.platform.exception.exceptions import EmptySelectionError
from src.service.booking.domain.entity.route_entity import Route
from src.service.booking.domain.entity.schedule_entity import Schedule


@attrs.frozen
class Reservation:
    """Seats claimed on one schedule of one route. Frozen once built."""

    id: UUID
    schedule_id: str
    route_id: str
    seat_class: str
    seat_ids: Tuple[str, ...]

    @classmethod
    def create(
        cls,
        *,
        schedule: Schedule,
        route: Route,
        seat_class: str,
        claimed_seat_ids: Iterable[str],
    ) -> 'Reservation':
        seat_ids = tuple(claimed_seat_ids)
        if not seat_ids:
            raise EmptySelectionError()

        return cls(
            id=uuid_utils.uuid7(),
            schedule_id=schedule.id,
            route_id=route.id,
            seat_class=seat_class,
            seat_ids=seat_ids,
        )
