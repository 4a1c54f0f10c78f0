"""
Seat Inventory Domain

Availability of every seat on one schedule. Claims are all-or-nothing:
the whole requested set is validated before any seat changes state.

Mutual exclusion between concurrent callers is not handled here; the
booking service serialises access per schedule with a KeyedLock.
"""

from typing import Dict, Iterable, List

from src.platform.exception.exceptions import ConflictError, EmptySelectionError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.schedule_entity import Schedule
from src.service.booking.domain.entity.seat_entity import Seat


class SeatInventory:
    def __init__(self, *, schedule_id: str, seats: Iterable[Seat]) -> None:
        self.schedule_id = schedule_id
        # Insertion order keeps the schedule's seat layout order
        self._seats: Dict[str, Seat] = {seat.seat_id: seat for seat in seats}

    @classmethod
    def from_schedule(cls, schedule: Schedule) -> 'SeatInventory':
        return cls(schedule_id=schedule.id, seats=schedule.seats)

    def seat(self, seat_id: str) -> Seat:
        try:
            return self._seats[seat_id]
        except KeyError:
            raise NotFoundError(f'Seat {seat_id} not found on schedule {self.schedule_id}')

    def seats(self) -> List[Seat]:
        return list(self._seats.values())

    def available_seats(self) -> List[Seat]:
        return [seat for seat in self._seats.values() if seat.available]

    def snapshot(self) -> Dict[str, bool]:
        return {seat_id: seat.available for seat_id, seat in self._seats.items()}

    def _require_known(self, seat_ids: List[str]) -> None:
        missing = [seat_id for seat_id in seat_ids if seat_id not in self._seats]
        if missing:
            raise NotFoundError(
                f'Seats {", ".join(missing)} not found on schedule {self.schedule_id}'
            )

    @Logger.io
    def claim(self, seat_ids: Iterable[str]) -> List[Seat]:
        """
        Mark every requested seat unavailable, or none of them

        Raises:
            EmptySelectionError: no seats requested
            NotFoundError: a seat id is not part of this schedule
            ConflictError: a seat is already taken or requested twice
        """
        requested = list(seat_ids)
        if not requested:
            raise EmptySelectionError()

        self._require_known(requested)

        duplicates = sorted({seat_id for seat_id in requested if requested.count(seat_id) > 1})
        if duplicates:
            raise ConflictError(f'Seats requested more than once: {", ".join(duplicates)}')

        taken = [seat_id for seat_id in requested if not self._seats[seat_id].available]
        if taken:
            raise ConflictError(
                f'Seats {", ".join(taken)} already claimed on schedule {self.schedule_id}'
            )

        for seat_id in requested:
            self._seats[seat_id] = self._seats[seat_id].mark_unavailable()

        return [self._seats[seat_id] for seat_id in requested]

    @Logger.io
    def release(self, seat_ids: Iterable[str]) -> List[str]:
        """
        Make seats available again. Already-available seats are left alone.

        Returns:
            Ids of seats that actually changed state
        """
        requested = list(dict.fromkeys(seat_ids))
        self._require_known(requested)

        released = []
        for seat_id in requested:
            seat = self._seats[seat_id]
            if not seat.available:
                self._seats[seat_id] = seat.mark_available()
                released.append(seat_id)
        return released
