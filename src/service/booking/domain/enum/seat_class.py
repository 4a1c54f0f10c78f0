from enum import StrEnum
from typing import Optional


class SeatClass(StrEnum):
    """Seat / schedule travel class. Values are lower-case; parsing is case-insensitive."""

    ECONOMY = 'economy'
    BUSINESS = 'business'
    FIRST = 'first'

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional['SeatClass']:
        if value is None:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None
