from datetime import datetime
from typing import Tuple

import attrs
from uuid_utils import UUID


@attrs.frozen
class ETicket:
    """Travel document issued for a paid booking"""

    ticket_id: str
    booking_id: UUID
    customer_id: str
    schedule_id: str
    seat_ids: Tuple[str, ...]
    issued_at: datetime
