from src.service.booking.app.interface.i_booking_event_publisher import IBookingEventPublisher
from src.service.booking.app.interface.i_cancellation_policy_source import (
    ICancellationPolicySource,
)
from src.service.booking.app.interface.i_promotional_code_source import IPromotionalCodeSource
from src.service.booking.app.interface.i_schedule_source import IScheduleSource
from src.service.booking.app.interface.i_unit_of_work import AbstractUnitOfWork


__all__ = [
    'AbstractUnitOfWork',
    'IBookingEventPublisher',
    'ICancellationPolicySource',
    'IPromotionalCodeSource',
    'IScheduleSource',
]
