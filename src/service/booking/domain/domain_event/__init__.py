from src.service.booking.domain.domain_event.booking_domain_event import (
    BookingCancelledEvent,
    BookingConfirmedEvent,
    BookingDomainEvent,
    PaymentConfirmedEvent,
)


__all__ = [
    'BookingCancelledEvent',
    'BookingConfirmedEvent',
    'BookingDomainEvent',
    'PaymentConfirmedEvent',
]
