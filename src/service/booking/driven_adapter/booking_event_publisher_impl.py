from src.platform.event.i_in_memory_broadcaster import IInMemoryEventBroadcaster
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.domain_event.booking_domain_event import (
    BookingCancelledEvent,
    BookingConfirmedEvent,
    BookingDomainEvent,
    PaymentConfirmedEvent,
)


class BookingEventPublisherImpl:
    """Publishes booking events to the in-process broadcaster, keyed by customer id"""

    def __init__(self, *, broadcaster: IInMemoryEventBroadcaster) -> None:
        self.broadcaster = broadcaster

    async def _publish(self, *, event: BookingDomainEvent) -> None:
        await self.broadcaster.broadcast(key=event.customer_id, event=event)
        Logger.base.info(
            f'📤 [EVENT] {type(event).__name__} for booking {event.booking_id} published'
        )

    async def publish_booking_confirmed(self, *, event: BookingConfirmedEvent) -> None:
        await self._publish(event=event)

    async def publish_payment_confirmed(self, *, event: PaymentConfirmedEvent) -> None:
        await self._publish(event=event)

    async def publish_booking_cancelled(self, *, event: BookingCancelledEvent) -> None:
        await self._publish(event=event)
