"""
https://python-dependency-injector.ets-labs.org/index.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.event.in_memory_broadcaster import InMemoryEventBroadcasterImpl
from src.service.booking.app.booking_service import BookingService
from src.service.booking.driven_adapter.booking_event_publisher_impl import (
    BookingEventPublisherImpl,
)
from src.service.booking.driven_adapter.in_memory_catalog import InMemoryCatalog
from src.service.booking.driven_adapter.in_memory_unit_of_work import (
    InMemoryBookingStore,
    InMemoryUnitOfWork,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Catalog sources (routes, schedules, policies, promo codes)
    catalog = providers.Singleton(InMemoryCatalog)

    # Persistence sink (one unit of work per core operation)
    booking_store = providers.Singleton(InMemoryBookingStore)
    unit_of_work = providers.Factory(InMemoryUnitOfWork, store=booking_store, catalog=catalog)

    # Notification fan-out
    event_broadcaster = providers.Singleton(
        InMemoryEventBroadcasterImpl,
        max_buffer_size=config_service.provided.EVENT_STREAM_BUFFER_SIZE,
    )
    booking_event_publisher = providers.Singleton(
        BookingEventPublisherImpl, broadcaster=event_broadcaster
    )

    # Booking engine (holds seat inventory and booking ledger, so Singleton)
    booking_service = providers.Singleton(
        BookingService,
        schedule_source=catalog,
        policy_source=catalog,
        promo_source=catalog,
        uow_factory=unit_of_work.provider,
        event_publisher=booking_event_publisher,
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()

