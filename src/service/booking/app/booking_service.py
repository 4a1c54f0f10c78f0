"""
Booking Service

Orchestrates seat inventory, pricing, promotions, cancellation policies and
the booking/payment state machines under one concurrency discipline:

- Seat claims and releases run under a per-schedule lock
- Booking and payment transitions run under a per-booking lock
  (lock order is always booking → schedule)
- Every transition is validated in memory, persisted through one unit of
  work, and only then published to the in-memory state. A failed commit
  leaves the previous booking instance and seat availability in place.
- Notifications go out after commit; a failing sink is logged, never raised
- Staff policy and promo changes are written to their sources before they
  take effect, so a catalog refresh keeps them
"""

from datetime import datetime
from decimal import Decimal
import time
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Tuple
import zoneinfo

from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import (
    ConflictError,
    CustomBaseError,
    DomainError,
    EmptySelectionError,
    InvalidPromoError,
    InvalidTransitionError,
    LockTimeoutError,
    NoPolicyError,
    NotFoundError,
    PersistenceFailureError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.platform.state.keyed_lock import KeyedLock
from src.service.booking.app.interface.i_booking_event_publisher import IBookingEventPublisher
from src.service.booking.app.interface.i_cancellation_policy_source import (
    ICancellationPolicySource,
)
from src.service.booking.app.interface.i_promotional_code_source import IPromotionalCodeSource
from src.service.booking.app.interface.i_schedule_source import IScheduleSource
from src.service.booking.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.booking.domain.cancellation_policy_table import CancellationPolicyTable
from src.service.booking.domain.domain_event.booking_domain_event import (
    BookingCancelledEvent,
    BookingConfirmedEvent,
    PaymentConfirmedEvent,
)
from src.service.booking.domain.entity.booking_entity import Booking, BookingStatus
from src.service.booking.domain.entity.cancellation_policy_entity import CancellationPolicy
from src.service.booking.domain.entity.payment_entity import Payment, PaymentStatus
from src.service.booking.domain.entity.promotional_code_entity import (
    PromotionalCode,
    normalize_code,
)
from src.service.booking.domain.entity.reservation_entity import Reservation
from src.service.booking.domain.entity.schedule_entity import Schedule
from src.service.booking.domain.entity.seat_entity import Seat
from src.service.booking.domain.pricing_engine import PricingEngine
from src.service.booking.domain.promotional_code_registry import PromotionalCodeRegistry
from src.service.booking.domain.seat_inventory import SeatInventory
from src.service.booking.domain.value_object.e_ticket import ETicket
from src.service.booking.domain.value_object.money import to_money


POLICIES_KEY = 'policies'
PROMO_CODES_KEY = 'promo_codes'

Clock = Callable[[], datetime]
UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]


def _claim_result(exc: BaseException) -> str:
    if isinstance(exc, LockTimeoutError):
        return 'timeout'
    if isinstance(exc, ConflictError):
        return 'conflict'
    if isinstance(exc, NotFoundError):
        return 'not_found'
    return 'error'


class BookingService:
    def __init__(
        self,
        *,
        schedule_source: IScheduleSource,
        policy_source: ICancellationPolicySource,
        promo_source: IPromotionalCodeSource,
        uow_factory: UnitOfWorkFactory,
        event_publisher: IBookingEventPublisher,
        pricing_engine: Optional[PricingEngine] = None,
        clock: Optional[Clock] = None,
        seat_claim_timeout: Optional[float] = None,
        booking_lock_timeout: Optional[float] = None,
    ) -> None:
        self.schedule_source = schedule_source
        self.policy_source = policy_source
        self.promo_source = promo_source
        self.uow_factory = uow_factory
        self.event_publisher = event_publisher
        self.pricing_engine = pricing_engine or PricingEngine()
        self.tz = zoneinfo.ZoneInfo(settings.TIMEZONE)
        self.clock: Clock = clock or (lambda: datetime.now(self.tz))
        self.seat_claim_timeout = seat_claim_timeout or settings.SEAT_CLAIM_TIMEOUT_SECONDS
        self.booking_lock_timeout = booking_lock_timeout or settings.BOOKING_LOCK_TIMEOUT_SECONDS

        self.policy_table = CancellationPolicyTable()
        self.promo_registry = PromotionalCodeRegistry(pricing_engine=self.pricing_engine)

        self._schedules: Dict[str, Schedule] = {}
        self._inventories: Dict[str, SeatInventory] = {}
        self._bookings: Dict[UUID, Booking] = {}
        self._schedule_locks = KeyedLock(name='schedule')
        self._booking_locks = KeyedLock(name='booking')
        self._catalog_locks = KeyedLock(name='catalog')
        self.tracer = trace.get_tracer(__name__)

    # ========== Helpers ==========

    def _aware(self, value: datetime) -> datetime:
        # Naive datetimes are read in the configured zone
        return value if value.tzinfo is not None else value.replace(tzinfo=self.tz)

    def _now(self, now_fn: Optional[Clock] = None) -> datetime:
        return self._aware((now_fn or self.clock)())

    def _get_booking(self, booking_id: UUID) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFoundError(f'Booking {booking_id} not found')
        return booking

    async def _inventory_for(self, schedule_id: str) -> SeatInventory:
        """Load the schedule on first use. Caller must hold the schedule lock."""
        inventory = self._inventories.get(schedule_id)
        if inventory is None:
            schedule = await self.schedule_source.load_schedule(schedule_id=schedule_id)
            self._schedules[schedule_id] = schedule
            inventory = SeatInventory.from_schedule(schedule)
            self._inventories[schedule_id] = inventory
            Logger.base.info(
                f'🪑 [INVENTORY] Loaded schedule {schedule_id} with {len(schedule.seats)} seats'
            )
        return inventory

    async def _persist(
        self,
        *,
        operation: str,
        booking: Optional[Booking] = None,
        payment: Optional[Payment] = None,
        schedule_id: Optional[str] = None,
        seat_updates: Sequence[Tuple[str, bool]] = (),
    ) -> None:
        if seat_updates and schedule_id is None:
            raise DomainError('Seat updates need a schedule_id')

        try:
            async with self.uow_factory() as uow:
                for seat_id, available in seat_updates:
                    await uow.update_seat_availability(
                        schedule_id=schedule_id, seat_id=seat_id, available=available
                    )
                if payment is not None:
                    await uow.persist_payment(payment=payment)
                if booking is not None:
                    await uow.persist_booking(booking=booking)
                await uow.commit()
        except PersistenceFailureError:
            metrics.record_persistence_failure(operation=operation)
            Logger.base.error(f'💥 [{operation.upper()}] Commit failed, in-memory state restored')
            raise

    async def _write_catalog(self, *, operation: str, write: Callable[[], Awaitable[None]]) -> None:
        try:
            await write()
        except CustomBaseError:
            raise
        except Exception as e:
            metrics.record_persistence_failure(operation=operation)
            Logger.base.error(f'💥 [{operation.upper()}] Catalog write failed, change discarded')
            raise PersistenceFailureError(f'Catalog write failed: {e}') from e

    async def _publish(self, publish: Callable[..., Awaitable[None]], event: Any) -> None:
        """Hand a committed event to the notification sink. Delivery errors are only logged."""
        try:
            await publish(event=event)
        except Exception:
            Logger.base.exception(
                f'📡 [PUBLISH] Failed to publish {type(event).__name__} for booking {event.booking_id}'
            )

    # ========== Catalog refresh ==========

    @Logger.io
    async def refresh_catalogs(self) -> None:
        """Reload cancellation policies and promotional codes from their sources"""
        async with self._catalog_locks.hold(key=POLICIES_KEY, timeout=self.booking_lock_timeout):
            async with self._catalog_locks.hold(
                key=PROMO_CODES_KEY, timeout=self.booking_lock_timeout
            ):
                policies = await self.policy_source.load_cancellation_policies()
                codes = await self.promo_source.load_promotional_codes()
                self.policy_table.replace_all(policies)
                self.promo_registry.replace_all(codes)
        Logger.base.info(
            f'📚 [CATALOG] Loaded {len(policies)} cancellation policies, {len(codes)} promo codes'
        )

    # ========== Commands ==========

    @Logger.io
    async def book_seats(
        self,
        *,
        customer_id: str,
        schedule_id: str,
        seat_ids: Iterable[str],
        promo_code: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Booking:
        """
        Claim seats and create a Confirmed(unpaid) booking

        Flow:
        1. Fail fast on empty selection or unusable promo code
        2. Under the schedule lock: claim seats atomically
        3. Build reservation, price it, create booking
        4. Persist seat availability + booking in one unit of work
        5. On any failure after the claim, release the seats before re-raising

        Raises:
            EmptySelectionError, NotFoundError, ConflictError, LockTimeoutError,
            InvalidPromoError, PersistenceFailureError
        """
        seat_ids = list(seat_ids)
        started = time.perf_counter()

        with self.tracer.start_as_current_span(
            'booking_service.book_seats',
            attributes={'schedule.id': schedule_id, 'seat.count': len(seat_ids)},
        ):
            if not seat_ids:
                raise EmptySelectionError()

            today = self._now().date()
            if promo_code is not None:
                promo = self.promo_registry.get(promo_code)
                if not promo.is_usable(today=today):
                    raise InvalidPromoError(f'Promotional code {promo.code} is inactive or expired')

            result = 'error'
            try:
                async with self._schedule_locks.hold(
                    key=schedule_id, timeout=timeout or self.seat_claim_timeout
                ):
                    inventory = await self._inventory_for(schedule_id)
                    schedule = self._schedules[schedule_id]
                    route = await self.schedule_source.load_route(route_id=schedule.route_id)

                    inventory.claim(seat_ids)
                    try:
                        reservation = Reservation.create(
                            schedule=schedule,
                            route=route,
                            seat_class=schedule.seat_class,
                            claimed_seat_ids=seat_ids,
                        )
                        total = self.pricing_engine.price(
                            base_price=route.base_price, seat_class=reservation.seat_class
                        )
                        if promo_code is not None:
                            total = self.promo_registry.redeem(promo_code, total, today=today)

                        booking = Booking.create(
                            customer_id=customer_id,
                            reservation=reservation,
                            total_amount=total,
                            created_at=self._now(),
                            promo_code=normalize_code(promo_code) if promo_code else None,
                        )
                        await self._persist(
                            operation='book_seats',
                            booking=booking,
                            schedule_id=schedule_id,
                            seat_updates=[(seat_id, False) for seat_id in seat_ids],
                        )
                    except BaseException:
                        # Includes task cancellation: no claim outlives a failed booking
                        inventory.release(seat_ids)
                        raise

                    self._bookings[booking.id] = booking
                    metrics.update_seats_available(
                        schedule_id=schedule_id, count=len(inventory.available_seats())
                    )
                result = 'success'
            except Exception as e:
                result = _claim_result(e)
                raise
            finally:
                metrics.record_seat_claim(
                    schedule_id=schedule_id,
                    result=result,
                    duration=time.perf_counter() - started,
                )

        metrics.record_transition(transition='created')
        Logger.base.info(
            f'📝 [BOOK-SEATS] Booking {booking.id} for {customer_id}: '
            f'{schedule_id} seats {",".join(seat_ids)} total {booking.total_amount}'
        )
        await self._publish(
            self.event_publisher.publish_booking_confirmed,
            BookingConfirmedEvent.from_booking(booking=booking),
        )
        return booking

    @Logger.io
    async def pay(self, *, booking_id: UUID, method: str) -> Payment:
        """
        Start paying for a booking

        Creates a pending payment for the booking total, attaches it and
        initiates it. A payment already processing is returned as is; the
        gateway callback is confirm_payment().
        """
        with self.tracer.start_as_current_span(
            'booking_service.pay', attributes={'booking.id': str(booking_id)}
        ):
            async with self._booking_locks.hold(
                key=str(booking_id), timeout=self.booking_lock_timeout
            ):
                booking = self._get_booking(booking_id)
                existing = booking.payment

                if existing is not None and existing.status == PaymentStatus.PROCESSING:
                    return existing

                if existing is not None and existing.status == PaymentStatus.PENDING:
                    payment = existing.initiate()
                    updated = booking.update_payment(payment=payment)
                else:
                    pending = Payment.create(
                        booking_id=booking.id, amount=booking.total_amount, method=method
                    )
                    updated = booking.attach_payment(payment=pending)
                    payment = pending.initiate()
                    updated = updated.update_payment(payment=payment)

                await self._persist(operation='pay', booking=updated, payment=payment)
                self._bookings[booking_id] = updated

        Logger.base.info(
            f'💳 [PAY] Payment {payment.id} processing for booking {booking_id} ({payment.amount})'
        )
        return payment

    @Logger.io
    async def confirm_payment(self, *, booking_id: UUID) -> Payment:
        """
        Gateway callback: payment → completed, booking → Confirmed(paid)

        Raises:
            InvalidTransitionError: no payment, or payment is not processing
        """
        with self.tracer.start_as_current_span(
            'booking_service.confirm_payment', attributes={'booking.id': str(booking_id)}
        ):
            async with self._booking_locks.hold(
                key=str(booking_id), timeout=self.booking_lock_timeout
            ):
                booking = self._get_booking(booking_id)
                if booking.payment is None:
                    raise InvalidTransitionError(f'Booking {booking_id} has no payment to confirm')

                confirmed = booking.payment.confirm(confirmed_at=self._now())
                updated = booking.update_payment(payment=confirmed).mark_paid()

                await self._persist(
                    operation='confirm_payment', booking=updated, payment=confirmed
                )
                self._bookings[booking_id] = updated

        metrics.record_transition(transition='paid')
        Logger.base.info(f'✅ [CONFIRM-PAYMENT] Booking {booking_id} paid ({confirmed.amount})')
        await self._publish(
            self.event_publisher.publish_payment_confirmed,
            PaymentConfirmedEvent.from_booking(booking=updated),
        )
        return confirmed

    @Logger.io
    async def fail_payment(self, *, booking_id: UUID) -> Payment:
        """Gateway callback: the payment was declined. The booking stays unpaid."""
        async with self._booking_locks.hold(key=str(booking_id), timeout=self.booking_lock_timeout):
            booking = self._get_booking(booking_id)
            if booking.payment is None:
                raise InvalidTransitionError(f'Booking {booking_id} has no payment to fail')

            failed = booking.payment.fail()
            updated = booking.update_payment(payment=failed)

            await self._persist(operation='fail_payment', booking=updated, payment=failed)
            self._bookings[booking_id] = updated

        metrics.record_transition(transition='payment_failed')
        Logger.base.warning(f'⚠️ [FAIL-PAYMENT] Payment {failed.id} failed for booking {booking_id}')
        return failed

    @Logger.io
    async def apply_promo_code(self, *, booking_id: UUID, code: str) -> Booking:
        """Discount the locked total of an unpaid booking before payment starts"""
        async with self._booking_locks.hold(key=str(booking_id), timeout=self.booking_lock_timeout):
            booking = self._get_booking(booking_id)
            discounted = self.promo_registry.redeem(
                code, booking.total_amount, today=self._now().date()
            )
            updated = booking.apply_discount(
                promo_code=normalize_code(code), discounted_total=discounted
            )

            await self._persist(operation='apply_promo_code', booking=updated)
            self._bookings[booking_id] = updated

        Logger.base.info(
            f'🏷️ [PROMO] {updated.promo_code} on booking {booking_id}: '
            f'{booking.total_amount} → {updated.total_amount}'
        )
        return updated

    @Logger.io
    async def cancel(
        self, *, booking_id: UUID, now_fn: Optional[Clock] = None
    ) -> Decimal:
        """
        Cancel a confirmed booking, release its seats and refund per policy

        Lead time is measured from now_fn() (service clock by default) to the
        schedule's departure. No applicable policy means a 0 % refund.

        Returns:
            Refunded amount (0 when unpaid or no policy applies)

        Raises:
            InvalidTransitionError: booking already cancelled or completed;
                nothing is touched in that case
        """
        with self.tracer.start_as_current_span(
            'booking_service.cancel', attributes={'booking.id': str(booking_id)}
        ):
            async with self._booking_locks.hold(
                key=str(booking_id), timeout=self.booking_lock_timeout
            ):
                booking = self._get_booking(booking_id)
                if booking.status != BookingStatus.CONFIRMED:
                    raise InvalidTransitionError(f'Cannot cancel a {booking.status} booking')

                schedule_id = booking.schedule_id
                async with self._schedule_locks.hold(
                    key=schedule_id, timeout=self.seat_claim_timeout
                ):
                    inventory = await self._inventory_for(schedule_id)
                    schedule = self._schedules[schedule_id]
                    now = self._now(now_fn)
                    hours_before_departure = (
                        schedule.departure_at(self.tz) - now
                    ).total_seconds() / 3600

                    try:
                        policy: Optional[CancellationPolicy] = (
                            self.policy_table.applicable_policy(hours_before_departure)
                        )
                    except NoPolicyError:
                        policy = None
                    refund_percentage = policy.refund_percentage if policy else Decimal(0)

                    cancelled = booking.cancel(
                        refund_percentage=refund_percentage, cancelled_at=now
                    )

                    released = inventory.release(booking.seat_ids)
                    try:
                        await self._persist(
                            operation='cancel',
                            booking=cancelled,
                            payment=cancelled.payment,
                            schedule_id=schedule_id,
                            seat_updates=[(seat_id, True) for seat_id in booking.seat_ids],
                        )
                    except BaseException:
                        if released:
                            inventory.claim(released)
                        raise

                    self._bookings[booking_id] = cancelled
                    metrics.update_seats_available(
                        schedule_id=schedule_id, count=len(inventory.available_seats())
                    )

        refund_amount = cancelled.refund_amount if cancelled.refund_amount is not None else to_money(0)
        metrics.record_transition(transition='cancelled')
        metrics.record_refund(amount=float(refund_amount))
        Logger.base.info(
            f'🚫 [CANCEL] Booking {booking_id} cancelled {hours_before_departure:.1f}h before departure, '
            f'policy={policy.id if policy else None}, refund={refund_amount}'
        )
        await self._publish(
            self.event_publisher.publish_booking_cancelled,
            BookingCancelledEvent.from_booking(
                booking=cancelled,
                released_seat_ids=tuple(released),
                policy_id=policy.id if policy else None,
            ),
        )
        return refund_amount

    @Logger.io
    async def complete(self, *, booking_id: UUID) -> Booking:
        """Trip completion: Confirmed(paid) → Completed"""
        async with self._booking_locks.hold(key=str(booking_id), timeout=self.booking_lock_timeout):
            booking = self._get_booking(booking_id)
            completed = booking.complete(completed_at=self._now())

            await self._persist(operation='complete', booking=completed)
            self._bookings[booking_id] = completed

        metrics.record_transition(transition='completed')
        return completed

    # ========== Staff operations ==========
    # Each change is validated on a copy of the table or registry, written to
    # its source, and only then swapped in. A failed write changes nothing.

    @Logger.io
    async def add_cancellation_policy(self, policy: CancellationPolicy) -> None:
        async with self._catalog_locks.hold(key=POLICIES_KEY, timeout=self.booking_lock_timeout):
            table = self.policy_table.copy()
            table.add(policy)
            await self._write_catalog(
                operation='add_cancellation_policy',
                write=lambda: self.policy_source.save_cancellation_policy(policy=policy),
            )
            self.policy_table = table

    @Logger.io
    async def update_cancellation_policy(self, policy: CancellationPolicy) -> None:
        async with self._catalog_locks.hold(key=POLICIES_KEY, timeout=self.booking_lock_timeout):
            table = self.policy_table.copy()
            table.update(policy)
            await self._write_catalog(
                operation='update_cancellation_policy',
                write=lambda: self.policy_source.save_cancellation_policy(policy=policy),
            )
            self.policy_table = table

    @Logger.io
    async def remove_cancellation_policy(self, policy_id: str) -> CancellationPolicy:
        async with self._catalog_locks.hold(key=POLICIES_KEY, timeout=self.booking_lock_timeout):
            table = self.policy_table.copy()
            removed = table.remove(policy_id)
            await self._write_catalog(
                operation='remove_cancellation_policy',
                write=lambda: self.policy_source.delete_cancellation_policy(policy_id=policy_id),
            )
            self.policy_table = table
        return removed

    @Logger.io
    async def add_promotional_code(self, promo: PromotionalCode) -> None:
        async with self._catalog_locks.hold(
            key=PROMO_CODES_KEY, timeout=self.booking_lock_timeout
        ):
            registry = self.promo_registry.copy()
            registry.add_code(promo)
            await self._write_catalog(
                operation='add_promotional_code',
                write=lambda: self.promo_source.save_promotional_code(promo=promo),
            )
            self.promo_registry = registry

    @Logger.io
    async def update_promotional_code(self, promo: PromotionalCode) -> None:
        """Change discount, expiry date or active flag of an existing code"""
        async with self._catalog_locks.hold(
            key=PROMO_CODES_KEY, timeout=self.booking_lock_timeout
        ):
            registry = self.promo_registry.copy()
            registry.update(promo)
            await self._write_catalog(
                operation='update_promotional_code',
                write=lambda: self.promo_source.save_promotional_code(promo=promo),
            )
            self.promo_registry = registry

    @Logger.io
    async def deactivate_promotional_code(self, code: str) -> PromotionalCode:
        async with self._catalog_locks.hold(
            key=PROMO_CODES_KEY, timeout=self.booking_lock_timeout
        ):
            registry = self.promo_registry.copy()
            deactivated = registry.deactivate(code)
            await self._write_catalog(
                operation='deactivate_promotional_code',
                write=lambda: self.promo_source.save_promotional_code(promo=deactivated),
            )
            self.promo_registry = registry
        return deactivated

    @Logger.io
    async def delete_promotional_code(self, code: str) -> PromotionalCode:
        async with self._catalog_locks.hold(
            key=PROMO_CODES_KEY, timeout=self.booking_lock_timeout
        ):
            registry = self.promo_registry.copy()
            removed = registry.remove(code)
            await self._write_catalog(
                operation='delete_promotional_code',
                write=lambda: self.promo_source.delete_promotional_code(code=removed.code),
            )
            self.promo_registry = registry
        return removed

    # ========== Queries ==========

    def get_booking(self, *, booking_id: UUID) -> Booking:
        return self._get_booking(booking_id)

    def list_bookings(
        self,
        *,
        customer_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
        schedule_id: Optional[str] = None,
        route_id: Optional[str] = None,
    ) -> List[Booking]:
        """Matching bookings, oldest first (ties keep booking order)"""
        bookings = [
            booking
            for booking in self._bookings.values()
            if (customer_id is None or booking.customer_id == customer_id)
            and (status is None or booking.status == status)
            and (schedule_id is None or booking.schedule_id == schedule_id)
            and (route_id is None or booking.reservation.route_id == route_id)
        ]
        return sorted(bookings, key=lambda booking: booking.created_at)

    def recent_bookings(self, *, limit: int) -> List[Booking]:
        """The newest `limit` bookings, newest first"""
        if limit < 0:
            raise DomainError('limit cannot be negative')
        return list(reversed(self.list_bookings()))[:limit]

    def count_bookings_by_status(self) -> Dict[BookingStatus, int]:
        counts = {status: 0 for status in BookingStatus}
        for booking in self._bookings.values():
            counts[booking.status] += 1
        return counts

    def search_bookings(self, *, term: str) -> List[Booking]:
        """
        Case-insensitive substring match on booking, customer, payment and
        reservation ids. A blank term matches every booking.
        """
        needle = term.strip().lower()
        matches = []
        for booking in self.list_bookings():
            haystack = [str(booking.id), booking.customer_id, str(booking.reservation.id)]
            if booking.payment is not None:
                haystack.append(str(booking.payment.id))
            if any(needle in value.lower() for value in haystack):
                matches.append(booking)
        return matches

    async def available_seats(self, *, schedule_id: str) -> List[Seat]:
        async with self._schedule_locks.hold(key=schedule_id, timeout=self.seat_claim_timeout):
            inventory = await self._inventory_for(schedule_id)
            return inventory.available_seats()

    async def seat_snapshot(self, *, schedule_id: str) -> Dict[str, bool]:
        async with self._schedule_locks.hold(key=schedule_id, timeout=self.seat_claim_timeout):
            inventory = await self._inventory_for(schedule_id)
            return inventory.snapshot()

    @Logger.io
    def issue_e_ticket(self, *, booking_id: UUID) -> ETicket:
        """
        Raises:
            InvalidTransitionError: booking is unpaid or cancelled
        """
        booking = self._get_booking(booking_id)
        if booking.status == BookingStatus.CANCELLED or not booking.is_paid:
            raise InvalidTransitionError('E-tickets are only issued for paid bookings')

        return ETicket(
            ticket_id=f'TKT{booking.id}',
            booking_id=booking.id,
            customer_id=booking.customer_id,
            schedule_id=booking.schedule_id,
            seat_ids=booking.seat_ids,
            issued_at=self._now(),
        )

    def total_revenue(
        self, *, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> Decimal:
        """Sum of paid, non-cancelled booking totals, optionally with created_at in [start, end)"""
        start = self._aware(start) if start is not None else None
        end = self._aware(end) if end is not None else None
        total = to_money(0)
        for booking in self._bookings.values():
            if not booking.is_paid or booking.status == BookingStatus.CANCELLED:
                continue
            if start is not None and booking.created_at < start:
                continue
            if end is not None and booking.created_at >= end:
                continue
            total += booking.total_amount
        return total
