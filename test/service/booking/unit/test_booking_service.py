"""
Unit tests for BookingService

Test Focus:
1. Booking creation: seat claim, class pricing, promo codes, event publication
2. Payment flow: pay → confirm, idempotent pay, rejected double confirm
3. Cancellation: policy refunds, seat release, terminal states untouched
4. Persistence failures leave inventory, ledger and store as they were
5. Staff catalog changes are written to their sources and survive a refresh
6. Notification failures never fail a committed operation
7. Queries: listings, search, counts, availability, e-tickets, revenue
"""

import asyncio
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import uuid_utils

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    DuplicateThresholdError,
    EmptySelectionError,
    InvalidPromoError,
    InvalidTransitionError,
    LockTimeoutError,
    NotFoundError,
    PersistenceFailureError,
)
from src.service.booking.domain.domain_event.booking_domain_event import (
    BookingCancelledEvent,
    BookingConfirmedEvent,
    PaymentConfirmedEvent,
)
from src.service.booking.domain.entity.booking_entity import BookingStatus
from src.service.booking.domain.entity.cancellation_policy_entity import CancellationPolicy
from src.service.booking.domain.entity.payment_entity import PaymentStatus
from src.service.booking.domain.entity.promotional_code_entity import PromotionalCode
from src.service.booking.domain.entity.route_entity import Route
from src.service.booking.domain.entity.schedule_entity import Schedule
from src.service.booking.domain.entity.seat_entity import Seat
from src.service.booking.driven_adapter.in_memory_unit_of_work import InMemoryUnitOfWork


class FailingUnitOfWork(InMemoryUnitOfWork):
    async def _commit(self) -> None:
        raise RuntimeError('storage unavailable')


def _fail_commits(service, store, catalog) -> None:
    service.uow_factory = lambda: FailingUnitOfWork(store=store, catalog=catalog)


@pytest.mark.unit
class TestBookSeats:
    @pytest.mark.asyncio
    async def test_book_economy_seats(self, service, catalog, store, event_publisher):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1', 'A2'])

        assert booking.status == BookingStatus.CONFIRMED
        assert booking.is_paid is False
        assert booking.seat_ids == ('A1', 'A2')
        assert booking.total_amount == Decimal('1000.00')
        assert booking.reservation.seat_class == 'economy'

        # Persisted and seat availability written through
        assert store.bookings[booking.id] is booking
        seats = {seat.seat_id: seat.available for seat in catalog._schedules['S1'].seats}
        assert seats['A1'] is False and seats['A2'] is False and seats['A3'] is True

        event_publisher.publish_booking_confirmed.assert_awaited_once()
        event = event_publisher.publish_booking_confirmed.call_args.kwargs['event']
        assert isinstance(event, BookingConfirmedEvent)
        assert event.booking_id == booking.id
        assert event.seat_ids == ('A1', 'A2')

    @pytest.mark.asyncio
    async def test_business_class_with_promo(self, service):
        plain = await service.book_seats(customer_id='alice', schedule_id='S2', seat_ids=['A1'])
        promo = await service.book_seats(
            customer_id='bob', schedule_id='S2', seat_ids=['A2'], promo_code='welcome10'
        )

        assert plain.total_amount == Decimal('1500.00')
        assert promo.total_amount == Decimal('1350.00')
        assert promo.promo_code == 'WELCOME10'

    @pytest.mark.asyncio
    async def test_taken_seat_conflicts(self, service):
        await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])

        with pytest.raises(ConflictError):
            await service.book_seats(customer_id='bob', schedule_id='S1', seat_ids=['A2', 'A1'])

        # A2 was not claimed by the failed attempt
        assert (await service.seat_snapshot(schedule_id='S1'))['A2'] is True

    @pytest.mark.asyncio
    async def test_empty_selection(self, service):
        with pytest.raises(EmptySelectionError):
            await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=[])

    @pytest.mark.asyncio
    async def test_unknown_schedule_and_seat(self, service):
        with pytest.raises(NotFoundError):
            await service.book_seats(customer_id='alice', schedule_id='S404', seat_ids=['A1'])
        with pytest.raises(NotFoundError):
            await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['Z9'])

    @pytest.mark.asyncio
    async def test_unknown_promo_claims_nothing(self, service, event_publisher):
        with pytest.raises(NotFoundError):
            await service.book_seats(
                customer_id='alice', schedule_id='S1', seat_ids=['A1'], promo_code='NOPE'
            )

        assert all((await service.seat_snapshot(schedule_id='S1')).values())
        event_publisher.publish_booking_confirmed.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_promo_rejected(self, service):
        with pytest.raises(InvalidPromoError):
            await service.book_seats(
                customer_id='alice', schedule_id='S1', seat_ids=['A1'], promo_code='OLD5'
            )

        assert service.list_bookings() == []

    @pytest.mark.asyncio
    async def test_price_locked_at_booking_time(self, service, catalog):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])

        catalog._routes['R1'].base_price = Decimal('5000')
        await service.pay(booking_id=booking.id, method='credit_card')
        payment = await service.confirm_payment(booking_id=booking.id)

        assert payment.amount == Decimal('1000.00')

    @pytest.mark.asyncio
    async def test_lock_timeout(self, service):
        held = asyncio.Event()
        release = asyncio.Event()

        async def hold_schedule():
            async with service._schedule_locks.hold(key='S1', timeout=1.0):
                held.set()
                await release.wait()

        holder = asyncio.create_task(hold_schedule())
        await held.wait()
        try:
            with pytest.raises(LockTimeoutError):
                await service.book_seats(
                    customer_id='alice', schedule_id='S1', seat_ids=['A1'], timeout=0.05
                )
        finally:
            release.set()
            await holder

        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])
        assert booking.seat_ids == ('A1',)


@pytest.mark.unit
class TestPaymentFlow:
    @pytest.mark.asyncio
    async def test_pay_then_confirm(self, service, store, event_publisher):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])

        payment = await service.pay(booking_id=booking.id, method='credit_card')
        assert payment.status == PaymentStatus.PROCESSING
        assert payment.amount == booking.total_amount

        confirmed = await service.confirm_payment(booking_id=booking.id)
        paid = service.get_booking(booking_id=booking.id)

        assert confirmed.status == PaymentStatus.COMPLETED
        assert paid.is_paid is True
        assert paid.status == BookingStatus.CONFIRMED
        assert store.payments[confirmed.id].status == PaymentStatus.COMPLETED
        event = event_publisher.publish_payment_confirmed.call_args.kwargs['event']
        assert isinstance(event, PaymentConfirmedEvent)
        assert event.payment_id == confirmed.id

    @pytest.mark.asyncio
    async def test_pay_twice_returns_the_same_payment(self, service):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])

        first = await service.pay(booking_id=booking.id, method='credit_card')
        second = await service.pay(booking_id=booking.id, method='credit_card')

        assert second.id == first.id

    @pytest.mark.asyncio
    async def test_confirm_twice_rejected(self, service):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])
        await service.pay(booking_id=booking.id, method='credit_card')
        await service.confirm_payment(booking_id=booking.id)

        with pytest.raises(InvalidTransitionError):
            await service.confirm_payment(booking_id=booking.id)

        assert service.get_booking(booking_id=booking.id).payment.status == PaymentStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_pay_after_paid_rejected(self, service, paid_booking):
        booking = await paid_booking()

        with pytest.raises(InvalidTransitionError):
            await service.pay(booking_id=booking.id, method='credit_card')

    @pytest.mark.asyncio
    async def test_confirm_without_payment(self, service):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])

        with pytest.raises(InvalidTransitionError):
            await service.confirm_payment(booking_id=booking.id)

    @pytest.mark.asyncio
    async def test_failed_payment_can_be_retried(self, service):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])
        first = await service.pay(booking_id=booking.id, method='credit_card')

        failed = await service.fail_payment(booking_id=booking.id)
        retry = await service.pay(booking_id=booking.id, method='bank_transfer')

        assert failed.status == PaymentStatus.FAILED
        assert service.get_booking(booking_id=booking.id).is_paid is False
        assert retry.id != first.id
        assert retry.status == PaymentStatus.PROCESSING

    @pytest.mark.asyncio
    async def test_unknown_booking(self, service):
        with pytest.raises(NotFoundError):
            await service.pay(booking_id=uuid_utils.uuid7(), method='credit_card')


@pytest.mark.unit
class TestApplyPromoCode:
    @pytest.mark.asyncio
    async def test_apply_to_unpaid_booking(self, service):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])

        updated = await service.apply_promo_code(booking_id=booking.id, code='welcome10')

        assert updated.total_amount == Decimal('900.00')
        assert updated.promo_code == 'WELCOME10'
        payment = await service.pay(booking_id=booking.id, method='credit_card')
        assert payment.amount == Decimal('900.00')

    @pytest.mark.asyncio
    async def test_rejected_once_payment_started(self, service):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])
        await service.pay(booking_id=booking.id, method='credit_card')

        with pytest.raises(InvalidTransitionError):
            await service.apply_promo_code(booking_id=booking.id, code='WELCOME10')

        assert service.get_booking(booking_id=booking.id).total_amount == Decimal('1000.00')


@pytest.mark.unit
class TestCancel:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'hours,expected_refund',
        [
            (72, Decimal('750.00')),
            (48, Decimal('750.00')),
            (30, Decimal('500.00')),
            (24, Decimal('500.00')),
            (10, Decimal('0.00')),
        ],
    )
    async def test_refund_follows_policy(
        self, service, paid_booking, before_departure, hours, expected_refund
    ):
        booking = await paid_booking()

        refund = await service.cancel(booking_id=booking.id, now_fn=before_departure(hours))

        cancelled = service.get_booking(booking_id=booking.id)
        assert refund == expected_refund
        assert cancelled.status == BookingStatus.CANCELLED
        assert cancelled.refund_amount == expected_refund
        assert cancelled.payment.status == PaymentStatus.REFUNDED

    @pytest.mark.asyncio
    async def test_cancel_restores_inventory_exactly(self, service, catalog, before_departure):
        before = await service.seat_snapshot(schedule_id='S1')
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1', 'B4'])

        await service.cancel(booking_id=booking.id, now_fn=before_departure(100))

        assert await service.seat_snapshot(schedule_id='S1') == before
        assert all(seat.available for seat in catalog._schedules['S1'].seats)

    @pytest.mark.asyncio
    async def test_cancel_unpaid_booking(self, service, event_publisher, before_departure):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])
        await service.pay(booking_id=booking.id, method='credit_card')

        refund = await service.cancel(booking_id=booking.id, now_fn=before_departure(72))

        assert refund == Decimal('0.00')
        assert service.get_booking(booking_id=booking.id).payment.status == PaymentStatus.FAILED
        event = event_publisher.publish_booking_cancelled.call_args.kwargs['event']
        assert isinstance(event, BookingCancelledEvent)
        assert event.released_seat_ids == ('A1',)
        assert event.policy_id == 'P48'

    @pytest.mark.asyncio
    async def test_cancel_completed_booking_changes_nothing(
        self, service, paid_booking, before_departure
    ):
        booking = await paid_booking(seat_ids=('A1', 'A2'))
        completed = await service.complete(booking_id=booking.id)
        snapshot = await service.seat_snapshot(schedule_id='S1')

        with pytest.raises(InvalidTransitionError):
            await service.cancel(booking_id=booking.id, now_fn=before_departure(72))

        assert service.get_booking(booking_id=booking.id) is completed
        assert await service.seat_snapshot(schedule_id='S1') == snapshot

    @pytest.mark.asyncio
    async def test_cancel_twice_rejected(self, service, before_departure):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])
        await service.cancel(booking_id=booking.id, now_fn=before_departure(72))

        with pytest.raises(InvalidTransitionError):
            await service.cancel(booking_id=booking.id, now_fn=before_departure(72))

    @pytest.mark.asyncio
    async def test_naive_clock_read_in_service_timezone(self, service, paid_booking, departure):
        booking = await paid_booking()
        naive = (departure - timedelta(hours=30)).replace(tzinfo=None)

        refund = await service.cancel(booking_id=booking.id, now_fn=lambda: naive)

        assert refund == Decimal('500.00')

    @pytest.mark.asyncio
    async def test_released_seats_can_be_booked_again(self, service, before_departure):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])
        await service.cancel(booking_id=booking.id, now_fn=before_departure(72))

        again = await service.book_seats(customer_id='bob', schedule_id='S1', seat_ids=['A1'])

        assert again.seat_ids == ('A1',)


@pytest.mark.unit
class TestPersistenceFailure:
    @pytest.mark.asyncio
    async def test_failed_booking_commit_releases_seats(
        self, service, store, catalog, event_publisher
    ):
        _fail_commits(service, store, catalog)

        with pytest.raises(PersistenceFailureError):
            await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1', 'A2'])

        assert all((await service.seat_snapshot(schedule_id='S1')).values())
        assert service.list_bookings() == []
        assert store.bookings == {}
        event_publisher.publish_booking_confirmed.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_commit_failing_midway_writes_nothing(self, service, store, catalog):
        await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])
        # B4 vanishes from the durable catalog while the loaded inventory still offers it
        durable = catalog._schedules['S1']
        durable.seats = [seat for seat in durable.seats if seat.seat_id != 'B4']

        with pytest.raises(PersistenceFailureError):
            await service.book_seats(customer_id='bob', schedule_id='S1', seat_ids=['A2', 'B4'])

        durable_a2 = next(seat for seat in catalog._schedules['S1'].seats if seat.seat_id == 'A2')
        snapshot = await service.seat_snapshot(schedule_id='S1')
        assert durable_a2.available is True
        assert len(store.bookings) == 1
        assert snapshot['A2'] is True and snapshot['B4'] is True

    @pytest.mark.asyncio
    async def test_failed_cancel_commit_keeps_booking_and_seats(
        self, service, store, catalog, paid_booking, before_departure
    ):
        booking = await paid_booking(seat_ids=('A1', 'A2'))
        _fail_commits(service, store, catalog)

        with pytest.raises(PersistenceFailureError):
            await service.cancel(booking_id=booking.id, now_fn=before_departure(72))

        current = service.get_booking(booking_id=booking.id)
        snapshot = await service.seat_snapshot(schedule_id='S1')
        assert current is booking
        assert current.payment.status == PaymentStatus.COMPLETED
        assert snapshot['A1'] is False and snapshot['A2'] is False
        assert store.bookings[booking.id].status == BookingStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_failed_confirm_keeps_payment_processing(self, service, store, catalog):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])
        await service.pay(booking_id=booking.id, method='credit_card')
        _fail_commits(service, store, catalog)

        with pytest.raises(PersistenceFailureError):
            await service.confirm_payment(booking_id=booking.id)

        current = service.get_booking(booking_id=booking.id)
        assert current.is_paid is False
        assert current.payment.status == PaymentStatus.PROCESSING

    @pytest.mark.asyncio
    async def test_seat_updates_without_schedule_rejected(self, service, store):
        with pytest.raises(DomainError):
            await service._persist(operation='booking', seat_updates=[('A1', False)])

        assert store.commit_count == 0
        assert (await service.seat_snapshot(schedule_id='S1'))['A1'] is True


@pytest.mark.unit
class TestStaffOperations:
    @pytest.mark.asyncio
    async def test_new_policy_applies_to_next_cancel(self, service, paid_booking, before_departure):
        await service.add_cancellation_policy(
            CancellationPolicy.create(
                id='P168',
                refund_percentage=Decimal('100'),
                hours_before_departure=168,
                description='A week or more before departure',
            )
        )
        booking = await paid_booking()

        assert await service.cancel(booking_id=booking.id, now_fn=before_departure(200)) == Decimal(
            '1000.00'
        )

    @pytest.mark.asyncio
    async def test_removed_policies_mean_no_refund(self, service, paid_booking, before_departure):
        await service.remove_cancellation_policy('P48')
        await service.remove_cancellation_policy('P24')
        booking = await paid_booking()

        assert await service.cancel(booking_id=booking.id, now_fn=before_departure(72)) == Decimal(
            '0.00'
        )

    @pytest.mark.asyncio
    async def test_updated_policy_applies(self, service, paid_booking, before_departure):
        await service.update_cancellation_policy(
            CancellationPolicy.create(
                id='P24',
                refund_percentage=Decimal('60'),
                hours_before_departure=24,
                description='One day or more before departure',
            )
        )
        booking = await paid_booking()

        assert await service.cancel(booking_id=booking.id, now_fn=before_departure(30)) == Decimal(
            '600.00'
        )

    @pytest.mark.asyncio
    async def test_added_promo_code_is_redeemable(self, service):
        await service.add_promotional_code(
            PromotionalCode.create(
                code='spring25', expires_on=date(2026, 12, 1), discount_percentage=Decimal('25')
            )
        )

        booking = await service.book_seats(
            customer_id='alice', schedule_id='S1', seat_ids=['A1'], promo_code='SPRING25'
        )

        assert booking.total_amount == Decimal('750.00')

    @pytest.mark.asyncio
    async def test_refresh_catalogs_picks_up_source_changes(self, service, catalog):
        catalog.add_promotional_code(
            PromotionalCode.create(
                code='LATE', expires_on=date(2026, 12, 1), discount_percentage=Decimal('50')
            )
        )
        assert service.promo_registry.find('LATE') is None

        await service.refresh_catalogs()

        assert service.promo_registry.find('late') is not None

    @pytest.mark.asyncio
    async def test_deactivated_code_rejected(self, service):
        await service.deactivate_promotional_code('WELCOME10')

        with pytest.raises(InvalidPromoError):
            await service.book_seats(
                customer_id='alice', schedule_id='S1', seat_ids=['A1'], promo_code='WELCOME10'
            )

    @pytest.mark.asyncio
    async def test_staff_changes_survive_refresh(self, service, catalog):
        await service.add_cancellation_policy(
            CancellationPolicy.create(
                id='P72',
                refund_percentage=Decimal('90'),
                hours_before_departure=72,
                description='Three days or more before departure',
            )
        )
        await service.remove_cancellation_policy('P24')
        await service.deactivate_promotional_code('WELCOME10')

        await service.refresh_catalogs()

        assert [policy.id for policy in service.policy_table.policies()] == ['P72', 'P48']
        assert service.promo_registry.validate('WELCOME10', today=date(2026, 10, 1)) is False
        assert {policy.id for policy in await catalog.load_cancellation_policies()} == {
            'P72',
            'P48',
        }

    @pytest.mark.asyncio
    async def test_updated_promo_code_is_persisted(self, service):
        await service.update_promotional_code(
            PromotionalCode.create(
                code='old5', expires_on=date(2027, 3, 31), discount_percentage=Decimal('20')
            )
        )
        await service.refresh_catalogs()

        booking = await service.book_seats(
            customer_id='alice', schedule_id='S1', seat_ids=['A1'], promo_code='OLD5'
        )

        assert booking.total_amount == Decimal('800.00')

    @pytest.mark.asyncio
    async def test_deleted_promo_code_is_gone_after_refresh(self, service, catalog):
        removed = await service.delete_promotional_code('welcome10')
        await service.refresh_catalogs()

        assert removed.code == 'WELCOME10'
        assert {promo.code for promo in await catalog.load_promotional_codes()} == {'OLD5'}
        with pytest.raises(NotFoundError):
            await service.book_seats(
                customer_id='alice', schedule_id='S1', seat_ids=['A1'], promo_code='WELCOME10'
            )

    @pytest.mark.asyncio
    async def test_failed_source_write_changes_nothing(self, service, catalog):
        catalog.save_cancellation_policy = AsyncMock(side_effect=OSError('catalog unavailable'))

        with pytest.raises(PersistenceFailureError):
            await service.add_cancellation_policy(
                CancellationPolicy.create(
                    id='P168',
                    refund_percentage=Decimal('100'),
                    hours_before_departure=168,
                    description='A week or more before departure',
                )
            )

        assert [policy.id for policy in service.policy_table.policies()] == ['P48', 'P24']

    @pytest.mark.asyncio
    async def test_rejected_change_never_reaches_source(self, service, catalog):
        with pytest.raises(DuplicateThresholdError):
            await service.add_cancellation_policy(
                CancellationPolicy.create(
                    id='P48b',
                    refund_percentage=Decimal('80'),
                    hours_before_departure=48,
                    description='Duplicate threshold',
                )
            )

        assert {policy.id for policy in await catalog.load_cancellation_policies()} == {
            'P48',
            'P24',
        }


@pytest.mark.unit
class TestNotificationFailures:
    @pytest.mark.asyncio
    async def test_booking_survives_publisher_error(self, service, store, event_publisher):
        event_publisher.publish_booking_confirmed.side_effect = RuntimeError('sink down')

        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])

        assert store.bookings[booking.id] == booking
        assert service.get_booking(booking_id=booking.id) == booking
        assert (await service.seat_snapshot(schedule_id='S1'))['A1'] is False

    @pytest.mark.asyncio
    async def test_payment_and_cancel_survive_publisher_error(
        self, service, event_publisher, before_departure
    ):
        event_publisher.publish_payment_confirmed.side_effect = RuntimeError('sink down')
        event_publisher.publish_booking_cancelled.side_effect = RuntimeError('sink down')
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])
        await service.pay(booking_id=booking.id, method='credit_card')

        confirmed = await service.confirm_payment(booking_id=booking.id)
        refund = await service.cancel(booking_id=booking.id, now_fn=before_departure(72))

        assert confirmed.status == PaymentStatus.COMPLETED
        assert refund == Decimal('750.00')
        assert service.get_booking(booking_id=booking.id).status == BookingStatus.CANCELLED


@pytest.mark.unit
class TestQueries:
    @pytest.mark.asyncio
    async def test_list_bookings_filters(self, service, paid_booking):
        await paid_booking(customer_id='alice', seat_ids=('A1',))
        await service.book_seats(customer_id='alice', schedule_id='S2', seat_ids=['A1'])
        await service.book_seats(customer_id='bob', schedule_id='S1', seat_ids=['A2'])

        assert len(service.list_bookings()) == 3
        assert len(service.list_bookings(customer_id='alice')) == 2
        assert len(service.list_bookings(customer_id='alice', schedule_id='S2')) == 1
        assert [b.customer_id for b in service.list_bookings(status=BookingStatus.CONFIRMED)] == [
            'alice',
            'alice',
            'bob',
        ]

    @pytest.mark.asyncio
    async def test_available_seats(self, service):
        await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1', 'B1'])

        available = await service.available_seats(schedule_id='S1')

        assert [seat.seat_id for seat in available] == ['A2', 'A3', 'A4', 'B2', 'B3', 'B4']

    @pytest.mark.asyncio
    async def test_e_ticket_for_paid_booking(self, service, paid_booking):
        booking = await paid_booking(seat_ids=('A1', 'A2'))

        ticket = service.issue_e_ticket(booking_id=booking.id)

        assert ticket.ticket_id == f'TKT{booking.id}'
        assert ticket.seat_ids == ('A1', 'A2')
        assert ticket.customer_id == 'alice'

    @pytest.mark.asyncio
    async def test_no_e_ticket_for_unpaid_booking(self, service):
        booking = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])

        with pytest.raises(InvalidTransitionError):
            service.issue_e_ticket(booking_id=booking.id)

    @pytest.mark.asyncio
    async def test_total_revenue(self, service, paid_booking, before_departure):
        economy = await paid_booking(schedule_id='S1')
        await paid_booking(schedule_id='S2')
        await service.book_seats(customer_id='bob', schedule_id='S1', seat_ids=['B1'])

        assert service.total_revenue() == Decimal('2500.00')

        await service.cancel(booking_id=economy.id, now_fn=before_departure(72))
        assert service.total_revenue() == Decimal('1500.00')

    @pytest.mark.asyncio
    async def test_total_revenue_period(self, service, paid_booking):
        await paid_booking()
        created_at = datetime(2026, 10, 1, 9, 0, tzinfo=timezone.utc)

        assert service.total_revenue(start=created_at) == Decimal('1000.00')
        assert service.total_revenue(end=created_at) == Decimal('0.00')

    @pytest.mark.asyncio
    async def test_total_revenue_naive_bounds_read_in_service_timezone(self, service, paid_booking):
        await paid_booking()

        assert service.total_revenue(start=datetime(2026, 10, 1, 9, 0)) == Decimal('1000.00')
        assert service.total_revenue(end=datetime(2026, 10, 1, 9, 0)) == Decimal('0.00')

    @pytest.mark.asyncio
    async def test_list_bookings_by_route(self, service, catalog):
        catalog.add_route(
            Route.create(id='R2', source='Taipei', destination='Hualien', base_price=Decimal('600'))
        )
        catalog.add_schedule(
            Schedule.create(
                id='S3',
                route_id='R2',
                date=date(2026, 11, 2),
                departure_time=time(7, 0),
                arrival_time=time(9, 30),
                seat_class='economy',
                seats=[Seat(seat_id='A1'), Seat(seat_id='A2')],
            )
        )
        await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])
        hualien = await service.book_seats(customer_id='bob', schedule_id='S3', seat_ids=['A1'])

        assert service.list_bookings(route_id='R2') == [hualien]
        assert len(service.list_bookings(route_id='R1')) == 1
        assert service.list_bookings(route_id='R404') == []

    @pytest.mark.asyncio
    async def test_recent_bookings_newest_first(self, service):
        first = await service.book_seats(customer_id='alice', schedule_id='S1', seat_ids=['A1'])
        second = await service.book_seats(customer_id='bob', schedule_id='S1', seat_ids=['A2'])
        third = await service.book_seats(customer_id='carol', schedule_id='S1', seat_ids=['A3'])

        assert service.recent_bookings(limit=2) == [third, second]
        assert service.recent_bookings(limit=10) == [third, second, first]
        assert service.recent_bookings(limit=0) == []
        with pytest.raises(DomainError):
            service.recent_bookings(limit=-1)

    @pytest.mark.asyncio
    async def test_count_bookings_by_status(self, service, paid_booking, before_departure):
        paid = await paid_booking(seat_ids=('A1',))
        await service.book_seats(customer_id='bob', schedule_id='S1', seat_ids=['A2'])
        await service.cancel(booking_id=paid.id, now_fn=before_departure(72))

        assert service.count_bookings_by_status() == {
            BookingStatus.CONFIRMED: 1,
            BookingStatus.CANCELLED: 1,
            BookingStatus.COMPLETED: 0,
        }

    @pytest.mark.asyncio
    async def test_search_bookings(self, service, paid_booking):
        paid = await paid_booking(customer_id='alice', seat_ids=('A1',))
        other = await service.book_seats(customer_id='bob', schedule_id='S1', seat_ids=['A2'])

        assert service.search_bookings(term='ALI') == [paid]
        assert service.search_bookings(term=str(paid.payment.id)) == [paid]
        assert service.search_bookings(term=str(other.reservation.id)) == [other]
        assert service.search_bookings(term=str(other.id).upper()) == [other]
        assert service.search_bookings(term='  ') == [paid, other]
        assert service.search_bookings(term='nobody') == []
