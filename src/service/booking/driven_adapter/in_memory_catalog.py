"""
In-memory catalog of routes, schedules, cancellation policies and promo codes.

Stands in for the external catalog database: seeds the engine in tests and
local runs, receives seat availability written by InMemoryUnitOfWork, and
keeps the policy and promo changes staff make through the booking service.
"""

from typing import Dict, Iterable, List, Tuple

import attrs

from src.platform.exception.exceptions import DomainError, NotFoundError
from src.service.booking.app.interface.i_cancellation_policy_source import (
    ICancellationPolicySource,
)
from src.service.booking.app.interface.i_promotional_code_source import IPromotionalCodeSource
from src.service.booking.app.interface.i_schedule_source import IScheduleSource
from src.service.booking.domain.entity.cancellation_policy_entity import CancellationPolicy
from src.service.booking.domain.entity.promotional_code_entity import (
    PromotionalCode,
    normalize_code,
)
from src.service.booking.domain.entity.route_entity import Route
from src.service.booking.domain.entity.schedule_entity import Schedule


class InMemoryCatalog(IScheduleSource, ICancellationPolicySource, IPromotionalCodeSource):
    def __init__(self) -> None:
        self._routes: Dict[str, Route] = {}
        self._schedules: Dict[str, Schedule] = {}
        self._policies: Dict[str, CancellationPolicy] = {}
        self._promo_codes: Dict[str, PromotionalCode] = {}

    # ========== Seeding ==========

    def add_route(self, route: Route) -> None:
        self._routes[route.id] = route

    def add_schedule(self, schedule: Schedule) -> None:
        route = self._routes.get(schedule.route_id)
        if route is None:
            raise NotFoundError(f'Route {schedule.route_id} not found')
        if schedule.id in self._schedules:
            raise DomainError(f'Schedule {schedule.id} already exists')
        self._schedules[schedule.id] = schedule
        route.schedule_ids.append(schedule.id)

    def add_cancellation_policy(self, policy: CancellationPolicy) -> None:
        self._policies[policy.id] = policy

    def add_promotional_code(self, promo: PromotionalCode) -> None:
        self._promo_codes[normalize_code(promo.code)] = promo

    # ========== Seat availability (written by InMemoryUnitOfWork) ==========

    def stage_seat_availability(
        self, updates: Iterable[Tuple[str, str, bool]]
    ) -> Dict[str, Schedule]:
        """
        Apply (schedule_id, seat_id, available) updates to copies of the schedules

        The catalog itself is untouched until commit_schedules().

        Raises:
            NotFoundError: unknown schedule or seat
        """
        staged: Dict[str, Schedule] = {}
        for schedule_id, seat_id, available in updates:
            schedule = staged.get(schedule_id)
            if schedule is None:
                current = self._schedules.get(schedule_id)
                if current is None:
                    raise NotFoundError(f'Schedule {schedule_id} not found')
                schedule = attrs.evolve(current, seats=list(current.seats))
                staged[schedule_id] = schedule

            for index, seat in enumerate(schedule.seats):
                if seat.seat_id == seat_id:
                    schedule.seats[index] = attrs.evolve(seat, available=available)
                    break
            else:
                raise NotFoundError(f'Seat {seat_id} not found on schedule {schedule_id}')
        return staged

    def commit_schedules(self, schedules: Dict[str, Schedule]) -> None:
        self._schedules.update(schedules)

    # ========== IScheduleSource ==========

    async def load_schedule(self, *, schedule_id: str) -> Schedule:
        schedule = self._schedules.get(schedule_id)
        if schedule is None:
            raise NotFoundError(f'Schedule {schedule_id} not found')
        # Callers get their own copy of the seat list
        return attrs.evolve(schedule, seats=list(schedule.seats))

    async def load_route(self, *, route_id: str) -> Route:
        route = self._routes.get(route_id)
        if route is None:
            raise NotFoundError(f'Route {route_id} not found')
        return attrs.evolve(route, schedule_ids=list(route.schedule_ids))

    # ========== Policy / promo sources ==========

    async def load_cancellation_policies(self) -> List[CancellationPolicy]:
        return list(self._policies.values())

    async def load_promotional_codes(self) -> List[PromotionalCode]:
        return list(self._promo_codes.values())

    async def save_cancellation_policy(self, *, policy: CancellationPolicy) -> None:
        self._policies[policy.id] = policy

    async def delete_cancellation_policy(self, *, policy_id: str) -> None:
        self._policies.pop(policy_id, None)

    async def save_promotional_code(self, *, promo: PromotionalCode) -> None:
        self._promo_codes[normalize_code(promo.code)] = promo

    async def delete_promotional_code(self, *, code: str) -> None:
        self._promo_codes.pop(normalize_code(code), None)
