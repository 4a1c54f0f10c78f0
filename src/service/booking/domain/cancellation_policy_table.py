from typing import Dict, Iterable, List

from src.platform.exception.exceptions import (
    DuplicatePolicyError,
    DuplicateThresholdError,
    NoPolicyError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.cancellation_policy_entity import CancellationPolicy


class CancellationPolicyTable:
    """
    Refund rules keyed by lead time before departure.

    Policies are evaluated from the longest threshold down; the first one the
    lead time still qualifies for wins, which is the most generous applicable one.
    """

    def __init__(self, policies: Iterable[CancellationPolicy] = ()) -> None:
        self._policies: Dict[str, CancellationPolicy] = {}
        for policy in policies:
            self.add(policy)

    def __len__(self) -> int:
        return len(self._policies)

    def policies(self) -> List[CancellationPolicy]:
        return sorted(
            self._policies.values(), key=lambda policy: policy.hours_before_departure, reverse=True
        )

    def copy(self) -> 'CancellationPolicyTable':
        return CancellationPolicyTable(self._policies.values())

    def get(self, policy_id: str) -> CancellationPolicy:
        try:
            return self._policies[policy_id]
        except KeyError:
            raise NotFoundError(f'Cancellation policy {policy_id} not found')

    def _check_threshold_free(self, policy: CancellationPolicy) -> None:
        for existing in self._policies.values():
            if (
                existing.id != policy.id
                and existing.hours_before_departure == policy.hours_before_departure
            ):
                raise DuplicateThresholdError(
                    f'A policy for {policy.hours_before_departure}h before departure already exists'
                )

    @Logger.io
    def add(self, policy: CancellationPolicy) -> None:
        policy.validate()
        if policy.id in self._policies:
            raise DuplicatePolicyError(f'Cancellation policy {policy.id} already exists')
        self._check_threshold_free(policy)
        self._policies[policy.id] = policy

    @Logger.io
    def update(self, policy: CancellationPolicy) -> None:
        self.get(policy.id)
        policy.validate()
        self._check_threshold_free(policy)
        self._policies[policy.id] = policy

    @Logger.io
    def remove(self, policy_id: str) -> CancellationPolicy:
        policy = self.get(policy_id)
        del self._policies[policy_id]
        return policy

    def replace_all(self, policies: Iterable[CancellationPolicy]) -> None:
        # Validate into a fresh table first so a bad source leaves this one untouched
        fresh = CancellationPolicyTable(policies)
        self._policies = fresh._policies

    @Logger.io
    def applicable_policy(self, hours_before_departure: float) -> CancellationPolicy:
        """
        Raises:
            NoPolicyError: no threshold is at or below the lead time
        """
        for policy in self.policies():
            if policy.matches(hours_before_departure):
                return policy
        raise NoPolicyError(f'No cancellation policy for {hours_before_departure:.2f}h lead time')
