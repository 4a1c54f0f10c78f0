from abc import ABC, abstractmethod
from typing import List

from src.service.booking.domain.entity.cancellation_policy_entity import CancellationPolicy


class ICancellationPolicySource(ABC):
    @abstractmethod
    async def load_cancellation_policies(self) -> List[CancellationPolicy]:
        """Load every configured cancellation policy (any order)"""
        pass

    @abstractmethod
    async def save_cancellation_policy(self, *, policy: CancellationPolicy) -> None:
        """Insert or overwrite the policy with this id"""
        pass

    @abstractmethod
    async def delete_cancellation_policy(self, *, policy_id: str) -> None:
        pass
