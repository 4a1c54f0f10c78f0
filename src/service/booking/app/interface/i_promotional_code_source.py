from abc import ABC, abstractmethod
from typing import List

from src.service.booking.domain.entity.promotional_code_entity import PromotionalCode


class IPromotionalCodeSource(ABC):
    @abstractmethod
    async def load_promotional_codes(self) -> List[PromotionalCode]:
        """Load every promotional code, including expired and inactive ones"""
        pass

    @abstractmethod
    async def save_promotional_code(self, *, promo: PromotionalCode) -> None:
        """Insert or overwrite the code (matched case-insensitively)"""
        pass

    @abstractmethod
    async def delete_promotional_code(self, *, code: str) -> None:
        pass
