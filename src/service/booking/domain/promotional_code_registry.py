from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from src.platform.exception.exceptions import (
    DuplicatePromoCodeError,
    InvalidPromoError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.promotional_code_entity import (
    PromotionalCode,
    normalize_code,
)
from src.service.booking.domain.pricing_engine import PricingEngine


class PromotionalCodeRegistry:
    """
    Promotional codes keyed case-insensitively.

    Expired or deactivated codes stay registered for reporting; they simply
    stop validating.
    """

    def __init__(
        self,
        codes: Iterable[PromotionalCode] = (),
        *,
        pricing_engine: Optional[PricingEngine] = None,
    ) -> None:
        self._pricing_engine = pricing_engine or PricingEngine()
        self._codes: Dict[str, PromotionalCode] = {}
        for promo in codes:
            self.add_code(promo)

    def __len__(self) -> int:
        return len(self._codes)

    def find(self, code: str) -> Optional[PromotionalCode]:
        return self._codes.get(normalize_code(code))

    def get(self, code: str) -> PromotionalCode:
        promo = self.find(code)
        if promo is None:
            raise NotFoundError(f'Promotional code {code} not found')
        return promo

    @Logger.io
    def add_code(self, promo: PromotionalCode) -> None:
        key = normalize_code(promo.code)
        if key in self._codes:
            raise DuplicatePromoCodeError(f'Promotional code {key} already exists')
        self._codes[key] = promo

    @Logger.io
    def update(self, promo: PromotionalCode) -> None:
        """Replace discount, expiry and active flag of an existing code"""
        self.get(promo.code)
        self._codes[normalize_code(promo.code)] = promo

    @Logger.io
    def remove(self, code: str) -> PromotionalCode:
        promo = self.get(code)
        del self._codes[normalize_code(code)]
        return promo

    @Logger.io
    def deactivate(self, code: str) -> PromotionalCode:
        promo = self.get(code).deactivate()
        self._codes[normalize_code(code)] = promo
        return promo

    def copy(self) -> 'PromotionalCodeRegistry':
        return PromotionalCodeRegistry(self.codes(), pricing_engine=self._pricing_engine)

    def replace_all(self, codes: Iterable[PromotionalCode]) -> None:
        fresh = PromotionalCodeRegistry(codes, pricing_engine=self._pricing_engine)
        self._codes = fresh._codes

    def validate(self, code: str, *, today: date) -> bool:
        promo = self.find(code)
        return promo is not None and promo.is_usable(today=today)

    @Logger.io
    def redeem(self, code: str, amount: Decimal, *, today: date) -> Decimal:
        """
        Raises:
            NotFoundError: code was never registered
            InvalidPromoError: code is inactive or past its expiry date
        """
        promo = self.get(code)
        outcome = self._pricing_engine.apply_promotion(amount=amount, promo=promo, today=today)
        if not outcome.applied:
            raise InvalidPromoError(f'Promotional code {promo.code} is inactive or expired')
        return outcome.amount

    def codes(self) -> List[PromotionalCode]:
        return list(self._codes.values())

    def active_codes(self, *, today: date) -> List[PromotionalCode]:
        return [promo for promo in self._codes.values() if promo.is_usable(today=today)]

    def expired_codes(self, *, today: date) -> List[PromotionalCode]:
        return [promo for promo in self._codes.values() if today > promo.expires_on]
