from datetime import date
from decimal import Decimal
from typing import Mapping, Optional

from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.promotional_code_entity import PromotionalCode
from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.domain.value_object.money import HUNDRED, to_money
from src.service.booking.domain.value_object.promotion_outcome import PromotionOutcome


CLASS_MULTIPLIERS: Mapping[SeatClass, Decimal] = {
    SeatClass.ECONOMY: Decimal('1.0'),
    SeatClass.BUSINESS: Decimal('1.5'),
    SeatClass.FIRST: Decimal('2.0'),
}

# Classes outside CLASS_MULTIPLIERS are charged the base price
DEFAULT_MULTIPLIER = Decimal('1.0')


class PricingEngine:
    """
    Stateless price arithmetic.

    Same inputs always give the same output; nothing is cached between calls.
    """

    def class_multiplier(self, seat_class: str) -> Decimal:
        parsed = SeatClass.parse(seat_class)
        if parsed is None:
            Logger.base.warning(
                f'💰 [PRICING] Unknown seat class {seat_class!r}, using multiplier {DEFAULT_MULTIPLIER}'
            )
            return DEFAULT_MULTIPLIER
        return CLASS_MULTIPLIERS[parsed]

    @Logger.io
    def price(self, *, base_price: Decimal, seat_class: str) -> Decimal:
        return to_money(base_price * self.class_multiplier(seat_class))

    @Logger.io
    def apply_promotion(
        self, *, amount: Decimal, promo: Optional[PromotionalCode], today: date
    ) -> PromotionOutcome:
        """
        Discount amount by a promotional code

        An unusable (inactive, expired or missing) code leaves the amount
        unchanged with applied=False; the caller decides whether that is an error.
        """
        if promo is None or not promo.is_usable(today=today):
            return PromotionOutcome(amount=to_money(amount), applied=False, code=promo and promo.code)

        discounted = amount * (HUNDRED - promo.discount_percentage) / HUNDRED
        return PromotionOutcome(amount=to_money(discounted), applied=True, code=promo.code)
