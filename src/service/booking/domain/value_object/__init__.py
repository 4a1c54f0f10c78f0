from src.service.booking.domain.value_object.e_ticket import ETicket
from src.service.booking.domain.value_object.money import minor_unit, percentage_of, to_money
from src.service.booking.domain.value_object.promotion_outcome import PromotionOutcome


__all__ = ['ETicket', 'PromotionOutcome', 'minor_unit', 'percentage_of', 'to_money']
