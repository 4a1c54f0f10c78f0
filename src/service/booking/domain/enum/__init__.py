"""Booking Domain Enums"""

from src.service.booking.domain.enum.seat_class import SeatClass

__all__ = ['SeatClass']
