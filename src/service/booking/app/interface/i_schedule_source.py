"""
Schedule Source Interface

Read side of the route/schedule catalog. The catalog itself (route and
timetable maintenance) lives outside the booking engine.
"""

from abc import ABC, abstractmethod

from src.service.booking.domain.entity.route_entity import Route
from src.service.booking.domain.entity.schedule_entity import Schedule


class IScheduleSource(ABC):
    @abstractmethod
    async def load_schedule(self, *, schedule_id: str) -> Schedule:
        """
        Load a schedule together with its seats

        Args:
            schedule_id: Schedule identifier

        Returns:
            Schedule whose seats reflect persisted availability

        Raises:
            NotFoundError: unknown schedule
        """
        pass

    @abstractmethod
    async def load_route(self, *, route_id: str) -> Route:
        """
        Raises:
            NotFoundError: unknown route
        """
        pass
