from typing import Optional, Any
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from wanderly.models import Tour
from .orderable_repository import OrderableRepository


class TourRepository(OrderableRepository):
    """Tour repository implementation"""

    def __init__(self, session: AsyncSession):
        super().__init__(Tour, session)

    async def get(self, id: Any) -> Optional[Tour]:
        """Override get method to eagerly load the destination"""
        query = (
            select(Tour)
            .options(selectinload(Tour.destination))
            .where(Tour.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_bookable(self, tour_id: int) -> Optional[Tour]:
        """Published tour by id (drafts cannot be booked)"""
        tour = await self.get(tour_id)
        if tour is None or tour.status != "PUBLISHED":
            return None
        return tour
