from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wanderly import pricing
from wanderly.core import BaseService, NotFoundError, get_settings
from wanderly.infrastructure.repositories import TourRepository
from wanderly.models import Tour


class TourService(BaseService):
    """Read-side pricing for tours"""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.repository = TourRepository(session)

    async def get_quote(self, tour_id: int) -> pricing.PriceQuote:
        tour = await self.repository.get_bookable(tour_id)
        if tour is None:
            raise NotFoundError("Tour", tour_id)
        return pricing.quote(tour, get_settings().DEFAULT_BOOKING_FEE_PCT)

    async def list_offers(self) -> List[Tour]:
        """Published tours with an active offer, in display order"""
        query = (
            select(Tour)
            .where(Tour.status == "PUBLISHED", Tour.offer_is_active.is_(True))
            .order_by(Tour.order.is_(None), Tour.order, Tour.id)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())
