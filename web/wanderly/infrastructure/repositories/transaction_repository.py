from typing import Optional
from datetime import datetime
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wanderly.core import BaseRepository
from wanderly.models import Booking, VisaBooking, PAYMENT_PENDING


class TransactionRepository(BaseRepository):
    """Records keyed by a payment-gateway transaction id.

    ``status_field`` names the lifecycle column that moves together with
    ``payment_status`` (``booking_status`` for tours, ``status`` for visas).
    """

    status_field = "status"

    async def get_by_transaction_id(self, transaction_id: str):
        query = select(self.model).where(self.model.transaction_id == transaction_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_transaction_id_for_update(self, transaction_id: str):
        query = (
            select(self.model)
            .where(self.model.transaction_id == transaction_id)
            .with_for_update()
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def settle(
        self,
        record,
        *,
        payment_status: str,
        status: str,
        validation_id: Optional[str] = None,
    ):
        """Move *record* out of ``pending``.

        Returns the record when the transition happened and ``None`` when it
        had already been settled; a settled record is never touched again.
        Fee snapshots are not part of the transition.
        """
        if record.payment_status != PAYMENT_PENDING:
            return None
        record.payment_status = payment_status
        setattr(record, self.status_field, status)
        if validation_id:
            record.validation_id = validation_id
        record.settled_at = datetime.utcnow()
        await self.session.flush()
        return record


class BookingRepository(TransactionRepository):
    status_field = "booking_status"

    def __init__(self, session: AsyncSession):
        super().__init__(Booking, session)


class VisaBookingRepository(TransactionRepository):
    status_field = "status"

    def __init__(self, session: AsyncSession):
        super().__init__(VisaBooking, session)
