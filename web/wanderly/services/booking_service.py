import logging
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from wanderly import pricing
from wanderly.core import BaseService, NotFoundError, BusinessLogicError, get_settings
from wanderly.infrastructure.repositories import (
    TourRepository, BookingRepository, VisaBookingRepository, TransactionRepository,
)
from wanderly.infrastructure.sslcommerz import SSLCommerzClient, PaymentSession, new_transaction_id
from wanderly.models import Booking, Visa, VisaBooking

logger = logging.getLogger(__name__)


class _CheckoutService(BaseService):
    """Shared checkout plumbing for transaction-bearing records"""

    label = "Booking"
    repository: TransactionRepository

    def __init__(self, session: AsyncSession, gateway: Optional[SSLCommerzClient] = None):
        super().__init__(session)
        self.gateway = gateway or SSLCommerzClient()
        self.settings = get_settings()

    async def get_by_transaction_id(self, transaction_id: str):
        """Read the settled (or pending) state of a payment attempt"""
        record = await self.repository.get_by_transaction_id(transaction_id)
        if record is None:
            raise NotFoundError(self.label, transaction_id, key="transaction id")
        return record

    async def _open_payment(
        self,
        record: Any,
        amount: Decimal,
        callback_base: str,
        customer: Dict[str, Any],
        product_name: str,
    ) -> PaymentSession:
        # The record is committed first: if the gateway call fails it stays
        # pending and is never settled by the client.
        await self.session.commit()
        return await self.gateway.create_session(
            transaction_id=record.transaction_id,
            amount=amount,
            callback_base=callback_base,
            customer=customer,
            product_name=product_name,
        )


class BookingService(_CheckoutService):
    """Tour checkout"""

    label = "Booking"

    def __init__(self, session: AsyncSession, gateway: Optional[SSLCommerzClient] = None):
        super().__init__(session, gateway)
        self.repository = BookingRepository(session)
        self.tours = TourRepository(session)

    async def create_booking(self, data: Dict[str, Any], callback_base: str) -> Tuple[Booking, PaymentSession]:
        """Create a pending booking and open its payment session.

        The booking fee is computed here, from the tour's *base* price, and
        stored on the booking; later price changes on the tour do not
        affect it.
        """
        tour = await self.tours.get_bookable(data["tour_id"])
        if tour is None:
            raise NotFoundError("Tour", data["tour_id"])

        quote = pricing.quote(tour, self.settings.DEFAULT_BOOKING_FEE_PCT)
        if quote.booking_fee <= 0:
            raise BusinessLogicError("Tour has no payable booking fee", rule="booking_fee")

        persons = data.get("persons") or 1
        total = (quote.booking_fee * persons).quantize(pricing.CENT)

        booking = await self.repository.create(obj_in={
            "tour_id": tour.id,
            "name": data["name"],
            "email": data.get("email"),
            "phone": data["phone"],
            "tour_title": tour.title,
            "destination": tour.destination.name if tour.destination else None,
            "travel_date": data.get("travel_date"),
            "persons": persons,
            "message": data.get("message"),
            "booking_fee": quote.booking_fee,
            "total_amount": total,
            "transaction_id": new_transaction_id("TOUR"),
        })
        logger.info(
            "Booking %s created for tour %s: fee=%s x %s persons, transaction=%s",
            booking.id, tour.id, quote.booking_fee, persons, booking.transaction_id,
        )

        session = await self._open_payment(
            booking,
            total,
            callback_base,
            customer={**data, "persons": persons},
            product_name=tour.title,
        )
        return booking, session


class VisaBookingService(_CheckoutService):
    """Visa application checkout"""

    label = "Visa booking"

    def __init__(self, session: AsyncSession, gateway: Optional[SSLCommerzClient] = None):
        super().__init__(session, gateway)
        self.repository = VisaBookingRepository(session)

    async def create_visa_booking(self, data: Dict[str, Any], callback_base: str) -> Tuple[VisaBooking, PaymentSession]:
        visa = await self.session.get(Visa, data["visa_id"])
        if visa is None or not visa.is_active:
            raise NotFoundError("Visa", data["visa_id"])

        fee = Decimal(visa.fee).quantize(pricing.CENT)
        if fee <= 0:
            raise BusinessLogicError("Visa has no payable application fee", rule="application_fee")

        application = await self.repository.create(obj_in={
            "visa_id": visa.id,
            "name": data["name"],
            "email": data["email"],
            "phone": data["phone"],
            "country": visa.country_name,
            "visa_type": visa.visa_type,
            "application_fee": fee,
            "transaction_id": new_transaction_id("VISA"),
        })
        logger.info(
            "Visa booking %s created for visa %s: fee=%s, transaction=%s",
            application.id, visa.id, fee, application.transaction_id,
        )

        session = await self._open_payment(
            application,
            fee,
            callback_base,
            customer=data,
            product_name=f"{visa.country_name} {visa.visa_type} visa",
        )
        return application, session
