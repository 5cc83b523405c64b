"""Server-side settlement of payment attempts.

The gateway reports the outcome of a payment by calling our callbacks
(success / fail / cancel redirects and the IPN).  Each record leaves the
``pending`` state exactly once; later callbacks for the same transaction
only read the stored state back.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from wanderly import pricing
from wanderly.core import BaseService, NotFoundError, get_settings
from wanderly.infrastructure.repositories import BookingRepository, VisaBookingRepository
from wanderly.infrastructure.sslcommerz import SSLCommerzClient
from wanderly.models import PAYMENT_PENDING, PAYMENT_PAID, PAYMENT_FAILED

logger = logging.getLogger(__name__)

# Outcomes, also used as the ``error`` code on redirect pages
PAID = "paid"
PAYMENT_FAILED_OUTCOME = "payment_failed"
VERIFICATION_FAILED = "verification_failed"
CANCELLED = "cancelled"


@dataclass(frozen=True)
class CheckoutKind:
    slug: str
    label: str
    repository: type
    amount_field: str
    success_status: str
    failure_status: str
    # Frontend pages the browser lands on after the gateway
    success_page: str
    fail_page: str
    cancel_page: str


KINDS: Dict[str, CheckoutKind] = {
    "bookings": CheckoutKind(
        slug="bookings",
        label="Booking",
        repository=BookingRepository,
        amount_field="total_amount",
        success_status="confirmed",
        failure_status="cancelled",
        success_page="/booking-success",
        fail_page="/booking-failed",
        cancel_page="/booking-cancelled",
    ),
    "visa-bookings": CheckoutKind(
        slug="visa-bookings",
        label="Visa booking",
        repository=VisaBookingRepository,
        amount_field="application_fee",
        success_status="submitted",
        failure_status="cancelled",
        success_page="/visa/payment/success",
        fail_page="/visa/payment/fail",
        cancel_page="/visa-cancelled",
    ),
}


def get_kind(slug: str) -> CheckoutKind:
    try:
        return KINDS[slug]
    except KeyError:
        raise NotFoundError("Checkout kind", slug, key="name") from None


@dataclass(frozen=True)
class Settlement:
    record: Any
    outcome: str
    changed: bool

    @property
    def succeeded(self) -> bool:
        return self.outcome == PAID


class PaymentService(BaseService):
    """Settles bookings and visa bookings from gateway callbacks"""

    def __init__(self, session: AsyncSession, kind: str, gateway: Optional[SSLCommerzClient] = None):
        super().__init__(session)
        self.kind = get_kind(kind)
        self.repository = self.kind.repository(session)
        self.gateway = gateway or SSLCommerzClient()

    async def _load(self, transaction_id: str):
        record = await self.repository.get_by_transaction_id_for_update(transaction_id)
        if record is None:
            raise NotFoundError(self.kind.label, transaction_id, key="transaction id")
        return record

    def _expected_amount(self, record) -> Decimal:
        return Decimal(getattr(record, self.kind.amount_field)).quantize(pricing.CENT)

    def _replay(self, record) -> Settlement:
        logger.info(
            "Ignoring repeat settlement of %s %s (already %s)",
            self.kind.slug, record.transaction_id, record.payment_status,
        )
        outcome = PAID if record.payment_status == PAYMENT_PAID else PAYMENT_FAILED_OUTCOME
        return Settlement(record=record, outcome=outcome, changed=False)

    async def _transition(self, record, *, paid: bool, outcome: str, validation_id: Optional[str] = None) -> Settlement:
        await self.repository.settle(
            record,
            payment_status=PAYMENT_PAID if paid else PAYMENT_FAILED,
            status=self.kind.success_status if paid else self.kind.failure_status,
            validation_id=validation_id,
        )
        logger.info("Settled %s %s: %s", self.kind.slug, record.transaction_id, outcome)
        return Settlement(record=record, outcome=outcome, changed=True)

    async def settle_success(self, transaction_id: str, val_id: Optional[str]) -> Settlement:
        """Handle a success redirect or IPN.

        The gateway's word is not taken on trust: the payment is validated
        server-side and its amount must equal the amount stored at checkout.
        Gateway errors propagate and leave the record pending.
        """
        record = await self._load(transaction_id)
        if record.payment_status != PAYMENT_PENDING:
            return self._replay(record)

        if not val_id:
            logger.warning("Success callback for %s without val_id", transaction_id)
            return await self._transition(record, paid=False, outcome=VERIFICATION_FAILED)

        validation = await self.gateway.validate(val_id)
        expected = self._expected_amount(record)
        if validation.matches(transaction_id, expected, get_settings().CURRENCY):
            return await self._transition(record, paid=True, outcome=PAID, validation_id=val_id)

        logger.warning(
            "Payment validation rejected %s: status=%s amount=%s expected=%s",
            transaction_id, validation.status, validation.amount, expected,
        )
        return await self._transition(record, paid=False, outcome=VERIFICATION_FAILED, validation_id=val_id)

    async def settle_failure(self, transaction_id: str, *, cancelled: bool = False) -> Settlement:
        """Handle the gateway's fail or cancel redirect.

        These redirects carry nothing the gateway signed, so the record only
        changes once the gateway's own transaction query agrees: a paid
        attempt settles it as paid, a closed attempt as failed. Otherwise
        the record stays pending.
        """
        record = await self._load(transaction_id)
        if record.payment_status != PAYMENT_PENDING:
            return self._replay(record)
        outcome = CANCELLED if cancelled else PAYMENT_FAILED_OUTCOME

        attempts = await self.gateway.query_transaction(transaction_id)
        expected = self._expected_amount(record)
        currency = get_settings().CURRENCY
        for attempt in attempts:
            if attempt.matches(transaction_id, expected, currency):
                logger.warning("Gateway reports %s as paid; ignoring %s redirect", transaction_id, outcome)
                return await self._transition(record, paid=True, outcome=PAID, validation_id=attempt.val_id)

        if not any(attempt.closed for attempt in attempts):
            logger.warning("Gateway has no closed attempt for %s; leaving it pending", transaction_id)
            return Settlement(record=record, outcome=outcome, changed=False)
        return await self._transition(record, paid=False, outcome=outcome)
