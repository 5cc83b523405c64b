"""
SSLCommerz integration: opening hosted-checkout sessions and validating
completed payments server-side.

The browser never talks to this module.  It only follows the
``GatewayPageURL`` returned by :meth:`SSLCommerzClient.create_session`; the
gateway then calls back our ``/payments/...`` endpoints, which validate the
payment here before settling the booking.
"""
import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Dict, Any, List

import httpx

from wanderly.core.config import Settings, get_settings
from wanderly.core.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

SESSION_PATH = "/gwprocess/v4/api.php"
VALIDATION_PATH = "/validator/api/validationserverAPI.php"
QUERY_PATH = "/validator/api/merchantTransIDvalidationAPI.php"
VALID_STATUSES = {"VALID", "VALIDATED"}
# Attempts the gateway will never complete
CLOSED_STATUSES = {"FAILED", "CANCELLED", "EXPIRED", "UNATTEMPTED"}


def new_transaction_id(prefix: str = "TXN") -> str:
    """Return a fresh, unique merchant transaction id."""
    return f"{prefix}-{uuid.uuid4().hex[:20].upper()}"


@dataclass(frozen=True)
class PaymentSession:
    transaction_id: str
    payment_url: str
    session_key: Optional[str] = None


@dataclass(frozen=True)
class PaymentValidation:
    valid: bool
    status: str
    transaction_id: Optional[str]
    amount: Optional[Decimal]
    currency: Optional[str]
    val_id: Optional[str] = None

    @property
    def closed(self) -> bool:
        return self.status in CLOSED_STATUSES

    def matches(self, transaction_id: str, amount: Decimal, currency: str) -> bool:
        """True when the gateway vouches for exactly this payment"""
        return (
            self.valid
            and self.transaction_id == transaction_id
            and self.amount is not None
            and self.amount == amount
            and (self.currency or currency).upper() == currency.upper()
        )


class SSLCommerzClient:
    """Thin async client over the SSLCommerz REST endpoints"""

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or get_settings()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.sslcommerz_base_url,
            timeout=self.settings.PAYMENT_TIMEOUT_SECONDS,
            transport=self._transport,
        )

    def _credentials(self) -> Dict[str, str]:
        return {
            "store_id": self.settings.SSLCOMMERZ_STORE_ID,
            "store_passwd": self.settings.SSLCOMMERZ_STORE_PASSWORD,
        }

    async def create_session(
        self,
        *,
        transaction_id: str,
        amount: Decimal,
        callback_base: str,
        customer: Dict[str, Any],
        product_name: str,
        product_category: str = "travel",
    ) -> PaymentSession:
        """Open a hosted checkout session and return its payment URL.

        *callback_base* is the absolute URL prefix of the gateway callbacks
        for this record kind, e.g. ``https://api.example.com/api/v1/payments/bookings``.
        """
        callback_base = callback_base.rstrip("/")
        form = {
            **self._credentials(),
            "total_amount": f"{amount:.2f}",
            "currency": self.settings.CURRENCY,
            "tran_id": transaction_id,
            "success_url": f"{callback_base}/success",
            "fail_url": f"{callback_base}/fail",
            "cancel_url": f"{callback_base}/cancel",
            "ipn_url": f"{callback_base}/ipn",
            "cus_name": customer.get("name") or "",
            "cus_email": customer.get("email") or "",
            "cus_phone": customer.get("phone") or "",
            "cus_add1": customer.get("address") or "N/A",
            "cus_country": "Bangladesh",
            "shipping_method": "NO",
            "num_of_item": customer.get("persons", 1),
            "product_name": product_name[:255],
            "product_category": product_category,
            "product_profile": "non-physical-goods",
        }

        try:
            async with self._client() as client:
                response = await client.post(SESSION_PATH, data=form)
        except httpx.HTTPError as exc:
            logger.exception("SSLCommerz session request failed for %s", transaction_id)
            raise PaymentGatewayError("Payment gateway unreachable", transaction_id) from exc

        if response.status_code != 200:
            logger.error("SSLCommerz session HTTP %s for %s", response.status_code, transaction_id)
            raise PaymentGatewayError(f"Payment gateway returned HTTP {response.status_code}", transaction_id)

        payload = response.json()
        url = payload.get("GatewayPageURL")
        if str(payload.get("status", "")).upper() != "SUCCESS" or not url:
            reason = payload.get("failedreason") or "Payment session was not created"
            logger.error("SSLCommerz refused session for %s: %s", transaction_id, reason)
            raise PaymentGatewayError(reason, transaction_id)

        return PaymentSession(
            transaction_id=transaction_id,
            payment_url=url,
            session_key=payload.get("sessionkey"),
        )

    async def validate(self, val_id: str) -> PaymentValidation:
        """Ask the gateway whether *val_id* denotes a completed payment"""
        params = {**self._credentials(), "val_id": val_id, "format": "json"}
        try:
            async with self._client() as client:
                response = await client.get(VALIDATION_PATH, params=params)
        except httpx.HTTPError as exc:
            logger.exception("SSLCommerz validation request failed for val_id=%s", val_id)
            raise PaymentGatewayError("Payment gateway unreachable") from exc

        if response.status_code != 200:
            raise PaymentGatewayError(f"Payment validation returned HTTP {response.status_code}")

        return _to_validation(response.json())

    async def query_transaction(self, transaction_id: str) -> List[PaymentValidation]:
        """Return every payment attempt the gateway knows for *transaction_id*.

        Used to confirm a fail or cancel redirect before acting on it; an
        empty list means the customer never reached a final state.
        """
        params = {**self._credentials(), "tran_id": transaction_id, "format": "json"}
        try:
            async with self._client() as client:
                response = await client.get(QUERY_PATH, params=params)
        except httpx.HTTPError as exc:
            logger.exception("SSLCommerz transaction query failed for %s", transaction_id)
            raise PaymentGatewayError("Payment gateway unreachable", transaction_id) from exc

        if response.status_code != 200:
            raise PaymentGatewayError(f"Transaction query returned HTTP {response.status_code}", transaction_id)

        payload = response.json()
        if str(payload.get("APIConnect", "")).upper() != "DONE":
            raise PaymentGatewayError(f"Transaction query refused: {payload.get('APIConnect')}", transaction_id)
        return [_to_validation(element) for element in payload.get("element") or []]


def _to_validation(payload: Dict[str, Any]) -> PaymentValidation:
    status = str(payload.get("status", "")).upper()
    amount = payload.get("amount")
    return PaymentValidation(
        valid=status in VALID_STATUSES,
        status=status,
        transaction_id=payload.get("tran_id"),
        amount=Decimal(str(amount)).quantize(Decimal("0.01")) if amount not in (None, "") else None,
        currency=payload.get("currency"),
        val_id=payload.get("val_id"),
    )


def get_payment_gateway() -> SSLCommerzClient:
    """FastAPI dependency (overridden in tests)"""
    return SSLCommerzClient()
