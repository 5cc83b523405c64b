"""Post-payment reconciliation for the gateway redirect pages.

When the gateway sends the browser back, the page knows nothing but a
transaction id (and, on the fail page, sometimes an ``error`` code).  The
reconciler turns that into exactly one terminal :class:`Outcome`:

    IDLE -> VERIFYING -> SUCCESS | FAILURE | NOT_FOUND
    IDLE -> CANCELLED

It only ever *reads* the booking back from the API; settlement happens on
the server when the gateway calls our payment callbacks.  Nothing here
raises to the page: every path ends in an outcome.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)


class State(str, Enum):
    IDLE = "idle"
    VERIFYING = "verifying"
    SUCCESS = "success"
    FAILURE = "failure"
    NOT_FOUND = "not_found"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({State.SUCCESS, State.FAILURE, State.NOT_FOUND, State.CANCELLED})

# Failure reasons; the first four also arrive as ``?error=`` on the fail page
NO_TRANSACTION_ID = "no_transaction_id"
VERIFICATION_FAILED = "verification_failed"
PROCESSING_ERROR = "processing_error"
PAYMENT_FAILED = "payment_failed"
CONFIG_ERROR = "config_error"

FAIL_MESSAGES: Dict[str, str] = {
    NO_TRANSACTION_ID: "Transaction ID not found. Please try again.",
    VERIFICATION_FAILED: "Payment verification failed. Please contact support.",
    PROCESSING_ERROR: "An error occurred while processing your payment.",
    PAYMENT_FAILED: "Your payment was not successful. Please try again.",
    CONFIG_ERROR: "Payment verification is currently unavailable. Please contact support.",
}
GENERIC_FAIL_MESSAGE = "Payment failed. Please try again."

# Echoed back to the page for display; never used to decide anything
DISPLAY_KEYS = ("applicationId", "country", "visaType", "amount")


def message_for(reason: Optional[str]) -> str:
    return FAIL_MESSAGES.get(reason or "", GENERIC_FAIL_MESSAGE)


def extract_transaction_id(params: Mapping[str, Any]) -> Optional[str]:
    """``tran_id`` from the gateway, ``transactionId`` from our own links"""
    for key in ("tran_id", "transactionId"):
        value = params.get(key)
        if value and str(value).strip():
            return str(value).strip()
    return None


@dataclass(frozen=True)
class Flow:
    """One checkout flow as seen from its redirect pages"""

    kind: str
    lookup_path: str
    retry_path: str
    success_message: str
    cancelled_message: str

    def lookup_url(self, api_base_url: str, transaction_id: str) -> str:
        path = self.lookup_path.format(transaction_id=quote(transaction_id, safe=""))
        return f"{api_base_url.rstrip('/')}{path}"


TOUR_FLOW = Flow(
    kind="bookings",
    lookup_path="/bookings/transaction/{transaction_id}",
    retry_path="/package",
    success_message="Payment successful! Your booking has been confirmed.",
    cancelled_message=(
        "You have cancelled the payment. Your booking was not completed. "
        "You can try booking again whenever you're ready."
    ),
)

VISA_FLOW = Flow(
    kind="visa-bookings",
    lookup_path="/visa-bookings/transaction/{transaction_id}",
    retry_path="/visa",
    success_message="Payment successful! Your visa application has been submitted.",
    cancelled_message="You have cancelled the visa application payment",
)


@dataclass(frozen=True)
class Outcome:
    state: State
    reason: Optional[str] = None
    message: Optional[str] = None
    transaction_id: Optional[str] = None
    record: Optional[Dict[str, Any]] = None
    retry_path: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)
    # Raw transport / server error text, for logs only
    diagnostics: Optional[str] = None

    @property
    def terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "reason": self.reason,
            "message": self.message,
            "transactionId": self.transaction_id,
            "record": self.record,
            "retryPath": self.retry_path,
            "context": self.context,
        }


class VerificationSession:
    """Lifetime of one page mount.

    Allows a single fetch.  Once closed (the page went away) any result
    still arriving is discarded instead of being applied.
    """

    def __init__(self):
        self.outcome: Optional[Outcome] = None
        self._fetched = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def claim_fetch(self) -> bool:
        if self._fetched or self._closed:
            return False
        self._fetched = True
        return True

    def deliver(self, outcome: Outcome) -> bool:
        if self._closed:
            logger.debug("Discarding %s outcome for a closed page", outcome.state.value)
            return False
        self.outcome = outcome
        return True

    def close(self) -> None:
        self._closed = True


class TransactionReconciler:
    """Resolves redirect-page query parameters into an :class:`Outcome`"""

    def __init__(
        self,
        api_base_url: Optional[str],
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_base_url = api_base_url
        self.timeout = timeout
        self._transport = transport

    async def verify(
        self,
        flow: Flow,
        params: Mapping[str, Any],
        session: Optional[VerificationSession] = None,
    ) -> Outcome:
        """Success page: read the record back and report its state"""
        session = session or VerificationSession()
        transaction_id = extract_transaction_id(params)
        context = _display_context(params)

        if transaction_id is None:
            return self._finish(session, Outcome(
                State.NOT_FOUND,
                reason=NO_TRANSACTION_ID,
                message=message_for(NO_TRANSACTION_ID),
                retry_path=flow.retry_path,
                context=context,
            ))

        if not self.api_base_url:
            logger.error("API base URL is not configured; cannot verify %s", transaction_id)
            return self._finish(session, self._failure(flow, transaction_id, CONFIG_ERROR, context))

        if not session.claim_fetch():
            return session.outcome or Outcome(State.VERIFYING, transaction_id=transaction_id, context=context)

        outcome = await self._fetch(flow, transaction_id, context)
        return self._finish(session, outcome)

    async def fail_page(
        self,
        flow: Flow,
        params: Mapping[str, Any],
        session: Optional[VerificationSession] = None,
    ) -> Outcome:
        """Fail page: the gateway already decided, nothing is fetched.

        An explicit ``error`` code picks its message; without one the
        generic failure message is shown.
        """
        session = session or VerificationSession()
        error = (params.get("error") or "").strip() or None
        return self._finish(session, Outcome(
            State.FAILURE,
            reason=error,
            message=message_for(error),
            transaction_id=extract_transaction_id(params),
            retry_path=flow.retry_path,
            context=_display_context(params),
        ))

    def cancelled(self, flow: Flow, params: Mapping[str, Any]) -> Outcome:
        return Outcome(
            State.CANCELLED,
            message=flow.cancelled_message,
            transaction_id=extract_transaction_id(params),
            retry_path=flow.retry_path,
            context=_display_context(params),
        )

    async def _fetch(self, flow: Flow, transaction_id: str, context: Dict[str, Any]) -> Outcome:
        url = flow.lookup_url(self.api_base_url, transaction_id)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.warning("Transaction lookup for %s failed: %s", transaction_id, exc)
            return self._failure(flow, transaction_id, PROCESSING_ERROR, context, diagnostics=str(exc))

        if response.is_error:
            logger.warning("Transaction lookup for %s returned HTTP %s", transaction_id, response.status_code)
            return self._failure(
                flow, transaction_id, PROCESSING_ERROR, context,
                diagnostics=f"HTTP {response.status_code}: {response.text[:500]}",
            )

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            return self._failure(
                flow, transaction_id, PROCESSING_ERROR, context,
                diagnostics="Lookup response is not a JSON object",
            )

        if payload.get("success"):
            return Outcome(
                State.SUCCESS,
                message=flow.success_message,
                transaction_id=transaction_id,
                record=payload.get("data"),
                context=context,
            )

        reason = payload.get("message") or VERIFICATION_FAILED
        return self._failure(flow, transaction_id, reason, context)

    @staticmethod
    def _failure(
        flow: Flow,
        transaction_id: Optional[str],
        reason: str,
        context: Dict[str, Any],
        diagnostics: Optional[str] = None,
    ) -> Outcome:
        return Outcome(
            State.FAILURE,
            reason=reason,
            message=message_for(reason),
            transaction_id=transaction_id,
            retry_path=flow.retry_path,
            context=context,
            diagnostics=diagnostics,
        )

    @staticmethod
    def _finish(session: VerificationSession, outcome: Outcome) -> Outcome:
        session.deliver(outcome)
        return outcome


def _display_context(params: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: params[k] for k in DISPLAY_KEYS if params.get(k)}
