"""Gateway callbacks.

SSLCommerz posts the browser back to ``success`` / ``fail`` / ``cancel``
and calls ``ipn`` server-to-server.  The browser is always redirected to
a frontend page carrying the transaction id and, on failure, an ``error``
code the page turns into a message.
"""
import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Form
from fastapi.responses import RedirectResponse

from wanderly.api.v1.schemas import Envelope
from wanderly.core import NotFoundError, ValidationError, get_settings
from wanderly.deps import SessionDep, GatewayDep
from wanderly.services import PaymentService, Settlement, get_kind
from wanderly.services.payment_service import CheckoutKind, CANCELLED

router = APIRouter()

logger = logging.getLogger(__name__)


def _redirect(path: str, **params) -> RedirectResponse:
    query = urlencode({k: v for k, v in params.items() if v})
    url = f"{get_settings().FRONTEND_URL.rstrip('/')}{path}"
    return RedirectResponse(f"{url}?{query}" if query else url, status_code=303)


def _redirect_for(kind: CheckoutKind, settlement: Settlement) -> RedirectResponse:
    tran_id = settlement.record.transaction_id
    if settlement.succeeded:
        return _redirect(kind.success_page, tran_id=tran_id)
    if settlement.outcome == CANCELLED:
        return _redirect(kind.cancel_page, transactionId=tran_id)
    return _redirect(kind.fail_page, tran_id=tran_id, error=settlement.outcome)


async def _settle_and_redirect(sess, kind: CheckoutKind, tran_id: Optional[str], settle) -> RedirectResponse:
    if not tran_id:
        return _redirect(kind.fail_page, error="no_transaction_id")
    try:
        settlement = await settle()
        await sess.commit()
    except NotFoundError:
        logger.warning("Gateway callback for unknown %s transaction %s", kind.slug, tran_id)
        return _redirect(kind.fail_page, tran_id=tran_id, error="no_transaction_id")
    except Exception:
        # The record stays pending; the IPN or a later redirect can still settle it
        logger.exception("Failed to settle %s transaction %s", kind.slug, tran_id)
        await sess.rollback()
        return _redirect(kind.fail_page, tran_id=tran_id, error="processing_error")
    return _redirect_for(kind, settlement)


@router.post("/{kind}/success")
async def payment_success(
    kind: str,
    sess: SessionDep,
    gateway: GatewayDep,
    tran_id: Optional[str] = Form(None),
    val_id: Optional[str] = Form(None),
):
    checkout = get_kind(kind)
    service = PaymentService(sess, kind, gateway)
    return await _settle_and_redirect(
        sess, checkout, tran_id, lambda: service.settle_success(tran_id, val_id),
    )


@router.post("/{kind}/fail")
async def payment_fail(
    kind: str,
    sess: SessionDep,
    gateway: GatewayDep,
    tran_id: Optional[str] = Form(None),
):
    checkout = get_kind(kind)
    service = PaymentService(sess, kind, gateway)
    return await _settle_and_redirect(
        sess, checkout, tran_id, lambda: service.settle_failure(tran_id),
    )


@router.post("/{kind}/cancel")
async def payment_cancel(
    kind: str,
    sess: SessionDep,
    gateway: GatewayDep,
    tran_id: Optional[str] = Form(None),
):
    checkout = get_kind(kind)
    service = PaymentService(sess, kind, gateway)
    return await _settle_and_redirect(
        sess, checkout, tran_id, lambda: service.settle_failure(tran_id, cancelled=True),
    )


@router.post("/{kind}/ipn", response_model=Envelope[dict])
async def payment_ipn(
    kind: str,
    sess: SessionDep,
    gateway: GatewayDep,
    tran_id: Optional[str] = Form(None),
    val_id: Optional[str] = Form(None),
):
    """Server-to-server notification; errors propagate so the gateway retries"""
    get_kind(kind)
    if not tran_id:
        raise ValidationError("tran_id is required", field="tran_id")
    settlement = await PaymentService(sess, kind, gateway).settle_success(tran_id, val_id)
    await sess.commit()
    return Envelope[dict](data={
        "transactionId": tran_id,
        "outcome": settlement.outcome,
        "changed": settlement.changed,
    })
