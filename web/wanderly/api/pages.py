"""Landing pages the browser reaches after the payment gateway.

They answer with the reconciled outcome as JSON; rendering is left to the
frontend.  Success pages read the record back through the public lookup
API (``API_BASE_URL``), exactly as a browser would.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from wanderly.client.reconciler import TransactionReconciler, Flow, TOUR_FLOW, VISA_FLOW
from wanderly.core import get_settings

router = APIRouter(tags=["pages"])


def get_reconciler() -> TransactionReconciler:
    """FastAPI dependency (overridden in tests)"""
    settings = get_settings()
    return TransactionReconciler(settings.API_BASE_URL, timeout=settings.PAYMENT_TIMEOUT_SECONDS)


ReconcilerDep = Annotated[TransactionReconciler, Depends(get_reconciler)]


async def _success(flow: Flow, request: Request, reconciler: TransactionReconciler) -> dict:
    outcome = await reconciler.verify(flow, dict(request.query_params))
    return outcome.to_dict()


async def _fail(flow: Flow, request: Request, reconciler: TransactionReconciler) -> dict:
    outcome = await reconciler.fail_page(flow, dict(request.query_params))
    return outcome.to_dict()


@router.get("/booking-success")
async def booking_success(request: Request, reconciler: ReconcilerDep):
    return await _success(TOUR_FLOW, request, reconciler)


@router.get("/booking-failed")
async def booking_failed(request: Request, reconciler: ReconcilerDep):
    return await _fail(TOUR_FLOW, request, reconciler)


@router.get("/booking-cancelled")
async def booking_cancelled(request: Request, reconciler: ReconcilerDep):
    return reconciler.cancelled(TOUR_FLOW, dict(request.query_params)).to_dict()


@router.get("/visa/payment/success")
async def visa_payment_success(request: Request, reconciler: ReconcilerDep):
    return await _success(VISA_FLOW, request, reconciler)


@router.get("/visa/payment/fail")
async def visa_payment_fail(request: Request, reconciler: ReconcilerDep):
    return await _fail(VISA_FLOW, request, reconciler)


@router.get("/visa-cancelled")
async def visa_cancelled(request: Request, reconciler: ReconcilerDep):
    return reconciler.cancelled(VISA_FLOW, dict(request.query_params)).to_dict()
