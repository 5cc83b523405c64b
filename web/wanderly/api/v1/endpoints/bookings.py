from fastapi import APIRouter, Request, status

from wanderly.api.v1.schemas import BookingCreate, BookingOut, CheckoutOut, Envelope
from wanderly.core import get_settings
from wanderly.deps import SessionDep, GatewayDep
from wanderly.services import BookingService

router = APIRouter()


def callback_base(request: Request, kind: str) -> str:
    """Absolute URL prefix the gateway calls back for *kind* records"""
    api_base = get_settings().API_BASE_URL or f"{str(request.base_url).rstrip('/')}/api/v1"
    return f"{api_base.rstrip('/')}/payments/{kind}"


@router.post("", response_model=Envelope[CheckoutOut], status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate,
    request: Request,
    sess: SessionDep,
    gateway: GatewayDep,
):
    """Create a pending booking and return the gateway URL to pay it.

    The booking fee is computed server-side; any price the browser
    displayed is not trusted.
    """
    service = BookingService(sess, gateway)
    booking, payment = await service.create_booking(
        payload.model_dump(),
        callback_base(request, "bookings"),
    )
    return Envelope[CheckoutOut](
        message="Booking created, redirecting to payment",
        data=CheckoutOut(
            booking_id=booking.id,
            transaction_id=booking.transaction_id,
            payment_url=payment.payment_url,
            booking_fee=booking.booking_fee,
            total_amount=booking.total_amount,
        ),
    )


@router.get("/transaction/{transaction_id}", response_model=Envelope[BookingOut])
async def get_booking_by_transaction(transaction_id: str, sess: SessionDep):
    """Read-only lookup used by the payment redirect pages"""
    booking = await BookingService(sess).get_by_transaction_id(transaction_id)
    return Envelope[BookingOut](data=BookingOut.model_validate(booking))
