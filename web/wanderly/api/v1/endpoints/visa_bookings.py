from fastapi import APIRouter, Request, status

from wanderly.api.v1.schemas import VisaBookingCreate, VisaBookingOut, CheckoutOut, Envelope
from wanderly.deps import SessionDep, GatewayDep
from wanderly.services import VisaBookingService
from .bookings import callback_base

router = APIRouter()


@router.post("", response_model=Envelope[CheckoutOut], status_code=status.HTTP_201_CREATED)
async def create_visa_booking(
    payload: VisaBookingCreate,
    request: Request,
    sess: SessionDep,
    gateway: GatewayDep,
):
    """Create a pending visa application and return the gateway URL to pay it"""
    service = VisaBookingService(sess, gateway)
    application, payment = await service.create_visa_booking(
        payload.model_dump(),
        callback_base(request, "visa-bookings"),
    )
    return Envelope[CheckoutOut](
        message="Visa application created, redirecting to payment",
        data=CheckoutOut(
            booking_id=application.id,
            transaction_id=application.transaction_id,
            payment_url=payment.payment_url,
            booking_fee=application.application_fee,
            total_amount=application.application_fee,
        ),
    )


@router.get("/transaction/{transaction_id}", response_model=Envelope[VisaBookingOut])
async def get_visa_booking_by_transaction(transaction_id: str, sess: SessionDep):
    application = await VisaBookingService(sess).get_by_transaction_id(transaction_id)
    return Envelope[VisaBookingOut](data=VisaBookingOut.model_validate(application))
