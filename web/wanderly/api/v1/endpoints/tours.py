from typing import List

from fastapi import APIRouter

from wanderly import pricing
from wanderly.api.v1.schemas import Envelope, TourOut, PriceQuoteOut
from wanderly.deps import SessionDep
from wanderly.services import TourService

router = APIRouter()


@router.get("/offers", response_model=Envelope[List[TourOut]])
async def list_offers(sess: SessionDep):
    """Published tours with an active offer, in display order"""
    tours = await TourService(sess).list_offers()
    return Envelope[List[TourOut]](data=[TourOut.from_tour(t) for t in tours])


@router.get("/{tour_id}/quote", response_model=Envelope[PriceQuoteOut])
async def get_quote(tour_id: int, sess: SessionDep):
    """Price breakdown shown on the tour page and the checkout form"""
    q = await TourService(sess).get_quote(tour_id)
    return Envelope[PriceQuoteOut](data=PriceQuoteOut(
        tour_id=tour_id,
        base_price=q.base_price,
        discount_amount=q.discount,
        discounted_price=q.discounted_price,
        booking_fee_percentage=q.booking_fee_percentage,
        booking_fee=q.booking_fee,
        formatted_price=pricing.format_price(q.discounted_price),
        formatted_booking_fee=pricing.format_price(q.booking_fee),
    ))
