from datetime import date, datetime
from typing import Optional

from pydantic import Field, EmailStr, field_validator

from .common import CamelModel, Money


class _ContactFields(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    phone: str = Field(..., min_length=6, max_length=32)

    @field_validator("name", "phone")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class BookingCreate(_ContactFields):
    """Checkout form for a tour"""
    tour_id: int
    email: Optional[EmailStr] = None
    travel_date: Optional[date] = None
    persons: int = Field(1, ge=1, le=50)
    message: Optional[str] = Field(None, max_length=2000)


class BookingOut(CamelModel):
    id: int
    tour_id: int
    name: str
    email: Optional[str] = None
    phone: str
    tour_title: str
    destination: Optional[str] = None
    travel_date: Optional[date] = None
    persons: int
    booking_fee: Money
    total_amount: Money
    transaction_id: str
    payment_status: str
    booking_status: str
    created_at: Optional[datetime] = None


class VisaBookingCreate(_ContactFields):
    """Visa application checkout form"""
    visa_id: int
    email: EmailStr


class VisaBookingOut(CamelModel):
    id: int
    visa_id: int
    name: str
    email: str
    phone: str
    country: str
    visa_type: str
    application_fee: Money
    transaction_id: str
    payment_status: str
    status: str
    created_at: Optional[datetime] = None


class CheckoutOut(CamelModel):
    """Returned by checkout; the browser is sent to ``payment_url``"""
    booking_id: int
    transaction_id: str
    payment_url: str
    booking_fee: Money
    total_amount: Money


class PriceQuoteOut(CamelModel):
    tour_id: int
    base_price: Money
    discount_amount: Money
    discounted_price: Money
    booking_fee_percentage: Money
    booking_fee: Money
    formatted_price: str
    formatted_booking_fee: str
