import re
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Any

from pydantic import BaseModel, Field, AliasChoices, field_validator, model_validator

from wanderly import pricing
from wanderly.core import get_settings
from .common import CamelModel, Money


READ_TIME_PATTERN = re.compile(r"^\d+\s*(min|minutes?|mins?)$", re.IGNORECASE)
MAX_TAGS = 10


def parse_tags(raw: str) -> List[str]:
    """Split a comma separated tag string, dropping blanks"""
    return [t.strip() for t in (raw or "").split(",") if t.strip()]


class ReorderIn(BaseModel):
    """Full ordered id list for one collection.

    Dashboard clients name the key after the resource
    (``reviewIds``, ``countryIds`` ...); all of them are accepted.
    """

    ids: List[int] = Field(
        ...,
        validation_alias=AliasChoices(
            "ids", "reviewIds", "blogIds", "countryIds", "teamIds",
            "visaIds", "categoryIds", "tourIds",
        ),
    )


# ---------- Reviews ----------
class ReviewIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    designation: Optional[str] = Field(None, max_length=120)
    text: str = Field(..., min_length=1, max_length=2000)
    rating: int = Field(5, ge=1, le=5)


class ReviewUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    designation: Optional[str] = Field(None, max_length=120)
    text: Optional[str] = Field(None, min_length=1, max_length=2000)
    rating: Optional[int] = Field(None, ge=1, le=5)


class ReviewOut(CamelModel):
    id: int
    name: str
    designation: Optional[str] = None
    text: str
    rating: int
    order: Optional[int] = None
    created_at: Optional[datetime] = None


# ---------- Blogs ----------
class _BlogRules(CamelModel):
    """Blog form rules; every failure blocks submission before any write"""

    @field_validator("title", check_fields=False)
    @classmethod
    def check_title(cls, v):
        if v is None:
            return v
        v = v.strip()
        if len(v) < 5:
            raise ValueError("Title must be at least 5 characters long")
        if len(v) > 150:
            raise ValueError("Title must be less than 150 characters")
        return v

    @field_validator("content", check_fields=False)
    @classmethod
    def check_content(cls, v):
        if v is None:
            return v
        if len(v.strip()) < 100:
            raise ValueError("Blog content must be at least 100 characters long")
        return v

    @field_validator("tags", check_fields=False)
    @classmethod
    def check_tags(cls, v):
        if v is None:
            return v
        tags = parse_tags(v)
        if not tags:
            raise ValueError("Please enter at least one valid tag")
        if len(tags) > MAX_TAGS:
            raise ValueError(f"Maximum {MAX_TAGS} tags allowed")
        return ", ".join(tags)

    @field_validator("read_time", check_fields=False)
    @classmethod
    def check_read_time(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not READ_TIME_PATTERN.match(v):
            raise ValueError("Please enter read time in format like '5 min' or '10 minutes'")
        return v


class BlogIn(_BlogRules):
    title: str
    content: str
    tags: str
    read_time: str
    is_published: bool = True


class BlogUpdate(_BlogRules):
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[str] = None
    read_time: Optional[str] = None
    is_published: Optional[bool] = None


class BlogOut(CamelModel):
    id: int
    title: str
    content: str
    tags: str
    read_time: str
    is_published: bool
    order: Optional[int] = None
    created_at: Optional[datetime] = None


# ---------- Countries ----------
class CountryIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=80)
    is_active: bool = True


class CountryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=80)
    is_active: Optional[bool] = None


class CountryOut(CamelModel):
    id: int
    name: str
    is_active: bool
    order: Optional[int] = None


# ---------- Team ----------
class TeamMemberIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    designation: Optional[str] = Field(None, max_length=120)


class TeamMemberUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    designation: Optional[str] = Field(None, max_length=120)


class TeamMemberOut(CamelModel):
    id: int
    name: str
    designation: Optional[str] = None
    order: Optional[int] = None


# ---------- Visas ----------
class VisaIn(CamelModel):
    country_name: str = Field(..., min_length=1, max_length=80)
    visa_type: str = Field(..., min_length=1, max_length=80)
    fee: Decimal = Field(..., ge=0)
    is_active: bool = True


class VisaUpdate(CamelModel):
    country_name: Optional[str] = Field(None, min_length=1, max_length=80)
    visa_type: Optional[str] = Field(None, min_length=1, max_length=80)
    fee: Optional[Decimal] = Field(None, ge=0)
    is_active: Optional[bool] = None


class VisaOut(CamelModel):
    id: int
    country_name: str
    visa_type: str
    fee: Money
    is_active: bool
    order: Optional[int] = None


# ---------- Tour categories ----------
class TourCategoryIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=64)
    is_active: bool = True


class TourCategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=64)
    is_active: Optional[bool] = None


class TourCategoryOut(CamelModel):
    id: int
    name: str
    is_active: bool
    order: Optional[int] = None


# ---------- Tours ----------
class OfferIn(CamelModel):
    is_active: bool = False
    discount_type: str = Field(pricing.FLAT, pattern="^(flat|percentage)$")
    flat_discount: Optional[Decimal] = Field(None, ge=0)
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100)

    @model_validator(mode="after")
    def check_amount(self):
        if not self.is_active:
            return self
        if self.discount_type == pricing.FLAT and self.flat_discount is None:
            raise ValueError("flatDiscount is required for a flat offer")
        if self.discount_type == pricing.PERCENTAGE and self.discount_percentage is None:
            raise ValueError("discountPercentage is required for a percentage offer")
        return self


class OfferOut(CamelModel):
    is_active: bool
    discount_type: str
    flat_discount: Optional[Money] = None
    discount_percentage: Optional[Money] = None


class TourIn(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    destination_id: Optional[int] = None
    category_id: Optional[int] = None
    status: str = Field("PUBLISHED", pattern="^(DRAFT|PUBLISHED)$")
    base_price: Decimal = Field(..., gt=0)
    booking_fee_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    offer: Optional[OfferIn] = None


class TourUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    destination_id: Optional[int] = None
    category_id: Optional[int] = None
    status: Optional[str] = Field(None, pattern="^(DRAFT|PUBLISHED)$")
    base_price: Optional[Decimal] = Field(None, gt=0)
    booking_fee_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    offer: Optional[OfferIn] = None


class TourOut(CamelModel):
    id: int
    title: str
    destination_id: Optional[int] = None
    category_id: Optional[int] = None
    status: str
    order: Optional[int] = None
    base_price: Money
    booking_fee_percentage: Money
    offer: Optional[OfferOut] = None
    discount_amount: Money
    discounted_price: Money
    booking_fee: Money
    formatted_price: str

    @classmethod
    def from_tour(cls, tour: Any) -> "TourOut":
        q = pricing.quote(tour, get_settings().DEFAULT_BOOKING_FEE_PCT)
        offer = None
        if tour.offer_discount_type or tour.offer_is_active:
            offer = OfferOut(
                is_active=bool(tour.offer_is_active),
                discount_type=tour.offer_discount_type or pricing.FLAT,
                flat_discount=tour.offer_flat_discount,
                discount_percentage=tour.offer_discount_percentage,
            )
        return cls(
            id=tour.id,
            title=tour.title,
            destination_id=tour.destination_id,
            category_id=tour.category_id,
            status=tour.status,
            order=tour.order,
            base_price=q.base_price,
            booking_fee_percentage=q.booking_fee_percentage,
            offer=offer,
            discount_amount=q.discount,
            discounted_price=q.discounted_price,
            booking_fee=q.booking_fee,
            formatted_price=pricing.format_price(q.discounted_price),
        )
