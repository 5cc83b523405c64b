from .common import CamelModel, Money, Envelope, ListEnvelope
from .catalog_schemas import (
    ReorderIn,
    ReviewIn, ReviewUpdate, ReviewOut,
    BlogIn, BlogUpdate, BlogOut,
    CountryIn, CountryUpdate, CountryOut,
    TeamMemberIn, TeamMemberUpdate, TeamMemberOut,
    VisaIn, VisaUpdate, VisaOut,
    TourCategoryIn, TourCategoryUpdate, TourCategoryOut,
    OfferIn, OfferOut, TourIn, TourUpdate, TourOut,
)
from .booking_schemas import (
    BookingCreate, BookingOut, VisaBookingCreate, VisaBookingOut,
    CheckoutOut, PriceQuoteOut,
)

__all__ = [
    # Shared
    "CamelModel",
    "Money",
    "Envelope",
    "ListEnvelope",

    # Catalog schemas
    "ReorderIn",
    "ReviewIn", "ReviewUpdate", "ReviewOut",
    "BlogIn", "BlogUpdate", "BlogOut",
    "CountryIn", "CountryUpdate", "CountryOut",
    "TeamMemberIn", "TeamMemberUpdate", "TeamMemberOut",
    "VisaIn", "VisaUpdate", "VisaOut",
    "TourCategoryIn", "TourCategoryUpdate", "TourCategoryOut",
    "OfferIn", "OfferOut", "TourIn", "TourUpdate", "TourOut",

    # Booking schemas
    "BookingCreate",
    "BookingOut",
    "VisaBookingCreate",
    "VisaBookingOut",
    "CheckoutOut",
    "PriceQuoteOut",
]
