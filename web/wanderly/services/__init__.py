from .catalog_service import CatalogService, RESOURCES
from .tour_service import TourService
from .booking_service import BookingService, VisaBookingService
from .payment_service import PaymentService, Settlement, KINDS, get_kind

__all__ = [
    "CatalogService",
    "RESOURCES",
    "TourService",
    "BookingService",
    "VisaBookingService",
    "PaymentService",
    "Settlement",
    "KINDS",
    "get_kind",
]
