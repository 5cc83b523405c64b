from .orderable_repository import OrderableRepository
from .tour_repository import TourRepository
from .transaction_repository import TransactionRepository, BookingRepository, VisaBookingRepository

__all__ = [
    "OrderableRepository",
    "TourRepository",
    "TransactionRepository",
    "BookingRepository",
    "VisaBookingRepository",
]
