from .api_client import ApiError, CatalogClient
from .reorder import ReorderController
from .reconciler import (
    State,
    Outcome,
    Flow,
    TOUR_FLOW,
    VISA_FLOW,
    VerificationSession,
    TransactionReconciler,
)

__all__ = [
    "ApiError",
    "CatalogClient",
    "ReorderController",
    "State",
    "Outcome",
    "Flow",
    "TOUR_FLOW",
    "VISA_FLOW",
    "VerificationSession",
    "TransactionReconciler",
]
