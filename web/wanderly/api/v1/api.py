from fastapi import APIRouter

from wanderly.api.v1.endpoints import catalog, tours, bookings, visa_bookings, payments


# Create main API router
api_v1_router = APIRouter()

# Public tour pricing; registered ahead of the admin /tours/{id} routes
api_v1_router.include_router(
    tours.router,
    prefix="/tours",
    tags=["tours"]
)

# Admin catalog collections (each router carries its own role guard)
for router in catalog.routers:
    api_v1_router.include_router(router)

# Checkout and transaction lookup (public access)
api_v1_router.include_router(
    bookings.router,
    prefix="/bookings",
    tags=["bookings"]
)

api_v1_router.include_router(
    visa_bookings.router,
    prefix="/visa-bookings",
    tags=["visa-bookings"]
)

# Gateway callbacks
api_v1_router.include_router(
    payments.router,
    prefix="/payments",
    tags=["payments"]
)
