from datetime import datetime

from sqlalchemy import (
    String, Integer, ForeignKey, Numeric, DateTime, Boolean, Date, Text,
    func, Index,
)
from sqlalchemy.orm import mapped_column, relationship, DeclarativeBase


class Base(DeclarativeBase): ...


# Payment / lifecycle vocabularies
PAYMENT_PENDING, PAYMENT_PAID, PAYMENT_FAILED = "pending", "paid", "failed"
PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_PAID, PAYMENT_FAILED)

BOOKING_STATUSES = ("pending", "confirmed", "cancelled", "completed")
APPLICATION_STATUSES = ("pending", "submitted", "approved", "rejected", "cancelled")


class Orderable:
    """Mixin for collections the admin can reorder by drag and drop.

    ``order`` is assigned by the reorder endpoint (0..n-1); rows created
    since the last reorder have no order yet and sort after ordered ones.
    """

    order = mapped_column(Integer, nullable=True, index=True)

    # Columns matched by the ``search`` query parameter of list endpoints
    __search_fields__: tuple = ()


# ---------- Catalog content ----------
class Review(Orderable, Base):
    __tablename__ = "reviews"
    __search_fields__ = ("name", "text")
    id          = mapped_column(Integer, primary_key=True)
    name        = mapped_column(String(120), nullable=False)
    designation = mapped_column(String(120))
    text        = mapped_column(String(2000), nullable=False)
    rating      = mapped_column(Integer, nullable=False, default=5)
    created_at  = mapped_column(DateTime, default=datetime.utcnow, server_default=func.now())


class Blog(Orderable, Base):
    __tablename__ = "blogs"
    __search_fields__ = ("title", "tags")
    id          = mapped_column(Integer, primary_key=True)
    title       = mapped_column(String(150), nullable=False)
    content     = mapped_column(Text, nullable=False)
    tags        = mapped_column(String(500), nullable=False, comment="Comma separated, at most 10")
    read_time   = mapped_column(String(32), nullable=False, comment="e.g. '5 min'")
    is_published = mapped_column(Boolean, default=True, nullable=False)
    created_at  = mapped_column(DateTime, default=datetime.utcnow, server_default=func.now())


class Country(Orderable, Base):
    __tablename__ = "countries"
    __search_fields__ = ("name",)
    id          = mapped_column(Integer, primary_key=True)
    name        = mapped_column(String(80), unique=True, nullable=False)
    is_active   = mapped_column(Boolean, default=True, nullable=False)

    tours       = relationship("Tour", back_populates="destination")


class TeamMember(Orderable, Base):
    __tablename__ = "team_members"
    __search_fields__ = ("name", "designation")
    id          = mapped_column(Integer, primary_key=True)
    name        = mapped_column(String(120), nullable=False)
    designation = mapped_column(String(120))


class Visa(Orderable, Base):
    __tablename__ = "visas"
    __search_fields__ = ("country_name", "visa_type")
    id          = mapped_column(Integer, primary_key=True)
    country_name = mapped_column(String(80), nullable=False)
    visa_type   = mapped_column(String(80), nullable=False)
    fee         = mapped_column(Numeric(12, 2), nullable=False, comment="Application fee charged at checkout")
    is_active   = mapped_column(Boolean, default=True, nullable=False)


class TourCategory(Orderable, Base):
    __tablename__ = "tour_categories"
    __search_fields__ = ("name",)
    id          = mapped_column(Integer, primary_key=True)
    name        = mapped_column(String(64), unique=True, nullable=False)
    is_active   = mapped_column(Boolean, default=True, nullable=False)

    tours       = relationship("Tour", back_populates="category")


# ---------- Tours ----------
class Tour(Orderable, Base):
    __tablename__ = "tours"
    __search_fields__ = ("title",)
    id          = mapped_column(Integer, primary_key=True)
    title       = mapped_column(String(200), nullable=False)
    destination_id = mapped_column(ForeignKey("countries.id"), nullable=True)
    category_id = mapped_column(ForeignKey("tour_categories.id"), nullable=True)
    status      = mapped_column(String(16), default="PUBLISHED", nullable=False, comment="DRAFT | PUBLISHED")
    base_price  = mapped_column(Numeric(12, 2), nullable=False)
    booking_fee_percentage = mapped_column(Numeric(5, 2), nullable=True, comment="Deposit taken against base_price; null uses platform default")
    # -------- Offer (flattened, one per tour) ---------
    offer_is_active = mapped_column(Boolean, default=False, nullable=False)
    offer_discount_type = mapped_column(String(16), nullable=True, comment="flat | percentage")
    offer_flat_discount = mapped_column(Numeric(12, 2), nullable=True)
    offer_discount_percentage = mapped_column(Numeric(5, 2), nullable=True)
    created_at  = mapped_column(DateTime, default=datetime.utcnow, server_default=func.now())

    destination = relationship("Country", back_populates="tours")
    category    = relationship("TourCategory", back_populates="tours")


# ---------- Transaction-bearing records ----------
class Booking(Base):
    __tablename__ = "bookings"
    id          = mapped_column(Integer, primary_key=True)
    tour_id     = mapped_column(ForeignKey("tours.id"), nullable=False)
    name        = mapped_column(String(120), nullable=False)
    email       = mapped_column(String(128), nullable=True)
    phone       = mapped_column(String(32), nullable=False)
    tour_title  = mapped_column(String(200), nullable=False, comment="Snapshot at booking time")
    destination = mapped_column(String(80), nullable=True)
    travel_date = mapped_column(Date, nullable=True)
    persons     = mapped_column(Integer, default=1, nullable=False)
    # Snapshot of pricing.compute_booking_fee at checkout; never recomputed
    booking_fee = mapped_column(Numeric(12, 2), nullable=False)
    total_amount = mapped_column(Numeric(12, 2), nullable=False)
    transaction_id = mapped_column(String(64), unique=True, nullable=False)
    payment_status = mapped_column(String(16), default=PAYMENT_PENDING, nullable=False, comment="pending | paid | failed")
    booking_status = mapped_column(String(16), default="pending", nullable=False, comment="pending | confirmed | cancelled | completed")
    validation_id = mapped_column(String(128), nullable=True)
    message     = mapped_column(String(2000), nullable=True)
    created_at  = mapped_column(DateTime, default=datetime.utcnow, server_default=func.now())
    settled_at  = mapped_column(DateTime, nullable=True, comment="When payment left the pending state")

    tour        = relationship("Tour")

    __table_args__ = (
        Index("ix_booking_payment_status", "payment_status"),
    )


class VisaBooking(Base):
    __tablename__ = "visa_bookings"
    id          = mapped_column(Integer, primary_key=True)
    visa_id     = mapped_column(ForeignKey("visas.id"), nullable=False)
    name        = mapped_column(String(120), nullable=False)
    email       = mapped_column(String(128), nullable=False)
    phone       = mapped_column(String(32), nullable=False)
    country     = mapped_column(String(80), nullable=False, comment="Snapshot at application time")
    visa_type   = mapped_column(String(80), nullable=False)
    # Snapshot of Visa.fee at checkout; never recomputed
    application_fee = mapped_column(Numeric(12, 2), nullable=False)
    transaction_id = mapped_column(String(64), unique=True, nullable=False)
    payment_status = mapped_column(String(16), default=PAYMENT_PENDING, nullable=False, comment="pending | paid | failed")
    status      = mapped_column(String(16), default="pending", nullable=False, comment="pending | submitted | approved | rejected | cancelled")
    validation_id = mapped_column(String(128), nullable=True)
    created_at  = mapped_column(DateTime, default=datetime.utcnow, server_default=func.now())
    settled_at  = mapped_column(DateTime, nullable=True)

    visa        = relationship("Visa")
