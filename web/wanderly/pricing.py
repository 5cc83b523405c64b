"""Tour price and booking-fee computation.

Everything here is pure: no I/O, no session, no settings lookup.  Inputs are
coerced to :class:`~decimal.Decimal` and clamped instead of raising, so a bad
value coming from the catalog degrades to a zero amount rather than a 500.

The booking fee is a deposit taken against the *undiscounted* base price.
Offers change what the customer sees as the tour price, never the deposit.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Mapping, Optional

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")
DEFAULT_BOOKING_FEE_PCT = Decimal("20")

FLAT = "flat"
PERCENTAGE = "percentage"
DISCOUNT_TYPES = (FLAT, PERCENTAGE)


def _to_decimal(value: Any) -> Decimal:
    """Return *value* as a finite, non-negative Decimal (0 when unusable)."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        dec = value
    else:
        try:
            dec = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not dec.is_finite() or dec < ZERO:
        return ZERO
    return dec


def _to_percentage(value: Any) -> Decimal:
    return min(_to_decimal(value), HUNDRED)


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Offer:
    """Promotional offer attached to a tour."""

    is_active: bool = False
    discount_type: str = FLAT
    flat_discount: Optional[Decimal] = None
    discount_percentage: Optional[Decimal] = None

    @classmethod
    def coerce(cls, raw: Any) -> Optional["Offer"]:
        """Build an Offer from a dataclass, a mapping or a Tour row.

        Mappings may use the camelCase keys of the public API
        (``isActive``, ``discountType`` ...) or snake_case ones.  Tour rows
        carry the offer flattened into ``offer_*`` columns.
        """
        if raw is None or isinstance(raw, Offer):
            return raw
        if isinstance(raw, Mapping):
            def pick(camel: str, snake: str):
                return raw[camel] if camel in raw else raw.get(snake)

            return cls(
                is_active=bool(pick("isActive", "is_active")),
                discount_type=str(pick("discountType", "discount_type") or FLAT),
                flat_discount=pick("flatDiscount", "flat_discount"),
                discount_percentage=pick("discountPercentage", "discount_percentage"),
            )
        if hasattr(raw, "offer_is_active"):
            return cls(
                is_active=bool(raw.offer_is_active),
                discount_type=raw.offer_discount_type or FLAT,
                flat_discount=raw.offer_flat_discount,
                discount_percentage=raw.offer_discount_percentage,
            )
        return cls(
            is_active=bool(getattr(raw, "is_active", False)),
            discount_type=getattr(raw, "discount_type", FLAT) or FLAT,
            flat_discount=getattr(raw, "flat_discount", None),
            discount_percentage=getattr(raw, "discount_percentage", None),
        )


def discount_amount(base_price: Any, offer: Any = None) -> Decimal:
    """Return how much the offer takes off *base_price* (never more than it)."""
    base = _to_decimal(base_price)
    offer = Offer.coerce(offer)
    if offer is None or not offer.is_active:
        return _money(ZERO)

    if offer.discount_type == FLAT:
        discount = _to_decimal(offer.flat_discount)
    elif offer.discount_type == PERCENTAGE:
        discount = base * _to_percentage(offer.discount_percentage) / HUNDRED
    else:
        discount = ZERO
    return _money(min(discount, base))


def compute_discounted_price(base_price: Any, offer: Any = None) -> Decimal:
    """Return the price the customer pays per person after the offer.

    An absent or inactive offer returns *base_price* unchanged.  The result
    is never negative.
    """
    base = _to_decimal(base_price)
    return _money(max(ZERO, base - discount_amount(base, offer)))


def compute_booking_fee(base_price: Any, booking_fee_percentage: Any) -> Decimal:
    """Return the per-person deposit: ``base_price * pct / 100``."""
    base = _to_decimal(base_price)
    return _money(base * _to_percentage(booking_fee_percentage) / HUNDRED)


def _group_indian(digits: str) -> str:
    # en-BD grouping: last three digits, then pairs (1,00,000)
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_price(amount: Any) -> str:
    """Format *amount* as Bangladeshi Taka, e.g. ``৳1,25,000`` or ``৳99.50``."""
    value = _money(_to_decimal(amount))
    whole, _, frac = f"{value:f}".partition(".")
    text = _group_indian(whole)
    if frac and frac.strip("0"):
        text = f"{text}.{frac}"
    return f"৳{text}"


@dataclass(frozen=True)
class PriceQuote:
    base_price: Decimal
    discount: Decimal
    discounted_price: Decimal
    booking_fee_percentage: Decimal
    booking_fee: Decimal


def quote(tour: Any, default_fee_percentage: Any = DEFAULT_BOOKING_FEE_PCT) -> PriceQuote:
    """Price a tour row (or any object with ``base_price`` and offer fields).

    Tours created without a fee percentage, or with a percentage of 0,
    fall back to *default_fee_percentage*.
    """
    base = _money(_to_decimal(getattr(tour, "base_price", None)))
    raw_pct = _to_percentage(getattr(tour, "booking_fee_percentage", None))
    pct = raw_pct or _to_percentage(default_fee_percentage)
    offer = Offer.coerce(tour)
    return PriceQuote(
        base_price=base,
        discount=discount_amount(base, offer),
        discounted_price=compute_discounted_price(base, offer),
        booking_fee_percentage=pct,
        booking_fee=compute_booking_fee(base, pct),
    )
