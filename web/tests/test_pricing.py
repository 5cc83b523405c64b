from decimal import Decimal
from types import SimpleNamespace

import pytest

from wanderly import pricing


def percent_offer(pct, active=True):
    return {"isActive": active, "discountType": "percentage", "discountPercentage": pct}


def flat_offer(amount, active=True):
    return {"isActive": active, "discountType": "flat", "flatDiscount": amount}


class TestDiscountedPrice:
    def test_no_offer_returns_base(self):
        assert pricing.compute_discounted_price(50000) == Decimal("50000.00")

    def test_inactive_offer_is_ignored(self):
        assert pricing.compute_discounted_price(50000, percent_offer(10, active=False)) == Decimal("50000.00")

    def test_percentage_offer(self):
        assert pricing.compute_discounted_price(50000, percent_offer(10)) == Decimal("45000.00")

    def test_flat_offer(self):
        assert pricing.compute_discounted_price(50000, flat_offer(7500)) == Decimal("42500.00")

    def test_flat_discount_larger_than_price_clamps_to_zero(self):
        assert pricing.compute_discounted_price(1000, flat_offer(5000)) == Decimal("0.00")

    def test_percentage_above_hundred_is_clamped(self):
        assert pricing.compute_discounted_price(1000, percent_offer(150)) == Decimal("0.00")

    def test_snake_case_mapping_is_accepted(self):
        offer = {"is_active": True, "discount_type": "flat", "flat_discount": "250.50"}
        assert pricing.compute_discounted_price("1000", offer) == Decimal("749.50")

    def test_unknown_discount_type_gives_no_discount(self):
        offer = {"isActive": True, "discountType": "bogus", "flatDiscount": 100}
        assert pricing.compute_discounted_price(1000, offer) == Decimal("1000.00")

    @pytest.mark.parametrize("bad", [None, "abc", -10, float("nan"), True])
    def test_unusable_base_price_is_zero(self, bad):
        assert pricing.compute_discounted_price(bad, percent_offer(10)) == Decimal("0.00")

    def test_discount_amount(self):
        assert pricing.discount_amount(50000, percent_offer(10)) == Decimal("5000.00")
        assert pricing.discount_amount(50000, None) == Decimal("0.00")


class TestBookingFee:
    def test_fee_is_percentage_of_base(self):
        assert pricing.compute_booking_fee(50000, 20) == Decimal("10000.00")

    def test_zero_percentage(self):
        assert pricing.compute_booking_fee(50000, 0) == Decimal("0.00")

    def test_full_percentage(self):
        assert pricing.compute_booking_fee(50000, 100) == Decimal("50000.00")

    def test_rounds_half_up_to_cents(self):
        assert pricing.compute_booking_fee("333.33", "15") == Decimal("50.00")
        assert pricing.compute_booking_fee("0.05", "50") == Decimal("0.03")

    def test_missing_inputs_do_not_raise(self):
        assert pricing.compute_booking_fee(None, None) == Decimal("0.00")


class TestQuote:
    def test_fee_ignores_offer(self):
        tour = SimpleNamespace(
            base_price=Decimal("50000"),
            booking_fee_percentage=Decimal("20"),
            offer_is_active=True,
            offer_discount_type="percentage",
            offer_flat_discount=None,
            offer_discount_percentage=Decimal("10"),
        )
        q = pricing.quote(tour)
        assert q.discounted_price == Decimal("45000.00")
        assert q.discount == Decimal("5000.00")
        assert q.booking_fee == Decimal("10000.00")

    def test_missing_percentage_uses_default(self):
        tour = SimpleNamespace(base_price=1000, booking_fee_percentage=None, offer_is_active=False,
                               offer_discount_type=None, offer_flat_discount=None,
                               offer_discount_percentage=None)
        assert pricing.quote(tour).booking_fee == Decimal("200.00")
        assert pricing.quote(tour, default_fee_percentage=30).booking_fee == Decimal("300.00")

    def test_zero_percentage_uses_default(self):
        tour = SimpleNamespace(base_price=1000, booking_fee_percentage=0, offer_is_active=False,
                               offer_discount_type=None, offer_flat_discount=None,
                               offer_discount_percentage=None)
        q = pricing.quote(tour)
        assert q.booking_fee_percentage == Decimal("20")
        assert q.booking_fee == Decimal("200.00")


class TestFormatPrice:
    @pytest.mark.parametrize("amount, expected", [
        (0, "৳0"),
        (999, "৳999"),
        (45000, "৳45,000"),
        (125000, "৳1,25,000"),
        (12345678, "৳1,23,45,678"),
        (Decimal("99.50"), "৳99.50"),
        ("1000.00", "৳1,000"),
    ])
    def test_bdt_grouping(self, amount, expected):
        assert pricing.format_price(amount) == expected
