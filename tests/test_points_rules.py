"""Tests for eco-points accrual and redemption rules."""

from decimal import Decimal

import pytest

from app.common.exceptions import DiscountBoundsViolation
from app.points.rules import (
    DEFAULT_POINT_RATE,
    calculate_pickup_points,
    calculate_points_discount,
    calculate_waste_points,
    distribute_discount,
    normalize_material,
    pickup_bonus,
    point_rate,
    points_for_discount,
    validate_discount,
)


# ============ Accrual ============

def test_waste_points_floor_per_material():
    points = calculate_waste_points(["plastic", "glass"], {"plastic": 2.5, "glass": 1})
    assert points == 37


def test_waste_points_same_input_same_result():
    materials = ["metal", "paper", "organic"]
    quantities = {"metal": 1.33, "paper": 0.7, "organic": 4}
    first = calculate_waste_points(materials, quantities)
    assert all(calculate_waste_points(materials, quantities) == first for _ in range(5))
    # 19 + 5 + 20
    assert first == 44


def test_unknown_material_uses_other_rate():
    assert point_rate("styrofoam") == DEFAULT_POINT_RATE
    assert calculate_waste_points(["styrofoam"], {"styrofoam": 2}) == 6


def test_aliases_from_pickup_form():
    assert normalize_material("Metals") == "metal"
    assert normalize_material("cardboard") == "paper"
    assert calculate_waste_points(["metals"], {"metals": 2}) == 30
    assert calculate_waste_points(["cardboard"], {"cardboard": 1.5}) == 12


def test_quantity_key_matched_by_normalized_tag():
    assert calculate_waste_points(["metals"], {"metal": 1}) == 15


def test_material_without_quantity_earns_nothing():
    assert calculate_waste_points(["plastic", "glass"], {"plastic": 1}) == 10


def test_quantity_without_material_is_ignored():
    assert calculate_waste_points(["plastic"], {"plastic": 1, "glass": 10}) == 10


def test_duplicate_material_counted_once():
    assert calculate_waste_points(["plastic", "plastic", "Plastic"], {"plastic": 1}) == 10


@pytest.mark.parametrize("bad", [-2, 0, None, True, "abc", float("nan"), float("inf")])
def test_invalid_quantities_earn_nothing(bad):
    assert calculate_waste_points(["plastic"], {"plastic": bad}) == 0


def test_numeric_string_quantity_accepted():
    assert calculate_waste_points(["glass"], {"glass": "2"}) == 24


def test_empty_input():
    assert calculate_waste_points([], {}) == 0


def test_pickup_bonus():
    assert pickup_bonus(37) == 7
    assert pickup_bonus(4) == 0
    assert pickup_bonus(0) == 0
    assert calculate_pickup_points(["plastic", "glass"], {"plastic": 2.5, "glass": 1}) == 44


# ============ Redemption ============

def test_discount_capped_at_half_of_purchase():
    assert calculate_points_discount(1000, Decimal("100")) == Decimal("50.00")


def test_discount_limited_by_points():
    assert calculate_points_discount(10, Decimal("100")) == Decimal("30.00")


@pytest.mark.parametrize(
    "points,amount",
    [(0, "10"), (1, "0.01"), (7, "45.55"), (17, "101.01"), (333, "999.99"), (100000, "12.34")],
)
def test_discount_never_exceeds_either_cap(points, amount):
    amount = Decimal(amount)
    discount = calculate_points_discount(points, amount)
    assert discount >= 0
    assert discount <= amount * Decimal("0.5")
    assert discount <= points * Decimal("3.00")


def test_discount_rounded_down_to_cent():
    assert calculate_points_discount(1000, Decimal("0.03")) == Decimal("0.01")


def test_no_discount_without_points_or_amount():
    assert calculate_points_discount(0, Decimal("100")) == Decimal("0.00")
    assert calculate_points_discount(-5, Decimal("100")) == Decimal("0.00")
    assert calculate_points_discount(100, Decimal("0")) == Decimal("0.00")


def test_points_for_discount_rounds_up():
    assert points_for_discount(Decimal("30.00")) == 10
    assert points_for_discount(Decimal("31.00")) == 11
    assert points_for_discount(Decimal("0.01")) == 1
    assert points_for_discount(Decimal("0")) == 0


def test_validate_discount_accepts_allowed_amount():
    assert validate_discount(Decimal("20"), 100, Decimal("100")) == Decimal("20.00")


def test_validate_discount_rejects_over_cap_with_maximum():
    with pytest.raises(DiscountBoundsViolation) as exc_info:
        validate_discount(Decimal("80"), 1000, Decimal("100"))
    assert exc_info.value.allowed == Decimal("50.00")
    assert exc_info.value.requested == Decimal("80.00")


def test_validate_discount_rejects_over_balance():
    with pytest.raises(DiscountBoundsViolation) as exc_info:
        validate_discount(Decimal("40"), 5, Decimal("100"))
    assert exc_info.value.allowed == Decimal("15.00")


def test_validate_discount_negative_means_none():
    assert validate_discount(Decimal("-5"), 100, Decimal("100")) == Decimal("0.00")


# ============ Distribution ============

def test_distribution_proportional():
    shares = distribute_discount([Decimal("100.00"), Decimal("300.00")], Decimal("40.00"))
    assert shares == [Decimal("10.00"), Decimal("30.00")]


def test_distribution_residue_on_last_line():
    shares = distribute_discount(
        [Decimal("10.00"), Decimal("10.00"), Decimal("10.00")], Decimal("10.00")
    )
    assert shares == [Decimal("3.33"), Decimal("3.33"), Decimal("3.34")]
    assert sum(shares) == Decimal("10.00")


@pytest.mark.parametrize(
    "totals,discount",
    [
        (["19.99", "0.01", "5.50"], "7.77"),
        (["0.01", "0.01", "99.99"], "50.00"),
        (["33.33", "33.33", "33.34"], "49.99"),
        (["1.00"], "0.50"),
    ],
)
def test_distribution_sums_to_discount_and_stays_within_lines(totals, discount):
    totals = [Decimal(t) for t in totals]
    discount = Decimal(discount)
    shares = distribute_discount(totals, discount)
    assert sum(shares) == discount
    assert all(Decimal("0") <= s <= t for s, t in zip(shares, totals))


def test_distribution_zero_discount():
    assert distribute_discount([Decimal("5.00"), Decimal("7.00")], Decimal("0")) == [
        Decimal("0.00"),
        Decimal("0.00"),
    ]


def test_distribution_empty():
    assert distribute_discount([], Decimal("10")) == []
