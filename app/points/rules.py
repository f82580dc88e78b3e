"""Eco-points accrual and redemption rules.

Pure functions only: no database access, no logging. Everything that moves
points goes through `PointsService`, which calls into this module for the
numbers.

Accrual: each material earns a fixed number of points per kilogram, floored
per material. Scheduled recycle pickups earn a 20% bonus on top.

Redemption: one point is worth LKR 3.00 and a discount can never exceed half
of the pre-discount purchase total.
"""

from collections.abc import Iterable, Mapping, Sequence
from decimal import ROUND_CEILING, ROUND_DOWN, ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation

from app.common.exceptions import DiscountBoundsViolation

# Points per kilogram
MATERIAL_POINT_RATES = {
    "plastic": 10,
    "paper": 8,
    "glass": 12,
    "metal": 15,
    "organic": 5,
    "electronic": 20,
    "clothing": 6,
}
DEFAULT_POINT_RATE = 3  # "other"

# Tags used by the recycle pickup form
MATERIAL_ALIASES = {
    "metals": "metal",
    "cardboard": "paper",
}

PICKUP_BONUS_RATE = Decimal("0.2")

POINT_VALUE_LKR = Decimal("3.00")
MAX_DISCOUNT_RATIO = Decimal("0.5")

CENT = Decimal("0.01")
ZERO_MONEY = Decimal("0.00")


def normalize_material(tag: str) -> str:
    key = tag.strip().lower()
    return MATERIAL_ALIASES.get(key, key)


def point_rate(material: str) -> int:
    """Points per kg for a material tag; unknown tags use the "other" rate."""
    return MATERIAL_POINT_RATES.get(normalize_material(material), DEFAULT_POINT_RATE)


def _to_kg(value) -> Decimal:
    # bool is an int subclass; a checkbox value is not a weight
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        kg = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal(0)
    if not kg.is_finite() or kg <= 0:
        return Decimal(0)
    return kg


def _to_money(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO_MONEY
    if not amount.is_finite():
        return ZERO_MONEY
    return amount


def calculate_waste_points(
    materials: Iterable[str], quantities: Mapping[str, float]
) -> int:
    """Points earned for a set of materials.

    Only materials listed in `materials` that also have a quantity count.
    Quantity keys are matched exactly first, then by normalized tag.
    """
    normalized_quantities: dict[str, object] = {}
    for key, value in quantities.items():
        normalized_quantities.setdefault(normalize_material(key), value)

    total = 0
    seen: set[str] = set()
    for material in materials:
        normalized = normalize_material(material)
        if normalized in seen:
            continue
        seen.add(normalized)

        if material in quantities:
            kg = _to_kg(quantities[material])
        else:
            kg = _to_kg(normalized_quantities.get(normalized))

        total += int((kg * point_rate(normalized)).to_integral_value(rounding=ROUND_FLOOR))

    return total


def pickup_bonus(base_points: int) -> int:
    if base_points <= 0:
        return 0
    return int((base_points * PICKUP_BONUS_RATE).to_integral_value(rounding=ROUND_FLOOR))


def calculate_pickup_points(
    materials: Iterable[str], quantities: Mapping[str, float]
) -> int:
    """Waste points plus the scheduling bonus for formal pickups."""
    base_points = calculate_waste_points(materials, quantities)
    return base_points + pickup_bonus(base_points)


def calculate_points_discount(available_points: int, purchase_amount) -> Decimal:
    """Largest LKR discount a balance can buy on a purchase.

    min(points * 3.00, amount * 0.5), rounded down to the cent.
    """
    points = max(0, int(available_points))
    amount = _to_money(purchase_amount)
    if points == 0 or amount <= 0:
        return ZERO_MONEY

    by_points = points * POINT_VALUE_LKR
    by_cap = amount * MAX_DISCOUNT_RATIO
    return min(by_points, by_cap).quantize(CENT, rounding=ROUND_DOWN)


def points_for_discount(discount) -> int:
    """Points to debit for an LKR discount, rounded up."""
    amount = _to_money(discount)
    if amount <= 0:
        return 0
    return int((amount / POINT_VALUE_LKR).to_integral_value(rounding=ROUND_CEILING))


def validate_discount(requested, available_points: int, purchase_amount) -> Decimal:
    """Return `requested` as money if the balance and the 50% cap allow it.

    Raises DiscountBoundsViolation carrying the maximum allowed discount
    otherwise. Negative requests mean no discount.
    """
    amount = _to_money(requested).quantize(CENT, rounding=ROUND_DOWN)
    if amount <= 0:
        return ZERO_MONEY

    allowed = calculate_points_discount(available_points, purchase_amount)
    if amount > allowed:
        raise DiscountBoundsViolation(requested=amount, allowed=allowed)
    return amount


def distribute_discount(line_totals: Sequence[Decimal], discount: Decimal) -> list[Decimal]:
    """Split a discount across lines in proportion to each line's total.

    Shares are rounded to the cent; the last line takes the rounding residue
    so the shares always add up to exactly `discount`. No share exceeds its
    own line total.
    """
    if not line_totals:
        return []

    totals = [_to_money(t) for t in line_totals]
    grand_total = sum(totals, Decimal(0))
    discount = _to_money(discount).quantize(CENT, rounding=ROUND_DOWN)
    if discount <= 0 or grand_total <= 0:
        return [ZERO_MONEY for _ in totals]
    discount = min(discount, grand_total)

    shares: list[Decimal] = []
    remaining = discount
    for line_total in totals[:-1]:
        share = (line_total * discount / grand_total).quantize(CENT, rounding=ROUND_HALF_UP)
        share = min(share, line_total, remaining)
        shares.append(share)
        remaining -= share

    last_total = totals[-1]
    if remaining <= last_total:
        shares.append(remaining)
        return shares

    # Residue larger than the last line: push the excess back onto earlier lines
    shares.append(last_total)
    excess = remaining - last_total
    for i in range(len(shares) - 2, -1, -1):
        if excess <= 0:
            break
        room = totals[i] - shares[i]
        take = min(room, excess)
        shares[i] += take
        excess -= take

    return shares
