"""
Price Calculator: surface-area based powder coating estimates.

Pure math, no I/O. Every calculation takes its pricing configuration as an
argument; the runtime (admin-editable) configuration lives in
pricing_config.PricingConfigStore and is resolved per request by the API.

All dimensions are in inches, so areas are in square inches and
price_per_unit_area is dollars per square inch.

Two price formulas exist and both are kept:
- calculate_price: area × rate, difficulty surcharge, material multiplier
- calculate_size_adjusted_price: area × rate with a large-item surcharge
"""

import math
from dataclasses import asdict, dataclass, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

# Size-adjusted variant: flat rate per sq in and large-item surcharge steps
SIZE_ADJUSTED_BASE_RATE = 0.15
SIZE_SURCHARGE_STEPS = [
    (36.0, 1.5),  # largest dimension > 36" → +50%
    (24.0, 1.3),  # largest dimension > 24" → +30%
]

CONFIG_FIELDS = ("price_per_unit_area", "difficulty_percentage", "material_multiplier")


def to_number(value) -> float:
    """Coerce raw input to a float. Anything non-numeric or non-finite becomes 0.0."""
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


class PriceOutOfRange(ValueError):
    """A computed amount overflowed to infinity (or NaN)."""


def round_currency(amount: float) -> float:
    """
    Round a computed amount to cents, ties half-up.

    Ties round away from zero, so -0.125 becomes -0.13. Raises
    PriceOutOfRange for a non-finite amount instead of pricing it at 0.
    """
    amount = float(amount)
    if not math.isfinite(amount):
        raise PriceOutOfRange(f"Computed amount is out of range: {amount}")
    return float(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Dimensions:
    height: float = 0.0
    width: float = 0.0
    depth: float = 0.0

    @classmethod
    def from_raw(cls, height=None, width=None, depth=None) -> "Dimensions":
        """Build from form input: non-numeric becomes 0, negatives clamp to 0."""
        return cls(
            height=max(to_number(height), 0.0),
            width=max(to_number(width), 0.0),
            depth=max(to_number(depth), 0.0),
        )

    @property
    def largest(self) -> float:
        return max(self.height, self.width, self.depth)

    @property
    def is_complete(self) -> bool:
        """All three dimensions given: otherwise a quote isn't computable yet."""
        return bool(self.height and self.width and self.depth)


@dataclass(frozen=True)
class PriceCalculatorConfig:
    price_per_unit_area: float = SIZE_ADJUSTED_BASE_RATE
    difficulty_percentage: float = 0.0
    material_multiplier: Optional[float] = 1.0

    @property
    def effective_material_multiplier(self) -> float:
        # Unset means 1; an explicit 0 is honored
        if self.material_multiplier is None:
            return 1.0
        return self.material_multiplier

    def merge(self, changes: dict) -> "PriceCalculatorConfig":
        """
        Apply a partial update field by field.

        Unknown keys are ignored. Values are coerced with to_number and
        never bounds-checked: zero and negative rates are accepted.
        """
        updates = {
            field: to_number(value)
            for field, value in changes.items()
            if field in CONFIG_FIELDS
        }
        return replace(self, **updates)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["material_multiplier"] = self.effective_material_multiplier
        return data


def calculate_total_area(height: float, width: float, depth: float) -> float:
    """Total surface area of a rectangular box: 2(hw + wd + hd)."""
    return 2 * (height * width + width * depth + height * depth)


def _cost_steps(dimensions: Dimensions, config: PriceCalculatorConfig) -> tuple:
    area = calculate_total_area(dimensions.height, dimensions.width, dimensions.depth)
    base_cost = area * config.price_per_unit_area
    difficulty_adjusted = base_cost * (1 + config.difficulty_percentage / 100.0)
    final_cost = difficulty_adjusted * config.effective_material_multiplier
    return area, base_cost, difficulty_adjusted, final_cost


def calculate_price(dimensions: Dimensions, config: PriceCalculatorConfig) -> float:
    """
    Price a single item from its dimensions.

    base = area × price_per_unit_area
    difficulty_adjusted = base × (1 + difficulty_percentage/100)
    final = difficulty_adjusted × material_multiplier, rounded to cents
    """
    _, _, _, final_cost = _cost_steps(dimensions, config)
    return round_currency(final_cost)


def size_surcharge_multiplier(largest_dimension: float) -> float:
    for threshold, multiplier in SIZE_SURCHARGE_STEPS:
        if largest_dimension > threshold:
            return multiplier
    return 1.0


def calculate_size_adjusted_price(
    dimensions: Dimensions,
    rate_per_unit_area: float = SIZE_ADJUSTED_BASE_RATE,
) -> float:
    """
    Simplified estimate with a large-item surcharge.

    Returns 0 until all three dimensions are filled in.
    """
    if not dimensions.is_complete:
        return 0.0

    area = calculate_total_area(dimensions.height, dimensions.width, dimensions.depth)
    price = area * rate_per_unit_area * size_surcharge_multiplier(dimensions.largest)
    return round_currency(price)


def estimate(dimensions: Dimensions, config: PriceCalculatorConfig, unit: str = "in") -> dict:
    """Full breakdown of both price formulas for one item."""
    area, base_cost, difficulty_adjusted, _ = _cost_steps(dimensions, config)
    return {
        "dimensions": asdict(dimensions),
        "unit": unit,
        "area": round(area, 4),
        "area_unit": f"sq {unit}",
        "base_cost": round_currency(base_cost),
        "difficulty_adjusted_cost": round_currency(difficulty_adjusted),
        "price": calculate_price(dimensions, config),
        "size_adjusted_price": calculate_size_adjusted_price(dimensions, config.price_per_unit_area),
        "size_surcharge_multiplier": size_surcharge_multiplier(dimensions.largest),
        "computable": area > 0,
        "config": config.to_dict(),
    }
