"""
Discount Engine: bulk quantity tiers plus promo codes.

Bulk tiers are a step function of total item quantity: the highest tier
reached wins, tiers never stack with each other. A promo discount stacks
on top of whichever bulk tier applies.

Discounts apply to the item subtotal only (never to add-on services).
"""

from .price_calculator import round_currency, to_number


class DiscountEngine:
    """Computes discount percentages and amounts for a quote."""

    # (minimum total quantity, percent off): highest first
    BULK_TIERS = [
        (50, 15.0),
        (25, 10.0),
        (10, 5.0),
    ]

    # Exact, case-sensitive codes
    PROMO_CODES = {
        "WELCOME10": 10.0,
    }

    def bulk_discount_percent(self, total_quantity) -> float:
        quantity = to_number(total_quantity)
        for min_quantity, percent in self.BULK_TIERS:
            if quantity >= min_quantity:
                return percent
        return 0.0

    def promo_discount_percent(self, promo_code) -> float:
        if not promo_code:
            return 0.0
        return self.PROMO_CODES.get(promo_code, 0.0)

    def validate_promo(self, promo_code) -> dict:
        """
        Check a promo code as typed by the customer.

        An empty code is simply "no code" and is not an error.
        """
        percent = self.promo_discount_percent(promo_code)
        if not promo_code:
            return {"code": promo_code or "", "valid": True, "percent": 0.0, "error": None}
        if percent > 0:
            return {"code": promo_code, "valid": True, "percent": percent, "error": None}
        return {"code": promo_code, "valid": False, "percent": 0.0, "error": "Invalid promo code"}

    def combined_percent(self, total_quantity, promo_code=None) -> float:
        return self.bulk_discount_percent(total_quantity) + self.promo_discount_percent(promo_code)

    def apply(self, subtotal, total_quantity, promo_code=None) -> dict:
        """
        Build the discount breakdown for a subtotal.

        Returns:
            {
                bulk_percent, bulk_amount,
                promo_code, promo_percent, promo_amount,
                total_percent, amount,
            }
        """
        subtotal = to_number(subtotal)
        bulk_percent = self.bulk_discount_percent(total_quantity)
        promo_percent = self.promo_discount_percent(promo_code)
        total_percent = bulk_percent + promo_percent

        return {
            "bulk_percent": bulk_percent,
            "bulk_amount": round_currency(subtotal * bulk_percent / 100.0),
            "promo_code": promo_code if promo_percent > 0 else None,
            "promo_percent": promo_percent,
            "promo_amount": round_currency(subtotal * promo_percent / 100.0),
            "total_percent": total_percent,
            "amount": round_currency(subtotal * total_percent / 100.0),
        }

    def tiers(self) -> list:
        """Bulk tiers lowest first, for display."""
        return [
            {"min_quantity": min_quantity, "percent": percent}
            for min_quantity, percent in sorted(self.BULK_TIERS)
        ]
