"""
Quote Total Aggregator: item subtotal, add-on services, discounts, total.

    subtotal       = Σ price × quantity
    services_total = flat fee per selected add-on
    discount       = subtotal × (bulk% + promo%) / 100
    total          = subtotal + services_total − discount

Every monetary value is rounded to cents; the total is computed from the
rounded components so the displayed lines always add up.
"""

from .discounts import DiscountEngine
from .price_calculator import round_currency, to_number


class QuoteTotalsBuilder:
    """Builds the totals section for a quote from its items and options."""

    # Flat surcharges per add-on service flag
    ADDON_PRICES = {
        "sandblasting": 50.00,
        "priming": 35.00,
    }

    def __init__(self, discount_engine: DiscountEngine = None):
        self.discount_engine = discount_engine or DiscountEngine()

    def build(self, items: list, additional_services: dict = None, promo_code: str = None) -> dict:
        """
        Args:
            items: list of {price, quantity} dicts (extra keys ignored)
            additional_services: {service_name: bool}; unknown services cost nothing
            promo_code: optional promo code string

        Returns:
            {
                item_count, total_quantity, subtotal,
                services: [{name, price}], services_total,
                discount: DiscountEngine.apply(...) breakdown,
                discount_percent, discount_amount, total,
            }
        """
        subtotal = round_currency(self._item_subtotal(items))
        total_quantity = self._total_quantity(items)
        services = self._selected_services(additional_services or {})
        services_total = round_currency(sum(s["price"] for s in services))

        discount = self.discount_engine.apply(subtotal, total_quantity, promo_code)

        total = round_currency(subtotal + services_total - discount["amount"])

        return {
            "item_count": len(items),
            "total_quantity": total_quantity,
            "subtotal": subtotal,
            "services": services,
            "services_total": services_total,
            "discount": discount,
            "discount_percent": discount["total_percent"],
            "discount_amount": discount["amount"],
            "total": total,
        }

    def _item_subtotal(self, items: list) -> float:
        return sum(to_number(i.get("price")) * to_number(i.get("quantity")) for i in items)

    def _total_quantity(self, items: list) -> float:
        total = sum(to_number(i.get("quantity")) for i in items)
        return int(total) if float(total).is_integer() else total

    def _selected_services(self, additional_services: dict) -> list:
        return [
            {"name": name, "price": price}
            for name, price in self.ADDON_PRICES.items()
            if additional_services.get(name)
        ]
