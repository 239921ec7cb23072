"""
Runtime pricing configuration: the admin-editable PriceCalculatorConfig.

The store only hands out immutable snapshots. Calculations never read the
store themselves: the API resolves a snapshot per request (get_pricing_config)
and passes it into the pure functions in price_calculator.
"""

from fastapi import Depends

from .config import settings
from .price_calculator import CONFIG_FIELDS, PriceCalculatorConfig


def default_config() -> PriceCalculatorConfig:
    return PriceCalculatorConfig(
        price_per_unit_area=settings.PRICE_PER_UNIT_AREA,
        difficulty_percentage=settings.DIFFICULTY_PERCENTAGE,
        material_multiplier=settings.MATERIAL_MULTIPLIER,
    )


class PricingConfigStore:
    """In-memory holder of the current config. Last write wins."""

    def __init__(self, defaults: PriceCalculatorConfig = None):
        self._defaults = defaults or default_config()
        self._current = self._defaults

    def get(self) -> PriceCalculatorConfig:
        return self._current

    def update(self, changes: dict) -> tuple:
        """
        Merge a partial update into the current config.

        Returns (new_config, applied_changes, previous_values). Only known
        fields are applied; nothing is bounds-checked.
        """
        previous = self._current
        updated = previous.merge(changes)
        applied = {f: getattr(updated, f) for f in CONFIG_FIELDS if f in changes}
        previous_values = {f: getattr(previous, f) for f in applied}
        self._current = updated
        return updated, applied, previous_values

    def reset(self) -> PriceCalculatorConfig:
        self._current = self._defaults
        return self._current


pricing_config_store = PricingConfigStore()


def get_pricing_config_store() -> PricingConfigStore:
    return pricing_config_store


def get_pricing_config(
    store: PricingConfigStore = Depends(get_pricing_config_store),
) -> PriceCalculatorConfig:
    """FastAPI dependency: snapshot of the config for this request."""
    return store.get()
