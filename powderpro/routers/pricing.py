"""
Pricing endpoints: live estimates, quote totals, and the admin pricing config.

Every calculation resolves the current config once (get_pricing_config) and
hands it to the pure functions in price_calculator.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import require_admin
from ..config import settings
from ..database import get_db
from ..discounts import DiscountEngine
from ..price_calculator import Dimensions, PriceCalculatorConfig, estimate
from ..pricing_config import PricingConfigStore, get_pricing_config, get_pricing_config_store
from ..quote_totals import QuoteTotalsBuilder

logger = logging.getLogger("powderpro.pricing")

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("/estimate")
def estimate_price(
    request: schemas.DimensionsIn,
    config: PriceCalculatorConfig = Depends(get_pricing_config),
):
    """Surface area and both price formulas for one item."""
    dimensions = Dimensions.from_raw(request.height, request.width, request.depth)
    return estimate(dimensions, config, unit=settings.DIMENSION_UNIT)


@router.post("/quote-total")
def quote_total(request: schemas.QuoteTotalRequest):
    items = [item.model_dump() for item in request.items]
    return QuoteTotalsBuilder().build(items, request.additional_services, request.promo_code)


@router.get("/discount-tiers")
def discount_tiers():
    engine = DiscountEngine()
    return {
        "bulk_tiers": engine.tiers(),
        "addon_prices": QuoteTotalsBuilder.ADDON_PRICES,
    }


@router.post("/promo/validate")
def validate_promo(request: schemas.PromoValidateRequest):
    return DiscountEngine().validate_promo(request.code)


@router.get("/config")
def get_config(config: PriceCalculatorConfig = Depends(get_pricing_config)):
    return {**config.to_dict(), "unit": settings.DIMENSION_UNIT}


@router.patch("/config")
def update_config(
    update: schemas.PriceConfigUpdate,
    store: PricingConfigStore = Depends(get_pricing_config_store),
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Merge a partial config update. Takes effect for the next calculation.

    Non-numeric values become 0; no bounds are enforced.
    """
    changes = update.model_dump(exclude_unset=True)
    config, applied, previous_values = store.update(changes)

    if applied:
        db.add(models.PricingConfigChange(
            user_id=admin.id,
            user_email=admin.email,
            action="update",
            changes=applied,
            previous_values=previous_values,
        ))
        db.commit()
        logger.info(f"Pricing config changed by {admin.email}: {applied}")

    return {**config.to_dict(), "unit": settings.DIMENSION_UNIT}


@router.post("/config/reset")
def reset_config(
    store: PricingConfigStore = Depends(get_pricing_config_store),
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    previous = store.get().to_dict()
    config = store.reset()
    db.add(models.PricingConfigChange(
        user_id=admin.id,
        user_email=admin.email,
        action="reset",
        changes=config.to_dict(),
        previous_values=previous,
    ))
    db.commit()
    return {**config.to_dict(), "unit": settings.DIMENSION_UNIT}


@router.get("/config/history")
def config_history(
    limit: int = 50,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    entries = db.query(models.PricingConfigChange).order_by(
        models.PricingConfigChange.id.desc()
    ).limit(limit).all()
    return [
        {
            "id": e.id,
            "action": e.action,
            "user_email": e.user_email,
            "changes": e.changes,
            "previous_values": e.previous_values,
            "created_at": e.created_at.isoformat() if e.created_at else None,
        }
        for e in entries
    ]
