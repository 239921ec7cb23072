import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user, require_admin
from ..database import get_db
from ..price_calculator import Dimensions, PriceCalculatorConfig, calculate_price, calculate_total_area, round_currency
from ..pricing_config import get_pricing_config
from ..quote_status import (
    QuoteStatus,
    is_cancellable,
    is_editable,
    next_status,
    previous_status,
    status_label,
)
from ..quote_totals import QuoteTotalsBuilder

logger = logging.getLogger("powderpro.quotes")

router = APIRouter(prefix="/quotes", tags=["quotes"])


def generate_quote_number(db: Session) -> str:
    last_id = db.query(func.max(models.Quote.id)).scalar() or 0
    year = datetime.utcnow().year
    return f"PP-{year}-{str(last_id + 1).zfill(4)}"


def build_quote_items(items: List[schemas.QuoteItemIn], config: PriceCalculatorConfig) -> List[models.QuoteItem]:
    """
    Turn submitted items into QuoteItem rows.

    An item with no explicit unit price is priced from its dimensions using
    the current pricing config (0 until all dimensions are known).
    """
    rows = []
    for item in items:
        dimensions = Dimensions.from_raw(item.height, item.width, item.depth)
        area = calculate_total_area(dimensions.height, dimensions.width, dimensions.depth)
        if item.price is not None:
            price = round_currency(item.price)
        else:
            price = calculate_price(dimensions, config)
        rows.append(models.QuoteItem(
            item_type=item.item_type,
            size=item.size,
            description=item.description,
            quantity=item.quantity,
            price=price,
            height=item.height,
            width=item.width,
            depth=item.depth,
            surface_area=round(area, 4) if area else None,
            line_total=round_currency(price * item.quantity),
        ))
    return rows


def calculate_totals(quote: models.Quote) -> dict:
    """Recompute subtotal, add-ons, discounts and total from the quote's items."""
    totals = QuoteTotalsBuilder().build(
        [{"price": i.price, "quantity": i.quantity} for i in quote.items],
        quote.additional_services or {},
        quote.promo_code,
    )
    quote.subtotal = totals["subtotal"]
    quote.services_total = totals["services_total"]
    quote.discount_percent = totals["discount_percent"]
    quote.discount_amount = totals["discount_amount"]
    quote.total = totals["total"]
    return totals


def _get_quote(quote_id: int, db: Session) -> models.Quote:
    quote = db.query(models.Quote).filter(models.Quote.id == quote_id).first()
    if not quote:
        raise HTTPException(status_code=404, detail="Quote not found")
    return quote


def get_visible_quote(quote_id: int, user: models.User, db: Session) -> models.Quote:
    """Quote owned by the user, or any quote for an admin."""
    quote = _get_quote(quote_id, db)
    if quote.user_id != user.id and not user.is_admin:
        raise HTTPException(status_code=403, detail="Not your quote")
    return quote


def _set_status(quote: models.Quote, new_status: QuoteStatus, user: models.User):
    old_status = quote.status
    quote.status = new_status
    quote.updated_at = datetime.utcnow()
    quote.updated_by = user.email
    logger.info(f"Quote {quote.quote_number}: {old_status.value if old_status else None} -> {new_status.value} by {user.email}")


# --- Endpoints ---

@router.post("/")
def create_quote(
    request: schemas.QuoteCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    config: PriceCalculatorConfig = Depends(get_pricing_config),
):
    if request.status not in (QuoteStatus.DRAFT, QuoteStatus.PENDING):
        raise HTTPException(status_code=400, detail="New quotes must be draft or pending")

    quote = models.Quote(
        quote_number=generate_quote_number(db),
        user_id=current_user.id,
        status=request.status,
        coating_type=request.coating.type,
        coating_color=request.coating.color,
        coating_finish=request.coating.finish,
        additional_services=request.additional_services,
        promo_code=request.promo_code or None,
        contact_name=request.contact_info.name,
        contact_email=request.contact_info.email,
        contact_phone=request.contact_info.phone,
        contact_notes=request.contact_info.notes,
    )
    quote.items = build_quote_items(request.items, config)
    calculate_totals(quote)

    db.add(quote)
    db.commit()
    db.refresh(quote)
    logger.info(f"Quote {quote.quote_number} created by {current_user.email}: total {quote.total:.2f}")
    return quote_to_dict(quote)


@router.get("/mine")
def list_my_quotes(
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """List quotes for the authenticated user, newest first."""
    quotes = db.query(models.Quote).filter(
        models.Quote.user_id == current_user.id,
    ).order_by(models.Quote.id.desc()).offset(skip).limit(limit).all()
    return [quote_to_dict(q) for q in quotes]


@router.get("/")
def list_quotes(
    status: Optional[QuoteStatus] = None,
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    """All quotes (admin dashboard), newest first, optionally filtered by status."""
    query = db.query(models.Quote)
    if status:
        query = query.filter(models.Quote.status == status)
    quotes = query.order_by(models.Quote.id.desc()).offset(skip).limit(limit).all()
    return [quote_to_dict(q) for q in quotes]


@router.get("/{quote_id}")
def get_quote(
    quote_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    return quote_to_dict(get_visible_quote(quote_id, current_user, db))


@router.patch("/{quote_id}")
def update_quote(
    quote_id: int,
    update: schemas.QuoteUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    config: PriceCalculatorConfig = Depends(get_pricing_config),
):
    """Edit a quote. Customers can only edit while it is draft or pending."""
    quote = get_visible_quote(quote_id, current_user, db)
    if not current_user.is_admin and not is_editable(quote.status):
        raise HTTPException(
            status_code=400,
            detail=f"Quote can no longer be edited (status: {status_label(quote.status)})",
        )

    data = update.model_dump(exclude_unset=True)
    if update.items is not None:
        quote.items = build_quote_items(update.items, config)
    if update.coating is not None:
        quote.coating_type = update.coating.type
        quote.coating_color = update.coating.color
        quote.coating_finish = update.coating.finish
    if update.contact_info is not None:
        quote.contact_name = update.contact_info.name
        quote.contact_email = update.contact_info.email
        quote.contact_phone = update.contact_info.phone
        quote.contact_notes = update.contact_info.notes
    if "additional_services" in data:
        quote.additional_services = update.additional_services or {}
    if "promo_code" in data:
        quote.promo_code = update.promo_code or None

    calculate_totals(quote)
    quote.updated_at = datetime.utcnow()
    quote.updated_by = current_user.email
    db.commit()
    db.refresh(quote)
    return quote_to_dict(quote)


@router.post("/{quote_id}/cancel")
def cancel_quote(
    quote_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    quote = get_visible_quote(quote_id, current_user, db)
    if not is_cancellable(quote.status):
        raise HTTPException(
            status_code=400,
            detail=f"Quote can no longer be cancelled (status: {status_label(quote.status)})",
        )
    _set_status(quote, QuoteStatus.CANCELLED, current_user)
    db.commit()
    db.refresh(quote)
    return quote_to_dict(quote)


@router.put("/{quote_id}/status")
def update_status(
    quote_id: int,
    update: schemas.StatusUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    quote = _get_quote(quote_id, db)
    _set_status(quote, update.status, admin)
    if update.tracking_number is not None:
        quote.tracking_number = update.tracking_number
    db.commit()
    db.refresh(quote)
    return quote_to_dict(quote)


@router.post("/{quote_id}/advance")
def advance_status(
    quote_id: int,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    """Move the quote one step forward along the shop workflow."""
    quote = _get_quote(quote_id, db)
    new_status = next_status(quote.status)
    if new_status is None:
        raise HTTPException(
            status_code=400,
            detail=f"No next status after {status_label(quote.status)}",
        )
    _set_status(quote, new_status, admin)
    db.commit()
    db.refresh(quote)
    return quote_to_dict(quote)


@router.post("/{quote_id}/revert")
def revert_status(
    quote_id: int,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    quote = _get_quote(quote_id, db)
    new_status = previous_status(quote.status)
    if new_status is None:
        raise HTTPException(
            status_code=400,
            detail=f"No previous status before {status_label(quote.status)}",
        )
    _set_status(quote, new_status, admin)
    db.commit()
    db.refresh(quote)
    return quote_to_dict(quote)


@router.delete("/{quote_id}")
def delete_quote(
    quote_id: int,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    quote = _get_quote(quote_id, db)
    db.delete(quote)
    db.commit()
    return {"ok": True}


def quote_to_dict(q: models.Quote) -> dict:
    status = QuoteStatus(q.status) if q.status else QuoteStatus.PENDING
    return {
        "id": q.id,
        "quote_number": q.quote_number,
        "user_id": q.user_id,
        "status": status.value,
        "status_label": status_label(status),
        "editable": is_editable(status),
        "cancellable": is_cancellable(status),
        "coating": {
            "type": q.coating_type,
            "color": q.coating_color,
            "finish": q.coating_finish,
        },
        "additional_services": q.additional_services or {},
        "promo_code": q.promo_code,
        "contact_info": {
            "name": q.contact_name,
            "email": q.contact_email,
            "phone": q.contact_phone,
            "notes": q.contact_notes,
        },
        "items": [_item_to_dict(i) for i in q.items],
        "subtotal": q.subtotal,
        "services_total": q.services_total,
        "discount_percent": q.discount_percent,
        "discount_amount": q.discount_amount,
        "total": q.total,
        "tracking_number": q.tracking_number,
        "created_at": q.created_at.isoformat() if q.created_at else None,
        "updated_at": q.updated_at.isoformat() if q.updated_at else None,
        "updated_by": q.updated_by,
    }


def _item_to_dict(i: models.QuoteItem) -> dict:
    return {
        "id": i.id,
        "item_type": i.item_type,
        "size": i.size,
        "description": i.description,
        "quantity": i.quantity,
        "price": i.price,
        "height": i.height,
        "width": i.width,
        "depth": i.depth,
        "surface_area": i.surface_area,
        "line_total": i.line_total,
    }
