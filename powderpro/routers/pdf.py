"""
PDF download endpoint.

GET /api/quotes/{quote_id}/pdf: quote document for the owner or an admin.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from .. import models
from ..auth import get_current_user
from ..config import settings
from ..database import get_db
from ..pdf_generator import generate_quote_pdf
from .quotes import get_visible_quote, quote_to_dict

router = APIRouter(prefix="/quotes", tags=["pdf"])


@router.get("/{quote_id}/pdf")
def download_pdf(
    quote_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    quote = get_visible_quote(quote_id, current_user, db)
    company = {
        "name": settings.COMPANY_NAME,
        "email": settings.COMPANY_EMAIL,
        "phone": settings.COMPANY_PHONE,
    }

    # Convert bytearray to bytes for Response compatibility
    pdf_bytes = bytes(generate_quote_pdf(quote_to_dict(quote), company))

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="Quote-{quote.quote_number}.pdf"',
        },
    )
