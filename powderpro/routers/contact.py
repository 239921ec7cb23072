import logging
import smtplib

from fastapi import APIRouter, Depends, HTTPException

from .. import schemas
from ..mailer import ContactMailer, get_mailer

logger = logging.getLogger("powderpro.contact")

router = APIRouter(prefix="/contact", tags=["contact"])


@router.post("")
def submit_contact_form(
    form: schemas.ContactRequest,
    mailer: ContactMailer = Depends(get_mailer),
):
    """Relay a contact form to the shop inbox and confirm to the sender."""
    try:
        mailer.send_contact_form(form.model_dump())
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Error sending contact form from {form.email}: {e}")
        raise HTTPException(status_code=500, detail="Failed to send message")
    return {"message": "Message sent successfully"}
