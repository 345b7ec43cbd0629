"""
Контактная форма сайта: проверяем поля и пересылаем письмо владельцу.
"""
from fastapi import APIRouter, HTTPException

from portfolio_api.core.mailer import send_contact_email
from portfolio_api.schemas.common import ErrorResponse
from portfolio_api.schemas.contact import ContactForm, ContactResponse

router = APIRouter(prefix="/api", tags=["contact"])


@router.post(
    "/contact",
    response_model=ContactResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def contact(form: ContactForm):
    if not send_contact_email(form):
        raise HTTPException(
            500,
            detail={"error": "email_failed", "message": "Failed to send message. Please try again later."},
        )
    return ContactResponse(message="Message sent successfully! I'll get back to you soon.")
