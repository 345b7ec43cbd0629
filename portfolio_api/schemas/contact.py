"""
Схемы для контактной формы.
"""
from pydantic import BaseModel, EmailStr, Field


class ContactForm(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    subject: str | None = None
    message: str = Field(min_length=1)


class ContactResponse(BaseModel):
    success: bool = True
    message: str
