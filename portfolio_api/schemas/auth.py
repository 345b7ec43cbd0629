"""
Схемы для авторизации администратора.
"""
from pydantic import Field

from portfolio_api.schemas.common import CamelModel


class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginResponse(CamelModel):
    token: str
    username: str
    message: str = "Login successful"
    must_change_password: bool = False


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)


class ChangePasswordResponse(CamelModel):
    """После смены пароля выдаём новый токен без флага обязательной смены."""

    message: str
    token: str


class VerifyResponse(CamelModel):
    valid: bool = True
    username: str
    message: str = "Token is valid"
