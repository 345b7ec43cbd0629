"""
Авторизация администратора: логин по паролю, смена пароля, проверка токена.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from portfolio_api.core.database import MongoStore, get_store
from portfolio_api.core.security import (
    Principal,
    get_current_admin,
    hash_password,
    issue_token,
    verify_password,
)
from portfolio_api.repositories import AdminRepository
from portfolio_api.schemas.auth import (
    ChangePasswordRequest,
    ChangePasswordResponse,
    LoginRequest,
    LoginResponse,
    VerifyResponse,
)
from portfolio_api.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

INVALID_CREDENTIALS = {"error": "invalid_credentials", "message": "Invalid credentials"}


def get_repository(store: MongoStore = Depends(get_store)) -> AdminRepository:
    return AdminRepository(store)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
def login(data: LoginRequest, admins: AdminRepository = Depends(get_repository)):
    """Вход по username/паролю. Неверный логин и неверный пароль неразличимы для клиента."""
    admin = admins.get_by_username(data.username)
    if admin is None or not verify_password(data.password, admin.password_hash):
        logger.info("Failed login attempt for %r", data.username)
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    admins.record_login(admin.id)
    token = issue_token(admin.id, admin.username, must_change_password=admin.must_change_password)
    return LoginResponse(
        token=token,
        username=admin.username,
        must_change_password=admin.must_change_password,
    )


@router.post(
    "/change-password",
    response_model=ChangePasswordResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def change_password(
    data: ChangePasswordRequest,
    admins: AdminRepository = Depends(get_repository),
    principal: Principal = Depends(get_current_admin),
):
    """Смена пароля. Доступна и до обязательной ротации — иначе её не пройти."""
    admin = admins.get_by_username(principal.username)
    if admin is None:
        raise HTTPException(404, detail={"error": "not_found", "message": "Admin not found"})

    if not verify_password(data.current_password, admin.password_hash):
        raise HTTPException(400, detail={"error": "invalid_password", "message": "Current password is incorrect"})
    if data.new_password == data.current_password:
        raise HTTPException(
            400,
            detail={"error": "invalid_password", "message": "New password must differ from the current one"},
        )

    admins.set_password(admin.id, hash_password(data.new_password))
    logger.info("Admin %r changed password", admin.username)
    return ChangePasswordResponse(
        message="Password changed successfully",
        token=issue_token(admin.id, admin.username),
    )


@router.get("/verify", response_model=VerifyResponse, responses={401: {"model": ErrorResponse}})
def verify(principal: Principal = Depends(get_current_admin)):
    return VerifyResponse(username=principal.username)
