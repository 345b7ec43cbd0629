"""
Безопасность: хеширование паролей, JWT-токены администратора и зависимости авторизации.

verify_token не бросает исключений — возвращает TokenValid или TokenInvalid,
а 401/403 формируют зависимости get_current_admin / require_admin.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from jose.utils import base64url_decode, base64url_encode
from passlib.context import CryptContext

from portfolio_api.core.config import settings
from portfolio_api.repositories.admins import AdminRepository

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Аутентифицированный администратор, извлечённый из токена."""

    admin_id: str
    username: str
    must_change_password: bool = False


@dataclass(frozen=True)
class TokenValid:
    principal: Principal


@dataclass(frozen=True)
class TokenInvalid:
    reason: str


TokenResult = TokenValid | TokenInvalid


def hash_password(password: str) -> str:
    """Хешировать пароль (bcrypt с солью)."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверить пароль."""
    return pwd_context.verify(plain_password, hashed_password)


def issue_token(
    admin_id: str,
    username: str,
    *,
    must_change_password: bool = False,
    issued_at: datetime | None = None,
) -> str:
    """Создать access token на JWT_EXPIRE_MINUTES (24 часа по умолчанию)."""
    iat = issued_at or datetime.now(timezone.utc)
    to_encode = {
        "sub": admin_id,
        "username": username,
        "mcp": must_change_password,
        "type": "access",
        "iat": iat,
        "exp": iat + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def _is_canonical(token: str) -> bool:
    """
    Каждый сегмент — каноничный base64url без паддинга.

    Декодер jose игнорирует младшие биты последнего символа сегмента,
    поэтому без этой проверки часть правок в конце подписи проходит.
    """
    segments = token.split(".")
    if len(segments) != 3:
        return False
    for segment in segments:
        try:
            raw = segment.encode("ascii")
            if base64url_encode(base64url_decode(raw)) != raw:
                return False
        except ValueError:
            return False
    return True


def verify_token(token: str) -> TokenResult:
    """Проверить подпись и срок действия токена."""
    if not _is_canonical(token):
        return TokenInvalid(reason="malformed token")
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        return TokenInvalid(reason=str(exc) or "invalid token")
    if payload.get("type") != "access":
        return TokenInvalid(reason="wrong token type")
    admin_id = payload.get("sub")
    username = payload.get("username")
    if not admin_id or not username:
        return TokenInvalid(reason="missing claims")
    return TokenValid(
        Principal(
            admin_id=admin_id,
            username=username,
            must_change_password=bool(payload.get("mcp", False)),
        )
    )


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": "unauthorized", "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """
    Dependency: администратор из заголовка Authorization: Bearer <token>.
    Без токена или с невалидным токеном — 401.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("No token provided")

    result = verify_token(credentials.credentials)
    if isinstance(result, TokenInvalid):
        logger.info("Rejected bearer token: %s", result.reason)
        raise _unauthorized("Invalid token")
    return result.principal


async def require_admin(principal: Principal = Depends(get_current_admin)) -> Principal:
    """Dependency для изменяющих контент роутов: пока пароль не сменён — 403."""
    if settings.FORCE_PASSWORD_ROTATION and principal.must_change_password:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "password_change_required", "message": "Password change required"},
        )
    return principal


def bootstrap_default_admin(admins: AdminRepository) -> None:
    """Создать администратора ADMIN_USERNAME, если его ещё нет. Повторный вызов ничего не делает."""
    if admins.get_by_username(settings.ADMIN_USERNAME):
        return
    admins.create(
        username=settings.ADMIN_USERNAME,
        password_hash=hash_password(settings.ADMIN_INITIAL_PASSWORD),
        must_change_password=True,
    )
    logger.warning(
        "Created admin account %r from ADMIN_INITIAL_PASSWORD; the password must be changed on first login",
        settings.ADMIN_USERNAME,
    )
