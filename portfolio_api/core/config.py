"""
Конфигурация приложения из переменных окружения.

Один класс Settings (pydantic-settings), все секреты и настройки читаются из .env.
В коде используем только settings.*, не os.getenv.
JWT_SECRET и ADMIN_INITIAL_PASSWORD обязательны: без них приложение не стартует.
"""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Заглушки, которые нельзя использовать как реальный секрет
_PLACEHOLDER_SECRETS = {
    "change-me-in-production",
    "your-secret-key-change-this",
    "secret",
}


class Settings(BaseSettings):
    """Настройки из env."""

    # MongoDB
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "portfolio"
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 30_000
    MONGO_SOCKET_TIMEOUT_MS: int = 45_000

    # CORS: список origin через запятую в .env
    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173"

    # Rate limit для логина и контактной формы (например, "20/minute")
    RATE_LIMIT: str = "20/minute"
    # IP клиента из X-Forwarded-For — только за доверенным reverse proxy
    TRUST_FORWARDED_FOR: bool = False

    # Логирование
    LOG_LEVEL: str = "INFO"

    # JWT
    JWT_SECRET: str = Field(min_length=32)
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 24  # 24 часа

    # Пароли
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    # Администратор, создаваемый при первом старте
    ADMIN_USERNAME: str = "admin"
    ADMIN_INITIAL_PASSWORD: str = Field(min_length=8)
    FORCE_PASSWORD_ROTATION: bool = True

    # SMTP для контактной формы
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    SMTP_TIMEOUT: int = 30
    FROM_EMAIL: str = ""
    CONTACT_RECIPIENT: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("JWT_SECRET")
    @classmethod
    def _reject_placeholder_secret(cls, value: str) -> str:
        if value.strip().lower() in _PLACEHOLDER_SECRETS:
            raise ValueError("JWT_SECRET must be a real secret, not a placeholder")
        return value

    def cors_list(self) -> list[str]:
        """CORS origins как список для CORSMiddleware."""
        return [x.strip() for x in self.CORS_ORIGINS.split(",") if x.strip()]

    def rate_limit_parsed(self) -> tuple[int, int]:
        """RATE_LIMIT разобрать в (max_requests, window_seconds). Пример: '20/minute' -> (20, 60)."""
        s = self.RATE_LIMIT.strip().lower().replace(" ", "")
        if "/" not in s:
            return 20, 60
        part, window = s.split("/", 1)
        try:
            max_req = int(part)
        except ValueError:
            return 20, 60
        if window in ("minute", "min", "m"):
            return max_req, 60
        if window in ("hour", "h"):
            return max_req, 3600
        if window in ("second", "sec", "s"):
            return max_req, 1
        return max_req, 60

    def contact_recipient(self) -> str:
        """Куда пересылать сообщения с сайта: CONTACT_RECIPIENT или FROM_EMAIL."""
        return self.CONTACT_RECIPIENT or self.FROM_EMAIL


# Глобальный экземпляр — импортируй: from portfolio_api.core.config import settings
settings = Settings()
