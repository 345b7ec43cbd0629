"""
Точка входа FastAPI.

lifespan: создание хранилища MongoDB, индексы и администратор по умолчанию при старте,
закрытие соединения при остановке.
CORS, rate limit, exception handlers (структурированные ответы), подключение роутеров.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_api.core.config import settings
from portfolio_api.core.database import DataAccessError, MongoStore
from portfolio_api.core.security import bootstrap_default_admin
from portfolio_api.middleware.rate_limit import RateLimitMiddleware
from portfolio_api.repositories import AdminRepository
from portfolio_api.routers import auth, contact, experiences, health, portfolio_content, projects
from portfolio_api.schemas.common import ErrorResponse, FieldError

# Логирование
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл: при старте — хранилище и bootstrap, при остановке — закрыть соединение."""
    if app.state.store is None:
        app.state.store = MongoStore()
    store: MongoStore = app.state.store
    logger.info("Starting up: preparing MongoDB indexes and admin account...")
    store.ensure_indexes()
    bootstrap_default_admin(AdminRepository(store))
    yield
    logger.info("Shutting down: closing MongoDB...")
    store.close()


def _error(status_code: int, error: str, message: str, **kwargs) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, **kwargs)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _field_name(loc) -> str:
    parts = [str(p) for p in loc if p != "body"]
    return ".".join(parts) or "body"


def register_exception_handlers(app: FastAPI) -> None:
    # Обработчик неожиданных исключений — структурированный ответ, без деталей наружу
    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s: %s", request.url.path, exc)
        return _error(500, "internal_server_error", "An unexpected error occurred")

    @app.exception_handler(DataAccessError)
    async def data_access_exception_handler(request: Request, exc: DataAccessError):
        logger.error("Data access failed on %s %s: %s", request.method, request.url.path, exc)
        return _error(500, "data_access_failed", "Data access failed")

    # HTTPException (и наши, и 404/405 самого роутинга) — структурированный ответ
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail
        if isinstance(detail, dict) and "error" in detail and "message" in detail:
            body = ErrorResponse(error=detail["error"], message=detail["message"])
        else:
            body = ErrorResponse(error="request_failed", message=str(detail) if detail else "Request failed")
        return JSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(exclude_none=True),
            headers=getattr(exc, "headers", None),
        )

    # Ошибки валидации — 400 с разбором по полям
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            FieldError(field=_field_name(e.get("loc", ())), message=e.get("msg", "Invalid value"))
            for e in exc.errors()
        ]
        return _error(400, "validation_error", "Invalid input", errors=errors)


def create_app(store: MongoStore | None = None) -> FastAPI:
    """Собрать приложение. store передают тесты; иначе он создаётся из settings в lifespan."""
    application = FastAPI(
        title="Portfolio API",
        description="Контент сайта-портфолио и админка. Ошибки: {success: false, error, message}.",
        version="1.0.0",
        lifespan=lifespan,
    )
    application.state.store = store

    # CORS — список origins из конфига (добавляем первым, выполняется после rate limit)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Rate limit по IP на логин и контактную форму (RATE_LIMIT из config)
    application.add_middleware(RateLimitMiddleware)

    register_exception_handlers(application)

    application.include_router(health.router)
    application.include_router(auth.router)
    application.include_router(portfolio_content.router)
    application.include_router(projects.router)
    application.include_router(experiences.router)
    application.include_router(contact.router)
    return application


app = create_app()
