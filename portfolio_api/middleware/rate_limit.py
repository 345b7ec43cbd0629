"""
Rate limit по IP для публичных POST-эндпоинтов, которые легко заспамить:
логин (перебор паролей) и контактная форма.

Лимит задаётся в config: RATE_LIMIT (например, "20/minute").
При превышении — 429 и структурированный ответ ErrorResponse.
X-Forwarded-For учитывается только при TRUST_FORWARDED_FOR=true (приложение за прокси).
"""
import logging
import time
from functools import partial
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from portfolio_api.core.config import settings
from portfolio_api.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

LIMITED_ROUTES = frozenset({
    ("POST", "/api/auth/login"),
    ("POST", "/api/contact"),
})


def _get_client_ip(request: Request, trust_forwarded_for: bool = False) -> str:
    """IP клиента: X-Forwarded-For (первый, если доверяем прокси) или request.client.host."""
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Счётчик запросов по (IP, маршрут) в фиксированном окне; сверх лимита — 429."""

    def __init__(
        self,
        app,
        key_func: Callable[[Request], str] | None = None,
        max_requests: int | None = None,
        window_seconds: int | None = None,
        routes: frozenset[tuple[str, str]] = LIMITED_ROUTES,
        trust_forwarded_for: bool | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(app)
        if trust_forwarded_for is None:
            trust_forwarded_for = settings.TRUST_FORWARDED_FOR
        self.key_func = key_func or partial(_get_client_ip, trust_forwarded_for=trust_forwarded_for)
        default_max, default_window = settings.rate_limit_parsed()
        self.max_requests = max_requests or default_max
        self.window_seconds = window_seconds or default_window
        self.routes = routes
        self.clock = clock
        # (ip, path) -> (count, window_start)
        self._storage: dict[tuple[str, str], tuple[int, float]] = {}
        self._next_sweep = clock() + self.window_seconds

    def _evict_expired(self, now: float) -> None:
        """Выбросить ключи с истёкшим окном; не чаще раза за окно."""
        if now < self._next_sweep:
            return
        expired = [key for key, (_, start) in self._storage.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._storage[key]
        self._next_sweep = now + self.window_seconds

    async def dispatch(self, request: Request, call_next):
        path = request.url.path.rstrip("/") or "/"
        if (request.method, path) not in self.routes:
            return await call_next(request)

        now = self.clock()
        self._evict_expired(now)
        key = (self.key_func(request), path)
        count, start = self._storage.get(key, (0, now))
        if now - start >= self.window_seconds:
            count, start = 0, now
        count += 1
        self._storage[key] = (count, start)
        if count > self.max_requests:
            logger.warning("Rate limit exceeded for %s on %s", key[0], path)
            body = ErrorResponse(
                error="rate_limit_exceeded",
                message=f"Too many requests. Limit: {self.max_requests} per {self.window_seconds}s.",
            )
            return JSONResponse(status_code=429, content=body.model_dump(exclude_none=True))
        return await call_next(request)
