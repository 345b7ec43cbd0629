"""
Health check: жив ли сервис, доступна ли БД.

Эндпоинт для оркестраторов (Docker, k8s) и мониторинга.
"""
import logging

from fastapi import APIRouter, Depends

from portfolio_api.core.database import MongoStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health(store: MongoStore = Depends(get_store)) -> dict:
    """Проверка живости сервиса и MongoDB."""
    try:
        store.ping()
        mongo = "connected"
    except Exception as exc:
        logger.warning("Health check: MongoDB ping failed: %s", exc)
        mongo = "disconnected"
    return {"status": "ok", "mongo": mongo}
