"""
Контент секций сайта. Ключ — имя секции, а не ObjectId; запись — всегда upsert.
"""
import logging
from typing import Any

from portfolio_api.core.database import PORTFOLIO_CONTENT, MongoStore
from portfolio_api.repositories.base import Clock, utcnow
from portfolio_api.schemas.portfolio_content import PortfolioContent, decode_content

logger = logging.getLogger(__name__)


class PortfolioContentRepository:
    collection = PORTFOLIO_CONTENT

    def __init__(self, store: MongoStore, clock: Clock = utcnow):
        self.store = store
        self.clock = clock

    def _to_model(self, doc: dict) -> PortfolioContent:
        content = decode_content(doc.get("content"))
        if not isinstance(content, dict):
            logger.warning("Section %s has unreadable content, serving it empty", doc.get("section"))
            content = {}
        return PortfolioContent(
            id=str(doc["_id"]),
            section=doc["section"],
            content=content,
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def list(self) -> list[PortfolioContent]:
        return [self._to_model(doc) for doc in self.store.find_many(self.collection)]

    def get(self, section: str) -> PortfolioContent | None:
        doc = self.store.find_one(self.collection, {"section": section})
        return self._to_model(doc) if doc else None

    def upsert(self, section: str, content: dict[str, Any]) -> PortfolioContent:
        """Создать секцию или перезаписать её content. created_at ставится только при создании."""
        now = self.clock()
        doc = self.store.update_one(
            self.collection,
            {"section": section},
            {"content": content, "updated_at": now},
            upsert=True,
            on_insert={"created_at": now},
        )
        return self._to_model(doc)
