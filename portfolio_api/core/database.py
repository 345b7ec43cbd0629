"""
Подключение к MongoDB.

MongoStore создаётся явно (main.create_app / lifespan) и живёт в app.state.store.
Клиент поднимается лениво при первом обращении и переиспользуется всеми запросами.
Роутеры получают хранилище через Depends(get_store).
Любая ошибка драйвера превращается в DataAccessError.
"""
import logging
from contextlib import contextmanager
from typing import Any, Iterator

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from portfolio_api.core.config import settings

logger = logging.getLogger(__name__)

ADMINS = "admins"
PROJECTS = "projects"
EXPERIENCES = "experiences"
PORTFOLIO_CONTENT = "portfolio-content"

Sort = list[tuple[str, int]]


class DataAccessError(Exception):
    """Хранилище недоступно или запрос к нему упал."""


def object_id(value: str) -> ObjectId | None:
    """Строка → ObjectId. Невалидный id → None (для вызывающего это «не найдено»)."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


@contextmanager
def _driver_errors(operation: str, collection: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        logger.error("MongoDB %s on %s failed: %s", operation, collection, exc)
        raise DataAccessError(f"{operation} on {collection} failed") from exc


class MongoStore:
    """Обёртка над MongoClient: find/insert/update/delete по имени коллекции."""

    def __init__(
        self,
        uri: str | None = None,
        db_name: str | None = None,
        client: MongoClient | None = None,
    ):
        self.uri = uri or settings.MONGO_URI
        self.db_name = db_name or settings.MONGO_DB_NAME
        self._client = client

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            logger.info("Opening MongoDB connection to database %s", self.db_name)
            self._client = MongoClient(
                self.uri,
                serverSelectionTimeoutMS=settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
                socketTimeoutMS=settings.MONGO_SOCKET_TIMEOUT_MS,
                tz_aware=True,
            )
        return self._client

    @property
    def db(self) -> Database:
        return self.client[self.db_name]

    def collection(self, name: str) -> Collection:
        return self.db[name]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def ping(self) -> None:
        with _driver_errors("ping", "admin"):
            self.client.admin.command("ping")

    def ensure_indexes(self) -> None:
        """Уникальные индексы: admins.username, portfolio_content.section."""
        with _driver_errors("create_index", ADMINS):
            self.collection(ADMINS).create_index([("username", ASCENDING)], unique=True)
        with _driver_errors("create_index", PORTFOLIO_CONTENT):
            self.collection(PORTFOLIO_CONTENT).create_index([("section", ASCENDING)], unique=True)

    def find_one(self, collection: str, filter: dict) -> dict | None:
        with _driver_errors("find_one", collection):
            return self.collection(collection).find_one(filter)

    def find_many(self, collection: str, filter: dict | None = None, sort: Sort | None = None) -> list[dict]:
        with _driver_errors("find", collection):
            cursor = self.collection(collection).find(filter or {})
            if sort:
                cursor = cursor.sort(sort)
            return list(cursor)

    def insert_one(self, collection: str, document: dict) -> dict:
        """Вставить документ и вернуть его в том виде, в каком он лежит в базе (с _id)."""
        with _driver_errors("insert_one", collection):
            coll = self.collection(collection)
            result = coll.insert_one(dict(document))
            return coll.find_one({"_id": result.inserted_id})

    def update_one(
        self,
        collection: str,
        filter: dict,
        fields: dict[str, Any],
        upsert: bool = False,
        on_insert: dict[str, Any] | None = None,
    ) -> dict | None:
        """
        Частичное обновление ($set). Возвращает документ после обновления
        или None, если ничего не совпало и upsert выключен.
        """
        update: dict[str, dict] = {"$set": fields}
        if on_insert:
            update["$setOnInsert"] = on_insert
        with _driver_errors("update_one", collection):
            return self.collection(collection).find_one_and_update(
                filter,
                update,
                upsert=upsert,
                return_document=ReturnDocument.AFTER,
            )

    def delete_one(self, collection: str, filter: dict) -> bool:
        with _driver_errors("delete_one", collection):
            return self.collection(collection).delete_one(filter).deleted_count > 0


def get_store(request: Request) -> MongoStore:
    """Dependency: хранилище, созданное в lifespan."""
    return request.app.state.store
