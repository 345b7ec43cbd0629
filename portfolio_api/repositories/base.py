"""
Базовый CRUD-репозиторий для сущностей с ObjectId.

Документ в Mongo хранится в snake_case; наружу репозиторий отдаёт Pydantic-модели.
Календарные даты (date) лежат в базе как datetime на полночь UTC.
"""
from datetime import date, datetime, timezone
from typing import Any, Callable, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from portfolio_api.core.database import MongoStore, Sort, object_id

ModelT = TypeVar("ModelT", bound=BaseModel)
Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def encode_value(value: Any) -> Any:
    """date → datetime (BSON не умеет хранить голую дату)."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return value


def decode_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    return value


class DocumentRepository(Generic[ModelT]):
    """list / get / create / update / delete для одной коллекции."""

    collection: ClassVar[str]
    model: ClassVar[type[BaseModel]]
    sort: ClassVar[Sort | None] = None
    # Поля, которые можно явно обнулить через PUT (null). Для остальных null игнорируется.
    nullable_fields: ClassVar[frozenset[str]] = frozenset()
    date_fields: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, store: MongoStore, clock: Clock = utcnow):
        self.store = store
        self.clock = clock

    def _to_model(self, doc: dict) -> ModelT:
        data = {k: v for k, v in doc.items() if k != "_id"}
        for field in self.date_fields:
            if field in data:
                data[field] = decode_date(data[field])
        return self.model(id=str(doc["_id"]), **data)

    def _encode(self, fields: dict[str, Any]) -> dict[str, Any]:
        return {k: encode_value(v) for k, v in fields.items()}

    def list(self) -> list[ModelT]:
        return [self._to_model(doc) for doc in self.store.find_many(self.collection, sort=self.sort)]

    def get(self, doc_id: str) -> ModelT | None:
        oid = object_id(doc_id)
        if oid is None:
            return None
        doc = self.store.find_one(self.collection, {"_id": oid})
        return self._to_model(doc) if doc else None

    def create(self, data: BaseModel) -> ModelT:
        now = self.clock()
        doc = self._encode(data.model_dump())
        doc["created_at"] = now
        doc["updated_at"] = now
        return self._to_model(self.store.insert_one(self.collection, doc))

    def update(self, doc_id: str, data: BaseModel) -> ModelT | None:
        """Частичное обновление: пишем только переданные поля, updated_at — всегда."""
        oid = object_id(doc_id)
        if oid is None:
            return None
        fields = {
            k: v
            for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k in self.nullable_fields
        }
        fields = self._encode(fields)
        fields["updated_at"] = self.clock()
        doc = self.store.update_one(self.collection, {"_id": oid}, fields)
        return self._to_model(doc) if doc else None

    def delete(self, doc_id: str) -> None:
        """Удаление без проверки существования: повторный DELETE тоже успешен."""
        oid = object_id(doc_id)
        if oid is None:
            return
        self.store.delete_one(self.collection, {"_id": oid})
