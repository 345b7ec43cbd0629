"""
Администраторы. В нормальной работе запись одна — её создаёт bootstrap при старте.
"""
from dataclasses import dataclass
from datetime import datetime

from portfolio_api.core.database import ADMINS, MongoStore, object_id
from portfolio_api.repositories.base import Clock, utcnow


@dataclass
class Admin:
    id: str
    username: str
    password_hash: str
    must_change_password: bool
    created_at: datetime
    updated_at: datetime | None = None
    last_login: datetime | None = None


def _doc_to_admin(doc: dict) -> Admin:
    return Admin(
        id=str(doc["_id"]),
        username=doc["username"],
        password_hash=doc["password_hash"],
        must_change_password=doc.get("must_change_password", False),
        created_at=doc["created_at"],
        updated_at=doc.get("updated_at"),
        last_login=doc.get("last_login"),
    )


class AdminRepository:
    collection = ADMINS

    def __init__(self, store: MongoStore, clock: Clock = utcnow):
        self.store = store
        self.clock = clock

    def get(self, admin_id: str) -> Admin | None:
        oid = object_id(admin_id)
        if oid is None:
            return None
        doc = self.store.find_one(self.collection, {"_id": oid})
        return _doc_to_admin(doc) if doc else None

    def get_by_username(self, username: str) -> Admin | None:
        doc = self.store.find_one(self.collection, {"username": username})
        return _doc_to_admin(doc) if doc else None

    def create(self, username: str, password_hash: str, must_change_password: bool = False) -> Admin:
        now = self.clock()
        doc = self.store.insert_one(
            self.collection,
            {
                "username": username,
                "password_hash": password_hash,
                "must_change_password": must_change_password,
                "last_login": None,
                "created_at": now,
                "updated_at": now,
            },
        )
        return _doc_to_admin(doc)

    def set_password(self, admin_id: str, password_hash: str) -> Admin | None:
        """Новый хеш пароля; флаг обязательной смены снимается."""
        oid = object_id(admin_id)
        if oid is None:
            return None
        doc = self.store.update_one(
            self.collection,
            {"_id": oid},
            {
                "password_hash": password_hash,
                "must_change_password": False,
                "updated_at": self.clock(),
            },
        )
        return _doc_to_admin(doc) if doc else None

    def record_login(self, admin_id: str) -> None:
        oid = object_id(admin_id)
        if oid is not None:
            self.store.update_one(self.collection, {"_id": oid}, {"last_login": self.clock()})

    def delete(self, admin_id: str) -> None:
        oid = object_id(admin_id)
        if oid is not None:
            self.store.delete_one(self.collection, {"_id": oid})
