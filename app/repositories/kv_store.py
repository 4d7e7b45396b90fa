# app/repositories/kv_store.py
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy.engine import Engine
from sqlmodel import Session

from app.models.kv_entry import KeyValueEntry


class KeyValueStore(Protocol):
    """
    Durable string-keyed storage used by the cart engine.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class SqlKeyValueStore:
    """
    KeyValueStore over the `kv_entries` table, scoped to one namespace
    (the shopper session id).

    Each call runs in its own short session and commits immediately.
    """

    def __init__(self, engine: Engine, namespace: str):
        self.engine = engine
        self.namespace = namespace

    def get(self, key: str) -> str | None:
        with Session(self.engine) as session:
            row = session.get(KeyValueEntry, (self.namespace, key))
            return row.value if row else None

    def set(self, key: str, value: str) -> None:
        with Session(self.engine) as session:
            row = session.get(KeyValueEntry, (self.namespace, key))
            if row is None:
                row = KeyValueEntry(namespace=self.namespace, key=key, value=value)
            else:
                row.value = value
                row.updated_at = datetime.now(timezone.utc)
            session.add(row)
            session.commit()

    def remove(self, key: str) -> None:
        with Session(self.engine) as session:
            row = session.get(KeyValueEntry, (self.namespace, key))
            if row is not None:
                session.delete(row)
                session.commit()
