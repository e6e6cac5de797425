"""Key-value blob stores backing the DataStore."""

from __future__ import annotations

from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .db import StoredBlob


class KeyValueStore:
    """Synchronous string-keyed blob storage."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store, useful for previews and tests."""

    def __init__(self, initial: Dict[str, str] | None = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class SqlKeyValueStore(KeyValueStore):
    """Store each blob as one row of the ``kv_store`` table."""

    def __init__(self, session: Session):
        """
        Initialize the store.

        Args:
            session: Database session; committed after every write
        """
        self.session = session

    def get(self, key: str) -> Optional[str]:
        try:
            row = self.session.get(StoredBlob, key)
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return None if row is None else row.value

    def set(self, key: str, value: str) -> None:
        try:
            self.session.merge(StoredBlob(key=key, value=value))
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def delete(self, key: str) -> None:
        try:
            row = self.session.get(StoredBlob, key)
            if row is not None:
                self.session.delete(row)
                self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
