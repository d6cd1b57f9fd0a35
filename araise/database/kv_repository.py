"""Repository implementing the durable store port on the kv_store table."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from araise.database.models import KeyValueDB

logger = logging.getLogger(__name__)


class KeyValueRepository:
    """get/set/remove of JSON blobs, one row per key."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.get(KeyValueDB, key)
        return row.value if row else None

    def set(self, key: str, value: str) -> None:
        row = self.db.get(KeyValueDB, key)
        try:
            if row is None:
                self.db.add(KeyValueDB(key=key, value=value, updated_at=datetime.utcnow()))
            else:
                row.value = value
                row.updated_at = datetime.utcnow()
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to write key {key}: {type(e).__name__}: {str(e)}")
            raise

    def remove(self, key: str) -> None:
        row = self.db.get(KeyValueDB, key)
        if row is None:
            return
        try:
            self.db.delete(row)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to remove key {key}: {type(e).__name__}: {str(e)}")
            raise
