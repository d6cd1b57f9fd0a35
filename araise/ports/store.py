"""Durable store port: string-keyed JSON blobs.

`araise.database.kv_repository.KeyValueRepository` is the SQLAlchemy-backed
implementation; `InMemoryStore` keeps blobs in a dict.
"""

from typing import Dict, Optional, Protocol


class DurableStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class InMemoryStore:
    """Process-local store; contents are lost on exit."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)
