"""Per-user JSON document storage under ``data:{subject}``. Last write wins."""

from __future__ import annotations

from typing import Any, Optional

from infrastructure.kv.keys import document_key
from infrastructure.kv.protocol import KeyValueStore


class UserDocumentService:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def save(self, subject: str, document: Any) -> None:
        await self._store.put_json(document_key(subject), document)

    async def load(self, subject: str) -> Optional[Any]:
        return await self._store.get_json(document_key(subject))
