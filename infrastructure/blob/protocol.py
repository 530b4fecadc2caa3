"""BlobStore protocol - the asset gate depends on this, not on the backend."""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class BlobObject:
    key: str
    body: bytes
    content_type: str
    etag: str


class BlobStore(Protocol):
    async def get(self, key: str) -> Optional[BlobObject]:
        """Return the object stored under *key*, or None when absent."""
        ...
