"""
Protected asset lookup.

The asset is read from the primary key first, then the fallback key. A
missing asset is reported as NotFoundError so clients can tell a
deployment problem apart from an access problem (401).
"""

from __future__ import annotations

from errors import NotFoundError, StorageError
from infrastructure.blob.protocol import BlobObject, BlobStore
from shared.logging import get_logger

log = get_logger(__name__)


class ProtectedAssetService:
    def __init__(
        self, blob_store: BlobStore, primary_key: str, fallback_key: str
    ) -> None:
        self._blobs = blob_store
        self._keys = (primary_key, fallback_key)

    async def fetch(self) -> BlobObject:
        for key in self._keys:
            try:
                blob = await self._blobs.get(key)
            except OSError as e:
                log.error("asset_read_failed", asset=key, error=str(e))
                raise StorageError("Storage Error") from e
            if blob is not None:
                return blob
        log.error("asset_missing", assets=list(self._keys))
        raise NotFoundError("Core not found")
