"""Directory-backed BlobStore.

Keys are relative paths under a root directory. Keys that resolve outside
the root are treated as absent. Reads run in a worker thread so the event
loop is not blocked on disk I/O.
"""

import asyncio
import hashlib
import mimetypes
from pathlib import Path
from typing import Optional

from infrastructure.blob.protocol import BlobObject


class LocalBlobStore:
    def __init__(self, root: str) -> None:
        self._root = Path(root).resolve()

    def _path_for(self, key: str) -> Optional[Path]:
        path = (self._root / key).resolve()
        if not path.is_relative_to(self._root):
            return None
        return path

    def _read(self, key: str) -> Optional[BlobObject]:
        path = self._path_for(key)
        if path is None or not path.is_file():
            return None
        body = path.read_bytes()
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        etag = '"' + hashlib.sha256(body).hexdigest()[:32] + '"'
        return BlobObject(key=key, body=body, content_type=content_type, etag=etag)

    async def get(self, key: str) -> Optional[BlobObject]:
        return await asyncio.to_thread(self._read, key)
