"""KeyValueStore protocol - services depend on this, not on Redis directly."""

from typing import Any, Optional, Protocol


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def put(
        self, key: str, value: str, ttl_seconds: Optional[int] = None
    ) -> None: ...

    async def get_json(self, key: str) -> Optional[Any]: ...

    async def put_json(
        self, key: str, value: Any, ttl_seconds: Optional[int] = None
    ) -> None: ...

    async def incr(self, key: str, ttl_seconds: Optional[int] = None) -> int: ...

    async def delete(self, key: str) -> None: ...
