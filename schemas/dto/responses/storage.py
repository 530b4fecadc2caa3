"""Response DTOs for the per-user document endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class LoadResponse(BaseModel):
    """Response body for GET /storage/load; ``config`` is None before the first save."""

    model_config = ConfigDict(populate_by_name=True)

    config: Any = None
