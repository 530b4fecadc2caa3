"""
Common response DTOs shared across multiple endpoints.

HealthResponse   - GET /health
SuccessResponse  - generic {success: true} acknowledgement
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    maintenance: bool


class SuccessResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
