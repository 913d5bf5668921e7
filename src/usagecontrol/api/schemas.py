"""
Pydantic schemas for API request/response validation.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from usagecontrol.policy.models import Pattern


class PatternRequest(BaseModel):
    """Request to classify a policy document."""

    policy: str = Field(..., min_length=1, description="Policy document text (JSON-LD)")


class PatternResponse(BaseModel):
    """Classification result."""

    pattern: Pattern
    recognized: bool


class PatternInfo(BaseModel):
    """A pattern in the example catalog."""

    name: str
    slug: str


class PatternListResponse(BaseModel):
    """Concrete patterns that have example documents."""

    items: list[PatternInfo]
    total: int


class HealthCheck(BaseModel):
    """Service health status."""

    status: str = "healthy"
    version: str
    uptime_seconds: float


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: Any | None = None
