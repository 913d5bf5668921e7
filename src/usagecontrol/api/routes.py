"""
REST API routes for the pattern engine.

Provides endpoints for classifying a policy document and for fetching the
example document of a pattern.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status

from usagecontrol import __version__
from usagecontrol.api.schemas import (
    ErrorResponse,
    HealthCheck,
    PatternInfo,
    PatternListResponse,
    PatternRequest,
    PatternResponse,
)
from usagecontrol.policy.engine import classify_document, example_policy
from usagecontrol.policy.models import Pattern
from usagecontrol.policy.parser import PolicyParseError, serialize_policy
from usagecontrol.policy.synthesizer import UnknownPatternError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

START_TIME = time.time()


# ============================================================================
# Health Check Endpoints
# ============================================================================


@router.get("/health", response_model=HealthCheck, tags=["Health"])
async def health_check() -> HealthCheck:
    """Check service health status."""
    return HealthCheck(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - START_TIME,
    )


# ============================================================================
# Pattern Endpoints
# ============================================================================


@router.post(
    "/examples/policy-pattern",
    response_model=PatternResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Patterns"],
)
async def get_policy_pattern(request: PatternRequest) -> PatternResponse:
    """
    Get the pattern of a policy.

    Classifies the first rule of the given document.
    """
    try:
        pattern = classify_document(request.policy)
    except PolicyParseError as e:
        logger.warning("Failed to parse policy: %s", e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return PatternResponse(
        pattern=pattern,
        recognized=pattern is not Pattern.NOT_RECOGNIZED,
    )


@router.post(
    "/examples/usage-policy",
    responses={400: {"model": ErrorResponse}},
    tags=["Patterns"],
)
async def get_example_usage_policy(
    pattern: str = Query(..., description="Pattern name, e.g. N_TIMES_USAGE"),
) -> dict[str, Any]:
    """
    Get an example policy for a given pattern.

    Returns the JSON-LD contract document.
    """
    try:
        policy = example_policy(pattern)
    except UnknownPatternError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return serialize_policy(policy)


@router.get(
    "/examples/patterns",
    response_model=PatternListResponse,
    tags=["Patterns"],
)
async def list_patterns() -> PatternListResponse:
    """List patterns that have example documents."""
    items = [PatternInfo(name=p.value, slug=p.slug) for p in Pattern.concrete()]
    return PatternListResponse(items=items, total=len(items))
