"""Drug-name autocomplete proxy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx
from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse

from neurostack.services.drugs import MIN_QUERY_LENGTH

if TYPE_CHECKING:
    from neurostack.containers import AppContainer

router = APIRouter(prefix="/api", tags=["drugs"])

CACHE_CONTROL = "public, s-maxage=3600, stale-while-revalidate=86400"

_logger = logging.getLogger(__name__)


@router.get("/rxterms")
async def rxterms(request: Request, q: str = "") -> JSONResponse:
    """Return drug-name suggestions for the compound autocomplete."""
    container: AppContainer = request.app.state.container
    query = q.strip()
    if len(query) < MIN_QUERY_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Query must be at least {MIN_QUERY_LENGTH} characters",
        )
    try:
        result = await container.drug_lookup_service.suggest(query)
    except httpx.HTTPError as exc:
        _logger.exception("RxTerms lookup failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch drug suggestions",
        ) from exc
    return JSONResponse(
        content={
            "suggestions": result.suggestions,
            "totalCount": result.total_count,
        },
        headers={"Cache-Control": CACHE_CONTROL},
    )
