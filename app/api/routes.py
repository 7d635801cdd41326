"""HTTP routes for the city insights service."""

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query

from app.domain.models import CitiesResponse
from app.pipeline.runner import CityInsightsPipeline

from .dependencies import get_pipeline

router = APIRouter(tags=["Cities"])


@router.get("/cities", response_model=CitiesResponse)
def get_polluted_cities(
    country: Optional[str] = Query(None, description="Country code, e.g. PL; all configured countries when omitted"),
    page: Optional[str] = Query(None, description="Positive integer page number"),
    limit: Optional[str] = Query(None, description="Positive integer page size"),
    pipeline: CityInsightsPipeline = Depends(get_pipeline),
) -> CitiesResponse:
    """Most polluted cities with a short description, sorted by pollution.

    page and limit are taken as raw strings so that invalid values reach the
    pipeline's validation and produce a 400 with the service's own message.

    Example:
        >>> GET /cities?country=PL&page=1&limit=10
        >>> Response: {"page": 1, "limit": 10, "total": 1, "cities": [...]}
    """
    return pipeline.get_polluted_cities(country=country, page=page, limit=limit)


@router.get("/health")
def health_check() -> Dict[str, str]:
    return {"status": "healthy", "service": "urban-air-quality-insights"}
