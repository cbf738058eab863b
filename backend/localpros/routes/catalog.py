"""
LocalPros Backend — Catalog Routes
====================================

What:  Read-only reference data for the app's pickers: states, cities per
       state, professional categories and urgency levels.
How:   Served straight from localpros.catalog; responses are cacheable.
"""

from typing import List

from fastapi import APIRouter, Response

from localpros import catalog
from localpros.exceptions import NotFoundError
from localpros.schemas.common import CatalogOption, CityListResponse, ErrorResponse

router = APIRouter(prefix="/api/catalog", tags=["Catalog"])

CACHE_CONTROL = "public, max-age=86400"


@router.get("/states", response_model=List[CatalogOption], summary="Brazilian states (UF)")
async def list_states(response: Response) -> List[CatalogOption]:
    response.headers["Cache-Control"] = CACHE_CONTROL
    return [CatalogOption(value=code, label=name) for code, name in catalog.STATES]


@router.get(
    "/states/{uf}/cities",
    response_model=CityListResponse,
    responses={404: {"description": "Unknown state", "model": ErrorResponse}},
    summary="Cities available for a state",
)
async def list_cities(uf: str, response: Response) -> CityListResponse:
    code = uf.upper()
    if not catalog.is_valid_state(code):
        raise NotFoundError(resource="state", resource_id=uf)
    response.headers["Cache-Control"] = CACHE_CONTROL
    return CityListResponse(state=code, cities=catalog.cities_for_state(code))


@router.get("/categories", response_model=List[str], summary="Professional categories")
async def list_categories(response: Response) -> List[str]:
    response.headers["Cache-Control"] = CACHE_CONTROL
    return list(catalog.PROFESSIONAL_CATEGORIES)


@router.get("/urgency-levels", response_model=List[CatalogOption], summary="Service urgency levels")
async def list_urgency_levels(response: Response) -> List[CatalogOption]:
    response.headers["Cache-Control"] = CACHE_CONTROL
    return [CatalogOption(value=code, label=label) for code, label in catalog.URGENCY_LEVELS]
