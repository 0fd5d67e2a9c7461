from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from app.models.regions import RegionListResponse, RegionValidityResponse
from app.services.dependencies import get_region_service
from app.services.region_service import RegionCatalog

router = APIRouter(prefix="/regions", tags=["regions"])


@router.get("", response_model=RegionListResponse)
async def list_regions(
    regions: RegionCatalog = Depends(get_region_service),
) -> RegionListResponse:
    options = await regions.region_options()
    return RegionListResponse(count=len(options), regions=options)


@router.get("/{code}", response_model=RegionValidityResponse)
async def region_validity(
    code: str = Path(..., description="Region code, e.g. eu-west-3"),
    regions: RegionCatalog = Depends(get_region_service),
) -> RegionValidityResponse:
    valid = await regions.is_valid_region(code)
    return RegionValidityResponse(code=code, valid=valid, description=regions.describe(code))
