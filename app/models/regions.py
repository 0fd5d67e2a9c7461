from __future__ import annotations

from pydantic import BaseModel


class RegionOption(BaseModel):
    code: str
    description: str


class RegionListResponse(BaseModel):
    count: int
    regions: list[RegionOption]


class RegionValidityResponse(BaseModel):
    code: str
    valid: bool
    description: str
