from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class EnsureStateBucketRequest(BaseModel):
    bucket_name: Optional[str] = Field(default=None, description="Falls back to terraform.backend.s3_bucket")
    region: Optional[str] = Field(default=None, description="Falls back to terraform.backend.s3_region")


class EnsureStateBucketResponse(BaseModel):
    bucket_name: str
    region: str
    bucket_was_created: bool


class BucketListResponse(BaseModel):
    count: int
    buckets: list[str]


class BucketLocationResponse(BaseModel):
    bucket_name: str
    region: str
