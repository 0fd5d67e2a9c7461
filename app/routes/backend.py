from __future__ import annotations

from typing import Callable, Optional

from fastapi import APIRouter, Depends, Path

from app.models.backend import (
    BucketListResponse,
    BucketLocationResponse,
    EnsureStateBucketRequest,
    EnsureStateBucketResponse,
)
from app.services.config import BackendTarget
from app.services.dependencies import get_s3_service, get_s3_setup_service_factory, get_settings_store
from app.services.s3_service import S3Service
from app.services.settings_store import SettingsStore
from app.services.settings_validator import validate_bucket_name, validate_region_code
from app.services.setup.s3_setup_service import S3SetupService

router = APIRouter(prefix="/backend/s3", tags=["backend"])


def _resolve_target(payload: Optional[EnsureStateBucketRequest], store: SettingsStore) -> BackendTarget:
    bucket_name = payload.bucket_name if payload else None
    region = payload.region if payload else None
    if not bucket_name or not region:
        stored = BackendTarget.from_settings(store.load())
        bucket_name = bucket_name or stored.bucket_name
        region = region or stored.region

    validate_bucket_name(bucket_name, field="bucket_name")
    validate_region_code(region, field="region")
    return BackendTarget(bucket_name=bucket_name, region=region)


@router.post("/state-bucket", response_model=EnsureStateBucketResponse)
async def ensure_state_bucket(
    payload: Optional[EnsureStateBucketRequest] = None,
    store: SettingsStore = Depends(get_settings_store),
    setup_for: Callable[[BackendTarget], S3SetupService] = Depends(get_s3_setup_service_factory),
) -> EnsureStateBucketResponse:
    target = _resolve_target(payload, store)
    outcome = await setup_for(target).ensure_state_bucket(target)
    return EnsureStateBucketResponse(
        bucket_name=outcome.bucket_name,
        region=outcome.region,
        bucket_was_created=outcome.bucket_was_created,
    )


@router.get("/buckets", response_model=BucketListResponse)
async def list_buckets(s3: S3Service = Depends(get_s3_service)) -> BucketListResponse:
    buckets = await s3.list_buckets()
    return BucketListResponse(count=len(buckets), buckets=buckets)


@router.get("/buckets/{bucket_name}/location", response_model=BucketLocationResponse)
async def bucket_location(
    bucket_name: str = Path(..., description="S3 bucket name"),
    s3: S3Service = Depends(get_s3_service),
) -> BucketLocationResponse:
    region = await s3.get_bucket_location(bucket_name=bucket_name)
    return BucketLocationResponse(bucket_name=bucket_name, region=region)
