from __future__ import annotations

from typing import Callable

from app.services.config import BackendTarget, S3Config, SettingsStoreConfig
from app.services.region_service import RegionCatalog, region_service_for
from app.services.s3_service import S3Service
from app.services.settings_store import SettingsStore
from app.services.setup.s3_setup_service import S3SetupService


def get_s3_service() -> S3Service:
    """FastAPI dependency provider for an S3Service instance."""

    return S3Service(S3Config.from_env())


def get_settings_store() -> SettingsStore:
    return SettingsStore(SettingsStoreConfig.from_env())


def get_region_service() -> RegionCatalog:
    """Region catalog for the cloud provider in the stored settings (AWS if none)."""

    store = get_settings_store()
    if not store.exists():
        return region_service_for("aws")
    return region_service_for(store.load().cloud.provider)


def s3_setup_service_for(target: BackendTarget) -> S3SetupService:
    """Setup service whose S3 client is pinned to the target bucket's region."""

    return S3SetupService(s3=S3Service(S3Config.from_env().for_region(target.region)))


def get_s3_setup_service_factory() -> Callable[[BackendTarget], S3SetupService]:
    """Dependency provider returning the per-target setup service factory."""

    return s3_setup_service_for
