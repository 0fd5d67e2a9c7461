"""Tests for the /regions routes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models.regions import RegionOption
from app.services.dependencies import get_region_service
from app.services.errors import ProviderError
from app.services.region_service import describe_region


class FakeRegionCatalog:
    def __init__(self, regions: list[str], *, error: Exception | None = None) -> None:
        self._regions = regions
        self._error = error

    async def list_regions(self) -> list[str]:
        if self._error is not None:
            raise self._error
        return sorted(self._regions)

    async def is_valid_region(self, code: str) -> bool:
        return code in await self.list_regions()

    def describe(self, code: str) -> str:
        return describe_region(code)

    async def region_options(self) -> list[RegionOption]:
        return [RegionOption(code=c, description=self.describe(c)) for c in await self.list_regions()]


@pytest.fixture
def override_catalog():
    def _install(catalog: FakeRegionCatalog) -> TestClient:
        app.dependency_overrides[get_region_service] = lambda: catalog
        return TestClient(app)

    yield _install
    app.dependency_overrides.clear()


class TestRegionRoutes:
    def test_list(self, override_catalog):
        client = override_catalog(FakeRegionCatalog(["us-east-1", "eu-west-3"]))

        body = client.get("/regions").json()

        assert body["count"] == 2
        assert body["regions"][0] == {"code": "eu-west-3", "description": "Europe (Paris)"}

    def test_validity(self, override_catalog):
        client = override_catalog(FakeRegionCatalog(["eu-west-3"]))

        assert client.get("/regions/eu-west-3").json() == {
            "code": "eu-west-3",
            "valid": True,
            "description": "Europe (Paris)",
        }
        assert client.get("/regions/xx-nowhere-1").json()["valid"] is False

    def test_provider_failure_is_bad_gateway(self, override_catalog):
        client = override_catalog(FakeRegionCatalog([], error=ProviderError("Failed to describe AWS regions")))

        resp = client.get("/regions")

        assert resp.status_code == 502
        assert resp.json() == {"detail": "Failed to describe AWS regions"}
