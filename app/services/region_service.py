from __future__ import annotations

import logging
from typing import Any, Protocol

import aioboto3

from app.models.regions import RegionOption
from app.services.errors import ProviderError, ProviderNotSupportedError


logger = logging.getLogger(__name__)

# DescribeRegions answers the same from any region.
_REGION_LISTING_REGION = "us-east-1"

_REGION_DESCRIPTIONS: dict[str, str] = {
    "us-east-1": "US East (N. Virginia)",
    "us-east-2": "US East (Ohio)",
    "us-west-1": "US West (N. California)",
    "us-west-2": "US West (Oregon)",
    "eu-west-1": "Europe (Ireland)",
    "eu-west-2": "Europe (London)",
    "eu-west-3": "Europe (Paris)",
    "eu-central-1": "Europe (Frankfurt)",
    "eu-north-1": "Europe (Stockholm)",
    "ap-northeast-1": "Asia Pacific (Tokyo)",
    "ap-northeast-2": "Asia Pacific (Seoul)",
    "ap-southeast-1": "Asia Pacific (Singapore)",
    "ap-southeast-2": "Asia Pacific (Sydney)",
    "ap-south-1": "Asia Pacific (Mumbai)",
    "ca-central-1": "Canada (Central)",
    "sa-east-1": "South America (São Paulo)",
}


def describe_region(code: str) -> str:
    return _REGION_DESCRIPTIONS.get(code, code)


class RegionCatalog(Protocol):
    async def list_regions(self) -> list[str]: ...

    async def is_valid_region(self, code: str) -> bool: ...

    def describe(self, code: str) -> str: ...

    async def region_options(self) -> list[RegionOption]: ...


class RegionService:
    """AWS region catalog backed by EC2 ``DescribeRegions``.

    Nothing is cached: every call re-queries AWS so a listing failure surfaces
    as ``ProviderError`` instead of a stale answer.
    """

    def __init__(self) -> None:
        self._session = aioboto3.Session()

    def _client(self) -> Any:
        return self._session.client("ec2", region_name=_REGION_LISTING_REGION)

    async def list_regions(self) -> list[str]:
        """Return every region code, opt-in regions included, sorted."""

        try:
            ec2_client: Any = self._client()
            async with ec2_client as ec2:
                response = await ec2.describe_regions(AllRegions=True)
        except Exception as exc:
            logger.exception("EC2 describe_regions failed")
            raise ProviderError("Failed to describe AWS regions") from exc

        regions = [r["RegionName"] for r in response.get("Regions", []) if r.get("RegionName")]
        return sorted(regions)

    async def is_valid_region(self, code: str) -> bool:
        return code in await self.list_regions()

    def describe(self, code: str) -> str:
        return describe_region(code)

    async def region_options(self) -> list[RegionOption]:
        return [RegionOption(code=code, description=self.describe(code)) for code in await self.list_regions()]


class GcpRegionService:
    """Placeholder for GCP; every remote call is refused."""

    _MESSAGE = "GCP support not yet implemented"

    async def list_regions(self) -> list[str]:
        raise ProviderNotSupportedError(self._MESSAGE)

    async def is_valid_region(self, code: str) -> bool:
        raise ProviderNotSupportedError(self._MESSAGE)

    def describe(self, code: str) -> str:
        return code

    async def region_options(self) -> list[RegionOption]:
        raise ProviderNotSupportedError(self._MESSAGE)


def region_service_for(cloud_provider: str) -> RegionCatalog:
    if cloud_provider == "aws":
        return RegionService()
    if cloud_provider == "gcp":
        return GcpRegionService()
    raise ProviderNotSupportedError(f"Unsupported cloud provider: {cloud_provider}")
