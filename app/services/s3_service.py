from __future__ import annotations

import logging
from typing import Any, Optional

import aioboto3
from botocore.exceptions import ClientError

from app.services.config import S3Config
from app.services.errors import ProviderError


logger = logging.getLogger(__name__)

# S3 reports buckets in us-east-1 with an empty LocationConstraint and rejects
# an explicit us-east-1 constraint on create.
DEFAULT_AWS_REGION = "us-east-1"

_NOT_FOUND_CODES = {"404", "NoSuchBucket", "NotFound"}


class S3ServiceError(ProviderError):
    pass


class S3Service:
    """aioboto3-backed implementation of the state bucket client capabilities."""

    def __init__(self, config: S3Config) -> None:
        self._config = config
        self._session = aioboto3.Session()

    @property
    def region_name(self) -> Optional[str]:
        return self._config.region_name

    def _client(self) -> Any:
        return self._session.client(
            "s3",
            region_name=self._config.region_name,
            endpoint_url=self._config.endpoint_url,
        )

    async def bucket_exists(self, *, bucket_name: str) -> bool:
        """Return True if the bucket exists and is reachable, False on 404."""

        try:
            s3_client: Any = self._client()
            async with s3_client as s3:
                await s3.head_bucket(Bucket=bucket_name)
            return True
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _NOT_FOUND_CODES:
                return False
            logger.exception("S3 head_bucket failed (bucket=%s)", bucket_name)
            raise S3ServiceError(f"Failed checking bucket exists: {bucket_name}") from exc
        except Exception as exc:
            logger.exception("S3 head_bucket failed (bucket=%s)", bucket_name)
            raise S3ServiceError(f"Failed checking bucket exists: {bucket_name}") from exc

    async def create_bucket(self, *, bucket_name: str, region: str) -> None:
        kwargs: dict[str, Any] = {"Bucket": bucket_name}
        if region != DEFAULT_AWS_REGION:
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}

        await self._call("create_bucket", **kwargs)

    async def put_bucket_versioning(self, *, bucket_name: str, configuration: dict[str, Any]) -> None:
        await self._call("put_bucket_versioning", Bucket=bucket_name, VersioningConfiguration=configuration)

    async def put_bucket_encryption(self, *, bucket_name: str, configuration: dict[str, Any]) -> None:
        await self._call(
            "put_bucket_encryption",
            Bucket=bucket_name,
            ServerSideEncryptionConfiguration=configuration,
        )

    async def put_public_access_block(self, *, bucket_name: str, configuration: dict[str, Any]) -> None:
        await self._call(
            "put_public_access_block",
            Bucket=bucket_name,
            PublicAccessBlockConfiguration=configuration,
        )

    async def put_bucket_lifecycle(self, *, bucket_name: str, configuration: dict[str, Any]) -> None:
        await self._call(
            "put_bucket_lifecycle_configuration",
            Bucket=bucket_name,
            LifecycleConfiguration=configuration,
        )

    async def put_bucket_tagging(self, *, bucket_name: str, tags: dict[str, str]) -> None:
        tag_set = [{"Key": key, "Value": value} for key, value in tags.items()]
        await self._call("put_bucket_tagging", Bucket=bucket_name, Tagging={"TagSet": tag_set})

    async def list_buckets(self) -> list[str]:
        response = await self._call("list_buckets")
        return [b["Name"] for b in response.get("Buckets", []) if b.get("Name")]

    async def get_bucket_location(self, *, bucket_name: str) -> str:
        """Return the region a bucket lives in."""

        response = await self._call("get_bucket_location", Bucket=bucket_name)
        return response.get("LocationConstraint") or DEFAULT_AWS_REGION

    async def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        try:
            s3_client: Any = self._client()
            async with s3_client as s3:
                return await getattr(s3, operation)(**kwargs)
        except Exception as exc:
            logger.exception("S3 %s failed (bucket=%s)", operation, kwargs.get("Bucket"))
            raise S3ServiceError(f"S3 {operation} failed (bucket={kwargs.get('Bucket')})") from exc
