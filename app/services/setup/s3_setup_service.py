from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Protocol

from app.services.config import BackendTarget
from app.services.errors import ProvisioningError


logger = logging.getLogger(__name__)


class StateBucketClient(Protocol):
    """Remote calls the state bucket setup needs, all keyed by bucket name."""

    async def bucket_exists(self, *, bucket_name: str) -> bool: ...

    async def create_bucket(self, *, bucket_name: str, region: str) -> None: ...

    async def put_bucket_versioning(self, *, bucket_name: str, configuration: dict[str, Any]) -> None: ...

    async def put_bucket_encryption(self, *, bucket_name: str, configuration: dict[str, Any]) -> None: ...

    async def put_public_access_block(self, *, bucket_name: str, configuration: dict[str, Any]) -> None: ...

    async def put_bucket_lifecycle(self, *, bucket_name: str, configuration: dict[str, Any]) -> None: ...

    async def put_bucket_tagging(self, *, bucket_name: str, tags: dict[str, str]) -> None: ...


class ProvisioningStep(str, Enum):
    CREATE_BUCKET = "create_bucket"
    VERSIONING = "versioning"
    ENCRYPTION = "encryption"
    PUBLIC_ACCESS_BLOCK = "public_access_block"
    LIFECYCLE = "lifecycle"
    TAGGING = "tagging"


@dataclass(frozen=True)
class ProvisioningOutcome:
    bucket_name: str
    region: str
    bucket_was_created: bool


class S3SetupService:
    """Provisioning helper for the Terraform/OpenTofu state bucket.

    Every step is an overwrite, so calling ``ensure_state_bucket`` again after a
    partial failure finishes the job. Nothing is rolled back.
    """

    LOCK_FILE_PREFIX = ".terraform.tfstate.lock.info"
    LOCK_FILE_RETENTION_DAYS = 7
    BUCKET_TAGS: dict[str, str] = {"ManagedBy": "SCAI", "Purpose": "Terraform State"}

    def __init__(self, *, s3: StateBucketClient) -> None:
        self._s3 = s3

    @staticmethod
    def _versioning_configuration() -> dict[str, Any]:
        return {"Status": "Enabled"}

    @staticmethod
    def _encryption_configuration() -> dict[str, Any]:
        return {
            "Rules": [
                {
                    "ApplyServerSideEncryptionByDefault": {"SSEAlgorithm": "AES256"},
                    "BucketKeyEnabled": True,
                }
            ]
        }

    @staticmethod
    def _public_access_block_configuration() -> dict[str, bool]:
        return {
            "BlockPublicAcls": True,
            "BlockPublicPolicy": True,
            "IgnorePublicAcls": True,
            "RestrictPublicBuckets": True,
        }

    @classmethod
    def _lifecycle_configuration(cls) -> dict[str, Any]:
        return {
            "Rules": [
                {
                    "ID": "cleanup-lock-files",
                    "Status": "Enabled",
                    "Filter": {"Prefix": cls.LOCK_FILE_PREFIX},
                    "NoncurrentVersionExpiration": {"NoncurrentDays": cls.LOCK_FILE_RETENTION_DAYS},
                }
            ]
        }

    async def ensure_state_bucket(self, target: BackendTarget) -> ProvisioningOutcome:
        """Public entry point: make sure the state bucket exists and is locked down.

        Steps, in order:
        1) Check whether the bucket exists (a failed check counts as "absent").
        2) Create it if absent.
        3) Enable versioning.
        4) Enable default SSE (AES256) with bucket keys.
        5) Block all public access.
        6) Expire noncurrent lock-file versions after 7 days, then tag the bucket.

        Returns:
            The outcome; ``bucket_was_created`` is True only if this call created it.

        Raises:
            ProvisioningError: naming the step that failed. Later steps are not run.
        """

        bucket = target.bucket_name
        created = False

        if not await self._bucket_exists(bucket_name=bucket):
            logger.info("State bucket %s not found, creating it in %s", bucket, target.region)
            await self._run_step(
                ProvisioningStep.CREATE_BUCKET,
                lambda: self._s3.create_bucket(bucket_name=bucket, region=target.region),
            )
            created = True
        else:
            logger.info("State bucket %s already exists, re-applying configuration", bucket)

        await self._run_step(
            ProvisioningStep.VERSIONING,
            lambda: self._s3.put_bucket_versioning(
                bucket_name=bucket, configuration=self._versioning_configuration()
            ),
        )
        await self._run_step(
            ProvisioningStep.ENCRYPTION,
            lambda: self._s3.put_bucket_encryption(
                bucket_name=bucket, configuration=self._encryption_configuration()
            ),
        )
        await self._run_step(
            ProvisioningStep.PUBLIC_ACCESS_BLOCK,
            lambda: self._s3.put_public_access_block(
                bucket_name=bucket, configuration=self._public_access_block_configuration()
            ),
        )
        await self._run_step(
            ProvisioningStep.LIFECYCLE,
            lambda: self._s3.put_bucket_lifecycle(
                bucket_name=bucket, configuration=self._lifecycle_configuration()
            ),
        )
        await self._run_step(
            ProvisioningStep.TAGGING,
            lambda: self._s3.put_bucket_tagging(bucket_name=bucket, tags=dict(self.BUCKET_TAGS)),
        )

        logger.info("State bucket %s is configured (created=%s)", bucket, created)
        return ProvisioningOutcome(bucket_name=bucket, region=target.region, bucket_was_created=created)

    # -----------------
    # Private helpers
    # -----------------

    async def _bucket_exists(self, *, bucket_name: str) -> bool:
        # Any failure reads as "absent"; a transient outage leads to a create
        # attempt, which then fails loudly if the bucket is really there.
        try:
            return await self._s3.bucket_exists(bucket_name=bucket_name)
        except Exception:
            logger.warning("Could not check whether bucket %s exists; treating it as absent", bucket_name, exc_info=True)
            return False

    async def _run_step(self, step: ProvisioningStep, call: Callable[[], Awaitable[None]]) -> None:
        logger.info("Applying state bucket step: %s", step.value)
        try:
            await call()
        except Exception as exc:
            logger.exception("State bucket step failed: %s", step.value)
            raise ProvisioningError(step, exc) from exc
