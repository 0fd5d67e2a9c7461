"""Tests for the state bucket provisioning sequence."""

from __future__ import annotations

import asyncio

import pytest

from app.services.config import BackendTarget
from app.services.errors import ProvisioningError
from app.services.setup.s3_setup_service import ProvisioningStep, S3SetupService
from tests.fakes import FakeStateBucketClient

TARGET = BackendTarget(bucket_name="valid-bucket-01", region="eu-west-3")

ALL_CALLS = [
    "bucket_exists",
    "create_bucket",
    "put_bucket_versioning",
    "put_bucket_encryption",
    "put_public_access_block",
    "put_bucket_lifecycle",
    "put_bucket_tagging",
]


class TestEnsureStateBucket:
    @pytest.mark.asyncio
    async def test_creates_missing_bucket_and_applies_every_step(self):
        client = FakeStateBucketClient()

        outcome = await S3SetupService(s3=client).ensure_state_bucket(TARGET)

        assert outcome.bucket_was_created is True
        assert outcome.bucket_name == "valid-bucket-01"
        assert outcome.region == "eu-west-3"
        assert client.calls == ALL_CALLS

    @pytest.mark.asyncio
    async def test_existing_bucket_is_reconfigured_not_recreated(self):
        client = FakeStateBucketClient(existing=["valid-bucket-01"])

        outcome = await S3SetupService(s3=client).ensure_state_bucket(TARGET)

        assert outcome.bucket_was_created is False
        assert "create_bucket" not in client.calls
        assert client.calls[-1] == "put_bucket_tagging"

    @pytest.mark.asyncio
    async def test_second_call_converges_to_same_state(self):
        client = FakeStateBucketClient()
        service = S3SetupService(s3=client)

        first = await service.ensure_state_bucket(TARGET)
        state_after_first = {k: dict(v) for k, v in client.buckets.items()}
        second = await service.ensure_state_bucket(TARGET)

        assert first.bucket_was_created is True
        assert second.bucket_was_created is False
        assert client.buckets == state_after_first
        assert client.calls.count("create_bucket") == 1

    @pytest.mark.asyncio
    async def test_target_configuration(self):
        client = FakeStateBucketClient()
        await S3SetupService(s3=client).ensure_state_bucket(TARGET)
        bucket = client.buckets["valid-bucket-01"]

        assert bucket["versioning"] == {"Status": "Enabled"}
        rule = bucket["encryption"]["Rules"][0]
        assert rule["ApplyServerSideEncryptionByDefault"] == {"SSEAlgorithm": "AES256"}
        assert rule["BucketKeyEnabled"] is True
        assert bucket["public_access_block"] == {
            "BlockPublicAcls": True,
            "BlockPublicPolicy": True,
            "IgnorePublicAcls": True,
            "RestrictPublicBuckets": True,
        }
        lifecycle_rule = bucket["lifecycle"]["Rules"][0]
        assert lifecycle_rule["Filter"] == {"Prefix": ".terraform.tfstate.lock.info"}
        assert lifecycle_rule["NoncurrentVersionExpiration"] == {"NoncurrentDays": 7}
        assert lifecycle_rule["Status"] == "Enabled"
        assert bucket["tags"] == {"ManagedBy": "SCAI", "Purpose": "Terraform State"}

    @pytest.mark.asyncio
    async def test_create_receives_target_region(self):
        client = FakeStateBucketClient()
        await S3SetupService(s3=client).ensure_state_bucket(TARGET)

        assert client.create_regions == ["eu-west-3"]

    @pytest.mark.asyncio
    async def test_exists_failure_is_treated_as_absent(self):
        client = FakeStateBucketClient(exists_error=RuntimeError("throttled"))

        outcome = await S3SetupService(s3=client).ensure_state_bucket(TARGET)

        assert outcome.bucket_was_created is True
        assert client.calls == ALL_CALLS

    @pytest.mark.asyncio
    async def test_cancellation_in_exists_check_propagates(self):
        client = FakeStateBucketClient(exists_error=asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await S3SetupService(s3=client).ensure_state_bucket(TARGET)

        assert client.calls == ["bucket_exists"]


class TestStepFailures:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("fail_on", "step"),
        [
            ("create_bucket", ProvisioningStep.CREATE_BUCKET),
            ("put_bucket_versioning", ProvisioningStep.VERSIONING),
            ("put_bucket_encryption", ProvisioningStep.ENCRYPTION),
            ("put_public_access_block", ProvisioningStep.PUBLIC_ACCESS_BLOCK),
            ("put_bucket_lifecycle", ProvisioningStep.LIFECYCLE),
            ("put_bucket_tagging", ProvisioningStep.TAGGING),
        ],
    )
    async def test_failure_stops_sequence_and_names_step(self, fail_on, step):
        client = FakeStateBucketClient(fail_on=fail_on)

        with pytest.raises(ProvisioningError) as excinfo:
            await S3SetupService(s3=client).ensure_state_bucket(TARGET)

        assert excinfo.value.step is step
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert client.calls == ALL_CALLS[: ALL_CALLS.index(fail_on) + 1]

    @pytest.mark.asyncio
    async def test_retry_after_partial_failure_finishes_configuration(self):
        failing = FakeStateBucketClient(fail_on="put_public_access_block")
        with pytest.raises(ProvisioningError):
            await S3SetupService(s3=failing).ensure_state_bucket(TARGET)

        assert "public_access_block" not in failing.buckets["valid-bucket-01"]

        # Same remote state, healthy client.
        healthy = FakeStateBucketClient()
        healthy.buckets = failing.buckets
        outcome = await S3SetupService(s3=healthy).ensure_state_bucket(TARGET)

        assert outcome.bucket_was_created is False
        assert healthy.buckets["valid-bucket-01"]["public_access_block"]["RestrictPublicBuckets"] is True

    @pytest.mark.asyncio
    async def test_cancellation_during_step_is_not_wrapped(self):
        class CancellingClient(FakeStateBucketClient):
            async def put_bucket_encryption(self, *, bucket_name, configuration):
                self.calls.append("put_bucket_encryption")
                raise asyncio.CancelledError()

        client = CancellingClient()

        with pytest.raises(asyncio.CancelledError):
            await S3SetupService(s3=client).ensure_state_bucket(TARGET)

        assert "put_public_access_block" not in client.calls
