from __future__ import annotations

import os
from dataclasses import dataclass

from app.models.settings import SettingsDocument


@dataclass(frozen=True)
class BackendTarget:
    """The bucket that will hold Terraform/OpenTofu state and lock files."""

    bucket_name: str
    region: str

    @staticmethod
    def from_settings(document: SettingsDocument) -> "BackendTarget":
        backend = document.terraform.backend
        return BackendTarget(bucket_name=backend.s3_bucket, region=backend.s3_region)

    @staticmethod
    def from_env() -> "BackendTarget":
        bucket_name = os.getenv("TF_STATE_BUCKET")
        if not bucket_name:
            raise ValueError("Missing required environment variable: TF_STATE_BUCKET")

        region = os.getenv("TF_STATE_REGION") or os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")
        if not region:
            raise ValueError("Missing required environment variable: TF_STATE_REGION (or AWS_REGION/AWS_DEFAULT_REGION)")

        return BackendTarget(bucket_name=bucket_name, region=region)
