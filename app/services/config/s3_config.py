from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class S3Config:
    """Client settings for S3 control-plane calls.

    Bucket names are passed per call; a client is pinned to one region because
    ``CreateBucket`` must be sent to the endpoint of the bucket's region.
    """

    region_name: Optional[str] = None
    endpoint_url: Optional[str] = None

    @staticmethod
    def from_env() -> "S3Config":
        region_name = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")
        endpoint_url = os.getenv("S3_ENDPOINT_URL")

        return S3Config(region_name=region_name, endpoint_url=endpoint_url)

    def for_region(self, region_name: str) -> "S3Config":
        return S3Config(region_name=region_name, endpoint_url=self.endpoint_url)
