from __future__ import annotations

import asyncio
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from scaffoldkit.config.models import AwsConfig
from scaffoldkit.lookups.cache import ExternalDataCache, LookupKey
from scaffoldkit.lookups.errors import LookupErrorKind, ProviderLookupError

MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}
DEFAULT_BUCKET_REGION = "us-east-1"


class AwsProvider:
    """Enumerates AWS profiles and regions and checks S3 buckets.

    boto3 calls block, so every operation runs in a worker thread.
    """

    def __init__(self, config: AwsConfig | None = None, session_factory: Any = None):
        self.config = config or AwsConfig()
        self._session_factory = session_factory or boto3.session.Session

    async def list_profiles(self) -> list[str]:
        return await asyncio.to_thread(self._list_profiles)

    async def list_regions(self, profile: str | None) -> list[str]:
        return await asyncio.to_thread(self._list_regions, profile)

    async def check_bucket_exists(self, bucket: str, profile: str | None) -> bool:
        return await asyncio.to_thread(self._check_bucket_exists, bucket, profile)

    async def create_bucket(self, bucket: str, profile: str | None, region: str | None = None) -> dict[str, str]:
        return await asyncio.to_thread(self._create_bucket, bucket, profile, region)

    def _session(self, profile: str | None = None) -> Any:
        try:
            if profile:
                return self._session_factory(profile_name=profile)
            return self._session_factory()
        except BotoCoreError as exc:
            raise ProviderLookupError(str(exc), LookupErrorKind.UNAVAILABLE) from exc

    def _list_profiles(self) -> list[str]:
        return list(self._session().available_profiles)

    def _list_regions(self, profile: str | None) -> list[str]:
        # Region enumeration does not depend on the region the client is bound to.
        ec2 = self._session(profile).client("ec2", region_name=self.config.lookup_region)
        try:
            response = ec2.describe_regions()
        except (BotoCoreError, ClientError) as exc:
            raise ProviderLookupError(str(exc), LookupErrorKind.UNAVAILABLE) from exc
        try:
            return [item["RegionName"] for item in response["Regions"]]
        except (KeyError, TypeError) as exc:
            raise ProviderLookupError(f"Unexpected describe_regions payload: {exc}", LookupErrorKind.MALFORMED) from exc

    def _check_bucket_exists(self, bucket: str, profile: str | None) -> bool:
        s3 = self._session(profile).client("s3")
        try:
            s3.head_bucket(Bucket=bucket)
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in MISSING_BUCKET_CODES:
                return False
            raise ProviderLookupError(str(exc), LookupErrorKind.UNAVAILABLE) from exc
        except BotoCoreError as exc:
            raise ProviderLookupError(str(exc), LookupErrorKind.UNAVAILABLE) from exc
        return True

    def _create_bucket(self, bucket: str, profile: str | None, region: str | None) -> dict[str, str]:
        s3 = self._session(profile).client("s3", region_name=region)
        params: dict[str, Any] = {"Bucket": bucket}
        # us-east-1 is the default location and rejects an explicit constraint.
        if region and region != DEFAULT_BUCKET_REGION:
            params["CreateBucketConfiguration"] = {"LocationConstraint": region}
        response = s3.create_bucket(**params)
        return {"location": str(response.get("Location", ""))}


class DeploymentLookups:
    """Cached views over an AWS provider used by the deployment field catalog."""

    def __init__(self, provider: AwsProvider, cache: ExternalDataCache):
        self.provider = provider
        self.cache = cache

    async def profiles(self, sentinel: str) -> list[str]:
        return await self.cache.fetch_choices(
            LookupKey("profiles"),
            self.provider.list_profiles,
            sentinel=sentinel,
        )

    async def regions(self, profile: str | None, sentinel: str) -> list[str]:
        return await self.cache.fetch_choices(
            LookupKey("regions", (profile or "",)),
            lambda: self.provider.list_regions(profile),
            sentinel=sentinel,
        )

    async def bucket_exists(self, bucket: str, profile: str | None) -> bool:
        return await self.cache.fetch_flag(
            LookupKey("bucket_exists", (bucket, profile or "")),
            lambda: self.provider.check_bucket_exists(bucket, profile),
        )
