"""
S3 presigned PUT URLs for event images.
Signing is a local computation; no request reaches S3 until the client uploads.
"""

from typing import Any, Optional

import boto3
from botocore.config import Config
from starlette.concurrency import run_in_threadpool

from events_api.services.interfaces.upload import UploadAuthorizer, UploadGrant


class S3UploadAuthorizer(UploadAuthorizer):
    """
    Issues SigV4 presigned `put_object` URLs.

    The signature covers the Content-Type, so the client must upload with the
    same header it asked for.
    """

    def __init__(
        self,
        bucket: str,
        expires_in: int = 300,
        client: Optional[Any] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ):
        if not bucket:
            raise ValueError("bucket is required")
        self.bucket = bucket
        self.expires_in = expires_in
        self._client = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            config=Config(signature_version="s3v4"),
        )

    async def authorize(self, key: str, content_type: str) -> UploadGrant:
        url = await run_in_threadpool(
            self._client.generate_presigned_url,
            "put_object",
            Params={"Bucket": self.bucket, "Key": key, "ContentType": content_type},
            ExpiresIn=self.expires_in,
            HttpMethod="PUT",
        )
        return UploadGrant(
            url=url,
            key=key,
            content_type=content_type,
            expires_in=self.expires_in,
            method="PUT",
        )
