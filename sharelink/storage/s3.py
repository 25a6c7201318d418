"""S3-compatible object store (Cloudflare R2, MinIO, AWS S3)."""

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from sharelink.logger import logger
from sharelink.storage.base import ObjectStore, ObjectStoreError


class S3ObjectStore(ObjectStore):
    def __init__(
        self,
        bucket: str,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str = "auto",
        connect_timeout: float = 5,
        read_timeout: float = 60,
        client=None,
    ):
        if not bucket:
            raise ValueError("S3 bucket name is required")
        self.bucket = bucket

        if client is None:
            client_config = BotoConfig(
                signature_version="s3v4",
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
                retries={"max_attempts": 2, "mode": "standard"},
            )
            client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key or None,
                aws_secret_access_key=secret_key or None,
                region_name=region,
                config=client_config,
            )
        self.s3 = client

    @retry(
        retry=retry_if_exception_type(ObjectStoreError),
        wait=wait_fixed(1),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    def put(self, key: str, data: bytes, content_type: str) -> None:
        logger.info(f"[S3] Uploading {key} ({len(data)} bytes)")
        try:
            self.s3.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"[S3] Upload failed for {key}: {e}")
            raise ObjectStoreError(f"Upload failed for {key}") from e

    def signed_get_url(self, key: str, ttl_seconds: int) -> str:
        try:
            return self.s3.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=ttl_seconds,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"[S3] Failed to sign GET URL for {key}: {e}")
            raise ObjectStoreError(f"Could not sign URL for {key}") from e

    def delete(self, key: str) -> None:
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"[S3] Delete failed for {key}: {e}")
            raise ObjectStoreError(f"Delete failed for {key}") from e
